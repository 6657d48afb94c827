"""
Local SQLite workspace for installed projects.

This module provides the workspace store that cloud projects are installed
into. Each installed project is a header row plus its file map; header ids
and timestamps are assigned here, not by the cloud.
"""

import json
import logging
import sqlite3
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime
from typing import Dict, Iterator, List, Optional, Protocol

from ..models.workspace_header import Header, InstallHeader

logger = logging.getLogger(__name__)


class WorkspaceStore(Protocol):
    """Interface the importer and the cloud save path need from a workspace."""

    def list_headers(self) -> List[Header]:
        ...

    def install(self, header: InstallHeader, file_map: Dict[str, str]) -> Header:
        ...

    def get_header_by_name(self, name: str) -> Optional[Header]:
        ...

    def get_files(self, header_id: str) -> Dict[str, str]:
        ...


class LocalWorkspace:
    """
    SQLite-based workspace holding installed projects.

    This class provides:
    - Listing of installed project headers
    - Installation of a header with its file map
    - Thread-safe operations
    - Soft deletion, so deleted projects drop out of listings
    """

    DEFAULT_DB_PATH = "codecloud_workspace.db"

    def __init__(self, db_path: Optional[str] = None):
        """
        Initialize the local workspace.

        Args:
            db_path: Path to the SQLite database file. If None, uses default.
                     Use ":memory:" for in-memory database (useful for testing).
        """
        self.db_path = db_path or self.DEFAULT_DB_PATH
        self._lock = threading.Lock()
        self._is_memory = self.db_path == ":memory:"
        self._shared_conn: Optional[sqlite3.Connection] = None
        self._init_database()

    def _init_database(self) -> None:
        """Initialize the SQLite database schema."""
        with self._connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS headers (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    target TEXT NOT NULL,
                    target_version TEXT,
                    editor TEXT NOT NULL,
                    meta TEXT NOT NULL,
                    pub_id TEXT NOT NULL DEFAULT '',
                    pub_current INTEGER NOT NULL DEFAULT 0,
                    modified_at TEXT NOT NULL,
                    is_deleted INTEGER NOT NULL DEFAULT 0
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS files (
                    header_id TEXT NOT NULL REFERENCES headers(id),
                    name TEXT NOT NULL,
                    content TEXT NOT NULL,
                    PRIMARY KEY (header_id, name)
                )
            """)
            conn.commit()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        # For in-memory databases, reuse the same connection
        if self._is_memory:
            if self._shared_conn is None:
                self._shared_conn = sqlite3.connect(":memory:", check_same_thread=False)
                self._shared_conn.row_factory = sqlite3.Row
            return self._shared_conn

        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection inside a transaction, closing file-backed connections afterwards."""
        conn = self._get_connection()
        try:
            with conn:
                yield conn
        finally:
            if not self._is_memory:
                conn.close()

    @staticmethod
    def _row_to_header(row: sqlite3.Row) -> Header:
        return Header(
            id=row['id'],
            name=row['name'],
            target=row['target'],
            editor=row['editor'],
            target_version=row['target_version'],
            meta=json.loads(row['meta']),
            pub_id=row['pub_id'],
            pub_current=bool(row['pub_current']),
            modified_at=row['modified_at'],
            is_deleted=bool(row['is_deleted'])
        )

    def list_headers(self, include_deleted: bool = False) -> List[Header]:
        """
        List installed project headers, most recently modified first.

        Args:
            include_deleted: Whether to include soft-deleted projects
        """
        query = "SELECT * FROM headers"
        if not include_deleted:
            query += " WHERE is_deleted = 0"
        query += " ORDER BY modified_at DESC"

        with self._lock:
            with self._connection() as conn:
                rows = conn.execute(query).fetchall()
                return [self._row_to_header(row) for row in rows]

    def get_header_by_name(self, name: str) -> Optional[Header]:
        """Get the live header with the given project name, if any."""
        with self._lock:
            with self._connection() as conn:
                row = conn.execute(
                    "SELECT * FROM headers WHERE name = ? AND is_deleted = 0 "
                    "ORDER BY modified_at DESC LIMIT 1",
                    (name,)
                ).fetchone()
                return self._row_to_header(row) if row else None

    def install(self, header: InstallHeader, file_map: Dict[str, str]) -> Header:
        """
        Install a project into the workspace.

        Args:
            header: Installation request
            file_map: Mapping from file name to file text

        Returns:
            The stored header with its assigned id
        """
        installed = Header(
            id=str(uuid.uuid4()),
            name=header.name,
            target=header.target,
            editor=header.editor,
            target_version=header.target_version,
            meta=dict(header.meta),
            pub_id=header.pub_id,
            pub_current=header.pub_current,
            modified_at=datetime.utcnow().isoformat()
        )

        with self._lock:
            with self._connection() as conn:
                conn.execute(
                    """
                    INSERT INTO headers (id, name, target, target_version, editor,
                                         meta, pub_id, pub_current, modified_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        installed.id,
                        installed.name,
                        installed.target,
                        installed.target_version,
                        installed.editor,
                        json.dumps(installed.meta),
                        installed.pub_id,
                        int(installed.pub_current),
                        installed.modified_at
                    )
                )
                conn.executemany(
                    "INSERT INTO files (header_id, name, content) VALUES (?, ?, ?)",
                    [(installed.id, name, content) for name, content in file_map.items()]
                )
                conn.commit()

        logger.debug(f"Installed project {installed.name} as {installed.id}")
        return installed

    def get_files(self, header_id: str) -> Dict[str, str]:
        """
        Get the file map of an installed project.

        Args:
            header_id: The header id assigned on install

        Returns:
            Mapping from file name to file text (empty if unknown)
        """
        with self._lock:
            with self._connection() as conn:
                rows = conn.execute(
                    "SELECT name, content FROM files WHERE header_id = ? ORDER BY name",
                    (header_id,)
                ).fetchall()
                return {row['name']: row['content'] for row in rows}

    def delete_header(self, header_id: str) -> bool:
        """
        Soft-delete an installed project.

        Returns:
            True if a live project was marked deleted
        """
        with self._lock:
            with self._connection() as conn:
                cursor = conn.execute(
                    "UPDATE headers SET is_deleted = 1, modified_at = ? "
                    "WHERE id = ? AND is_deleted = 0",
                    (datetime.utcnow().isoformat(), header_id)
                )
                conn.commit()
                return cursor.rowcount > 0

    def close(self) -> None:
        """Close the workspace and any open connections."""
        if self._shared_conn is not None:
            self._shared_conn.close()
            self._shared_conn = None
