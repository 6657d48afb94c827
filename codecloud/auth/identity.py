"""
User identity providers.

These supply the user id sent with every project-store request. The stored
provider is a convenience for single-user setups and is not authentication.
"""
import logging
import os
from pathlib import Path
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class IdentityProvider(Protocol):
    """Supplies the id of the current user."""

    def current_user_id(self) -> str:
        ...


class StaticIdentityProvider:
    """Always returns the user id it was created with."""

    def __init__(self, user_id: str):
        self.user_id = user_id

    def current_user_id(self) -> str:
        return self.user_id


class StoredIdentityProvider:
    """
    Resolves the user id from the environment, then a stored file, then a
    placeholder.
    """

    ENV_VAR = "CODECLOUD_USER_ID"
    DEFAULT_PATH = Path.home() / ".codecloud" / "user_id"
    PLACEHOLDER_USER_ID = "test-user"

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else self.DEFAULT_PATH

    def current_user_id(self) -> str:
        user_id = os.environ.get(self.ENV_VAR, "").strip()
        if user_id:
            return user_id

        if self.path.is_file():
            stored = self.path.read_text(encoding='utf-8').strip()
            if stored:
                return stored

        return self.PLACEHOLDER_USER_ID

    def remember(self, user_id: str) -> None:
        """Store a user id for later sessions."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(user_id.strip() + "\n", encoding='utf-8')
        logger.info(f"Stored user id in {self.path}")
