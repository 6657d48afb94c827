"""
Import of cloud project bundles into the local workspace.
"""
import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Optional

from ..codec.bundle_codec import decode_base64, decompress_bundle
from ..errors import CloudStoreError, InstallationFailure, InvalidFormat
from ..models.workspace_header import CloudProjectData, ImportedProject, InstallHeader
from ..notifications import Notifier
from ..sync.local_workspace import WorkspaceStore

logger = logging.getLogger(__name__)

CONFIG_NAME = "pxt.json"
BLOCKS_PROJECT_NAME = "blocksprj"


class PayloadShape(Enum):
    """Known layouts of a decompressed project document."""
    SOURCE = "source"  # files as a JSON string under "source", header under "meta"
    TEXT = "text"      # files as an object under "text", header under "header"
    UNKNOWN = "unknown"


def _as_dict(value: Any) -> Dict[str, Any]:
    # Header fields of an unexpected type are treated as absent
    return value if isinstance(value, dict) else {}


@dataclass
class DecodedPayload:
    shape: PayloadShape
    file_map: Dict[str, str] = field(default_factory=dict)
    header: Dict[str, Any] = field(default_factory=dict)


def classify_payload(document: Any) -> DecodedPayload:
    """
    Classify a decompressed project document and extract its files and header.

    Raises:
        InvalidFormat: The document matches neither known shape
    """
    if not isinstance(document, dict):
        raise InvalidFormat("Invalid project structure: expected a JSON object")

    source = document.get('source')
    text = document.get('text')

    if isinstance(source, str):
        try:
            file_map = json.loads(source)
        except ValueError as e:
            raise InvalidFormat(f"Invalid project structure: unreadable 'source': {e}") from e
        if not isinstance(file_map, dict):
            raise InvalidFormat("Invalid project structure: 'source' is not a file map")
        decoded = DecodedPayload(PayloadShape.SOURCE, file_map, _as_dict(document.get('meta')))
    elif isinstance(text, dict):
        decoded = DecodedPayload(PayloadShape.TEXT, text, _as_dict(document.get('header')))
    else:
        decoded = DecodedPayload(PayloadShape.UNKNOWN)

    if decoded.shape is PayloadShape.UNKNOWN:
        logger.error(f"Unknown project format, keys: {sorted(document.keys())}")
        raise InvalidFormat("Invalid project structure: expected 'source' or 'text' property")

    return decoded


def decode_project(cloud_data: CloudProjectData) -> ImportedProject:
    """
    Turn a Base64 cloud payload into an importable project.

    Raises:
        InvalidFormat: The payload cannot be decoded or lacks the project config file
    """
    compressed = decode_base64(cloud_data.project_data)
    try:
        document = json.loads(decompress_bundle(compressed))
    except ValueError as e:
        raise InvalidFormat(f"Invalid project structure: {e}") from e

    decoded = classify_payload(document)
    if CONFIG_NAME not in decoded.file_map:
        raise InvalidFormat(f"Invalid project structure: missing '{CONFIG_NAME}' file")
    if not isinstance(decoded.file_map[CONFIG_NAME], str):
        raise InvalidFormat(f"Invalid project structure: '{CONFIG_NAME}' is not file text")

    return ImportedProject(
        project_name=cloud_data.project_name,
        file_map=decoded.file_map,
        header_metadata=decoded.header
    )


class ProjectImporter:
    """
    Installs cloud projects into a workspace store.

    Local projects take precedence: a cloud project whose name matches an
    installed project is not imported.
    """

    def __init__(
        self,
        workspace: WorkspaceStore,
        notifier: Notifier,
        target_id: str,
        on_installed: Optional[Callable[[], None]] = None
    ):
        """
        Initialize the importer.

        Args:
            workspace: Store the projects are installed into
            notifier: Sink for failure notifications
            target_id: Editor target id recorded on installed headers
            on_installed: Optional refresh hook called after each install
        """
        self.workspace = workspace
        self.notifier = notifier
        self.target_id = target_id
        self.on_installed = on_installed

    def build_install_header(self, project: ImportedProject) -> InstallHeader:
        """Build the installation request for a decoded project."""
        header = _as_dict(project.header_metadata)
        try:
            config = json.loads(project.file_map[CONFIG_NAME])
        except (TypeError, ValueError) as e:
            raise InvalidFormat(f"Invalid '{CONFIG_NAME}': {e}") from e
        if not isinstance(config, dict):
            raise InvalidFormat(f"Invalid '{CONFIG_NAME}': expected a JSON object")

        target_versions = _as_dict(header.get('targetVersions'))
        return InstallHeader(
            target=self.target_id,
            target_version=target_versions.get('target') or header.get('targetVersion'),
            editor=config.get('preferredEditor') or header.get('editor') or BLOCKS_PROJECT_NAME,
            name=project.project_name,
            meta=_as_dict(header.get('meta')),
            pub_id=header.get('pubId') or "",
            pub_current=False
        )

    def exists_locally(self, project_name: str) -> bool:
        return any(h.name == project_name for h in self.workspace.list_headers())

    def import_project(self, cloud_data: CloudProjectData) -> bool:
        """
        Import a single cloud project.

        Args:
            cloud_data: Project name and Base64 payload

        Returns:
            True if installed, False if skipped because a local project has the same name

        Raises:
            InvalidFormat: The payload is not a recognized project bundle
            InstallationFailure: The workspace store rejected the install
        """
        logger.info(f"Importing project: {cloud_data.project_name}")

        try:
            project = decode_project(cloud_data)

            if self.exists_locally(cloud_data.project_name):
                logger.info(
                    f"Project '{cloud_data.project_name}' already exists locally, skipping import"
                )
                return False

            install_header = self.build_install_header(project)
            try:
                self.workspace.install(install_header, project.file_map)
            except CloudStoreError:
                raise
            except Exception as e:
                raise InstallationFailure(f"Workspace rejected install: {e}") from e

            logger.info(f"Successfully imported project: {cloud_data.project_name}")

            if self.on_installed is not None:
                self.on_installed()

            return True

        except Exception as e:
            logger.error(f"Failed to import project '{cloud_data.project_name}': {e}")
            self.notifier.error(f"Failed to import '{cloud_data.project_name}': {e}")
            raise
