"""
Main application class for the cloud storage client.
"""
import logging
from typing import Callable, List, Optional

from ..auth.identity import IdentityProvider, StaticIdentityProvider, StoredIdentityProvider
from ..codec.bundle_codec import decode_base64, encode_base64, pack_bundle
from ..config.app_config import AppConfig
from ..errors import CloudStoreError
from ..importer.project_importer import ProjectImporter
from ..models.project_record import (
    DeleteResult,
    HealthStatus,
    ProjectListItem,
    ProjectRecord,
    SaveResult,
    UpdateResult,
)
from ..models.workspace_header import CloudProjectData
from ..notifications import LoggingNotifier, Notifier
from ..sync.cloud_sync import CloudSync, SyncReport
from ..sync.local_workspace import LocalWorkspace, WorkspaceStore
from ..sync.project_api_client import ProjectApiClient

logger = logging.getLogger(__name__)


def decode_project_data(project_data: str) -> bytes:
    """Convert a stored Base64 payload back into bundle bytes."""
    return decode_base64(project_data)


class CloudApplication:
    """
    Wires the API client, workspace, importer and sync orchestrator together.

    Each user operation emits one success or failure notification and
    re-raises failures to the caller.
    """

    def __init__(
        self,
        config: AppConfig,
        identity: Optional[IdentityProvider] = None,
        notifier: Optional[Notifier] = None,
        workspace: Optional[WorkspaceStore] = None,
        on_installed: Optional[Callable[[], None]] = None
    ):
        """
        Initialize the application.

        Args:
            config: Application configuration
            identity: Supplies the current user id; defaults to the configured
                      user id or the stored identity
            notifier: Notification sink; defaults to logging
            workspace: Workspace store; defaults to a LocalWorkspace at the configured path
            on_installed: Optional refresh hook called after each imported project
        """
        self.config = config
        if identity is None:
            identity = (StaticIdentityProvider(config.user_id) if config.user_id
                        else StoredIdentityProvider())
        self.identity = identity
        self.notifier = notifier or LoggingNotifier()

        self._owns_workspace = workspace is None
        self.workspace = workspace or LocalWorkspace(config.workspace.path)

        self.client = ProjectApiClient(config.api)
        self.importer = ProjectImporter(
            self.workspace,
            self.notifier,
            config.workspace.target_id,
            on_installed=on_installed
        )
        self.cloud_sync = CloudSync(self.client, self.importer, self.identity, self.notifier)

    @property
    def user_id(self) -> str:
        return self.identity.current_user_id()

    def save_bundle(self, project_name: str, project_data: bytes) -> SaveResult:
        """
        Save an exported project bundle to the cloud.

        Args:
            project_name: The name of the project
            project_data: Compressed bundle bytes as exported by the editor
        """
        logger.info(f"Cloud save initiated for '{project_name}'")
        try:
            base64_data = encode_base64(project_data)
            logger.debug(f"Base64 size: {len(base64_data)} characters")
            result = self.client.save_project(self.user_id, project_name, base64_data)
        except Exception as e:
            logger.error(f"Error saving to cloud: {e}")
            self.notifier.error(f"Failed to save '{project_name}': {e}")
            raise

        self.notifier.info(f"Project '{project_name}' saved to cloud!")
        return result

    def save_local_project(self, project_name: str) -> SaveResult:
        """Pack an installed local project and save it to the cloud."""
        header = self.workspace.get_header_by_name(project_name)
        if header is None:
            message = f"No local project named '{project_name}'"
            self.notifier.error(f"Failed to save '{project_name}': {message}")
            raise CloudStoreError(message)

        meta = {
            'name': header.name,
            'editor': header.editor,
            'targetVersions': {'target': header.target_version},
            'meta': header.meta,
            'pubId': header.pub_id
        }
        bundle = pack_bundle(self.workspace.get_files(header.id), meta)
        return self.save_bundle(project_name, bundle)

    def update_project(
        self,
        project_id: int,
        project_name: Optional[str] = None,
        project_data: Optional[bytes] = None
    ) -> UpdateResult:
        """Rename a cloud project and/or replace its bundle."""
        try:
            result = self.client.update_project(
                project_id,
                self.user_id,
                project_name=project_name,
                project_data=encode_base64(project_data) if project_data is not None else None
            )
        except Exception as e:
            self.notifier.error(f"Failed to update project {project_id}: {e}")
            raise

        self.notifier.info(f"Project {project_id} updated in cloud")
        return result

    def delete_project(self, project_id: int) -> DeleteResult:
        """Delete a cloud project."""
        try:
            result = self.client.delete_project(project_id, self.user_id)
        except Exception as e:
            self.notifier.error(f"Failed to delete project {project_id}: {e}")
            raise

        self.notifier.info(f"Project {project_id} deleted from cloud")
        return result

    def list_projects(self) -> List[ProjectListItem]:
        return self.client.get_user_projects(self.user_id)

    def get_project(self, project_id: int) -> ProjectRecord:
        return self.client.get_project(project_id, self.user_id)

    def import_bundle(self, project_name: str, project_data: bytes) -> bool:
        """Import an exported bundle file straight into the local workspace."""
        return self.importer.import_project(
            CloudProjectData(project_name=project_name, project_data=encode_base64(project_data))
        )

    def sync_from_cloud(self) -> SyncReport:
        return self.cloud_sync.sync_from_cloud()

    def check_health(self) -> HealthStatus:
        return self.client.check_health()

    def close(self) -> None:
        """Release the workspace if this application created it."""
        if self._owns_workspace and isinstance(self.workspace, LocalWorkspace):
            self.workspace.close()
