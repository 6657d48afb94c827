"""
Cloud-to-local synchronization.

Imports every cloud project of the current user into the local workspace,
one project at a time. A project that fails to fetch or import is logged
and counted; the remaining projects are still processed.
"""

import logging
from dataclasses import dataclass

from ..auth.identity import IdentityProvider
from ..models.workspace_header import CloudProjectData
from ..notifications import Notifier
from .project_api_client import ProjectApiClient

logger = logging.getLogger(__name__)


@dataclass
class SyncReport:
    """Aggregate outcome of a sync run."""
    total: int = 0
    imported: int = 0
    skipped: int = 0
    failed: int = 0

    @property
    def processed(self) -> int:
        return self.imported + self.skipped


class CloudSync:
    """
    Pulls the current user's cloud projects into the local workspace.

    Local files win: projects already present locally by name are skipped.
    """

    def __init__(
        self,
        client: ProjectApiClient,
        importer,
        identity: IdentityProvider,
        notifier: Notifier
    ):
        """
        Initialize the sync orchestrator.

        Args:
            client: Project API client
            importer: Object with ``import_project(CloudProjectData) -> bool``
            identity: Supplies the current user id
            notifier: Sink for the aggregate result notification
        """
        self.client = client
        self.importer = importer
        self.identity = identity
        self.notifier = notifier

    def sync_from_cloud(self) -> SyncReport:
        """
        Run one sync pass.

        Returns:
            Counts of imported, skipped and failed projects

        Raises:
            CloudStoreError: The project list could not be fetched
        """
        logger.info("Starting cloud sync...")
        user_id = self.identity.current_user_id()

        try:
            cloud_projects = self.client.get_user_projects(user_id)
        except Exception as e:
            logger.error(f"Cloud sync failed: {e}")
            self.notifier.error(f"Cloud sync failed: {e}")
            raise

        report = SyncReport(total=len(cloud_projects))
        if not cloud_projects:
            logger.info("No cloud projects found")
            self.notifier.info("No cloud projects to sync")
            return report

        logger.info(f"Found {len(cloud_projects)} cloud projects")

        for project_info in cloud_projects:
            try:
                full_project = self.client.get_project(project_info.id, user_id)
                cloud_data = CloudProjectData(
                    project_name=full_project.project_name,
                    project_data=full_project.project_data,
                    created_at=full_project.created_at
                )
                if self.importer.import_project(cloud_data):
                    report.imported += 1
                else:
                    report.skipped += 1
            except Exception as e:
                report.failed += 1
                logger.error(f"Failed to import project {project_info.project_name}: {e}")

        logger.info(
            f"Cloud sync complete! Imported: {report.imported}, "
            f"Skipped: {report.skipped}, Failed: {report.failed}"
        )

        if report.imported > 0:
            self.notifier.info(f"Synced {report.imported} project(s) from cloud")
        elif report.skipped > 0:
            self.notifier.info(f"All {report.skipped} cloud project(s) already exist locally")

        return report
