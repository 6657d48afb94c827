"""Models package for the cloud storage client."""

from .project_record import (
    DeleteResult,
    HealthStatus,
    ProjectListItem,
    ProjectRecord,
    SaveResult,
    UpdateResult,
)
from .workspace_header import CloudProjectData, Header, ImportedProject, InstallHeader

__all__ = [
    'CloudProjectData',
    'DeleteResult',
    'Header',
    'HealthStatus',
    'ImportedProject',
    'InstallHeader',
    'ProjectListItem',
    'ProjectRecord',
    'SaveResult',
    'UpdateResult',
]
