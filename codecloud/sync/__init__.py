"""
Cloud synchronization module.

This module provides components for moving projects between the cloud and
the local workspace:
- ProjectApiClient: HTTP client for the project-store API
- LocalWorkspace: SQLite-based store of installed projects
- CloudSync: imports the user's cloud projects into the workspace
"""

from .project_api_client import ProjectApiClient
from .local_workspace import LocalWorkspace, WorkspaceStore
from .cloud_sync import CloudSync, SyncReport

__all__ = ['CloudSync', 'LocalWorkspace', 'ProjectApiClient', 'SyncReport', 'WorkspaceStore']
