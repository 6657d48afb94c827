"""
Project API client for the cloud project-store backend.

This module provides a thin HTTP client that:
- Saves, lists, fetches, updates and deletes project records
- Maps unsuccessful responses to ApiError with the server's message
- Reports requests that never got a response as NetworkFailure

Every call is a single attempt; there is no retry and no local cache.
"""

import json
import logging
from typing import Any, Dict, List, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

from .. import __version__
from ..config.app_config import ApiConfig
from ..errors import ApiError, NetworkFailure
from ..models.project_record import (
    DeleteResult,
    HealthStatus,
    ProjectListItem,
    ProjectRecord,
    SaveResult,
    UpdateResult,
)

logger = logging.getLogger(__name__)


class ProjectApiClient:
    """
    HTTP client for the project-store API.

    The base URL belongs to the instance, so clients pointed at different
    endpoints can coexist in one process.
    """

    def __init__(self, config: Optional[ApiConfig] = None):
        """
        Initialize the project API client.

        Args:
            config: API connection configuration
        """
        config = config or ApiConfig()
        self.base_url = config.base_url.rstrip('/')
        self.timeout = config.timeout

    def set_base_url(self, url: str) -> None:
        """Point this client at a different API base URL."""
        self.base_url = url.rstrip('/')
        logger.info(f"API base URL set to: {self.base_url}")

    def _build_headers(self) -> Dict[str, str]:
        """Build HTTP headers for the request."""
        return {
            "Content-Type": "application/json",
            "User-Agent": f"CodeCloud/{__version__}"
        }

    @staticmethod
    def _error_message(error: HTTPError, default: str) -> str:
        """Extract the server's error message from an error response body."""
        try:
            body = json.loads(error.read().decode('utf-8'))
        except (ValueError, OSError, AttributeError):
            return default
        if isinstance(body, dict) and body.get('error'):
            return str(body['error'])
        return default

    def _request(
        self,
        method: str,
        path: str,
        failure_message: str,
        payload: Optional[Dict[str, Any]] = None,
        parse_error_body: bool = True
    ) -> Any:
        """
        Send a single request and decode the JSON response.

        Args:
            method: HTTP method
            path: Path (and query string) relative to the base URL
            failure_message: Message used when the server gives none
            payload: Optional JSON body
            parse_error_body: Whether to read the server message from error bodies

        Returns:
            The decoded JSON response

        Raises:
            ApiError: The server answered with a non-2xx status
            NetworkFailure: No response was received
        """
        url = f"{self.base_url}{path}"
        data = json.dumps(payload).encode('utf-8') if payload is not None else None
        request = Request(url, data=data, headers=self._build_headers(), method=method)

        kwargs = {}
        if self.timeout is not None:
            kwargs['timeout'] = self.timeout

        try:
            with urlopen(request, **kwargs) as response:
                body = response.read()
        except HTTPError as e:
            message = self._error_message(e, failure_message) if parse_error_body else failure_message
            logger.error(f"HTTP error on {method} {path}: {e.code} {message}")
            raise ApiError(message, status=e.code) from e
        except URLError as e:
            logger.error(f"URL error on {method} {path}: {e.reason}")
            raise NetworkFailure(f"Could not reach {url}: {e.reason}", reason=e.reason) from e
        except OSError as e:
            logger.error(f"Network error on {method} {path}: {e}")
            raise NetworkFailure(f"Could not reach {url}: {e}", reason=e) from e

        try:
            return json.loads(body.decode('utf-8')) if body else {}
        except ValueError as e:
            raise ApiError(f"{failure_message}: invalid JSON response") from e

    def save_project(self, user_id: str, project_name: str, project_data: str) -> SaveResult:
        """
        Save a new project to the cloud.

        Args:
            user_id: The user's identifier
            project_name: The name of the project
            project_data: Base64 encoded project bundle

        Returns:
            The server-assigned id and creation timestamp
        """
        result = self._request(
            'POST',
            '/api/projects',
            'Failed to save project',
            payload={
                'userId': user_id,
                'projectName': project_name,
                'projectData': project_data
            }
        )
        logger.info(f"Project saved to cloud: {result}")
        return SaveResult.from_api(result)

    def get_user_projects(self, user_id: str) -> List[ProjectListItem]:
        """
        Get all projects for a user, without their payloads.

        Args:
            user_id: The user's identifier

        Returns:
            List of project list items
        """
        projects = self._request(
            'GET',
            f"/api/projects/user/{quote(user_id, safe='')}",
            'Failed to fetch projects'
        )
        if not isinstance(projects, list):
            raise ApiError("Failed to fetch projects: expected a list of projects")
        logger.info(f"Fetched {len(projects)} projects for user {user_id}")
        return [ProjectListItem.from_api(item) for item in projects]

    def get_project(self, project_id: int, user_id: str) -> ProjectRecord:
        """
        Get a single project including its payload.

        Args:
            project_id: The project's database id
            user_id: The user's identifier (for authorization)

        Returns:
            The complete project record
        """
        project = self._request(
            'GET',
            f"/api/projects/{project_id}?userId={quote(user_id, safe='')}",
            'Failed to fetch project'
        )
        record = ProjectRecord.from_api(project)
        logger.info(f"Fetched project {project_id}: {record.project_name}")
        return record

    def update_project(
        self,
        project_id: int,
        user_id: str,
        project_name: Optional[str] = None,
        project_data: Optional[str] = None
    ) -> UpdateResult:
        """
        Update an existing project.

        Fields left as None are omitted from the request so the server keeps
        their current values.

        Args:
            project_id: The project's database id
            user_id: The user's identifier (for authorization)
            project_name: Optional new project name
            project_data: Optional new Base64 encoded bundle

        Returns:
            The project id and update timestamp
        """
        payload: Dict[str, Any] = {'userId': user_id}
        if project_name is not None:
            payload['projectName'] = project_name
        if project_data is not None:
            payload['projectData'] = project_data

        result = self._request(
            'PUT',
            f"/api/projects/{project_id}",
            'Failed to update project',
            payload=payload
        )
        logger.info(f"Project {project_id} updated: {result}")
        return UpdateResult.from_api(result)

    def delete_project(self, project_id: int, user_id: str) -> DeleteResult:
        """
        Delete a project from the cloud.

        Args:
            project_id: The project's database id
            user_id: The user's identifier (for authorization)
        """
        result = self._request(
            'DELETE',
            f"/api/projects/{project_id}?userId={quote(user_id, safe='')}",
            'Failed to delete project'
        )
        logger.info(f"Project {project_id} deleted")
        return DeleteResult.from_api(result)

    def check_health(self) -> HealthStatus:
        """Check whether the API is reachable and healthy."""
        health = self._request(
            'GET',
            '/health',
            'API health check failed',
            parse_error_body=False
        )
        logger.info(f"API is healthy: {health}")
        return HealthStatus.from_api(health)
