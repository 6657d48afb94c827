"""
Application configuration for the cloud storage client.
"""
import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from ..errors import ConfigurationError


@dataclass
class ApiConfig:
    """Project-store API connection configuration."""
    base_url: str = "http://localhost:3001"
    timeout: Optional[float] = None


@dataclass
class WorkspaceConfig:
    """Local workspace configuration."""
    path: str = "codecloud_workspace.db"
    target_id: str = "microbit"


@dataclass
class AppConfig:
    """Main application configuration."""
    api: ApiConfig = field(default_factory=ApiConfig)
    workspace: WorkspaceConfig = field(default_factory=WorkspaceConfig)
    user_id: Optional[str] = None

    @classmethod
    def from_env(cls) -> 'AppConfig':
        """Create configuration from environment variables and a ``.env`` file."""
        load_dotenv(find_dotenv(usecwd=True))

        timeout = os.getenv("CODECLOUD_TIMEOUT")
        try:
            timeout_seconds = float(timeout) if timeout else None
        except ValueError as e:
            raise ConfigurationError(
                f"CODECLOUD_TIMEOUT must be a number of seconds, got {timeout!r}"
            ) from e

        return cls(
            api=ApiConfig(
                base_url=os.getenv("API_BASE_URL", ApiConfig.base_url),
                timeout=timeout_seconds
            ),
            workspace=WorkspaceConfig(
                path=os.getenv("CODECLOUD_WORKSPACE", WorkspaceConfig.path),
                target_id=os.getenv("CODECLOUD_TARGET", WorkspaceConfig.target_id)
            ),
            user_id=os.getenv("CODECLOUD_USER_ID") or None
        )
