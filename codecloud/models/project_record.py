"""
Records exchanged with the project-store API.

The API answers with snake_case records for reads and camelCase objects for
write acknowledgements; the ``from_api`` constructors accept both as sent.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ProjectRecord:
    """A stored project including its Base64 payload."""
    id: int
    user_id: str
    project_name: str
    project_data: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'ProjectRecord':
        return cls(
            id=data['id'],
            user_id=data.get('user_id'),
            project_name=data.get('project_name'),
            project_data=data.get('project_data'),
            created_at=data.get('created_at'),
            updated_at=data.get('updated_at')
        )


@dataclass(frozen=True)
class ProjectListItem:
    """A project entry without its payload, used for enumeration."""
    id: int
    project_name: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'ProjectListItem':
        return cls(
            id=data['id'],
            project_name=data.get('project_name'),
            created_at=data.get('created_at'),
            updated_at=data.get('updated_at')
        )


@dataclass(frozen=True)
class SaveResult:
    success: bool
    id: int
    created_at: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'SaveResult':
        return cls(
            success=bool(data.get('success', False)),
            id=data['id'],
            created_at=data.get('createdAt')
        )


@dataclass(frozen=True)
class UpdateResult:
    success: bool
    id: int
    updated_at: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'UpdateResult':
        return cls(
            success=bool(data.get('success', False)),
            id=data['id'],
            updated_at=data.get('updatedAt')
        )


@dataclass(frozen=True)
class DeleteResult:
    success: bool
    id: int

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'DeleteResult':
        return cls(success=bool(data.get('success', False)), id=data['id'])


@dataclass(frozen=True)
class HealthStatus:
    status: str
    timestamp: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'HealthStatus':
        return cls(status=data.get('status', 'unknown'), timestamp=data.get('timestamp'))
