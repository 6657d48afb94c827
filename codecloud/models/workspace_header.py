"""
Local workspace records: installed project headers and import inputs.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class CloudProjectData:
    """Input to a single project import."""
    project_name: str
    project_data: str  # Base64 encoded bundle
    created_at: Optional[str] = None


@dataclass
class ImportedProject:
    """A decoded bundle ready to be installed. Never persisted by the client."""
    project_name: str
    file_map: Dict[str, str]
    header_metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class InstallHeader:
    """Installation request handed to a workspace store."""
    target: str
    target_version: Optional[str]
    editor: str
    name: str
    meta: Dict[str, Any] = field(default_factory=dict)
    pub_id: str = ""
    pub_current: bool = False


@dataclass
class Header:
    """An installed project as recorded by the workspace store."""
    id: str
    name: str
    target: str
    editor: str
    target_version: Optional[str] = None
    meta: Dict[str, Any] = field(default_factory=dict)
    pub_id: str = ""
    pub_current: bool = False
    modified_at: Optional[str] = None
    is_deleted: bool = False
