"""
Publication output folder-location schemas.

Contains Pydantic models for the FolderLocation response returned by the
repository, the repository object handles accepted as batch input, and the
per-item result of a collect-all resolution.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.errors import IshRemoteError


class BaseFolder(str, Enum):
    """Top-level repository folders under which every folder hierarchy is rooted."""

    DATA = "Data"
    SYSTEM = "System"
    FAVORITES = "Favorites"
    EDITOR_TEMPLATE = "EditorTemplate"


class FolderLocationResponse(BaseModel):
    """Schema for one FolderLocation lookup.

    Attributes:
        base_folder: Base folder category as sent on the wire (e.g. "Data").
            Kept as a string so categories this client does not know reach the
            label lookup instead of failing validation.
        folder_path: Folder names strictly beneath the base folder, root to
            leaf. Absent or null means the object sits in the base folder.

    Example:
        >>> FolderLocationResponse.model_validate(
        ...     {"baseFolder": "Data", "folderPath": ["Folder1", "Folder2"]}
        ... ).folder_path
        ['Folder1', 'Folder2']
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    base_folder: str = Field(
        ...,
        alias="baseFolder",
        description="Base folder category (Data, System, Favorites, EditorTemplate)",
        min_length=1,
    )
    folder_path: List[str] = Field(
        default_factory=list,
        alias="folderPath",
        description="Folder names beneath the base folder, in root-to-leaf order",
    )

    @field_validator("base_folder", mode="before")
    @classmethod
    def coerce_base_folder(cls, v: Any) -> Any:
        if isinstance(v, Enum):
            return v.value
        return v

    @field_validator("folder_path", mode="before")
    @classmethod
    def default_missing_folder_path(cls, v: Any) -> Any:
        if v is None:
            return []
        return v


class IshObject(BaseModel):
    """Repository object handle carrying the logical identifier of the object.

    Attributes:
        ish_ref: Logical identifier (e.g. "GUID-412E3A98-9AA8-484E-A1AA-3DE3B58947BD")
        ish_type: Object type (e.g. "ISHPublication")
        object_ref: References by kind, e.g. {"lng": "4711"}; only used for logging
    """

    model_config = ConfigDict(populate_by_name=True)

    ish_ref: str = Field(..., alias="ishRef", description="Logical identifier of the object")
    ish_type: Optional[str] = Field(default=None, alias="ishType")
    object_ref: Dict[str, str] = Field(default_factory=dict, alias="objectRef")

    @property
    def lng_ref(self) -> Optional[str]:
        return self.object_ref.get("lng")


@dataclass(frozen=True)
class FolderLocationResult:
    """Outcome of resolving one logical identifier in collect-all mode."""

    logical_id: Any
    folder_path: Optional[str] = None
    error: Optional[IshRemoteError] = None

    @property
    def ok(self) -> bool:
        return self.error is None
