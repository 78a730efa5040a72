"""
ishremote: repository client operations for publication outputs.

Exposes the folder-location resolver together with the session and remote
API client it depends on.
"""

from ishremote.api_client import (
    FolderLocationService,
    PublicationOutputApiClient,
    classify_api_error,
)
from ishremote.folder_location import (
    FolderLocationResolver,
    build_folder_path,
    validate_logical_id,
)
from ishremote.schemas import (
    BaseFolder,
    FolderLocationResponse,
    FolderLocationResult,
    IshObject,
)
from ishremote.session import (
    IshSession,
    clear_current_session,
    get_current_session,
    set_current_session,
)

__all__ = [
    # Resolver
    "FolderLocationResolver",
    "build_folder_path",
    "validate_logical_id",
    # Session
    "IshSession",
    "set_current_session",
    "get_current_session",
    "clear_current_session",
    # Remote API
    "FolderLocationService",
    "PublicationOutputApiClient",
    "classify_api_error",
    # Schemas
    "BaseFolder",
    "FolderLocationResponse",
    "FolderLocationResult",
    "IshObject",
]
