"""
IshSession: connection handle, folder path separator and base folder labels.

A session is read-only from the resolver's point of view. Commands that are
not handed a session explicitly fall back to the one registered with
set_current_session().
"""

import logging
from contextvars import ContextVar
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

from config import DEFAULT_BASE_FOLDER_LABELS, DEFAULT_FOLDER_PATH_SEPARATOR, IshRemoteConfig
from core.errors import SessionNotFoundError, UnmappedCategoryError
from ishremote.api_client import FolderLocationService, PublicationOutputApiClient
from ishremote.schemas import BaseFolder

logger = logging.getLogger(__name__)


class IshSession:
    """Authenticated handle to the repository plus folder presentation settings."""

    def __init__(
        self,
        publication_output: FolderLocationService,
        folder_path_separator: str = DEFAULT_FOLDER_PATH_SEPARATOR,
        base_folder_labels: Optional[Mapping[str, str]] = None,
        name: Optional[str] = None,
    ):
        if not folder_path_separator:
            raise ValueError("IshSession requires a non-empty folder_path_separator")

        labels = dict(DEFAULT_BASE_FOLDER_LABELS if base_folder_labels is None else base_folder_labels)
        self.publication_output = publication_output
        self.name = name or "default"
        self._folder_path_separator = folder_path_separator
        self._base_folder_labels = MappingProxyType(labels)

    @classmethod
    def from_config(cls, config: IshRemoteConfig) -> "IshSession":
        client = PublicationOutputApiClient(
            base_url=config.ws_base_url,
            token=config.api_token,
            timeout_seconds=config.timeout_seconds,
            max_concurrent=config.max_concurrent_requests,
        )
        return cls(
            publication_output=client,
            folder_path_separator=config.folder_path_separator,
            base_folder_labels=config.base_folder_labels,
            name=config.effective_session_name,
        )

    @property
    def folder_path_separator(self) -> str:
        return self._folder_path_separator

    @property
    def base_folder_labels(self) -> Mapping[str, str]:
        return self._base_folder_labels

    def base_folder_label(self, base_folder: BaseFolder | str) -> str:
        """Return the display label of a base folder category.

        Raises:
            UnmappedCategoryError: the category has no configured label
        """
        key = base_folder.value if isinstance(base_folder, Enum) else base_folder
        try:
            return self._base_folder_labels[key]
        except KeyError:
            raise UnmappedCategoryError(str(key)) from None

    async def close(self) -> None:
        close = getattr(self.publication_output, "close", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> "IshSession":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"IshSession(name={self.name!r}, folder_path_separator={self._folder_path_separator!r})"


_current_session: ContextVar[Optional[IshSession]] = ContextVar("ish_session", default=None)


def set_current_session(session: IshSession) -> None:
    _current_session.set(session)
    logger.debug(f"Using IshSession[{session.name}] as current session")


def get_current_session() -> IshSession:
    """Return the current session or raise SessionNotFoundError."""
    session = _current_session.get()
    if session is None:
        raise SessionNotFoundError()
    return session


def clear_current_session() -> None:
    _current_session.set(None)
