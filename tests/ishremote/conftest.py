"""Shared fixtures for ishremote tests."""

import asyncio
from typing import Dict, List, Optional

import pytest

from ishremote.schemas import FolderLocationResponse
from ishremote.session import IshSession, clear_current_session

TEST_LABELS = {
    "Data": "General",
    "System": "System",
    "Favorites": "Favorites",
    "EditorTemplate": "Editor Template",
    "UserGuides": "UserGuides",
}


class FakeFolderLocationService:
    """In-memory FolderLocation service recording every lookup."""

    def __init__(
        self,
        responses: Optional[Dict[str, FolderLocationResponse]] = None,
        errors: Optional[Dict[str, Exception]] = None,
        delays: Optional[Dict[str, float]] = None,
    ):
        self.responses = responses or {}
        self.errors = errors or {}
        self.delays = delays or {}
        self.calls: List[str] = []
        self.closed = False

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def folder_location(self, logical_id: str) -> FolderLocationResponse:
        self.calls.append(logical_id)
        delay = self.delays.get(logical_id)
        if delay:
            await asyncio.sleep(delay)
        if logical_id in self.errors:
            raise self.errors[logical_id]
        return self.responses[logical_id]

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def folder_responses():
    return {
        "GUID-1": FolderLocationResponse(base_folder="Data", folder_path=["Folder1", "Folder2"]),
        "GUID-2": FolderLocationResponse(base_folder="UserGuides", folder_path=[]),
        "GUID-3": FolderLocationResponse(base_folder="System", folder_path=["Config"]),
    }


@pytest.fixture
def fake_service(folder_responses):
    return FakeFolderLocationService(responses=folder_responses)


@pytest.fixture
def ish_session(fake_service):
    return IshSession(
        publication_output=fake_service,
        folder_path_separator="\\",
        base_folder_labels=TEST_LABELS,
        name="test-session",
    )


@pytest.fixture(autouse=True)
def reset_current_session():
    clear_current_session()
    yield
    clear_current_session()


@pytest.fixture
def make_service(folder_responses):
    """Factory for services with per-identifier errors or delays."""

    def factory(errors=None, delays=None, responses=None):
        return FakeFolderLocationService(
            responses=folder_responses if responses is None else responses,
            errors=errors,
            delays=delays,
        )

    return factory


@pytest.fixture
def make_session():
    def factory(service, separator="\\", labels=None):
        return IshSession(
            publication_output=service,
            folder_path_separator=separator,
            base_folder_labels=TEST_LABELS if labels is None else labels,
            name="test-session",
        )

    return factory
