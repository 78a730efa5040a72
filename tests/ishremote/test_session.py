"""Tests for IshSession and the current-session registry."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from config import IshRemoteConfig
from core.errors import SessionNotFoundError, UnmappedCategoryError
from ishremote.api_client import PublicationOutputApiClient
from ishremote.schemas import BaseFolder
from ishremote.session import (
    IshSession,
    clear_current_session,
    get_current_session,
    set_current_session,
)


class TestBaseFolderLabel:
    def test_default_labels(self):
        session = IshSession(publication_output=MagicMock())
        assert session.base_folder_label("Data") == "General"
        assert session.base_folder_label("System") == "System"
        assert session.base_folder_label("Favorites") == "Favorites"
        assert session.base_folder_label("EditorTemplate") == "Editor Template"

    def test_accepts_enum(self):
        session = IshSession(publication_output=MagicMock())
        assert session.base_folder_label(BaseFolder.DATA) == "General"

    def test_custom_labels(self):
        session = IshSession(publication_output=MagicMock(), base_folder_labels={"Data": "Algemeen"})
        assert session.base_folder_label("Data") == "Algemeen"

    def test_unknown_category_raises(self):
        session = IshSession(publication_output=MagicMock())

        with pytest.raises(UnmappedCategoryError) as exc_info:
            session.base_folder_label("Archive")

        assert exc_info.value.base_folder == "Archive"

    def test_label_table_is_read_only(self):
        labels = {"Data": "General"}
        session = IshSession(publication_output=MagicMock(), base_folder_labels=labels)

        labels["Data"] = "Changed"

        assert session.base_folder_label("Data") == "General"
        with pytest.raises(TypeError):
            session.base_folder_labels["Data"] = "Changed"


class TestSessionSettings:
    def test_default_separator_is_backslash(self):
        assert IshSession(publication_output=MagicMock()).folder_path_separator == "\\"

    def test_empty_separator_rejected(self):
        with pytest.raises(ValueError):
            IshSession(publication_output=MagicMock(), folder_path_separator="")

    def test_from_config(self):
        config = IshRemoteConfig(
            ws_base_url="https://ish.example.com/ISHWS/",
            api_token="secret",
            session_name="prod",
            folder_path_separator="/",
            timeout_seconds=10,
            max_concurrent_requests=5,
        )

        session = IshSession.from_config(config)

        assert isinstance(session.publication_output, PublicationOutputApiClient)
        assert session.publication_output.base_url == "https://ish.example.com/ISHWS"
        assert session.publication_output.timeout_seconds == 10
        assert session.folder_path_separator == "/"
        assert session.name == "prod"

    def test_from_config_without_url_fails(self):
        with pytest.raises(ValueError, match="base_url"):
            IshSession.from_config(IshRemoteConfig(api_token="secret"))

    @pytest.mark.asyncio
    async def test_context_manager_closes_client(self):
        service = MagicMock()
        service.close = AsyncMock()

        async with IshSession(publication_output=service):
            pass

        service.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_close_without_client_close(self):
        session = IshSession(publication_output=object())
        await session.close()


class TestCurrentSession:
    def setup_method(self):
        clear_current_session()

    def teardown_method(self):
        clear_current_session()

    def test_get_without_session_raises(self):
        with pytest.raises(SessionNotFoundError):
            get_current_session()

    def test_set_and_get(self):
        session = IshSession(publication_output=MagicMock(), name="s1")
        set_current_session(session)
        assert get_current_session() is session

    def test_clear(self):
        set_current_session(IshSession(publication_output=MagicMock()))
        clear_current_session()
        with pytest.raises(SessionNotFoundError):
            get_current_session()
