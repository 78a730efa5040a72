"""PublicationOutput REST API client for folder-location lookups."""

import asyncio
import logging
from typing import Any, Protocol
from urllib.parse import quote

import aiohttp
from pydantic import ValidationError

from core.errors import RemoteLookupError
from core.logging.context import get_log_context
from core.types import ErrorCategory
from ishremote.schemas import FolderLocationResponse

logger = logging.getLogger(__name__)

FOLDER_LOCATION_ENDPOINT = "/api/publicationoutputs/{logical_id}/folderlocation"


class FolderLocationService(Protocol):
    """Remote service answering one folder-location lookup per call."""

    async def folder_location(self, logical_id: str) -> FolderLocationResponse:
        ...


# (label, category) per status code
_STATUS_MAP: dict[int, tuple[str, ErrorCategory]] = {
    401: ("Unauthorized", ErrorCategory.AUTH),
    403: ("Forbidden", ErrorCategory.PERMANENT),
    404: ("Not found", ErrorCategory.PERMANENT),
    429: ("Rate limited", ErrorCategory.TRANSIENT),
    500: ("Server error", ErrorCategory.TRANSIENT),
    502: ("Server error", ErrorCategory.TRANSIENT),
    503: ("Server error", ErrorCategory.TRANSIENT),
    504: ("Server error", ErrorCategory.TRANSIENT),
}


def classify_api_error(status: int, url: str, logical_id: str | None = None) -> RemoteLookupError:
    """Classify HTTP status codes into a RemoteLookupError with the matching category."""
    entry = _STATUS_MAP.get(status)
    if entry:
        label, category = entry
        message = f"{label} ({status}): {url}"
    elif 400 <= status < 500:
        # Remaining 4xx are permanent, everything else is transient
        message, category = f"Client error ({status}): {url}", ErrorCategory.PERMANENT
    else:
        message, category = f"HTTP error ({status}): {url}", ErrorCategory.TRANSIENT

    return RemoteLookupError(
        message,
        logical_id=logical_id,
        status_code=status,
        category=category,
    )


class PublicationOutputApiClient:
    """Async client for the PublicationOutput FolderLocation API."""

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout_seconds: int = 30,
        max_concurrent: int = 20,
    ):
        self.base_url = base_url.rstrip("/") if base_url else ""

        if not self.base_url:
            raise ValueError(
                "PublicationOutputApiClient requires 'base_url'. "
                "Set ISH_WS_BASE_URL environment variable or configure session.ws_base_url in config."
            )

        if not self.base_url.startswith(("http://", "https://")):
            raise ValueError(
                f"PublicationOutputApiClient base_url must start with http:// or https://, got: {self.base_url!r}. "
                "Set ISH_WS_BASE_URL environment variable or configure session.ws_base_url in config."
            )

        if not token:
            raise ValueError(
                "PublicationOutputApiClient requires 'token'. "
                "Set ISH_API_TOKEN environment variable or configure session.api_token in config."
            )

        self._auth_header = f"Bearer {token}"
        self.timeout_seconds = timeout_seconds
        self.max_concurrent = max_concurrent

        self._session: aiohttp.ClientSession | None = None
        self._semaphore: asyncio.Semaphore | None = None
        self._closed = False

        logger.debug(
            "PublicationOutputApiClient initialized",
            extra={
                "base_url": self.base_url,
                "timeout_seconds": self.timeout_seconds,
                "max_concurrent": self.max_concurrent,
            },
        )

    async def __aenter__(self) -> "PublicationOutputApiClient":
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _ensure_session(self) -> None:
        if self._closed:
            raise RuntimeError("PublicationOutputApiClient is closed, cannot create new session")
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                limit=self.max_concurrent,
                limit_per_host=self.max_concurrent,
            )
            self._session = aiohttp.ClientSession(
                connector=connector,
                headers={"Accept": "application/json"},
            )
            self._semaphore = asyncio.Semaphore(self.max_concurrent)

    async def close(self) -> None:
        self._closed = True
        if self._session and not self._session.closed:
            await self._session.close()
            await asyncio.sleep(0)
        self._session = None

    @staticmethod
    def _get_context_ids() -> dict[str, str]:
        return {k: v for k, v in get_log_context().items() if v}

    async def _handle_error_response(
        self, response, url: str, endpoint: str, logical_id: str, duration: float
    ) -> None:
        """Read error body, classify error, and raise."""
        try:
            response_body = await response.text()
            response_body_log = (
                response_body[:500] + "..." if len(response_body) > 500 else response_body
            )
        except (aiohttp.ClientError, UnicodeDecodeError):
            response_body_log = "<unable to read response body>"

        error = classify_api_error(response.status, url, logical_id)
        logger.warning(
            "API request failed",
            extra={
                **self._get_context_ids(),
                "logical_id": logical_id,
                "api_endpoint": endpoint,
                "api_method": "GET",
                "api_url": url,
                "http_status": response.status,
                "error_category": error.category.value,
                "is_retryable": error.is_retryable,
                "response_body": response_body_log,
                "duration_seconds": round(duration, 3),
            },
        )
        raise error

    async def _get_json(self, endpoint: str, logical_id: str) -> Any:
        await self._ensure_session()

        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        ctx = self._get_context_ids()

        logger.debug(
            "API request starting",
            extra={**ctx, "logical_id": logical_id, "api_method": "GET", "api_url": url},
        )

        async with self._semaphore:
            loop = asyncio.get_running_loop()
            start_time = loop.time()
            try:
                if self._session is None:
                    raise RuntimeError(
                        "HTTP session not initialized - call _ensure_session() first"
                    )
                async with self._session.get(
                    url,
                    headers={"Authorization": self._auth_header},
                    timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
                ) as response:
                    duration = loop.time() - start_time

                    if response.status != 200:
                        await self._handle_error_response(
                            response, url, endpoint, logical_id, duration
                        )

                    try:
                        data = await response.json(content_type=None)
                    except ValueError as e:
                        raise RemoteLookupError(
                            f"Malformed FolderLocation response (not JSON): {url}",
                            logical_id=logical_id,
                            status_code=response.status,
                            category=ErrorCategory.PERMANENT,
                            cause=e,
                        ) from e

                    log_level = logging.INFO if duration > 2.0 else logging.DEBUG
                    log_msg = "Slow API request" if duration > 2.0 else "API request succeeded"
                    logger.log(
                        log_level,
                        log_msg,
                        extra={
                            **ctx,
                            "logical_id": logical_id,
                            "api_endpoint": endpoint,
                            "http_status": response.status,
                            "duration_seconds": round(duration, 3),
                        },
                    )
                    return data

            except TimeoutError as e:
                duration = loop.time() - start_time
                logger.warning(
                    "API request timeout",
                    extra={
                        **ctx,
                        "logical_id": logical_id,
                        "api_url": url,
                        "timeout_seconds": self.timeout_seconds,
                        "duration_seconds": round(duration, 3),
                        "error_category": "transient",
                    },
                )
                raise RemoteLookupError(
                    f"Timeout after {self.timeout_seconds}s: {url}",
                    logical_id=logical_id,
                    category=ErrorCategory.TRANSIENT,
                    cause=e,
                ) from e

            except aiohttp.ClientError as e:
                duration = loop.time() - start_time
                logger.error(
                    "API connection error",
                    exc_info=True,
                    extra={
                        **ctx,
                        "logical_id": logical_id,
                        "api_url": url,
                        "duration_seconds": round(duration, 3),
                        "error_category": "transient",
                    },
                )
                raise RemoteLookupError(
                    f"Connection error: {e}",
                    logical_id=logical_id,
                    category=ErrorCategory.TRANSIENT,
                    cause=e,
                ) from e

    async def folder_location(self, logical_id: str) -> FolderLocationResponse:
        """Get the base folder and folder path of a publication output."""
        endpoint = FOLDER_LOCATION_ENDPOINT.format(logical_id=quote(logical_id, safe=""))
        data = await self._get_json(endpoint, logical_id)

        if not isinstance(data, dict):
            raise RemoteLookupError(
                f"Malformed FolderLocation response: expected object, got {type(data).__name__}",
                logical_id=logical_id,
                category=ErrorCategory.PERMANENT,
            )

        try:
            return FolderLocationResponse.model_validate(data)
        except ValidationError as e:
            raise RemoteLookupError(
                "Malformed FolderLocation response",
                logical_id=logical_id,
                category=ErrorCategory.PERMANENT,
                cause=e,
            ) from e
