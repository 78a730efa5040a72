"""
Folder-location resolution for publication outputs.

Turns a logical identifier into the repository folder path of the object,
e.g. ``\\General\\Folder1\\Folder2``: one remote FolderLocation lookup per
identifier, base folder translated into its display label, segments joined
with the session's folder path separator behind one leading separator.

Batches keep input order and are fail-fast: the first failure aborts the
batch and no partial list is returned. resolve_many_collect() is the explicit
alternative that reports every item's outcome instead.
"""

import asyncio
import logging
from typing import Any, Iterable, List, Optional, Sequence

from core.errors import (
    InvalidInputError,
    IshRemoteError,
    RemoteLookupError,
    UnmappedCategoryError,
)
from core.types import ErrorCategory
from ishremote.schemas import FolderLocationResponse, FolderLocationResult, IshObject
from ishremote.session import IshSession, get_current_session

logger = logging.getLogger(__name__)


def build_folder_path(separator: str, label: str, segments: Sequence[str]) -> str:
    """Join the base folder label and the segments beneath it, with one leading separator."""
    return separator + separator.join([label, *segments])


def _require_batch(logical_ids: Any) -> None:
    if isinstance(logical_ids, str):
        raise InvalidInputError(
            "Expected a batch of LogicalIds, got a single string; use resolve_one()",
            value=logical_ids,
        )


def validate_logical_id(logical_id: Any) -> str:
    if logical_id is None:
        raise InvalidInputError("LogicalId is required", value=logical_id)
    if not isinstance(logical_id, str):
        raise InvalidInputError(
            f"LogicalId must be a string, got {type(logical_id).__name__}", value=logical_id
        )
    if not logical_id.strip():
        raise InvalidInputError("LogicalId must not be empty", value=logical_id)
    return logical_id


class FolderLocationResolver:
    """Resolves logical identifiers of publication outputs to their folder paths.

    Args:
        session: Session to use; defaults to the current session
        max_concurrent: Number of lookups in flight for batches (1 = sequential)
    """

    def __init__(self, session: Optional[IshSession] = None, max_concurrent: int = 1):
        if max_concurrent < 1:
            raise ValueError(f"max_concurrent must be >= 1, got {max_concurrent}")
        self.session = session if session is not None else get_current_session()
        self.max_concurrent = max_concurrent
        logger.debug(f"Using IshSession[{self.session.name}]")

    async def _lookup(self, logical_id: str) -> str:
        logger.debug(
            f"Retrieving PublicationOutput FolderLocation LogicalId[{logical_id}]",
            extra={"logical_id": logical_id},
        )
        try:
            response = await self.session.publication_output.folder_location(logical_id)
        except IshRemoteError:
            raise
        except Exception as e:
            raise RemoteLookupError(
                f"FolderLocation lookup failed for LogicalId[{logical_id}]: {type(e).__name__}",
                logical_id=logical_id,
                category=ErrorCategory.UNKNOWN,
                cause=e,
            ) from e

        if response is None:
            raise RemoteLookupError(
                f"FolderLocation lookup returned no response for LogicalId[{logical_id}]",
                logical_id=logical_id,
                category=ErrorCategory.PERMANENT,
            )

        if not isinstance(response, FolderLocationResponse):
            raise RemoteLookupError(
                f"Malformed FolderLocation response for LogicalId[{logical_id}]: "
                f"{type(response).__name__}",
                logical_id=logical_id,
                category=ErrorCategory.PERMANENT,
            )

        try:
            label = self.session.base_folder_label(response.base_folder)
        except UnmappedCategoryError as e:
            raise UnmappedCategoryError(e.base_folder, logical_id=logical_id) from None

        folder_path = build_folder_path(
            self.session.folder_path_separator, label, response.folder_path
        )
        logger.debug(
            "Resolved folder location",
            extra={
                "logical_id": logical_id,
                "base_folder": response.base_folder,
                "segment_count": len(response.folder_path),
            },
        )
        return folder_path

    async def resolve_one(self, logical_id: str) -> str:
        """Resolve one logical identifier to its folder path.

        Raises:
            InvalidInputError: identifier missing or empty; no remote call is made
            RemoteLookupError: the lookup could not be completed
            UnmappedCategoryError: the base folder has no configured label
        """
        return await self._lookup(validate_logical_id(logical_id))

    async def resolve_many(self, logical_ids: Iterable[str]) -> List[str]:
        """Resolve identifiers in order, failing fast on the first error.

        Every identifier is validated before the first remote call, so an
        invalid entry anywhere in the batch means no lookups at all.
        """
        _require_batch(logical_ids)
        validated = [validate_logical_id(logical_id) for logical_id in logical_ids]
        total = len(validated)

        if self.max_concurrent == 1 or total <= 1:
            results = []
            for position, logical_id in enumerate(validated, start=1):
                logger.debug(
                    f"LogicalId[{logical_id}] {position}/{total}",
                    extra={"logical_id": logical_id, "position": position, "total": total},
                )
                results.append(await self._lookup(logical_id))
        else:
            results = await self._resolve_concurrently(validated)

        logger.info(
            f"returned folderlocation count[{len(results)}]",
            extra={"records_processed": len(results)},
        )
        return results

    async def _resolve_concurrently(self, logical_ids: List[str]) -> List[str]:
        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def bounded(logical_id: str) -> str:
            async with semaphore:
                return await self._lookup(logical_id)

        tasks = [
            asyncio.create_task(bounded(logical_id), name=f"folder-location-{position}")
            for position, logical_id in enumerate(logical_ids)
        ]
        try:
            await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        # Earliest failing item in input order wins
        for task in tasks:
            if not task.cancelled() and task.exception() is not None:
                raise task.exception()
        return [task.result() for task in tasks]

    async def resolve_objects(self, ish_objects: Sequence[IshObject]) -> List[str]:
        """Resolve repository object handles by their logical identifier."""
        logical_ids = []
        total = len(ish_objects)
        for position, ish_object in enumerate(ish_objects, start=1):
            lng_ref = getattr(ish_object, "lng_ref", None)
            logger.debug(
                f"lngRef[{lng_ref}] {position}/{total}",
                extra={"lng_ref": lng_ref, "position": position, "total": total},
            )
            logical_ids.append(getattr(ish_object, "ish_ref", None))
        return await self.resolve_many(logical_ids)

    async def resolve_many_collect(self, logical_ids: Iterable[Any]) -> List[FolderLocationResult]:
        """Resolve every identifier, reporting each outcome instead of failing fast.

        Lookups run sequentially, or concurrently up to max_concurrent; the
        result list always follows input order.
        """
        _require_batch(logical_ids)
        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def collect(logical_id: Any) -> FolderLocationResult:
            try:
                validated = validate_logical_id(logical_id)
                async with semaphore:
                    folder_path = await self._lookup(validated)
            except IshRemoteError as e:
                logger.warning(
                    "Folder location lookup failed",
                    extra={
                        "logical_id": logical_id if isinstance(logical_id, str) else None,
                        "error_type": type(e).__name__,
                        "error_category": e.category.value,
                        "error_message": str(e),
                    },
                )
                return FolderLocationResult(logical_id=logical_id, error=e)
            return FolderLocationResult(logical_id=logical_id, folder_path=folder_path)

        results = list(await asyncio.gather(*(collect(i) for i in logical_ids)))
        failed = sum(1 for result in results if not result.ok)
        logger.info(
            f"returned folderlocation count[{len(results) - failed}]",
            extra={
                "records_processed": len(results),
                "records_succeeded": len(results) - failed,
                "records_failed": failed,
            },
        )
        return results
