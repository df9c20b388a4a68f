"""Chunked deletion for a store that caps the writes per batch."""

import logging
from typing import Callable, Iterator, List, Sequence, TypeVar

from config import DEFAULT_BATCH_SIZE
from exceptions import BulkDeleteError


logger = logging.getLogger(__name__)

T = TypeVar("T")

DELETE_BATCH_SIZE = DEFAULT_BATCH_SIZE


def chunked(items: Sequence[T], size: int) -> Iterator[List[T]]:
    if size < 1:
        raise ValueError("batch size must be at least 1")
    for start in range(0, len(items), size):
        yield list(items[start:start + size])


def delete_in_batches(
    handles: Sequence[T],
    commit: Callable[[List[T]], int],
    batch_size: int = DELETE_BATCH_SIZE,
    label: str = "",
) -> int:
    """Delete ``handles`` one chunk at a time and return how many went.

    ``commit`` deletes one chunk and returns the number of documents it
    removed. Chunks run strictly in order; a failing chunk stops the run
    with BulkDeleteError, leaving earlier chunks deleted and later ones
    untouched.
    """
    deleted = 0
    for number, chunk in enumerate(chunked(handles, batch_size), start=1):
        try:
            deleted += int(commit(chunk))
        except Exception as exc:
            logger.error(
                "Delete batch %d failed for %s after %d deleted: %s",
                number, label or "collection", deleted, exc,
            )
            raise BulkDeleteError(
                f"Batch {number} failed; {deleted} records deleted before the failure.",
                deleted=deleted,
                collection=label or None,
            ) from exc
        logger.debug("Delete batch %d for %s removed %d", number, label or "collection", len(chunk))
    return deleted
