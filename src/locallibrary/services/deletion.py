"""
Guarded delete: an entity is only removed once nothing references it.

Each delete request moves through these states::

    FETCHING -> FAILED                    (store error, propagated)
    FETCHING -> DONE                      (primary does not exist)
    FETCHING -> BLOCKED                   (dependents exist, nothing deleted)
    FETCHING -> READY                     (no dependents, waiting for confirmation)
    FETCHING -> CONFIRMED -> DONE         (no dependents, confirmed request)

Only confirmed requests can reach CONFIRMED. A blocked request leaves the
store untouched, so retrying it without removing the dependents blocks
again.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..core.errors import CatalogError
from ..models.author import Author
from ..models.book import Book
from ..models.bookinstance import BookInstance
from ..models.genre import Genre
from .aggregate import Aggregate, Dependent, fetch_aggregate

logger = logging.getLogger(__name__)

# What must be gone before each kind can be deleted
DELETE_DEPENDENTS: Dict[type, List[Dependent]] = {
    Author: [Dependent("books", Book, "author", sort="title")],
    Genre: [Dependent("books", Book, "genre", sort="title")],
    Book: [Dependent("bookinstances", BookInstance, "book")],
    BookInstance: [],
}


class DeleteState(str, enum.Enum):
    FETCHING = "fetching"
    BLOCKED = "blocked"
    READY = "ready"
    CONFIRMED = "confirmed"
    DONE = "done"
    FAILED = "failed"


@dataclass
class DeleteOutcome:
    state: DeleteState
    aggregate: Optional[Aggregate] = None
    deleted: bool = False

    @property
    def entity(self):
        return self.aggregate.primary if self.aggregate else None

    @property
    def dependents(self) -> Dict[str, list]:
        return self.aggregate.dependents if self.aggregate else {}

    @property
    def not_found(self) -> bool:
        return self.state is DeleteState.DONE and not self.deleted

    @property
    def blocked(self) -> bool:
        return self.state is DeleteState.BLOCKED


async def guarded_delete(
    store,
    kind: type,
    entity_id: str,
    confirm: bool = False,
    timeout: Optional[float] = None,
) -> DeleteOutcome:
    """
    Runs the guarded delete state machine for one request.

    Args:
        store (EntityStore): Store handle.
        kind (type): Entity class to delete.
        entity_id (str): Identifier of the entity.
        confirm (bool): True for a confirmed (POST) request; False only
            fetches what the confirmation page needs.
        timeout (Optional[float]): Per-lookup timeout for the fetch.

    Returns:
        DeleteOutcome: Final state, the fetched aggregate and whether a
        deletion happened.

    Raises:
        StoreError: If any lookup or the deletion itself fails.
    """
    state = DeleteState.FETCHING
    try:
        aggregate = await fetch_aggregate(store, kind, entity_id, dependents=DELETE_DEPENDENTS[kind], timeout=timeout)
    except CatalogError:
        logger.error(f"Delete of {kind.__name__} {entity_id}: {DeleteState.FAILED.value} while {state.value}")
        raise

    if not aggregate.found:
        return DeleteOutcome(DeleteState.DONE, aggregate)

    if aggregate.has_dependents:
        counts = {key: len(items) for key, items in aggregate.dependents.items()}
        logger.info(f"Delete of {kind.__name__} {entity_id} blocked by dependents {counts}")
        return DeleteOutcome(DeleteState.BLOCKED, aggregate)

    if not confirm:
        return DeleteOutcome(DeleteState.READY, aggregate)

    state = DeleteState.CONFIRMED
    try:
        await store.delete_by_id(kind, entity_id)
    except CatalogError:
        logger.error(f"Delete of {kind.__name__} {entity_id}: {DeleteState.FAILED.value} while {state.value}")
        raise
    return DeleteOutcome(DeleteState.DONE, aggregate, deleted=True)
