"""
Aggregate fetcher: a primary entity plus everything that references it,
retrieved as one logical read.

All lookups are independent and run concurrently. The join waits for every
lookup to finish (a failure never cancels its siblings) and then raises the
first failure in declaration order, discarding partial results. A missing
primary is a normal outcome reported through ``Aggregate.found``; empty
dependent lists are normal too.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Dict, Iterable, Mapping, Optional

from ..core.errors import NotFound, StoreError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Dependent:
    """
    A dependent lookup keyed to the primary id.

    Attributes:
        key (str): Name the result is stored under.
        kind (type): Entity class to list.
        field (str): Reference filter compared to the primary id.
        sort (Optional[str]): Optional ascending sort field.
    """
    key: str
    kind: type
    field: str
    sort: Optional[str] = None


@dataclass
class Aggregate:
    primary: Any
    dependents: Dict[str, list] = field(default_factory=dict)
    extras: Dict[str, Any] = field(default_factory=dict)

    @property
    def found(self) -> bool:
        return self.primary is not None

    @property
    def has_dependents(self) -> bool:
        return any(self.dependents.values())


async def _bounded(name: str, lookup: Awaitable, timeout: Optional[float]) -> Any:
    if timeout is None:
        return await lookup
    try:
        return await asyncio.wait_for(lookup, timeout)
    except asyncio.TimeoutError as e:
        logger.error(f"Lookup '{name}' timed out after {timeout}s")
        raise StoreError(f"Lookup '{name}' timed out", operation=name) from e


async def gather_lookups(lookups: Mapping[str, Awaitable], timeout: Optional[float] = None) -> Dict[str, Any]:
    """
    Runs independent lookups concurrently and joins on all of them.

    Args:
        lookups (Mapping[str, Awaitable]): Named awaitables, typically store calls.
        timeout (Optional[float]): Per-lookup timeout in seconds; None disables it.

    Returns:
        Dict[str, Any]: Results keyed by lookup name.

    Raises:
        StoreError: The first failure, after every lookup has finished.
    """
    names = list(lookups)
    results = await asyncio.gather(
        *(_bounded(name, lookups[name], timeout) for name in names),
        return_exceptions=True,
    )
    for name, result in zip(names, results):
        if isinstance(result, BaseException):
            logger.debug(f"Aggregate failed on lookup '{name}': {result!r}")
            raise result
    return dict(zip(names, results))


async def fetch_aggregate(
    store,
    kind: type,
    entity_id: str,
    dependents: Iterable[Dependent] = (),
    extras: Optional[Mapping[str, Awaitable]] = None,
    timeout: Optional[float] = None,
) -> Aggregate:
    """
    Fetches the primary entity, its dependents and any extra lookups concurrently.

    Args:
        store (EntityStore): Store handle.
        kind (type): Primary entity class.
        entity_id (str): Primary identifier.
        dependents (Iterable[Dependent]): Lookups filtered by ``field = entity_id``.
        extras (Optional[Mapping[str, Awaitable]]): Unrelated lookups to run in the same join.
        timeout (Optional[float]): Per-lookup timeout.

    Returns:
        Aggregate: ``primary`` is None when the id does not exist.
    """
    dependents = list(dependents)
    extras = dict(extras or {})
    lookups: Dict[str, Awaitable] = {"primary": store.find_by_id(kind, entity_id)}
    for dep in dependents:
        lookups[f"dependent:{dep.key}"] = store.find_many(dep.kind, sort=dep.sort, **{dep.field: entity_id})
    for key, lookup in extras.items():
        lookups[f"extra:{key}"] = lookup

    results = await gather_lookups(lookups, timeout=timeout)
    aggregate = Aggregate(
        primary=results["primary"],
        dependents={dep.key: results[f"dependent:{dep.key}"] for dep in dependents},
        extras={key: results[f"extra:{key}"] for key in extras},
    )
    if not aggregate.found:
        logger.warning(f"{kind.__name__} {entity_id} not found.")
    return aggregate


async def fetch_required(store, kind: type, entity_id: str, **kwargs) -> Aggregate:
    """Like ``fetch_aggregate`` but raises ``NotFound`` when the primary is absent."""
    aggregate = await fetch_aggregate(store, kind, entity_id, **kwargs)
    if not aggregate.found:
        raise NotFound(kind.__name__, entity_id)
    return aggregate
