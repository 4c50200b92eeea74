"""
Response actions produced by catalog handlers, and the catalog context
every handler receives.

Handlers never render HTML or talk HTTP: they return a ``Render`` (view
name plus data) or a ``Redirect`` (target location) for the host to carry
out.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from ..core.errors import NotFound, StoreError
from ..display import entity_url, listing_url

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Render:
    view: str
    context: Dict[str, Any] = field(default_factory=dict)
    status: int = 200


@dataclass(frozen=True)
class Redirect:
    location: str
    status: int = 302


Response = Union[Render, Redirect]


@dataclass
class Catalog:
    """
    Explicit handler context.

    Attributes:
        store (EntityStore): Store handle shared by the handlers.
        url_prefix (str): Prefix of every canonical catalog URL.
        lookup_timeout (Optional[float]): Per-lookup timeout for aggregate fetches.
    """
    store: Any
    url_prefix: str = "/catalog"
    lookup_timeout: Optional[float] = None

    @classmethod
    def from_settings(cls, store, settings) -> "Catalog":
        return cls(
            store=store,
            url_prefix=settings.CATALOG_URL_PREFIX,
            lookup_timeout=settings.LOOKUP_TIMEOUT_SECONDS,
        )

    def url(self, kind: str, entity_id: str) -> str:
        return entity_url(kind, entity_id, self.url_prefix)

    def listing(self, kind: str) -> str:
        return listing_url(kind, self.url_prefix)


def form_errors(result) -> list:
    return [violation.as_dict() for violation in result.violations]


async def dispatch(handler: Callable[..., Awaitable[Response]], *args, **kwargs) -> Response:
    """
    Runs a handler and turns propagated errors into error pages.

    ``NotFound`` becomes a 404 ``error`` view; ``StoreError`` is logged and
    becomes a 500 ``error`` view. Anything else propagates.
    """
    try:
        return await handler(*args, **kwargs)
    except NotFound as e:
        logger.warning(f"{handler.__name__}: {e} ({e.entity_id})")
        return Render("error", {"message": str(e), "status": e.status}, status=e.status)
    except StoreError as e:
        logger.error(f"{handler.__name__}: store failure: {e}")
        return Render("error", {"message": "Internal error", "status": e.status}, status=e.status)
