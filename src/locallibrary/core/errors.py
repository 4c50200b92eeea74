"""
Error types raised by the Local Library catalog.

Validation failures and refused deletes are not errors: handlers recover
from them locally by rendering a form or a confirmation page. Only store
failures and missing primary entities propagate.
"""

from typing import Optional


class CatalogError(Exception):
    """Base class for catalog errors."""


class StoreError(CatalogError):
    """
    The underlying store failed (connectivity, bad query, timeout).

    Always terminal for the current request; the catalog never retries.
    """

    status = 500

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message)
        self.operation = operation


class NotFound(CatalogError):
    """A requested primary entity does not exist."""

    status = 404

    def __init__(self, kind: str, entity_id: str):
        super().__init__(f"{kind} not found")
        self.kind = kind
        self.entity_id = entity_id
