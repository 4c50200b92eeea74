from .store import EntityStore, KINDS, REFERENCE_COLUMNS

__all__ = [
    "EntityStore",
    "KINDS",
    "REFERENCE_COLUMNS",
]
