"""
Storage abstraction shared by the MongoDB backend and the in-memory fallback.

Records are plain dicts. Every record carries a string ``id`` (ObjectId hex)
plus ``created_at``/``updated_at`` timestamps stamped by the collection.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Tuple

ASCENDING = 1
DESCENDING = -1

Record = Dict[str, Any]
SortSpec = Sequence[Tuple[str, int]]


def tie_direction(sort: Optional[SortSpec]) -> int:
    """
    Direction in which records that compare equal on every sort key are
    returned, by insertion order.

    Follows a trailing ``created_at`` key, so records stamped within the same
    clock tick still come out newest first when sorted newest first.
    """
    if sort and sort[-1][0] == 'created_at':
        return sort[-1][1]
    return ASCENDING


class StoreError(Exception):
    """Base class for storage failures."""


class DuplicateRecord(StoreError):
    """Raised when an insert or replace violates a unique field."""

    def __init__(self, field: str):
        super().__init__(f"duplicate value for unique field '{field}'")
        self.field = field


class Collection(ABC):
    """A named set of records keyed by identifier."""

    name: str = ''

    @abstractmethod
    def find_by_id(self, record_id: str) -> Optional[Record]:
        """Return the record or None. Malformed identifiers are simply absent."""

    @abstractmethod
    def find_many(
        self,
        filter: Optional[Dict[str, Any]] = None,
        sort: Optional[SortSpec] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Record]:
        """Return the records matching ``filter``, sorted and windowed."""

    @abstractmethod
    def count(self, filter: Optional[Dict[str, Any]] = None) -> int:
        """Return how many records match ``filter``."""

    @abstractmethod
    def insert(self, record: Record) -> Record:
        """Store a new record and return it with ``id`` and timestamps set."""

    @abstractmethod
    def replace(self, record_id: str, patch: Dict[str, Any]) -> Optional[Record]:
        """Merge ``patch`` into the record. Returns the new record or None."""

    @abstractmethod
    def delete(self, record_id: str) -> bool:
        """Remove the record permanently. Returns False when it was absent."""

    def find_one(self, filter: Dict[str, Any]) -> Optional[Record]:
        found = self.find_many(filter, limit=1)
        return found[0] if found else None


class Store(ABC):
    """Bundle of the collections the application persists."""

    users: Collection
    tasks: Collection

    def ping(self) -> bool:
        return True
