"""
In-process fallback store used when MongoDB is unreachable in development.

Data lives in plain lists and does not survive a restart.
"""
import copy
import logging
import threading
from typing import Any, Dict, List, Optional, Sequence

from bson import ObjectId
from django.utils import timezone

from .base import Collection, DuplicateRecord, Record, SortSpec, Store, tie_direction
from .filters import matches

logger = logging.getLogger(__name__)


def _sort_key(value: Any):
    # null sorts before any value, as in MongoDB
    return (0, 0) if value is None else (1, value)


class MemoryCollection(Collection):

    def __init__(self, name: str, unique_fields: Sequence[str] = ()):
        self.name = name
        self._unique_fields = tuple(unique_fields)
        self._records: List[Record] = []
        self._lock = threading.Lock()

    def _index_of(self, record_id: str) -> int:
        for index, record in enumerate(self._records):
            if record['id'] == record_id:
                return index
        return -1

    def _check_unique(self, candidate: Record, ignore_id: Optional[str] = None) -> None:
        for field in self._unique_fields:
            value = candidate.get(field)
            if value is None:
                continue
            for record in self._records:
                if record['id'] != ignore_id and record.get(field) == value:
                    raise DuplicateRecord(field)

    def find_by_id(self, record_id: str) -> Optional[Record]:
        with self._lock:
            index = self._index_of(str(record_id))
            return copy.deepcopy(self._records[index]) if index != -1 else None

    def find_many(
        self,
        filter: Optional[Dict[str, Any]] = None,
        sort: Optional[SortSpec] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Record]:
        with self._lock:
            found = [record for record in self._records if matches(record, filter or {})]
            # records are kept in insertion order and list.sort is stable:
            # orient ties first, then apply keys last-to-first
            if tie_direction(sort) < 0:
                found.reverse()
            for field, direction in reversed(list(sort or [])):
                found.sort(key=lambda record: _sort_key(record.get(field)), reverse=direction < 0)
            if skip:
                found = found[skip:]
            if limit is not None:
                found = found[:max(limit, 0)]
            return copy.deepcopy(found)

    def count(self, filter: Optional[Dict[str, Any]] = None) -> int:
        with self._lock:
            return sum(1 for record in self._records if matches(record, filter or {}))

    def insert(self, record: Record) -> Record:
        now = timezone.now()
        stored = copy.deepcopy(record)
        stored['id'] = str(ObjectId())
        stored['created_at'] = now
        stored['updated_at'] = now
        with self._lock:
            self._check_unique(stored)
            self._records.append(stored)
        return copy.deepcopy(stored)

    def replace(self, record_id: str, patch: Dict[str, Any]) -> Optional[Record]:
        patch = {key: value for key, value in patch.items() if key not in ('id', 'created_at')}
        with self._lock:
            index = self._index_of(str(record_id))
            if index == -1:
                return None
            updated = {**self._records[index], **copy.deepcopy(patch), 'updated_at': timezone.now()}
            self._check_unique(updated, ignore_id=updated['id'])
            self._records[index] = updated
            return copy.deepcopy(updated)

    def delete(self, record_id: str) -> bool:
        with self._lock:
            index = self._index_of(str(record_id))
            if index == -1:
                return False
            del self._records[index]
            return True


class MemoryStore(Store):
    """List-backed store. Identifiers are ObjectId strings, as with MongoDB."""

    def __init__(self):
        self.users = MemoryCollection('users', unique_fields=('email',))
        self.tasks = MemoryCollection('tasks')
        logger.warning("Using in-memory store: data will not persist between restarts")
