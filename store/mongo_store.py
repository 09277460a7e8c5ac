"""
MongoDB-backed store.

Documents keep MongoDB's native ``_id`` ObjectId; records leaving this module
expose it as the string field ``id`` so callers never see backend types.
"""
import datetime
import logging
from typing import Any, Dict, List, Optional, Sequence

from bson import ObjectId
from django.utils import timezone
from pymongo import ASCENDING, MongoClient, ReturnDocument
from pymongo.errors import DuplicateKeyError

from .base import Collection, DuplicateRecord, Record, SortSpec, Store, tie_direction

logger = logging.getLogger(__name__)


def _to_object_id(record_id: Any) -> Optional[ObjectId]:
    if isinstance(record_id, ObjectId):
        return record_id
    if isinstance(record_id, str) and ObjectId.is_valid(record_id):
        return ObjectId(record_id)
    return None


def _aware(value: Any) -> Any:
    if isinstance(value, datetime.datetime) and timezone.is_naive(value):
        return value.replace(tzinfo=datetime.timezone.utc)
    return value


def _utc_naive(value: Any) -> Any:
    # MongoDB keeps naive UTC datetimes; send them that way in documents and queries
    if isinstance(value, datetime.datetime) and timezone.is_aware(value):
        return value.astimezone(datetime.timezone.utc).replace(tzinfo=None)
    if isinstance(value, dict):
        return {key: _utc_naive(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_utc_naive(item) for item in value]
    return value


def _id_condition(condition: Any) -> Any:
    if isinstance(condition, dict):
        converted = {}
        for op, operand in condition.items():
            if op in ('$in', '$nin'):
                converted[op] = [oid for oid in map(_to_object_id, operand) if oid is not None]
            else:
                converted[op] = _to_object_id(operand)
        return converted
    return _to_object_id(condition)


class MongoCollection(Collection):

    def __init__(self, collection, unique_fields: Sequence[str] = ()):
        self._collection = collection
        self.name = collection.name
        self._unique_fields = tuple(unique_fields)

    @staticmethod
    def _to_record(document: Optional[Dict[str, Any]]) -> Optional[Record]:
        if document is None:
            return None
        record = {key: _aware(value) for key, value in document.items() if key != '_id'}
        record['id'] = str(document['_id'])
        return record

    def _translate(self, filter: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        translated = {}
        for key, condition in (filter or {}).items():
            if key == 'id':
                translated['_id'] = _id_condition(condition)
            elif key in ('$or', '$and'):
                translated[key] = [self._translate(sub) for sub in condition]
            else:
                translated[key] = _utc_naive(condition)
        return translated

    def _duplicate(self, exc: DuplicateKeyError) -> DuplicateRecord:
        key_pattern = (exc.details or {}).get('keyPattern') or {}
        field = next(iter(key_pattern), None)
        if field is None:
            field = self._unique_fields[0] if self._unique_fields else 'id'
        return DuplicateRecord(field)

    def find_by_id(self, record_id: str) -> Optional[Record]:
        oid = _to_object_id(record_id)
        if oid is None:
            return None
        return self._to_record(self._collection.find_one({'_id': oid}))

    def find_many(
        self,
        filter: Optional[Dict[str, Any]] = None,
        sort: Optional[SortSpec] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Record]:
        # pymongo treats limit=0 as "no limit"
        if limit is not None and limit <= 0:
            return []
        cursor = self._collection.find(self._translate(filter))
        # _id grows with insertion order; created_at only keeps milliseconds
        cursor = cursor.sort(list(sort or []) + [('_id', tie_direction(sort))])
        if skip:
            cursor = cursor.skip(skip)
        if limit is not None:
            cursor = cursor.limit(limit)
        return [self._to_record(document) for document in cursor]

    def count(self, filter: Optional[Dict[str, Any]] = None) -> int:
        return self._collection.count_documents(self._translate(filter))

    def insert(self, record: Record) -> Record:
        now = timezone.now()
        document = {key: value for key, value in record.items() if key != 'id'}
        document['created_at'] = now
        document['updated_at'] = now
        try:
            result = self._collection.insert_one(_utc_naive(document))
        except DuplicateKeyError as exc:
            raise self._duplicate(exc) from exc
        document['_id'] = result.inserted_id
        return self._to_record(document)

    def replace(self, record_id: str, patch: Dict[str, Any]) -> Optional[Record]:
        oid = _to_object_id(record_id)
        if oid is None:
            return None
        changes = {key: value for key, value in patch.items() if key not in ('id', '_id', 'created_at')}
        changes['updated_at'] = timezone.now()
        try:
            document = self._collection.find_one_and_update(
                {'_id': oid},
                {'$set': _utc_naive(changes)},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as exc:
            raise self._duplicate(exc) from exc
        return self._to_record(document)

    def delete(self, record_id: str) -> bool:
        oid = _to_object_id(record_id)
        if oid is None:
            return False
        return self._collection.delete_one({'_id': oid}).deleted_count == 1


class MongoStore(Store):

    def __init__(self, uri: str = '', db_name: str = 'taskboard', timeout_ms: int = 5000, client=None):
        self._client = client if client is not None else MongoClient(
            uri,
            serverSelectionTimeoutMS=timeout_ms,
            tz_aware=True,
        )
        database = self._client[db_name]
        self.users = MongoCollection(database['users'], unique_fields=('email',))
        self.tasks = MongoCollection(database['tasks'])
        self._database = database

    def ensure_indexes(self) -> None:
        self._database['users'].create_index('email', unique=True)
        self._database['users'].create_index('refresh_tokens')
        tasks = self._database['tasks']
        tasks.create_index([('assignee', ASCENDING), ('priority', ASCENDING), ('status', ASCENDING)])
        tasks.create_index('created_by')
        tasks.create_index('due_date')
        tasks.create_index([('priority', ASCENDING), ('position', ASCENDING)])

    def ping(self) -> bool:
        self._client.admin.command('ping')
        return True
