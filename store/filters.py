"""
Evaluation of the MongoDB filter subset used by the application.

MongoDB evaluates these natively; the in-memory store uses ``matches`` so that
both backends answer the same queries identically.
"""
import re
from typing import Any, Dict

_MISSING = object()


def _compare(op: str, value: Any, operand: Any) -> bool:
    if op == '$ne':
        return not _equals(value, operand)
    if op == '$in':
        return any(_equals(value, candidate) for candidate in operand)
    if op == '$nin':
        return not any(_equals(value, candidate) for candidate in operand)
    if op == '$exists':
        return (value is not _MISSING) == bool(operand)

    # Range operators never match missing or null values, as in MongoDB.
    if value is _MISSING or value is None:
        return False
    try:
        if op == '$lt':
            return value < operand
        if op == '$lte':
            return value <= operand
        if op == '$gt':
            return value > operand
        if op == '$gte':
            return value >= operand
    except TypeError:
        return False
    raise ValueError(f"Unsupported filter operator: {op}")


def _equals(value: Any, expected: Any) -> bool:
    if value is _MISSING:
        return expected is None
    if isinstance(value, list) and not isinstance(expected, list):
        return expected in value
    return value == expected


def _match_regex(value: Any, pattern: str, options: str) -> bool:
    if not isinstance(value, str):
        return False
    flags = re.IGNORECASE if 'i' in options else 0
    return re.search(pattern, value, flags) is not None


def _match_field(value: Any, condition: Any) -> bool:
    if isinstance(condition, dict) and any(key.startswith('$') for key in condition):
        if '$regex' in condition:
            if not _match_regex(value, condition['$regex'], condition.get('$options', '')):
                return False
        for op, operand in condition.items():
            if op in ('$regex', '$options'):
                continue
            if not _compare(op, value, operand):
                return False
        return True
    return _equals(value, condition)


def matches(record: Dict[str, Any], filter: Dict[str, Any]) -> bool:
    """Return True when ``record`` satisfies every clause of ``filter``."""
    for key, condition in (filter or {}).items():
        if key == '$or':
            if not any(matches(record, sub) for sub in condition):
                return False
            continue
        if key == '$and':
            if not all(matches(record, sub) for sub in condition):
                return False
            continue
        if not _match_field(record.get(key, _MISSING), condition):
            return False
    return True
