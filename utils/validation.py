from typing import Any, Dict, List

from utils.errors import ValidationFailed


def flatten_messages(errors) -> List[str]:
    if isinstance(errors, dict):
        return [message for nested in errors.values() for message in flatten_messages(nested)]
    if isinstance(errors, list):
        return [message for nested in errors for message in flatten_messages(nested)]
    return [str(errors)]


def validated_data(serializer) -> Dict[str, Any]:
    """Run a DRF serializer and turn its errors into a ValidationFailed."""
    if not serializer.is_valid():
        raise ValidationFailed({field: flatten_messages(errors) for field, errors in serializer.errors.items()})
    return dict(serializer.validated_data)
