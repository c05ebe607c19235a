"""
Field path access for JMI records.

Records are plain mappings. A field path is a dot-separated list of keys,
so "parent.uid" reads record["parent"]["uid"].
"""

from collections.abc import Mapping
from typing import Any

from ..errors import DataFormatError


class _Missing:
    def __repr__(self):
        return "MISSING"


MISSING = _Missing()


def get_field(record: Any, path: str, default: Any = MISSING) -> Any:
    """
    Get a value from a record using dot notation.

    Args:
        record: The record to read from
        path: Dot-separated path to the value (e.g., "id" or "parent.uid")
        default: Value returned when the path does not resolve

    Returns:
        The value at the path, or the default

    Raises:
        DataFormatError: If the record is not a mapping, or the path does not
            resolve and no default was given
    """
    if not isinstance(record, Mapping):
        raise DataFormatError(f"Record is not an object: {record!r}", level="warn")

    value = record
    for key in path.split('.'):
        if isinstance(value, Mapping) and key in value:
            value = value[key]
        else:
            if default is MISSING:
                raise DataFormatError(f"Record is missing the field [{path}].", level="warn")
            return default

    return value


def is_unset(value: Any) -> bool:
    """Check whether a reference value means "no reference"."""
    return value is None or value == ""
