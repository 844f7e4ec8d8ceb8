"""Opaque identifiers shared by users and todos."""

import re
import uuid

_ID_PATTERN = re.compile(r'^[0-9a-f]{32}$')


def new_id() -> str:
    return uuid.uuid4().hex


def is_valid_id(value: str) -> bool:
    """Return True if value has the shape produced by new_id()."""
    return isinstance(value, str) and bool(_ID_PATTERN.match(value))
