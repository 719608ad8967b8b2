import uuid
from collections.abc import Mapping
from typing import Any


def is_valid_input_body(data: Any) -> bool:
    """True when data is a mapping with at least one key (request body, query params)."""
    return isinstance(data, Mapping) and len(data) > 0


def is_valid_input_value(value: Any) -> bool:
    """True for a string with something other than whitespace in it."""
    return isinstance(value, str) and len(value.strip()) > 0


def is_valid_id(value: Any) -> bool:
    """True for an entity id: a UUID string in canonical (lowercase, hyphenated) form."""
    if not isinstance(value, str):
        return False
    try:
        return str(uuid.UUID(value)) == value
    except ValueError:
        return False


def is_valid_remove_flag(value: Any) -> bool:
    """removeProduct must be the number 0 or 1. Booleans and strings don't count."""
    return not isinstance(value, bool) and isinstance(value, (int, float)) and value in (0, 1)
