"""
Field-name mapping between the wire shape and the persisted shape.

API payloads use camelCase keys (``imageUrl``, ``ratingCount``); table
columns use snake_case (``image_url``, ``rating_count``). These functions
are the only place that translation is defined. The pydantic models use
snake_to_camel as their alias generator and the REST backend runs
payloads through to_storage / to_wire.
"""

import re
from typing import Any, Mapping

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def snake_to_camel(name: str) -> str:
    """``completion_year`` -> ``completionYear``."""
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def camel_to_snake(name: str) -> str:
    """``completionYear`` -> ``completion_year``."""
    return _CAMEL_BOUNDARY.sub(r"_\1", name).lower()


def to_wire(row: Mapping[str, Any]) -> dict[str, Any]:
    """Rename the keys of a persisted row to camelCase (values untouched)."""
    return {snake_to_camel(key): value for key, value in row.items()}


def to_storage(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Rename the keys of a wire payload to snake_case (values untouched)."""
    return {camel_to_snake(key): value for key, value in payload.items()}
