"""
Module 01 - Schemas & Canonicalization
File: canonical.py

Purpose: Deterministic element serialization for leaf hashing.

The tree itself only ever hashes bytes. This module turns the element
types callers commonly hand us into those bytes:

- bytes / bytearray / memoryview: used as-is
- str: UTF-8 encoded
- dict / list / tuple / Pydantic model: canonical JSON, UTF-8 encoded

CRITICAL: All outputs from this module MUST be deterministic across runs.
"""

import json
import math
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel

from .errors import CanonicalizationException

# Canonical JSON separators - no whitespace
CANONICAL_JSON_SEPARATORS: tuple[str, str] = (",", ":")


def ensure_utc(dt: datetime) -> datetime:
    """
    Ensure a datetime is timezone-aware and in UTC.

    Naive datetimes are treated as UTC; aware ones are converted.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_datetime_canonical(dt: datetime) -> str:
    """
    Format a datetime as ISO-8601 with Z suffix for UTC.

    Returns:
        e.g. "2026-01-27T21:35:00Z" (microseconds only when non-zero)
    """
    utc_dt = ensure_utc(dt)
    if utc_dt.microsecond == 0:
        return utc_dt.strftime("%Y-%m-%dT%H:%M:%SZ")
    return utc_dt.strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def canonicalize_value(value: Any, path: str = "") -> Any:
    """
    Recursively canonicalize a value for deterministic JSON serialization.

    Args:
        value: Any Python value to canonicalize.
        path: Current path for error reporting.

    Returns:
        A JSON-serializable canonical representation.

    Raises:
        CanonicalizationException: If the value contains a non-finite float
            or a type with no canonical form.
    """
    if value is None:
        return None

    # bool before int, bool is a subclass of int
    if isinstance(value, bool):
        return value

    if isinstance(value, int):
        return value

    if isinstance(value, float):
        if not math.isfinite(value):
            raise CanonicalizationException(
                message=f"Non-finite float value encountered: {value}",
                details={"path": path, "value": str(value)},
            )
        return value

    if isinstance(value, str):
        return value

    if isinstance(value, datetime):
        return format_datetime_canonical(value)

    if isinstance(value, Enum):
        return value.value

    if isinstance(value, BaseModel):
        dumped = value.model_dump(mode="json", by_alias=True, exclude_none=True)
        return canonicalize_value(dumped, path)

    if isinstance(value, dict):
        # Keys are sorted during JSON serialization
        return {
            str(k): canonicalize_value(v, f"{path}.{k}" if path else str(k))
            for k, v in value.items()
            if v is not None
        }

    if isinstance(value, (list, tuple)):
        return [
            canonicalize_value(item, f"{path}[{i}]")
            for i, item in enumerate(value)
        ]

    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()

    raise CanonicalizationException(
        message=f"Cannot canonicalize value of type {type(value).__name__}",
        details={"path": path, "type": type(value).__name__},
    )


def dumps_canonical(obj: Any) -> str:
    """
    Serialize an object to a canonical JSON string.

    Output has sorted keys, no extra whitespace, None fields excluded,
    datetimes as ISO-8601 with Z suffix, enums as their values.

    Example:
        >>> dumps_canonical({"b": 2, "a": 1})
        '{"a":1,"b":2}'
    """
    canonicalized = canonicalize_value(obj)
    try:
        return json.dumps(
            canonicalized,
            sort_keys=True,
            separators=CANONICAL_JSON_SEPARATORS,
            ensure_ascii=False,
        )
    except (TypeError, ValueError) as e:
        raise CanonicalizationException(
            message=f"Failed to serialize to canonical JSON: {e}",
            details={"type": type(obj).__name__, "error": str(e)},
        ) from e


def serialize_element(element: Any) -> bytes:
    """
    Reduce a leaf element to the byte sequence that gets hashed.

    Args:
        element: bytes-like, str, or a structured value (dict, list,
                 tuple, Pydantic model).

    Returns:
        The element's canonical byte representation.

    Raises:
        CanonicalizationException: For any other type.

    Example:
        >>> serialize_element("0")
        b'0'
        >>> serialize_element({"b": 1, "a": 2})
        b'{"a":2,"b":1}'
    """
    if isinstance(element, (bytes, bytearray, memoryview)):
        return bytes(element)

    if isinstance(element, str):
        return element.encode("utf-8")

    if isinstance(element, (dict, list, tuple, BaseModel)):
        return dumps_canonical(element).encode("utf-8")

    raise CanonicalizationException(
        message=(
            f"Cannot serialize element of type {type(element).__name__}; "
            "pass bytes, str, a dict/list/tuple, a Pydantic model, "
            "or supply a custom serializer"
        ),
        details={"type": type(element).__name__},
    )


__all__ = [
    "CANONICAL_JSON_SEPARATORS",
    "ensure_utc",
    "format_datetime_canonical",
    "canonicalize_value",
    "dumps_canonical",
    "serialize_element",
]
