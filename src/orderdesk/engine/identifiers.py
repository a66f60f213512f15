"""Dealer identifier normalization and resolution.

Order lines reference dealers in several historical shapes: a plain id
string, a numeric id, a populated dealer document, or a placeholder such as
"N/A". Everything downstream works with the canonical string id returned by
``normalize_dealer_id``, where ``""`` means "no dealer".
"""

import math
from collections.abc import Mapping
from typing import Any

from orderdesk.model.snapshot import LineItem

PLACEHOLDER_IDS = frozenset({"n/a", "na", "null", "undefined", "-"})


def _from_string(value: str) -> str:
    if value.strip().lower() in PLACEHOLDER_IDS:
        return ""
    return value


def _from_number(value: int | float) -> str:
    if isinstance(value, float):
        if not math.isfinite(value):
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value)


def normalize_dealer_id(value: Any) -> str:
    """Coerce any dealer reference into a canonical dealer id, or ``""``.

    Never raises. Strings keep their original case; only the placeholder
    comparison is case- and whitespace-insensitive.
    """
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, str):
        return _from_string(value)
    if isinstance(value, (int, float)):
        return _from_number(value)
    if isinstance(value, Mapping):
        ref = value.get("_id") or value.get("id")
        if isinstance(ref, str):
            return _from_string(ref)
        if isinstance(ref, bool) or not ref:
            return ""
        if isinstance(ref, (int, float)):
            return _from_number(ref)
        return str(ref)
    return ""


def resolve_dealer_id(item: LineItem) -> str:
    """Return the authoritative dealer id for a line item.

    An explicit ``dealer_mapped`` assignment always wins over the legacy
    ``dealer_id`` field, even when the legacy field is populated.
    """
    if item.dealer_mapped:
        mapped = normalize_dealer_id(item.dealer_mapped[0].dealer_id)
        if mapped:
            return mapped
    return normalize_dealer_id(item.dealer_id)


def dealer_count(value: Any) -> int:
    """Count the usable dealer references in a legacy ``dealer_id`` value."""
    if not value:
        return 0
    if isinstance(value, (list, tuple)):
        return sum(1 for ref in value if normalize_dealer_id(ref))
    return 1 if normalize_dealer_id(value) else 0
