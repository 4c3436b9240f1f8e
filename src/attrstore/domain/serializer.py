"""Canonical JSON serialization of an item's attributes.

Output is a compact JSON array ``[{"name": k, "value": v}, ...]`` sorted
by value, descending. Existing consumers compare this string verbatim,
so the ordering is fixed: it is NOT alphabetical by key.

INVARIANT: Equal values keep the order in which the backend returned them.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence

AttributeMap = Mapping[str, Sequence[str]]


def attribute_pairs(attributes: AttributeMap) -> list[tuple[str, str]]:
    """Flatten ``{key: [values]}`` into ``(key, value)`` pairs in backend order."""
    return [(name, value) for name, values in attributes.items() for value in values]


def serialize_attributes(attributes: AttributeMap | None) -> str | None:
    """Return the canonical JSON for *attributes*, or None when there are none.

    A missing item and an item with zero attributes both yield None.

    Examples:
        >>> serialize_attributes({"a": ["x"], "b": ["y"]})
        '[{"name":"b","value":"y"},{"name":"a","value":"x"}]'
        >>> serialize_attributes({}) is None
        True
    """
    if not attributes:
        return None
    pairs = attribute_pairs(attributes)
    if not pairs:
        return None
    # sorted() is stable under reverse=True, so ties keep backend order.
    ordered = sorted(pairs, key=lambda pair: pair[1], reverse=True)
    entries = [{"name": name, "value": value} for name, value in ordered]
    return json.dumps(entries, separators=(",", ":"), ensure_ascii=False)
