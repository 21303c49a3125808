"""Turn section-oriented raw sources into nested, typed configuration trees."""

from __future__ import annotations

from typing import Any, Dict, Mapping

from .coerce import coerce
from .types import ConfigTree, RawSource


def build_path(dotted_key: str, raw: Any) -> ConfigTree:
    """Build a single-path tree from a dotted key.

    Only the first ``.`` is split off; the remainder is handled by the
    recursive call. A trailing dot produces an empty-string key.

    Example:
        >>> build_path("a.b.c", "5")
        {'a': {'b': {'c': 5}}}
    """
    value = coerce(raw)
    head, sep, tail = dotted_key.partition(".")
    if not sep:
        return {dotted_key: value}
    return {head: build_path(tail, value)}


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> ConfigTree:
    """Recursively merge ``override`` into a copy of ``base``.

    Nested mappings present on both sides are merged; on any other conflict
    the value from ``override`` wins. Neither input is mutated.
    """
    merged: Dict[str, Any] = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            merged[key] = deep_merge(current, value)
        elif isinstance(value, Mapping):
            merged[key] = deep_merge({}, value)
        else:
            merged[key] = value
    return merged


def materialize(source: RawSource) -> ConfigTree:
    """Convert a raw source into a nested configuration tree.

    Args:
        source: Mapping of section name to either a mapping of dotted keys to
            raw values, or a bare raw value.

    Returns:
        Nested tree with coerced leaves. Sections without keys are omitted.
    """
    result: ConfigTree = {}
    for section, body in source.items():
        if isinstance(body, Mapping):
            merged: ConfigTree = {}
            for dotted_key, raw in body.items():
                merged = deep_merge(merged, build_path(str(dotted_key), raw))
            if body:
                result[section] = merged
        else:
            result[section] = coerce(body)
    return result
