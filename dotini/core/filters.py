"""Filtering and flattening of configuration keys."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Mapping, Optional, Pattern, Tuple


@dataclass(frozen=True)
class Filter:
    """Filter for including configuration sections and keys.

    Attributes:
        include_regex: Regular expression a name must match (``search``).
    """

    include_regex: Optional[Pattern[str]] = None


def should_include_key(name: str, flt: Optional[Filter]) -> bool:
    """Check if a section or key name passes the filter.

    Args:
        name: Section name or flattened key.
        flt: Filter to apply (None means include all).

    Returns:
        True if the name should be included, False otherwise.
    """
    if flt is None:
        return True
    if flt.include_regex and not flt.include_regex.search(name):
        return False
    return True


def iter_hierarchical(
    data: Mapping[str, Any],
    parent: str = "",
    depth: Optional[int] = None,
) -> Iterator[Tuple[str, Any]]:
    """Flatten nested mappings using dot-notation.

    Lists and scalars are emitted as-is. Nested mappings below ``depth``
    are emitted whole.

    Args:
        data: Mapping to flatten.
        parent: Parent key prefix for recursion.
        depth: Maximum depth to flatten (None for unlimited).

    Yields:
        Tuples of (flattened_key, value).
    """
    if depth is not None and depth < 0:
        return

    for key, value in data.items():
        full_key = key if not parent else f"{parent}.{key}"
        if isinstance(value, Mapping) and value and (depth is None or depth > 0):
            next_depth = None if depth is None else depth - 1
            yield from iter_hierarchical(value, full_key, next_depth)
        else:
            yield full_key, value
