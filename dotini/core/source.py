"""Source protocol and registration for configuration sources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from .filters import Filter
from .types import RawSource


class Source(Protocol):
    """Protocol defining the interface for configuration sources.

    A source reads some external resource and hands back a RawSource:
    section names mapped to dotted-key/raw-value mappings, or bare values.
    """

    id: str
    name: str
    extension: Optional[str]

    def load(self, filter: Optional[Filter] = None) -> RawSource:
        """Load raw sections from the source.

        Args:
            filter: Optional filter applied to section names.

        Returns:
            Raw section mapping, values not yet coerced.

        Raises:
            SourceUnreadable: If the resource cannot be read or parsed.
        """
        ...


@dataclass
class RegisteredSource:
    """A source registered with an Environment.

    Attributes:
        source: The source instance.
        filter: Optional filter to apply to source sections.
    """

    source: Source
    filter: Optional[Filter] = None
