"""Type definitions for the dotini configuration system."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Union

# section name -> {dotted key -> raw value}, or a bare top-level raw value
RawSource = Mapping[str, Union[Mapping[str, Any], Any]]

# key -> coerced scalar or nested tree
ConfigTree = Dict[str, Any]


@dataclass(frozen=True)
class ProvenanceRecord:
    """Record tracking the source of a configuration value.

    Attributes:
        key: Flattened dotted key in the effective configuration.
        source_id: ID of the source this value came from.
        timestamp_loaded: When this value was loaded.
    """

    key: str
    source_id: str
    timestamp_loaded: datetime
