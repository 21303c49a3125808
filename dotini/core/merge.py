"""Overlaying multiple configuration sources."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Dict, List, Tuple

from .filters import iter_hierarchical
from .materializer import deep_merge, materialize
from .source import RegisteredSource
from .types import ConfigTree, ProvenanceRecord

logger = logging.getLogger(__name__)


def merge_sources(
    registered_sources: List[RegisteredSource],
) -> Tuple[ConfigTree, Dict[str, ProvenanceRecord]]:
    """Materialize and overlay sources into a single tree.

    Sources are merged in order with later sources overriding
    earlier ones on leaf conflicts; sibling keys are preserved.

    Args:
        registered_sources: List of registered sources to merge.

    Returns:
        Tuple of (effective_tree, provenance_map) where provenance_map is
        keyed by flattened dotted key.

    Raises:
        SourceUnreadable: Propagated from the first source that fails.
    """
    effective: ConfigTree = {}
    provenance: Dict[str, ProvenanceRecord] = {}

    for rs in registered_sources:
        raw = rs.source.load(filter=rs.filter)
        tree = materialize(raw)
        loaded_at = datetime.now(timezone.utc)
        logger.debug("Merging %d top-level keys from %s", len(tree), rs.source.id)
        effective = deep_merge(effective, tree)
        for key, _ in iter_hierarchical(tree):
            provenance[key] = ProvenanceRecord(
                key=key,
                source_id=rs.source.id,
                timestamp_loaded=loaded_at,
            )

    # a later scalar can replace an earlier subtree
    live = {key for key, _ in iter_hierarchical(effective)}
    provenance = {k: v for k, v in provenance.items() if k in live}
    return effective, provenance
