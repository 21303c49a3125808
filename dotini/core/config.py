from __future__ import annotations

import copy
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union

from .filters import iter_hierarchical
from .materializer import deep_merge
from .source import RegisteredSource
from .types import ConfigTree, ProvenanceRecord

_MISSING = object()


class Config:
    """Read-only nested configuration with dotted-path and attribute access.

    Example:
        >>> cfg = Config({"database": {"host": "localhost", "port": 3306}})
        >>> cfg.database.port
        3306
        >>> cfg.get("database.host")
        'localhost'
    """

    def __init__(self, tree: Union["Config", Mapping[str, Any], None] = None):
        if isinstance(tree, Config):
            tree = tree._tree
        self._tree: ConfigTree = copy.deepcopy(dict(tree or {}))

    @staticmethod
    def _wrap(value: Any) -> Any:
        if isinstance(value, Mapping):
            return Config(value)
        return value

    def _lookup(self, path: str, delimiter: str) -> Any:
        if path in self._tree:
            return self._tree[path]
        node: Any = self._tree
        for part in path.split(delimiter):
            if not isinstance(node, Mapping) or part not in node:
                return _MISSING
            node = node[part]
        return node

    def get(self, path: str, default: Optional[Any] = None, delimiter: str = ".") -> Any:
        value = self._lookup(path, delimiter)
        if value is _MISSING:
            return default
        return self._wrap(value)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._wrap(self._tree[name])
        except KeyError:
            raise AttributeError(f"Config has no key {name!r}") from None

    def __getitem__(self, key: str) -> Any:
        return self._wrap(self._tree[key])

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self._lookup(path, ".") is not _MISSING

    def __iter__(self) -> Iterator[str]:
        return iter(self._tree)

    def __len__(self) -> int:
        return len(self._tree)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Config):
            return self._tree == other._tree
        if isinstance(other, Mapping):
            return self._tree == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._tree!r})"

    def keys(self) -> List[str]:
        return list(self._tree.keys())

    def to_dict(self) -> ConfigTree:
        return copy.deepcopy(self._tree)

    def flatten(self, depth: Optional[int] = None) -> Dict[str, Any]:
        """Flatten the tree to dotted keys.

        Args:
            depth: Maximum nesting depth to flatten (None for unlimited).
        """
        return {k: v for k, v in iter_hierarchical(self._tree, depth=depth)}

    def merge(self, other: Union["Config", Mapping[str, Any]]) -> "Config":
        """Return a new Config with ``other`` deep-merged over this one."""
        overlay = other.to_dict() if isinstance(other, Config) else other
        return Config(deep_merge(self._tree, overlay))


class EnvironmentConfig(Config):
    """Config produced by an Environment, with per-key provenance."""

    def __init__(
        self,
        tree: Optional[Mapping[str, Any]] = None,
        provenance: Optional[Mapping[str, ProvenanceRecord]] = None,
        registered_sources: Optional[List[RegisteredSource]] = None,
    ):
        super().__init__(tree)
        self._provenance: Dict[str, ProvenanceRecord] = dict(provenance or {})
        self._registered: List[RegisteredSource] = list(registered_sources or [])

    def provenance(self, key: str) -> Optional[ProvenanceRecord]:
        """Return which source supplied a flattened dotted key, if any."""
        return self._provenance.get(key)

    def registered_sources(self) -> List[RegisteredSource]:
        return list(self._registered)
