"""dotini - INI files as nested, typed configuration.

Dotted INI keys become nested mappings, scalar strings are coerced to
native types, and several files can be layered per environment.
"""

from .core.coerce import coerce
from .core.config import Config, EnvironmentConfig
from .core.environment import Environment
from .core.errors import DotiniError, ManifestError, SourceUnreadable
from .core.filters import Filter
from .core.materializer import build_path, deep_merge, materialize
from .core.source import RegisteredSource, Source
from .sources.ini_file import IniFileSource

__all__ = [
    "Config",
    "DotiniError",
    "Environment",
    "EnvironmentConfig",
    "Filter",
    "IniFileSource",
    "ManifestError",
    "RegisteredSource",
    "Source",
    "SourceUnreadable",
    "build_path",
    "coerce",
    "deep_merge",
    "materialize",
]
