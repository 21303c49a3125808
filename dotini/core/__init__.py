from .coerce import coerce
from .config import Config, EnvironmentConfig
from .environment import Environment
from .errors import DotiniError, ManifestError, SourceUnreadable
from .filters import Filter
from .materializer import build_path, deep_merge, materialize
from .source import RegisteredSource, Source

__all__ = [
    "Config",
    "DotiniError",
    "Environment",
    "EnvironmentConfig",
    "Filter",
    "ManifestError",
    "RegisteredSource",
    "Source",
    "SourceUnreadable",
    "build_path",
    "coerce",
    "deep_merge",
    "materialize",
]
