"""INI file configuration source."""

from __future__ import annotations

import configparser
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from ..core.errors import SourceUnreadable
from ..core.filters import Filter, should_include_key
from ..core.source import Source

logger = logging.getLogger(__name__)

MODES = ("raw", "normal")

# holds keys written before the first [section] header
_ROOT_SECTION = "\x00root"
# configparser's DEFAULT section would leak into every section
_NO_DEFAULTS = "\x00defaults"
# marks a `key[]` line rewritten to a unique `key[\x00<line>]` subkey
_APPEND = "\x00"

_APPEND_RE = re.compile(r"^(?P<base>[^=:\[\]]+?)\s*\[\]\s*(?=[=:])")
_SUBKEY_RE = re.compile(r"^(?P<base>[^\[\]]+)\[(?P<sub>[^\[\]]+)\]$")
_BRACED_RE = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")
_CONSTANT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _normalize(text: str) -> str:
    """Prepare INI text for configparser, keeping one output line per input line.

    Leading whitespace is dropped so indented lines are never read as value
    continuations, and each ``key[]`` gets a distinct subkey so repeated
    lines are not collapsed into the last one.
    """
    lines = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        line = line.lstrip()
        line = _APPEND_RE.sub(lambda m: f"{m.group('base')}[{_APPEND}{lineno}]", line, count=1)
        lines.append(line)
    return "\n".join(lines)


def _strip_comment(raw: str) -> str:
    """Remove a trailing ``;`` comment that sits outside quotes."""
    quote = raw[:1]
    if quote in ('"', "'"):
        end = raw.find(quote, 1)
        if end > 0:
            rest = raw[end + 1:].lstrip()
            if not rest or rest.startswith(";"):
                return raw[:end + 1]
    return raw.split(";", 1)[0].rstrip()


class IniFileSource(Source):
    """Configuration source for INI files.

    Sections become top-level keys, ``key = value`` lines written before any
    section header become bare top-level values, ``key[sub] = value`` lines
    are grouped into a mapping under ``key`` and repeated ``key[] = value``
    lines into a list. Values are returned as strings; type coercion happens
    when the source is materialized.

    With ``mode="normal"``, ``${NAME}`` references and bare values naming a
    known constant are replaced from ``constants`` (default: the process
    environment).
    """

    def __init__(
        self,
        path: Union[str, Path],
        name: Optional[str] = None,
        mode: str = "raw",
        constants: Optional[Mapping[str, str]] = None,
    ):
        if mode not in MODES:
            raise ValueError(f"Unsupported INI scan mode: {mode!r}")
        self.path = Path(path)
        self.name = name or f"ini:{self.path.name}"
        self.id = str(self.path.resolve())
        self.extension = self.path.suffix or ".ini"
        self.mode = mode
        self.constants = constants

    def _read(self) -> configparser.ConfigParser:
        try:
            text = self.path.read_text(encoding="utf-8-sig")
        except OSError as e:
            raise SourceUnreadable(self.path.name, e.strerror) from e
        except UnicodeDecodeError as e:
            raise SourceUnreadable(self.path.name, "not valid UTF-8") from e

        parser = configparser.ConfigParser(
            interpolation=None,
            default_section=_NO_DEFAULTS,
            strict=False,
        )
        parser.optionxform = str  # keep key case
        try:
            parser.read_string(f"[{_ROOT_SECTION}]\n{_normalize(text)}", source=str(self.path))
        except configparser.ParsingError as e:
            # the root header adds one line in front of the file
            detail = "; ".join(f"line {lineno - 1}: {line}" for lineno, line in e.errors)
            raise SourceUnreadable(self.path.name, detail) from e
        except configparser.Error as e:
            raise SourceUnreadable(self.path.name, e.message) from e
        return parser

    def _constant(self, name: str) -> Optional[str]:
        table = os.environ if self.constants is None else self.constants
        return table.get(name)

    def _expand(self, value: str) -> str:
        def replace(match: "re.Match[str]") -> str:
            found = self._constant(match.group(1))
            return "" if found is None else str(found)

        return _BRACED_RE.sub(replace, value)

    def _value(self, raw: str) -> str:
        raw = _strip_comment(raw)
        quote = raw[:1]
        quoted = len(raw) >= 2 and quote in ('"', "'") and raw.endswith(quote)
        if quoted:
            raw = raw[1:-1]
        if self.mode != "normal" or (quoted and quote == "'"):
            return raw
        if not quoted and _CONSTANT_RE.match(raw):
            found = self._constant(raw)
            if found is not None:
                return str(found)
        return self._expand(raw)

    def _section(self, items: Mapping[str, str]) -> Dict[str, Any]:
        body: Dict[str, Any] = {}
        for key, raw in items.items():
            value = self._value(raw)
            match = _SUBKEY_RE.match(key)
            if not match:
                body[key] = value
                continue
            base, sub = match.group("base").rstrip(), match.group("sub")
            group = body.get(base)
            if sub.startswith(_APPEND):
                if isinstance(group, list):
                    group.append(value)
                elif isinstance(group, dict):
                    group[str(len(group))] = value
                else:
                    body[base] = [value]
                continue
            if isinstance(group, list):
                group = body[base] = {str(i): item for i, item in enumerate(group)}
            elif not isinstance(group, dict):
                group = body[base] = {}
            group[sub] = value
        return body

    def load(self, filter: Optional[Filter] = None) -> Dict[str, Any]:
        """Read the INI file into a raw section mapping.

        Args:
            filter: Optional filter applied to section and bare key names.

        Returns:
            Ordered mapping of section name to raw dotted-key mapping,
            or to a raw value for keys outside any section.

        Raises:
            SourceUnreadable: If the file is missing or cannot be parsed.
        """
        parser = self._read()
        raw: Dict[str, Any] = {}
        for key, value in self._section(parser[_ROOT_SECTION]).items():
            raw[key] = value
        for section in parser.sections():
            if section == _ROOT_SECTION:
                continue
            raw[section] = self._section(parser[section])
        logger.debug("Loaded %d sections from %s", len(raw), self.path)
        if filter:
            return {k: v for k, v in raw.items() if should_include_key(k, filter)}
        return raw
