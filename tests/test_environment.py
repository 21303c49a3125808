"""Unit tests for the Environment class."""

from __future__ import annotations

import re
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from dotini.core.environment import Environment
from dotini.core.errors import SourceUnreadable
from dotini.core.filters import Filter
from dotini.sources.ini_file import IniFileSource


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Keep manifest discovery away from the real working directory."""
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def layered(tmp_path: Path):
    base = tmp_path / "base.ini"
    base.write_text(
        "[database]\n"
        "host = localhost\n"
        "port = 3306\n"
        "options.timeout = 5\n"
        "[app]\n"
        "debug = on\n"
    )
    prod = tmp_path / "prod.ini"
    prod.write_text(
        "[database]\n"
        "host = db.internal\n"
        "options.ssl = true\n"
        "[app]\n"
        "debug = off\n"
    )
    return base, prod


class TestEnvironment:
    """Test suite for Environment class."""

    def test_init(self):
        env = Environment("production")
        assert env.name == "production"
        assert env.sources == []

    def test_register_sources_multiple(self, layered):
        env = Environment("dev")
        env.register_sources(*layered)
        assert [rs.source.path for rs in env.sources] == list(layered)

    def test_sources_passed_to_init(self, layered):
        env = Environment("dev", sources=list(layered))
        assert len(env.sources) == 2

    def test_register_source_with_options(self, layered):
        env = Environment("dev")
        flt = Filter(include_regex=re.compile("^app$"))
        env.register_source(layered[0], filter=flt, name="base", mode="normal")

        rs = env.sources[0]
        assert rs.filter is flt
        assert rs.source.name == "base"
        assert isinstance(rs.source, IniFileSource)
        assert rs.source.mode == "normal"

    @pytest.mark.parametrize("suffix", [".ini", ".cfg", ".conf", ".INI"])
    def test_supported_suffixes(self, tmp_path, suffix):
        env = Environment("dev")
        env.register_source(tmp_path / f"settings{suffix}")
        assert len(env.sources) == 1

    def test_unsupported_source_type(self, tmp_path):
        env = Environment("dev")
        with pytest.raises(ValueError, match="Unsupported source type"):
            env.register_source(tmp_path / "config.yaml")

    def test_registration_is_lazy(self, tmp_path):
        """Test that files are not read until get_config()."""
        env = Environment("dev")
        env.register_source(tmp_path / "later.ini")
        with pytest.raises(SourceUnreadable):
            env.get_config()

    def test_add_source_type(self):
        source = MagicMock()
        source.id = "mock"
        source.load.return_value = {"timeout": "30", "s": {"a.b": "x"}}

        env = Environment("dev")
        env.add_source_type(source)
        cfg = env.get_config()

        assert cfg.timeout == 30
        assert cfg.get("s.a.b") == "x"
        source.load.assert_called_once_with(filter=None)


class TestGetConfig:
    """Materializing a stack of INI files."""

    def test_later_sources_override(self, layered):
        cfg = Environment("prod", sources=list(layered)).get_config()
        assert cfg.get("database.host") == "db.internal"
        assert cfg.get("app.debug") is False

    def test_siblings_preserved_across_sources(self, layered):
        cfg = Environment("prod", sources=list(layered)).get_config()
        assert cfg.get("database.port") == 3306
        assert cfg.database.options.to_dict() == {"timeout": 5, "ssl": True}

    def test_provenance(self, layered):
        base, prod = layered
        cfg = Environment("prod", sources=[base, prod]).get_config()
        assert cfg.provenance("database.host").source_id == str(prod.resolve())
        assert cfg.provenance("database.port").source_id == str(base.resolve())
        assert cfg.provenance("database.options.ssl").source_id == str(prod.resolve())
        assert cfg.provenance("database") is None

    def test_provenance_dropped_when_subtree_replaced(self, tmp_path):
        a = tmp_path / "a.ini"
        a.write_text("[cache]\ndriver = redis\n")
        b = tmp_path / "b.ini"
        b.write_text("cache = off\n")
        cfg = Environment("dev", sources=[a, b]).get_config()
        assert cfg.cache is False
        assert cfg.provenance("cache.driver") is None
        assert cfg.provenance("cache").source_id == str(b.resolve())

    def test_section_filter(self, layered):
        env = Environment("prod")
        env.register_source(layered[0])
        env.register_source(layered[1], filter=Filter(include_regex=re.compile("^app$")))
        cfg = env.get_config()
        assert cfg.get("database.host") == "localhost"
        assert cfg.get("app.debug") is False

    def test_unreadable_source_propagates(self, layered, tmp_path):
        env = Environment("prod", sources=[layered[0], tmp_path / "missing.ini"])
        with pytest.raises(SourceUnreadable) as exc:
            env.get_config()
        assert exc.value.resource == "missing.ini"

    def test_registered_sources_exposed(self, layered):
        cfg = Environment("prod", sources=list(layered)).get_config()
        assert len(cfg.registered_sources()) == 2

    def test_empty_environment(self):
        cfg = Environment("dev").get_config()
        assert cfg.to_dict() == {}


class TestManifest:
    """Sources declared in dotini.yaml."""

    def test_sources_from_manifest(self, tmp_path, layered):
        manifest = tmp_path / "dotini.yaml"
        manifest.write_text(
            "environments:\n"
            "  prod:\n"
            "    sources:\n"
            "      - path: base.ini\n"
            "      - path: prod.ini\n"
            "        name: overrides\n"
        )
        env = Environment("prod")
        assert [rs.source.name for rs in env.sources] == ["ini:base.ini", "overrides"]
        assert env.get_config().get("database.host") == "db.internal"

    def test_explicit_sources_after_manifest(self, tmp_path, layered):
        manifest = tmp_path / "dotini.yaml"
        manifest.write_text("environments:\n  prod:\n    sources:\n      - path: prod.ini\n")
        env = Environment("prod", sources=[layered[0]], config_path=manifest)
        # base.ini registered last, so it wins
        assert env.get_config().get("database.host") == "localhost"

    def test_bad_entries_skipped(self, tmp_path, layered, caplog):
        manifest = tmp_path / "dotini.yaml"
        manifest.write_text(
            "environments:\n"
            "  prod:\n"
            "    sources:\n"
            "      - name: nameless\n"
            "      - path: settings.json\n"
            "      - path: base.ini\n"
        )
        with caplog.at_level("WARNING", logger="dotini.core.environment"):
            env = Environment("prod")
        assert len(env.sources) == 1
        assert "Skipping source" in caplog.text

    def test_other_environment_ignored(self, tmp_path, layered):
        manifest = tmp_path / "dotini.yaml"
        manifest.write_text("environments:\n  prod:\n    sources:\n      - path: base.ini\n")
        assert Environment("dev").sources == []
