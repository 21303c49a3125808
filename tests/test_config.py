"""Unit tests for the Config container."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from dotini.core.config import Config, EnvironmentConfig
from dotini.core.types import ProvenanceRecord


@pytest.fixture
def cfg() -> Config:
    return Config({
        "database": {"host": "localhost", "port": 3306, "options": {"timeout": 30}},
        "debug": True,
        "a.b": "literal",
    })


class TestConfigAccess:
    """Test suite for reading values."""

    def test_attribute_access(self, cfg):
        assert cfg.database.host == "localhost"
        assert cfg.database.options.timeout == 30
        assert cfg.debug is True

    def test_nested_values_are_configs(self, cfg):
        assert isinstance(cfg.database, Config)
        assert isinstance(cfg["database"], Config)

    def test_item_access(self, cfg):
        assert cfg["database"]["port"] == 3306

    def test_missing_attribute(self, cfg):
        with pytest.raises(AttributeError):
            cfg.missing

    def test_missing_item(self, cfg):
        with pytest.raises(KeyError):
            cfg["missing"]

    def test_get_dotted_path(self, cfg):
        assert cfg.get("database.options.timeout") == 30
        assert cfg.get("database.port") == 3306

    def test_get_default(self, cfg):
        assert cfg.get("database.user") is None
        assert cfg.get("database.user", "root") == "root"
        assert cfg.get("debug.level", 1) == 1

    def test_get_custom_delimiter(self, cfg):
        assert cfg.get("database/options/timeout", delimiter="/") == 30

    def test_get_literal_dotted_key(self, cfg):
        """Test that a top-level key containing a dot is found as-is."""
        assert cfg.get("a.b") == "literal"

    def test_contains(self, cfg):
        assert "database" in cfg
        assert "database.options.timeout" in cfg
        assert "database.user" not in cfg
        assert 42 not in cfg

    def test_len_and_iter(self, cfg):
        assert len(cfg) == 3
        assert list(cfg) == ["database", "debug", "a.b"]
        assert cfg.keys() == ["database", "debug", "a.b"]

    def test_none_values_are_present(self):
        c = Config({"driver": None})
        assert "driver" in c
        assert c.get("driver", "fallback") is None


class TestConfigConversion:
    """Test suite for exporting and combining configs."""

    def test_to_dict_is_copy(self, cfg):
        data = cfg.to_dict()
        data["database"]["host"] = "changed"
        assert cfg.database.host == "localhost"

    def test_source_tree_is_copied(self):
        tree = {"a": {"b": 1}}
        c = Config(tree)
        tree["a"]["b"] = 2
        assert c.get("a.b") == 1

    def test_flatten(self, cfg):
        assert cfg.flatten() == {
            "database.host": "localhost",
            "database.port": 3306,
            "database.options.timeout": 30,
            "debug": True,
            "a.b": "literal",
        }

    def test_flatten_depth(self, cfg):
        flat = cfg.flatten(depth=1)
        assert flat["database.options"] == {"timeout": 30}

    def test_merge(self, cfg):
        merged = cfg.merge({"database": {"port": 5432, "user": "app"}})
        assert merged.get("database.host") == "localhost"
        assert merged.get("database.port") == 5432
        assert merged.get("database.user") == "app"
        assert cfg.get("database.port") == 3306

    def test_merge_config(self, cfg):
        merged = cfg.merge(Config({"debug": False}))
        assert merged.debug is False

    def test_equality(self, cfg):
        assert Config({"a": 1}) == Config({"a": 1})
        assert Config({"a": 1}) == {"a": 1}
        assert Config({"a": 1}) != Config({"a": 2})

    def test_repr(self):
        assert repr(Config({"a": 1})) == "Config({'a': 1})"


class TestEnvironmentConfig:
    """Test suite for EnvironmentConfig."""

    def test_provenance(self):
        record = ProvenanceRecord(
            key="db.host",
            source_id="/etc/app.ini",
            timestamp_loaded=datetime.now(timezone.utc),
        )
        c = EnvironmentConfig({"db": {"host": "x"}}, {"db.host": record})
        assert c.provenance("db.host") is record
        assert c.provenance("db.port") is None
        assert c.db.host == "x"

    def test_registered_sources_default(self):
        assert EnvironmentConfig({}).registered_sources() == []
