"""Tests for reportspec.registry module."""

import os
import tempfile
from datetime import date

import pytest

from reportspec.errors import ConfigError
from reportspec.registry import (
    DisplayStyle,
    Registry,
    clear_cache,
    load_registry,
    parse_display,
)

YAML_TEXT = """
commands:
  change:
    formula: "(current - previous) / previous * 100"
    figure: "{value:.1f}%"
series:
  cat_purrs:
    label: cat purrs
    points:
      2022-02-01: 4
      "2022-02-03": 6
  dog_barks:
defaults:
  date: 2022-02-04
  display: Words
"""


@pytest.fixture
def yaml_file():
    """Create a temporary registry file."""
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yml", delete=False) as f:
        f.write(YAML_TEXT)
        path = f.name
    yield path
    os.unlink(path)
    clear_cache()


def _write(text: str) -> str:
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yml", delete=False) as f:
        f.write(text)
        return f.name


class TestParseDisplay:
    """Tests for display style parsing."""

    def test_names(self):
        assert parse_display("Words") is DisplayStyle.WORDS
        assert parse_display("numerical") is DisplayStyle.NUMERICAL

    def test_unknown(self):
        with pytest.raises(ValueError):
            parse_display("Shouting")


class TestLoadRegistry:
    """Tests for load_registry."""

    def test_commands(self, yaml_file):
        reg = load_registry(yaml_file)
        assert set(reg.commands) == {"change"}
        assert reg.commands["change"].label == "change"  # defaults to the name
        assert reg.commands["change"].figure == "{value:.1f}%"

    def test_default_functions(self, yaml_file):
        reg = load_registry(yaml_file)
        assert reg.functions == frozenset({"expression", "table"})

    def test_series_points(self, yaml_file):
        reg = load_registry(yaml_file)
        points = reg.series["cat_purrs"].points
        assert points == {date(2022, 2, 1): 4.0, date(2022, 2, 3): 6.0}
        assert reg.series_label("cat_purrs") == "cat purrs"

    def test_series_without_body(self, yaml_file):
        reg = load_registry(yaml_file)
        assert reg.series["dog_barks"].label == "dog barks"
        assert dict(reg.series["dog_barks"].points) == {}

    def test_defaults_are_strings(self, yaml_file):
        reg = load_registry(yaml_file)
        assert dict(reg.defaults) == {"date": "2022-02-04", "display": "Words"}

    def test_caching(self, yaml_file):
        assert load_registry(yaml_file) is load_registry(yaml_file)

    def test_immutable(self, yaml_file):
        reg = load_registry(yaml_file)
        with pytest.raises(TypeError):
            reg.commands["new"] = None

    def test_missing_file(self):
        with pytest.raises(FileNotFoundError):
            load_registry("/nonexistent/registry.yml")

    def test_invalid_yaml(self):
        path = _write("commands: [unclosed\n")
        try:
            with pytest.raises(ConfigError):
                load_registry(path)
        finally:
            os.unlink(path)

    def test_command_without_formula(self):
        path = _write("commands:\n  change:\n    label: change\n")
        try:
            with pytest.raises(ConfigError, match="no formula"):
                load_registry(path)
        finally:
            os.unlink(path)

    def test_bad_point_date(self):
        path = _write("series:\n  s:\n    points:\n      yesterday: 1\n")
        try:
            with pytest.raises(ConfigError):
                load_registry(path)
        finally:
            os.unlink(path)

    def test_top_level_not_mapping(self):
        path = _write("- a\n- b\n")
        try:
            with pytest.raises(ConfigError):
                load_registry(path)
        finally:
            os.unlink(path)


class TestBuild:
    """Tests for Registry.build."""

    def test_functions_must_be_names(self):
        with pytest.raises(ConfigError):
            Registry.build({}, {}, functions="table")

    def test_custom_functions(self):
        reg = Registry.build({}, {}, functions=["expression"])
        assert reg.functions == frozenset({"expression"})

    def test_direct_construction_defaults(self):
        reg = Registry(commands={}, series={})
        assert dict(reg.defaults) == {}
        assert reg.functions == frozenset({"expression", "table"})
        with pytest.raises(TypeError):
            reg.defaults["date"] = "2022-02-04"

    def test_instances_do_not_share_defaults(self):
        a = Registry(commands={}, series={})
        b = Registry(commands={}, series={})
        assert a.defaults is not b.defaults
