# -------------------------------------
# closed registries
# -------------------------------------
"""
The closed vocabularies the DSL resolves tokens against.

A Registry is built once (usually from a YAML configuration file) and then
passed by reference to the token resolver and the calculation engine. It is
immutable: names live in frozensets and mapping proxies.

Configuration layout:

    functions: [expression, table]
    commands:
      change:
        label: change
        formula: "(current - previous) / previous * 100"
        figure: "{value:.1f}%"
        words: "{series} {direction} {magnitude:.1f}% on the previous {period}"
    series:
      cat_purrs:
        label: cat purrs
        points:
          2022-02-01: 4
    defaults:
      display: Numerical
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml

from .errors import ConfigError
from .timespan import parse_date


class DisplayStyle(Enum):
    NUMERICAL = "Numerical"
    WORDS = "Words"

    def __str__(self) -> str:
        return self.value


_STYLE_BY_NAME = {s.value.lower(): s for s in DisplayStyle}


def parse_display(s: str) -> DisplayStyle:
    """Parse a display style name (case-insensitive). Raises ValueError."""
    try:
        return _STYLE_BY_NAME[s.strip().lower()]
    except KeyError:
        raise ValueError(f"not a display style: {s!r}") from None


DEFAULT_FUNCTIONS = ("expression", "table")


@dataclass(frozen=True)
class CommandSpec:
    name: str
    label: str
    formula: str
    figure: str = "{value}"
    words: str = "{series}: {value}"


@dataclass(frozen=True)
class SeriesSpec:
    name: str
    label: str
    points: Mapping[date, float] = field(default_factory=dict)


@dataclass(frozen=True)
class Registry:
    commands: Mapping[str, CommandSpec]
    series: Mapping[str, SeriesSpec]
    functions: frozenset[str] = frozenset(DEFAULT_FUNCTIONS)
    defaults: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def build(
        cls,
        commands: Mapping[str, Any],
        series: Mapping[str, Any],
        functions=DEFAULT_FUNCTIONS,
        defaults: Mapping[str, Any] | None = None,
    ) -> "Registry":
        """Build a Registry from plain (configuration-shaped) dicts."""
        cmds = {str(k): _command_spec(str(k), v) for k, v in (commands or {}).items()}
        sers = {str(k): _series_spec(str(k), v) for k, v in (series or {}).items()}
        if isinstance(functions, str) or not all(isinstance(f, str) for f in functions):
            raise ConfigError(f"functions must be a list of names, got {functions!r}")
        return cls(
            commands=MappingProxyType(cmds),
            series=MappingProxyType(sers),
            functions=frozenset(functions),
            defaults=MappingProxyType({str(k): str(v) for k, v in (defaults or {}).items()}),
        )

    def command_label(self, name: str) -> str:
        return self.commands[name].label

    def series_label(self, name: str) -> str:
        return self.series[name].label


def _command_spec(name: str, raw: Any) -> CommandSpec:
    if not isinstance(raw, dict):
        raise ConfigError(f"command {name!r} must be a mapping")
    if "formula" not in raw:
        raise ConfigError(f"command {name!r} has no formula")
    return CommandSpec(
        name=name,
        label=str(raw.get("label", name)),
        formula=str(raw["formula"]),
        figure=str(raw.get("figure", CommandSpec.figure)),
        words=str(raw.get("words", CommandSpec.words)),
    )


def _as_date(k: Any) -> date:
    # yaml.safe_load already turns unquoted YYYY-MM-DD keys into dates
    if isinstance(k, date):
        return k
    try:
        return parse_date(str(k))
    except ValueError as e:
        raise ConfigError(str(e)) from e


def _series_spec(name: str, raw: Any) -> SeriesSpec:
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"series {name!r} must be a mapping")
    points_raw = raw.get("points") or {}
    if not isinstance(points_raw, dict):
        raise ConfigError(f"series {name!r}: points must be a date -> value mapping")
    try:
        points = {_as_date(k): float(v) for k, v in points_raw.items()}
    except (TypeError, ValueError) as e:
        raise ConfigError(f"series {name!r}: {e}") from e
    return SeriesSpec(
        name=name,
        label=str(raw.get("label", name.replace("_", " "))),
        points=MappingProxyType(points),
    )


# ============================================================
# YAML loading
# ============================================================

_REGISTRY_CACHE: dict[str, Registry] = {}


def load_registry(path: str | Path) -> Registry:
    """
    Load a registry from a YAML configuration file.

    Results are cached per resolved path.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ConfigError: If the file is not valid YAML or has a malformed section
    """
    path = Path(path)
    path_str = str(path.resolve())

    if path_str in _REGISTRY_CACHE:
        return _REGISTRY_CACHE[path_str]

    with open(path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid YAML in '{path}': {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"'{path}' must contain a mapping at top level")

    reg = Registry.build(
        commands=data.get("commands") or {},
        series=data.get("series") or {},
        functions=data.get("functions") or DEFAULT_FUNCTIONS,
        defaults=data.get("defaults") or {},
    )
    _REGISTRY_CACHE[path_str] = reg
    return reg


def clear_cache() -> None:
    """Clear the registry file cache."""
    _REGISTRY_CACHE.clear()
