# -------------------------------------
# report driver
# -------------------------------------
"""
Source text in, ordered rendered fragments out.

    scan_clauses -> resolve_clause -> lower -> render_fragments

The root ambient Selection is built from the registry's `defaults` section;
an explicit ambient passed by the caller takes precedence over it.
"""
from __future__ import annotations

from typing import List, Optional

from .args import Function, resolve
from .clauses import resolve_clause
from .errors import ConfigError, ReportSpecError
from .lower import lower_all
from .registry import Registry
from .scanner import scan_clauses
from .selection import Selection
from .tree import Component, render_fragments


def defaults_selection(registry: Registry) -> Selection:
    """The registry's `defaults` section as a Selection."""
    sel = Selection()
    for label, raw in registry.defaults.items():
        try:
            arg = resolve(label, raw, registry)
        except ReportSpecError as e:
            raise ConfigError(f"defaults: {e}") from e
        if isinstance(arg, Function):
            raise ConfigError(f"defaults: {label!r} is not a selection field")
        sel.fill(arg)
    return sel


def build(source: str, registry: Registry) -> List[Component]:
    """Scan, resolve and lower source text into top-level components."""
    return lower_all([resolve_clause(c, registry) for c in scan_clauses(source)], registry)


def render_report(
    source: str,
    registry: Registry,
    engine,
    ambient: Optional[Selection] = None,
) -> List[str]:
    """Render source text to its fragments, in document order."""
    root = ambient.copy() if ambient is not None else Selection()
    root.inherit(defaults_selection(registry))
    return render_fragments(build(source, registry), root, engine)


def render_text(
    source: str,
    registry: Registry,
    engine,
    ambient: Optional[Selection] = None,
) -> str:
    return "".join(render_report(source, registry, engine, ambient))
