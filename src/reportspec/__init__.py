# -------------------------------------
# reportspec
# -------------------------------------
"""
Narrative report fragments from time-series metrics.

Source text carries {{ ... }} clauses that select a command, a data series,
a frequency, a date and a display style; blocks scope those selections over
nested text, and tables cross two axes of them. Each fully-resolved selection
is handed to a calculation engine that computes and renders the figure.

Use: from reportspec import load_registry, MetricEngine, render_text
"""

from .errors import (
    ReportSpecError,
    UnknownLabel,
    InvalidValue,
    UnresolvedToken,
    UnknownFunction,
    UnknownCommand,
    ExpansionMismatch,
    MixedCollection,
    CalcError,
    MarkupError,
    ConfigError,
)
from .registry import DisplayStyle, Registry, load_registry
from .timespan import TimeFrequency, TimeSpan
from .args import resolve, resolve_group
from .selection import Selection
from .expander import expand
from .scanner import scan_clauses
from .lower import lower
from .tree import render, render_fragments
from .table import Table
from .store import DataStore
from .engine import MetricEngine
from .report import render_report, render_text

__all__ = [
    # errors
    "ReportSpecError",
    "UnknownLabel",
    "InvalidValue",
    "UnresolvedToken",
    "UnknownFunction",
    "UnknownCommand",
    "ExpansionMismatch",
    "MixedCollection",
    "CalcError",
    "MarkupError",
    "ConfigError",
    # registries
    "DisplayStyle",
    "Registry",
    "load_registry",
    "TimeFrequency",
    "TimeSpan",
    # core
    "resolve",
    "resolve_group",
    "Selection",
    "expand",
    "scan_clauses",
    "lower",
    "render",
    "render_fragments",
    "Table",
    # engine
    "DataStore",
    "MetricEngine",
    "render_report",
    "render_text",
]
