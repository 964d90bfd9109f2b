# -------------------------------------
# reference calculation engine
# -------------------------------------
"""
Turn a fully-resolved Selection into a rendered figure.

Each command in the registry carries a formula evaluated with simpleeval over
aggregates of the selected series:

    current   sum of values in the span of `frequency` containing `date`
    previous  sum of values in the span before it
    count     number of datapoints in the current span
    mean      mean datapoint in the current span (nan if none)
    first     first datapoint in the current span (nan if none)
    last      last datapoint in the current span (nan if none)
    days      length of the current span in days

and is then rendered through the command's `figure` format (display
Numerical, the default) or its `words` template (display Words). Templates
see value, magnitude, direction, series, period and date.

Any object with an evaluate(selection) -> str method can stand in for
MetricEngine; the renderer only calls that.
"""
from __future__ import annotations

import ast
import math
import operator as op

import numpy as np
from simpleeval import InvalidExpression, SimpleEval

from .errors import CalcError, UnknownCommand
from .registry import DisplayStyle, Registry
from .selection import Selection
from .store import DataStore
from .timespan import TimeSpan

# ============================================================
# Operators whitelist for simpleeval
# ============================================================

ALLOWED_OPS = {
    ast.Add: op.add,
    ast.Sub: op.sub,
    ast.Mult: op.mul,
    ast.Div: op.truediv,
    ast.Pow: op.pow,
    ast.USub: op.neg,
    ast.UAdd: op.pos,
    ast.FloorDiv: op.floordiv,
    ast.Mod: op.mod,
}

FUNCS: dict[str, object] = {
    "abs":   abs,
    "min":   min,
    "max":   max,
    "round": round,
}


def span_stats(values: np.ndarray, prev_values: np.ndarray, span: TimeSpan) -> dict[str, float]:
    """Aggregates exposed to command formulas."""
    n = int(values.size)
    return {
        "current":  float(np.sum(values)),
        "previous": float(np.sum(prev_values)),
        "count":    float(n),
        "mean":     float(np.mean(values)) if n else math.nan,
        "first":    float(values[0]) if n else math.nan,
        "last":     float(values[-1]) if n else math.nan,
        "days":     float(span.days),
    }


def _direction(value: float) -> str:
    if value > 0:
        return "rose"
    if value < 0:
        return "fell"
    return "held steady"


class MetricEngine:
    def __init__(self, registry: Registry, store: DataStore | None = None):
        self.registry = registry
        self.store = store if store is not None else DataStore.from_registry(registry)

    def compute(self, selection: Selection) -> float:
        """Evaluate the selected command's formula; the bare number."""
        spec = self._command(selection)
        span = self._span(selection)
        values = self.store.values(selection.data_name, span)
        prev_values = self.store.values(selection.data_name, span.prev())
        names = span_stats(values, prev_values, span)

        se = SimpleEval(names=names, functions=FUNCS, operators=ALLOWED_OPS)
        try:
            return float(se.eval(spec.formula))
        except (ArithmeticError, InvalidExpression, SyntaxError, TypeError, ValueError) as e:
            raise CalcError(
                f"{spec.name} for {selection.data_name} over {span} failed: "
                f"{type(e).__name__}: {e}"
            ) from e

    def evaluate(self, selection: Selection) -> str:
        """Compute and render the figure for a Selection."""
        spec = self._command(selection)
        value = self.compute(selection)
        style = selection.display or DisplayStyle.NUMERICAL
        template = spec.words if style is DisplayStyle.WORDS else spec.figure
        fields = {
            "value":     value,
            "magnitude": abs(value),
            "direction": _direction(value),
            "series":    self.registry.series_label(selection.data_name),
            "period":    selection.frequency.noun,
            "date":      selection.date.strftime("%Y-%m-%d"),
        }
        try:
            return template.format(**fields)
        except (KeyError, IndexError, ValueError) as e:
            raise CalcError(f"bad {style} template for command {spec.name!r}: {e}") from e

    # ---------------------------------
    # selection checks
    # ---------------------------------

    def _command(self, selection: Selection):
        if selection.command is None:
            raise UnknownCommand(f"no command selected in {selection}")
        try:
            return self.registry.commands[selection.command]
        except KeyError:
            raise UnknownCommand(f"unknown command {selection.command!r}") from None

    def _span(self, selection: Selection) -> TimeSpan:
        missing = [
            name for name in ("data_name", "frequency", "date")
            if getattr(selection, name) is None
        ]
        if missing:
            raise CalcError(f"selection {selection} is missing {', '.join(missing)}")
        if selection.data_name not in self.registry.series:
            raise CalcError(f"unknown data series {selection.data_name!r}")
        if selection.data_name not in self.store:
            raise CalcError(f"no datapoints loaded for series {selection.data_name!r}")
        return TimeSpan.containing(selection.date, selection.frequency)
