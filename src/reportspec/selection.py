# -------------------------------------
# selections
# -------------------------------------
"""
A Selection (expression) is the bag of parameters a figure is computed
under. Fields are set at most once: filling, inheriting or merging never
overwrites a field that is already set.
"""
from __future__ import annotations

from dataclasses import dataclass, fields, replace
from datetime import date
from typing import Optional

from .args import Argument, Command, DataName, Date, Display, Frequency, Function
from .registry import DisplayStyle
from .timespan import TimeFrequency


@dataclass
class Selection:
    command: Optional[str] = None
    frequency: Optional[TimeFrequency] = None
    data_name: Optional[str] = None
    date: Optional[date] = None
    display: Optional[DisplayStyle] = None

    @classmethod
    def from_args(cls, args) -> "Selection":
        """Fold arguments, in order, into a fresh Selection."""
        sel = cls()
        for arg in args:
            sel.fill(arg)
        return sel

    def fill(self, arg: Argument) -> None:
        """Set the field arg belongs to, unless it is already set."""
        if isinstance(arg, Command):
            name, value = "command", arg.name
        elif isinstance(arg, Frequency):
            name, value = "frequency", arg.value
        elif isinstance(arg, DataName):
            name, value = "data_name", arg.name
        elif isinstance(arg, Date):
            name, value = "date", arg.value
        elif isinstance(arg, Display):
            name, value = "display", arg.value
        elif isinstance(arg, Function):
            raise TypeError(f"function {arg.name!r} is not a selection field")
        else:
            raise TypeError(f"not an argument: {arg!r}")
        if getattr(self, name) is None:
            setattr(self, name, value)

    def inherit(self, other: "Selection") -> None:
        """Copy down every field other sets and self leaves unset."""
        for f in fields(self):
            if getattr(self, f.name) is None:
                v = getattr(other, f.name)
                if v is not None:
                    setattr(self, f.name, v)

    def merged(self, other: "Selection") -> "Selection":
        """self ⊕ other: a new Selection, self's fields taking precedence."""
        out = self.copy()
        out.inherit(other)
        return out

    def copy(self) -> "Selection":
        return replace(self)

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def __str__(self) -> str:
        parts = []
        for f in fields(self):
            v = getattr(self, f.name)
            if v is None:
                continue
            if isinstance(v, date):
                v = v.strftime("%Y-%m-%d")
            parts.append(f"{f.name}={v}")
        return "{" + ", ".join(parts) + "}"
