# -------------------------------------
# token resolution
# -------------------------------------
"""
Arguments and argument groups.

Token resolution maps a raw string, bare or labelled, to exactly one typed
Argument. Bare tokens are tried against each variant in a fixed priority
order and the first match wins:

    command > function > frequency > data-series name > date > display style

so a token that is both a frequency and a data-series name always resolves
to the frequency. Use a label ("name: Weekly") to pick the other meaning.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Callable, List, Optional, Union

from .errors import InvalidValue, UnknownLabel, UnresolvedToken
from .registry import DisplayStyle, Registry, parse_display
from .timespan import TimeFrequency, parse_date, parse_frequency


# ============================================================
# Arguments (closed union)
# ============================================================

@dataclass(frozen=True)
class Command:
    name: str
    label: str = field(default="", compare=False)

    def __str__(self) -> str:
        return self.label or self.name


@dataclass(frozen=True)
class Function:
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Frequency:
    value: TimeFrequency

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class DataName:
    name: str
    label: str = field(default="", compare=False)

    def __str__(self) -> str:
        return self.label or self.name


@dataclass(frozen=True)
class Date:
    value: date

    def __str__(self) -> str:
        return self.value.strftime("%Y-%m-%d")


@dataclass(frozen=True)
class Display:
    value: DisplayStyle

    def __str__(self) -> str:
        return str(self.value)


Argument = Union[Command, Function, Frequency, DataName, Date, Display]


# ============================================================
# Variant constructors
# ============================================================

def _try_command(s: str, reg: Registry) -> Optional[Argument]:
    if s in reg.commands:
        return Command(s, reg.command_label(s))
    return None


def _try_function(s: str, reg: Registry) -> Optional[Argument]:
    return Function(s) if s in reg.functions else None


def _try_frequency(s: str, reg: Registry) -> Optional[Argument]:
    try:
        return Frequency(parse_frequency(s))
    except ValueError:
        return None


def _try_data_name(s: str, reg: Registry) -> Optional[Argument]:
    if s in reg.series:
        return DataName(s, reg.series_label(s))
    return None


def _try_date(s: str, reg: Registry) -> Optional[Argument]:
    try:
        return Date(parse_date(s))
    except ValueError:
        return None


def _try_display(s: str, reg: Registry) -> Optional[Argument]:
    try:
        return Display(parse_display(s))
    except ValueError:
        return None


_Constructor = Callable[[str, Registry], Optional[Argument]]

# priority order for bare tokens
_PRIORITY: List[_Constructor] = [
    _try_command,
    _try_function,
    _try_frequency,
    _try_data_name,
    _try_date,
    _try_display,
]

LABELS: dict[str, _Constructor] = {
    "command":   _try_command,
    "function":  _try_function,
    "frequency": _try_frequency,
    "name":      _try_data_name,
    "date":      _try_date,
    "display":   _try_display,
}


def resolve(label: Optional[str], raw: str, registry: Registry) -> Argument:
    """
    Resolve one raw token into an Argument.

    Raises:
        UnknownLabel: label is not one of LABELS
        InvalidValue: labelled token does not parse / is not registered
        UnresolvedToken: bare token matches no variant
    """
    s = raw.strip()
    if label is not None:
        key = label.strip().lower()
        ctor = LABELS.get(key)
        if ctor is None:
            raise UnknownLabel(f"unknown argument label {label!r}")
        arg = ctor(s, registry)
        if arg is None:
            raise InvalidValue(f"{s!r} is not a valid {key}")
        return arg

    for ctor in _PRIORITY:
        arg = ctor(s, registry)
        if arg is not None:
            return arg
    raise UnresolvedToken(f"unresolved token {s!r}")


# ============================================================
# Raw groups (scanner output) and resolved groups
# ============================================================

@dataclass(frozen=True)
class RawArg:
    raw: str


@dataclass(frozen=True)
class LabelledArg:
    label: str
    raw: str


@dataclass(frozen=True)
class RawCollection:
    items: tuple[str, ...]


@dataclass(frozen=True)
class RawNamedCollection:
    name: str
    items: tuple[str, ...]


RawGroup = Union[RawArg, LabelledArg, RawCollection, RawNamedCollection]


@dataclass(frozen=True)
class Single:
    arg: Argument

    @property
    def items(self) -> tuple[Argument, ...]:
        return (self.arg,)


@dataclass(frozen=True)
class Collection:
    args: tuple[Argument, ...]

    @property
    def items(self) -> tuple[Argument, ...]:
        return self.args


@dataclass(frozen=True)
class NamedCollection:
    name: str
    args: tuple[Argument, ...]

    @property
    def items(self) -> tuple[Argument, ...]:
        return self.args


ArgGroup = Union[Single, Collection, NamedCollection]


def resolve_group(raw: RawGroup, registry: Registry) -> ArgGroup:
    """
    Resolve a raw group.

    Members of a named collection whose name is a label ("frequency: [...]")
    resolve through that label; members of any other collection resolve bare.
    """
    if isinstance(raw, RawArg):
        return Single(resolve(None, raw.raw, registry))
    if isinstance(raw, LabelledArg):
        return Single(resolve(raw.label, raw.raw, registry))
    if isinstance(raw, RawCollection):
        return Collection(tuple(resolve(None, s, registry) for s in raw.items))
    if isinstance(raw, RawNamedCollection):
        label = raw.name if raw.name.lower() in LABELS else None
        return NamedCollection(raw.name, tuple(resolve(label, s, registry) for s in raw.items))
    raise TypeError(f"not a raw argument group: {raw!r}")
