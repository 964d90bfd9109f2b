# -------------------------------------
# clauses
# -------------------------------------
"""
Parsed units of DSL source.

The scanner produces clauses holding raw groups; resolve_clause turns them
into clauses holding resolved ArgGroups. Both stages use the same types.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Union

from .args import resolve_group
from .errors import ReportSpecError, with_source
from .registry import Registry


@dataclass
class FunctionClause:
    groups: list
    source: str = ""


@dataclass
class NamedFunctionClause:
    name: str
    groups: list
    source: str = ""


@dataclass
class BlockClause:
    groups: list
    children: List["Clause"] = field(default_factory=list)
    source: str = ""


@dataclass
class TextClause:
    text: str

    @property
    def source(self) -> str:
        return self.text


Clause = Union[FunctionClause, NamedFunctionClause, BlockClause, TextClause]


def _resolve_groups(groups: list, registry: Registry, source: str) -> list:
    try:
        return [resolve_group(g, registry) for g in groups]
    except ReportSpecError as e:
        raise with_source(e, source) from e


def resolve_clause(clause: Clause, registry: Registry) -> Clause:
    """Resolve every raw group in a clause tree against the registry."""
    if isinstance(clause, TextClause):
        return clause
    if isinstance(clause, FunctionClause):
        return FunctionClause(_resolve_groups(clause.groups, registry, clause.source), clause.source)
    if isinstance(clause, NamedFunctionClause):
        return NamedFunctionClause(
            clause.name,
            _resolve_groups(clause.groups, registry, clause.source),
            clause.source,
        )
    if isinstance(clause, BlockClause):
        return BlockClause(
            _resolve_groups(clause.groups, registry, clause.source),
            [resolve_clause(c, registry) for c in clause.children],
            clause.source,
        )
    raise TypeError(f"not a clause: {clause!r}")
