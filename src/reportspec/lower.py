# -------------------------------------
# clause lowering
# -------------------------------------
"""
Lower resolved clauses into renderable components.

  FunctionClause       -> FunctionCall (or a named call if one of its
                          arguments is a Function)
  NamedFunctionClause  -> "expression": FunctionCall
                          "table":      Table, or a Node of Tables when the
                                        non-axis groups expand to several
  BlockClause          -> Node( Node(sel_1, subtree), Node(sel_2, subtree'), ... )
                          one deep copy of the lowered children per block
                          Selection, in expansion order
  TextClause           -> Text
"""
from __future__ import annotations

import copy
from typing import List

from . import expander
from .args import Function, Single
from .clauses import BlockClause, Clause, FunctionClause, NamedFunctionClause, TextClause
from .errors import InvalidValue, ReportSpecError, UnknownFunction, with_source
from .registry import Registry
from .selection import Selection
from .table import Table, split_axes
from .tree import Component, FunctionCall, Node, Text

EXPRESSION = "expression"
TABLE = "table"


def _lower_expression(groups: list) -> Component:
    return FunctionCall(expander.expand(groups))


def _lower_table(groups: list) -> Component:
    rows, cols, rest = split_axes(groups)
    for var in rows + cols:
        for a in var:
            if isinstance(a, Function):
                raise InvalidValue(f"function {a.name!r} cannot be a table axis entry")
    tables = [Table(list(rows), list(cols), base) for base in expander.expand(rest)]
    if len(tables) == 1:
        return tables[0]
    return Node(Selection(), list(tables))


_LOWERINGS = {
    EXPRESSION: _lower_expression,
    TABLE:      _lower_table,
}


def _lower_named(name: str, groups: list, registry: Registry) -> Component:
    if name not in registry.functions:
        raise UnknownFunction(f"unknown function {name!r}")
    fn = _LOWERINGS.get(name)
    if fn is None:
        raise UnknownFunction(f"function {name!r} has no implementation")
    return fn(groups)


def _lower_function(groups: list, registry: Registry) -> Component:
    named = [g for g in groups if isinstance(g, Single) and isinstance(g.arg, Function)]
    if not named:
        return _lower_expression(groups)
    if len(named) > 1:
        names = ", ".join(g.arg.name for g in named)
        raise InvalidValue(f"clause names more than one function ({names})")
    rest = [g for g in groups if g is not named[0]]
    return _lower_named(named[0].arg.name, rest, registry)


def _lower_block(clause: BlockClause, registry: Registry) -> Component:
    try:
        selections = expander.expand(clause.groups)
    except ReportSpecError as e:
        raise with_source(e, clause.source) from e

    base = Node(Selection(), [lower(c, registry) for c in clause.children])

    outer = Node(Selection())
    for sel in selections:
        replica = copy.deepcopy(base)
        replica.selection = sel
        outer.add_child(replica)
    return outer


def lower(clause: Clause, registry: Registry) -> Component:
    """
    Lower one resolved clause (recursively for blocks).

    Raises:
        ReportSpecError: any expansion or dispatch failure; the message names
                         the clause source
    """
    if isinstance(clause, TextClause):
        return Text(clause.text)
    if isinstance(clause, BlockClause):
        return _lower_block(clause, registry)
    try:
        if isinstance(clause, FunctionClause):
            return _lower_function(clause.groups, registry)
        if isinstance(clause, NamedFunctionClause):
            return _lower_named(clause.name, clause.groups, registry)
    except ReportSpecError as e:
        raise with_source(e, clause.source) from e
    raise TypeError(f"not a clause: {clause!r}")


def lower_all(clauses: List[Clause], registry: Registry) -> List[Component]:
    return [lower(c, registry) for c in clauses]
