# -------------------------------------
# cross-section tables
# -------------------------------------
"""
A Table is a two dimensional structure that adds one variable from each axis
to a base Selection to complete it.

A row or column adds the *same* variable to the entire row/column, so that a
cross-section of two variables is generated:

    | _ | Weekly | Quarterly |
    | --- | --- | --- |
    | change | 25.0% | 233.3% |
    | avg_freq | 10.0 | 130.0 |

A variable is one Argument, or several when an axis is declared more than
once: repeated `rows:` (or `cols:`) collections are zipped element-wise, like
any other named collections sharing a name.

    rows: [change, total], rows: [Weekly, Monthly]
        -> rows (change, Weekly) and (total, Monthly)

Cell selection: base ⊕ row ⊕ col, then the ambient Selection fills whatever
is still unset. A field set by the row is never superseded by the column.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple, Union

from .args import Argument, ArgGroup, NamedCollection
from .errors import ExpansionMismatch
from .selection import Selection

ROWS = "rows"
COLS = "cols"
CORNER = "_"

Variable = Tuple[Argument, ...]


def _variable(entry: Union[Argument, Variable]) -> Variable:
    return tuple(entry) if isinstance(entry, tuple) else (entry,)


def _label(var: Variable) -> str:
    return " ".join(str(a) for a in var)


@dataclass
class Table:
    rows: List[Variable]
    cols: List[Variable]
    base: Selection = field(default_factory=Selection)

    def __post_init__(self):
        self.rows = [_variable(r) for r in self.rows]
        self.cols = [_variable(c) for c in self.cols]

    def cell_selection(self, row, col, ambient: Selection) -> Selection:
        sel = self.base.copy()
        for arg in _variable(row) + _variable(col):
            sel.fill(arg)
        sel.inherit(ambient)
        return sel

    def render(self, ambient: Selection, engine) -> str:
        lines = ["| " + " | ".join([CORNER] + [_label(c) for c in self.cols]) + " |"]
        lines.append("|" + " --- |" * (len(self.cols) + 1))
        for row in self.rows:
            cells = [_label(row)]
            for col in self.cols:
                cells.append(engine.evaluate(self.cell_selection(row, col, ambient)))
            lines.append("| " + " | ".join(cells) + " |")
        return "\n" + "\n".join(lines) + "\n"


def _zip_axis(name: str, collections: List[NamedCollection]) -> List[Variable]:
    sizes = {len(g.args) for g in collections}
    if len(sizes) > 1:
        lengths = ", ".join(str(len(g.args)) for g in collections)
        raise ExpansionMismatch(f"'{name}' collections have different lengths ({lengths})")
    return list(zip(*(g.args for g in collections)))


def split_axes(groups: Sequence[ArgGroup]) -> tuple[List[Variable], List[Variable], List[ArgGroup]]:
    """
    Pull the row and column axes out of a table's groups.

    Returns (rows, cols, rest). Each row and column is a tuple of Arguments;
    several groups with the same axis name are zipped in declaration order.

    Raises:
        ExpansionMismatch: the rows or cols axis is missing, or repeated
                           collections of one axis differ in length
    """
    axes: dict[str, List[NamedCollection]] = {ROWS: [], COLS: []}
    rest: List[ArgGroup] = []
    for g in groups:
        if isinstance(g, NamedCollection) and g.name in axes:
            axes[g.name].append(g)
        else:
            rest.append(g)
    missing = [axis for axis in (ROWS, COLS) if not axes[axis]]
    if missing:
        raise ExpansionMismatch(f"table needs a '{ROWS}: [...]' and a '{COLS}: [...]' axis, missing {missing}")
    return _zip_axis(ROWS, axes[ROWS]), _zip_axis(COLS, axes[COLS]), rest
