# -------------------------------------
# combinatorial expander
# -------------------------------------
"""
Turn argument groups into the list of Selections a clause is evaluated under.

  - Single(arg)                 applies to every Selection
  - Collection(args)            its own axis
  - NamedCollection(name, args) one axis per distinct name; collections that
                                share a name are iterated element-wise
                                (zipped), not multiplied

The cartesian product runs over the axes in order of first declaration, the
first axis varying slowest. Each combination is folded into a fresh Selection
in group declaration order, set-if-unset, so an earlier group wins a field.

    [Weekly, Monthly], [cat_purrs, dog_barks]
        -> Weekly/cat_purrs, Weekly/dog_barks, Monthly/cat_purrs, Monthly/dog_barks

    rows: [change, total], cat_purrs, rows: [Weekly, Monthly]
        -> change/Weekly/cat_purrs, total/Monthly/cat_purrs
"""
from __future__ import annotations

from itertools import product
from typing import List, Sequence

from .args import ArgGroup, Argument, Collection, Function, NamedCollection, Single
from .errors import ExpansionMismatch, InvalidValue, MixedCollection
from .selection import Selection


def _check_homogeneous(group: Collection) -> None:
    kinds = {type(a) for a in group.args}
    if len(kinds) > 1:
        names = ", ".join(sorted(k.__name__ for k in kinds))
        members = ", ".join(str(a) for a in group.args)
        raise MixedCollection(f"collection [{members}] mixes argument kinds ({names})")


def _axes(groups: Sequence[ArgGroup]) -> tuple[list[int], list[int]]:
    """
    Return (axis_of_group, axis_sizes).

    axis_of_group[i] is the axis index of groups[i], or -1 for a Single.
    """
    axis_of_group: list[int] = []
    sizes: list[int] = []
    by_name: dict[str, int] = {}

    for g in groups:
        if isinstance(g, Single):
            axis_of_group.append(-1)
        elif isinstance(g, Collection):
            _check_homogeneous(g)
            axis_of_group.append(len(sizes))
            sizes.append(len(g.args))
        elif isinstance(g, NamedCollection):
            if g.name in by_name:
                ax = by_name[g.name]
                if sizes[ax] != len(g.args):
                    raise ExpansionMismatch(
                        f"named collections {g.name!r} have different lengths "
                        f"({sizes[ax]} and {len(g.args)})"
                    )
                axis_of_group.append(ax)
            else:
                by_name[g.name] = len(sizes)
                axis_of_group.append(len(sizes))
                sizes.append(len(g.args))
        else:
            raise TypeError(f"not an argument group: {g!r}")

    return axis_of_group, sizes


def expand_args(groups: Sequence[ArgGroup]) -> List[List[Argument]]:
    """
    Expand groups into argument combinations, each in group declaration order.

    No collections -> exactly one combination. An empty collection -> none.
    """
    axis_of_group, sizes = _axes(groups)

    if any(sz == 0 for sz in sizes):
        return []

    out: List[List[Argument]] = []
    for picks in product(*(range(sz) for sz in sizes)):
        combo: List[Argument] = []
        for g, ax in zip(groups, axis_of_group):
            combo.append(g.arg if ax < 0 else g.items[picks[ax]])
        out.append(combo)
    return out


def expand(groups: Sequence[ArgGroup]) -> List[Selection]:
    """Expand groups into Selections, one per argument combination."""
    for g in groups:
        for a in g.items:
            if isinstance(a, Function):
                raise InvalidValue(f"function {a.name!r} cannot be used as a selection argument")
    return [Selection.from_args(combo) for combo in expand_args(groups)]
