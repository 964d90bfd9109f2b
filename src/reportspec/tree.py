# -------------------------------------
# scope tree
# -------------------------------------
"""
Renderable components and the scope tree renderer.

Component is a closed union:
  - Text(text)                literal, ignores the ambient Selection
  - FunctionCall(selections)  one engine call per Selection, joined by " "
  - Table                     cross-section grid (see table.py)
  - Node(selection, children) scope: inherits unset fields, then renders
                              its children under its own Selection

Rendering is pre-order: a node's Selection is completed from the ambient
before any child renders, and nothing flows back up.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Union

from .selection import Selection
from .table import Table


@dataclass
class Text:
    text: str


@dataclass
class FunctionCall:
    selections: List[Selection]


@dataclass
class Node:
    selection: Selection = field(default_factory=Selection)
    children: List["Component"] = field(default_factory=list)

    def add_child(self, child: "Component") -> None:
        self.children.append(child)


Component = Union[Text, FunctionCall, Table, Node]


def render(component: Component, ambient: Selection, engine) -> str:
    """Render one component under an ambient Selection."""
    if isinstance(component, Text):
        return component.text
    if isinstance(component, FunctionCall):
        return " ".join(engine.evaluate(sel.merged(ambient)) for sel in component.selections)
    if isinstance(component, Table):
        return component.render(ambient, engine)
    if isinstance(component, Node):
        component.selection.inherit(ambient)
        return "".join(render(child, component.selection, engine) for child in component.children)
    raise TypeError(f"not a renderable component: {component!r}")


def render_fragments(components: List[Component], ambient: Selection, engine) -> List[str]:
    """Render top-level components to their fragments, in document order."""
    return [render(c, ambient, engine) for c in components]
