# -------------------------------------
# markup scanner
# -------------------------------------
"""
One-pass scanner from markdown-like source text to a raw clause tree.

  {{ g1, g2, ... }}          function clause
  {{ name(g1, g2, ...) }}    named function clause
  {{# g1, g2, ... }}         opens a block
  {{/}}                      closes the innermost block ({{/anything}} too)

Everything outside {{ ... }} is text. Groups are split on top-level commas:

  label: [a, b]    named collection
  label: value     labelled argument
  [a, b]           collection
  value            bare token
"""
from __future__ import annotations

import re
from typing import List

from .args import LabelledArg, RawArg, RawCollection, RawGroup, RawNamedCollection
from .clauses import BlockClause, Clause, FunctionClause, NamedFunctionClause, TextClause
from .errors import MarkupError

OPEN = "{{"
CLOSE = "}}"

_LABEL_RE = re.compile(r"^([A-Za-z_]\w*)\s*:\s*(.*)$", re.DOTALL)
_CALL_RE = re.compile(r"^([A-Za-z_]\w*)\s*\((.*)\)$", re.DOTALL)


# ============================================================
# Group parsing
# ============================================================

def split_list_items(inner: str) -> List[str]:
    """
    Split inner text on commas at depth 0 only.

    Protected regions: (...), [...], {...}. Empty items are dropped.
    """
    out: List[str] = []
    buf: List[str] = []
    depth = 0

    for ch in inner:
        if ch in "([{":
            depth += 1
        elif ch in ")]}":
            if depth > 0:
                depth -= 1
        if ch == "," and depth == 0:
            out.append("".join(buf).strip())
            buf.clear()
        else:
            buf.append(ch)

    out.append("".join(buf).strip())
    return [x for x in out if x != ""]


def _collection_items(body: str, item: str) -> tuple[str, ...]:
    body = body.strip()
    if not (body.startswith("[") and body.endswith("]")):
        raise MarkupError(f"unterminated collection in {item!r}")
    inner = body[1:-1]
    if "[" in inner or "]" in inner:
        raise MarkupError(f"nested collections are not supported: {item!r}")
    return tuple(split_list_items(inner))


def parse_group(item: str) -> RawGroup:
    """Parse one comma-separated item into a raw group."""
    item = item.strip()
    m = _LABEL_RE.match(item)
    if m:
        label, value = m.group(1), m.group(2).strip()
        if value == "":
            raise MarkupError(f"label {label!r} has no value")
        if value.startswith("["):
            return RawNamedCollection(label, _collection_items(value, item))
        return LabelledArg(label, value)
    if item.startswith("["):
        return RawCollection(_collection_items(item, item))
    if "]" in item:
        raise MarkupError(f"unbalanced ']' in {item!r}")
    return RawArg(item)


def parse_groups(inner: str) -> List[RawGroup]:
    return [parse_group(item) for item in split_list_items(inner)]


# ============================================================
# Clause scanning
# ============================================================

def _clause_from_tag(tag: str, source: str) -> Clause | None:
    """Build a non-block clause from tag text (None for block markers)."""
    m = _CALL_RE.match(tag)
    if m:
        return NamedFunctionClause(m.group(1), parse_groups(m.group(2)), source)
    groups = parse_groups(tag)
    if not groups:
        raise MarkupError(f"empty clause {source!r}")
    return FunctionClause(groups, source)


def scan_clauses(text: str) -> List[Clause]:
    """
    Scan source text into a list of top-level clauses.

    Raises:
        MarkupError: unterminated {{, stray or missing block close,
                     malformed argument group
    """
    root: List[Clause] = []
    stack: List[BlockClause] = []
    buf: List[str] = []

    def target() -> List[Clause]:
        return stack[-1].children if stack else root

    def flush_text() -> None:
        if buf:
            target().append(TextClause("".join(buf)))
            buf.clear()

    i = 0
    n = len(text)
    while i < n:
        start = text.find(OPEN, i)
        if start < 0:
            buf.append(text[i:])
            break
        if start > i:
            buf.append(text[i:start])

        end = text.find(CLOSE, start + len(OPEN))
        if end < 0:
            raise MarkupError(f"unterminated clause at offset {start}: {text[start:start + 40]!r}")
        source = text[start : end + len(CLOSE)]
        tag = text[start + len(OPEN) : end].strip()
        i = end + len(CLOSE)

        flush_text()
        try:
            if tag.startswith("#"):
                block = BlockClause(parse_groups(tag[1:]), [], source)
                target().append(block)
                stack.append(block)
            elif tag.startswith("/"):
                if not stack:
                    raise MarkupError(f"block close {source!r} without an open block")
                stack.pop()
            else:
                target().append(_clause_from_tag(tag, source))
        except MarkupError as e:
            if source in str(e):
                raise
            raise MarkupError(f"{e} (in clause {source!r})") from e

    flush_text()
    if stack:
        raise MarkupError(f"unclosed block {stack[-1].source!r}")
    return root


def dump_clauses(clauses: List[Clause], indent: int = 0) -> List[str]:
    """Render a clause tree as indented lines, for inspection."""
    pad = "  " * indent
    out: List[str] = []
    for c in clauses:
        if isinstance(c, TextClause):
            out.append(f"{pad}TEXT  {c.text!r}")
        elif isinstance(c, FunctionClause):
            out.append(f"{pad}FUNC  {c.groups!r}")
        elif isinstance(c, NamedFunctionClause):
            out.append(f"{pad}CALL  {c.name} {c.groups!r}")
        elif isinstance(c, BlockClause):
            out.append(f"{pad}BLOCK {c.groups!r}")
            out.extend(dump_clauses(c.children, indent + 1))
    return out
