# -------------------------------------
# reportspec CLI entry point
# -------------------------------------
"""
CLI entry point.

Usage:
    python -m reportspec data/report.yml data/example.md
    python -m reportspec data/report.yml data/example.md --date 2022-03-01
    python -m reportspec data/report.yml --resolve "name: Weekly"
    python -m reportspec data/report.yml --expand "change, frequency: [Weekly, Monthly]"
    python -m reportspec data/report.yml data/example.md --scan
"""
import argparse
import sys
from pathlib import Path

from .args import resolve_group
from .clauses import resolve_clause
from .engine import MetricEngine
from .errors import ReportSpecError
from .expander import expand
from .lower import lower
from .registry import load_registry
from .report import defaults_selection
from .scanner import dump_clauses, parse_group, parse_groups, scan_clauses
from .selection import Selection
from .store import DataStore
from .timespan import parse_date, parse_frequency
from .tree import render


def _ambient(args, registry) -> Selection:
    root = Selection(
        date=parse_date(args.date) if args.date else None,
        frequency=parse_frequency(args.frequency) if args.frequency else None,
    )
    root.inherit(defaults_selection(registry))
    return root


def _run(p: argparse.ArgumentParser, args) -> int:
    registry = load_registry(args.config)

    if args.resolve:
        g = resolve_group(parse_group(args.resolve), registry)
        for a in g.items:
            print(f"{type(a).__name__:<10} {a}")
        return 0

    if args.expand:
        groups = [resolve_group(g, registry) for g in parse_groups(args.expand)]
        for i, sel in enumerate(expand(groups), start=1):
            print(f"{i} {sel}")
        return 0

    if args.template is None:
        p.error("template is required unless --resolve or --expand is given")

    source = Path(args.template).read_text(encoding="utf-8")
    clauses = scan_clauses(source)

    if args.scan:
        for line in dump_clauses(clauses):
            print(line)
        return 0

    store = DataStore.from_parquet(args.data) if args.data else DataStore.from_registry(registry)
    engine = MetricEngine(registry, store)
    ambient = _ambient(args, registry)

    parts = []
    for clause in clauses:
        fragment = render(lower(resolve_clause(clause, registry), registry), ambient, engine)
        if args.verbose:
            print(f"{clause.source!r} -> {fragment!r}", file=sys.stderr)
        parts.append(fragment)
    text = "".join(parts)

    if args.output:
        Path(args.output).write_text(text, encoding="utf-8")
        print(f"Wrote {len(text)} characters to {args.output}", file=sys.stderr)
    else:
        sys.stdout.write(text)
    return 0


def _main(argv=None) -> int:
    p = argparse.ArgumentParser(
        description="Render narrative report fragments from a reportspec template.",
    )
    p.add_argument("config", help="Path to registry YAML file")
    p.add_argument("template", nargs="?", help="Template (markdown with {{ ... }} clauses)")
    p.add_argument("--data", metavar="PARQUET_PATH", help="Datapoints parquet file (series, date, value); default: points in the config")
    p.add_argument("--date", metavar="YYYY-MM-DD", help="Report date for clauses that set none")
    p.add_argument("--frequency", metavar="FREQ", help="Report frequency for clauses that set none")
    p.add_argument("--output", "-o", metavar="PATH", help="Write the rendered document to PATH")
    p.add_argument("--scan", action="store_true", help="Print the clause tree and exit")
    p.add_argument("--resolve", metavar="TOKEN", help="Resolve one argument group and print its arguments")
    p.add_argument("--expand", metavar="GROUPS", help="Expand comma-separated groups and print the selections")
    p.add_argument("--verbose", "-v", action="store_true", help="Echo each clause and its fragment to stderr")
    args = p.parse_args(argv)

    try:
        return _run(p, args)
    except (ReportSpecError, ValueError, OSError) as e:
        print(f"reportspec error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(_main())
