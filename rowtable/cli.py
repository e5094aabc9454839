"""Command line entry point using ``argparse``.

Renders a CSV or JSON (records) file as an HTML or text table::

    rowtable sales.csv --total revenue=sum --percent-of revenue=1200
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Callable

import pandas as pd

from rowtable.errors import TableError
from rowtable.frames import rows_from_frame, schema_from_frame
from rowtable.logutils import logger, setup_logging
from rowtable.render import render_html, render_text
from rowtable.resolver import resolve_table


def _pair(text: str) -> tuple[str, str]:
    column, sep, value = text.partition("=")
    if not sep or not column or not value:
        raise argparse.ArgumentTypeError(f"expected COLUMN=VALUE, got '{text}'")
    return column.strip(), value.strip()


def _order_pair(text: str) -> tuple[str, int]:
    column, value = _pair(text)
    try:
        return column, int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"order of '{column}' must be an integer") from exc


def read_frame(path: str | Path) -> pd.DataFrame:
    """Load ``path`` as a DataFrame; ``.json`` files hold a list of records."""

    path = Path(path)
    if path.suffix.lower() == ".json":
        return pd.read_json(path, orient="records")
    return pd.read_csv(path)


def _sort_by(column: str, descending: bool) -> Callable[[Any, Any], int]:
    def compare(a: Any, b: Any) -> int:
        left, right = a.get(column), b.get(column)
        # Missing values sort last in both directions
        if left is None or right is None:
            return (left is None) - (right is None)
        result = (left > right) - (left < right)
        return -result if descending else result

    return compare


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rowtable", description="Render a data file as a table")
    parser.add_argument("path", help="CSV or JSON file with one record per row")
    parser.add_argument("--format", choices=("html", "text"), default="html", dest="output")
    parser.add_argument("--tablefmt", default="github", help="tabulate style for text output")
    parser.add_argument("--name", help="Schema name used for row ids (default: file stem)")
    parser.add_argument("--include", nargs="+", metavar="COLUMN", help="Only show these columns, in this order")
    parser.add_argument("--exclude", nargs="+", metavar="COLUMN", help="Hide these columns")
    parser.add_argument(
        "--keep-foreign-keys",
        action="store_true",
        help="Show columns ending in the foreign key suffix",
    )
    parser.add_argument("--total", action="append", type=_pair, default=[], metavar="COLUMN=METHOD")
    parser.add_argument("--formatter", action="append", type=_pair, default=[], metavar="COLUMN=NAME")
    parser.add_argument("--order", action="append", type=_order_pair, default=[], metavar="COLUMN=N")
    parser.add_argument("--caption")
    parser.add_argument("--heading")
    parser.add_argument("--percent-of", action="append", type=_pair, default=[], metavar="COLUMN=DIVISOR")
    parser.add_argument("--difference-of", action="append", type=_pair, default=[], metavar="COLUMN=VALUE")
    parser.add_argument("--sort-by", metavar="COLUMN")
    parser.add_argument("--descending", action="store_true")
    parser.add_argument("--no-totals", action="store_true", help="Omit the totals footer")
    return parser


def _render_options(args: argparse.Namespace) -> dict[str, Any]:
    options: dict[str, Any] = {
        "totals": not args.no_totals,
        "caption": args.caption,
        "heading": args.heading,
    }
    if args.include:
        options["include"] = args.include
    if args.exclude:
        options["exclude"] = args.exclude
    if args.keep_foreign_keys:
        options["exclude_foreign_keys"] = False
    if args.sort_by:
        options["sort"] = _sort_by(args.sort_by, args.descending)
    for column, value in args.percent_of:
        options[f"percent_of_{column}"] = value
    for column, value in args.difference_of:
        options[f"difference_of_{column}"] = value
    return options


def run(args: argparse.Namespace) -> str:
    frame = read_frame(args.path)
    schema = schema_from_frame(frame, name=args.name or Path(args.path).stem)
    for column, method in args.total:
        schema.column_format(column, total=method)
    for column, name in args.formatter:
        schema.column_format(column, formatter=name)
    for column, order in args.order:
        schema.column_format(column, order=order)

    table = resolve_table(rows_from_frame(frame), schema, _render_options(args))
    if args.output == "text":
        return render_text(table, tablefmt=args.tablefmt)
    return render_html(table)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()
    try:
        output = run(args)
    except FileNotFoundError as exc:
        logger.error(f"Input file not found: {exc.filename}")
        return 1
    except TableError as exc:
        logger.error(f"Cannot render {args.path}: {exc}")
        return 2
    print(output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
