"""Renderers for :class:`~rowtable.resolver.ResolvedTable`.

``render_html`` emits the table markup.  Cell text is escaped unless the
column's formatter declares ``markup = True``, as ``bar_and_percentage``
does; labels, captions and attribute values are always escaped.
``render_text`` prints the same model with ``tabulate`` for terminals.
"""

from __future__ import annotations

import html as _html
from typing import Any, Iterable, Mapping

from tabulate import tabulate

from rowtable.model import ColumnSpec
from rowtable.resolver import RenderOptions, ResolvedTable, resolve_table
from rowtable.rows import RowView
from rowtable.schema import Schema


def _attrs(**attributes: Any) -> str:
    parts = [
        f' {name}="{_html.escape(str(value), quote=True)}"'
        for name, value in attributes.items()
        if value not in (None, "")
    ]
    return "".join(parts)


def _cell(table: ResolvedTable, column: ColumnSpec, text: str) -> str:
    return text if table.emits_markup(column) else _html.escape(text)


def _table_headings(table: ResolvedTable) -> list[str]:
    lines = ["  <colgroup>"]
    for column in table.columns:
        lines.append(f"    <col{_attrs(**{'class': column.name})} />")
    lines.append("  </colgroup>")

    lines.append("  <thead>")
    heading = table.options.heading
    if heading:
        lines.append(
            f"    <tr><th{_attrs(colspan=len(table.columns))}>{_html.escape(heading)}</th></tr>"
        )
    lines.append("    <tr>")
    for column in table.columns:
        lines.append(
            f"      <th{_attrs(**{'class': column.css_class})}>{_html.escape(column.label)}</th>"
        )
    lines.append("    </tr>")
    lines.append("  </thead>")
    return lines


def _table_footers(table: ResolvedTable) -> list[str]:
    if not table.has_totals:
        return []
    totals = table.formatted_totals()
    lines = ["  <tfoot>", "    <tr>"]
    for index, column in enumerate(table.columns):
        if index == 0:
            content = _html.escape(table.footer_label())
        else:
            content = _cell(table, column, totals.get(column.name, ""))
        lines.append(f"      <th{_attrs(**{'class': column.css_class})}>{content}</th>")
    lines.extend(["    </tr>", "  </tfoot>"])
    return lines


def _table_row(table: ResolvedTable, row: RowView, index: int) -> list[str]:
    options = table.options
    row_class = options.even_row_class if index % 2 == 0 else options.odd_row_class
    lines = [f"    <tr{_attrs(**{'class': row_class, 'id': table.schema.row_id(row)})}>"]
    for column in table.columns:
        content = _cell(table, column, table.format_cell(column, row))
        lines.append(f"      <td{_attrs(**{'class': column.css_class})}>{content}</td>")
    lines.append("    </tr>")
    return lines


def render_html(table: ResolvedTable) -> str:
    """Render ``table`` as an HTML ``<table>`` element."""

    lines = ["<table>"]
    if table.options.caption:
        lines.append(f"  <caption>{_html.escape(table.options.caption)}</caption>")
    lines.extend(_table_headings(table))
    lines.extend(_table_footers(table))
    lines.append("  <tbody>")
    for index, row in enumerate(table.rows):
        lines.extend(_table_row(table, row, index))
    lines.append("  </tbody>")
    lines.append("</table>")
    return "\n".join(lines) + "\n"


def render_text(table: ResolvedTable, *, tablefmt: str = "github") -> str:
    """Render ``table`` as plain text."""

    headers = [column.label for column in table.columns]
    body = [
        [table.format_cell(column, row, markup=False) for column in table.columns]
        for row in table.rows
    ]
    if table.has_totals:
        totals = table.formatted_totals(markup=False)
        footer = [totals.get(column.name, "") for column in table.columns]
        if footer:
            footer[0] = table.footer_label()
        body.append(footer)
    colalign = tuple("right" if column.css_class == "right" else "left" for column in table.columns)
    output = tabulate(
        body,
        headers=headers,
        tablefmt=tablefmt,
        colalign=colalign or None,
        disable_numparse=True,
    )
    if table.options.caption:
        output = f"{table.options.caption}\n{output}"
    return output


def to_html(
    rows: Iterable[Any],
    schema: Schema,
    options: RenderOptions | Mapping[str, Any] | None = None,
    **kwargs: Any,
) -> str:
    """Resolve ``rows`` and render them as HTML in one call."""
    return render_html(resolve_table(rows, schema, options, **kwargs))


def to_text(
    rows: Iterable[Any],
    schema: Schema,
    options: RenderOptions | Mapping[str, Any] | None = None,
    *,
    tablefmt: str = "github",
    **kwargs: Any,
) -> str:
    """Resolve ``rows`` and render them as text in one call."""
    return render_text(resolve_table(rows, schema, options, **kwargs), tablefmt=tablefmt)


__all__ = ["render_html", "render_text", "to_html", "to_text"]
