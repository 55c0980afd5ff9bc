import asyncio
import json
from collections.abc import Sequence
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.table import Table

from cec_test_server.config import configure_logging, load_settings
from cec_test_server.core.conditions import parse_query
from cec_test_server.core.items import ItemRequest, get_items, query_items
from cec_test_server.store import ContentSet, SourceTree

query_app = typer.Typer(help="Query local content exports.")
console = Console()

ProjectDirOption = Annotated[Path | None, typer.Option("--project-dir", help="Toolkit project root.")]
TemplateOption = Annotated[str, typer.Option("--template", "-t", help="Template or content export name.")]


def _render_table(headers: Sequence[str], rows: Sequence[tuple[Any, ...]]) -> None:
    table = Table(show_lines=False)
    for h in headers:
        table.add_column(h)
    for row in rows:
        table.add_row(*(str(v) for v in row))
    console.print(table)
    console.print(f"({len(rows)} rows)")


def _get_source_tree(project_dir: Path | None) -> SourceTree:
    settings = load_settings(project_dir=project_dir)
    configure_logging("WARNING")
    return SourceTree(settings.src_dir)


def _open(project_dir: Path | None, template: str) -> ContentSet:
    content_set = _get_source_tree(project_dir).open(template)
    if content_set is None:
        console.print(f"[red]No content found for {template}[/red]")
        raise typer.Exit(code=1)
    return content_set


def _item_rows(items: Sequence[dict[str, Any]]) -> list[tuple[Any, ...]]:
    return [(i.get("id", ""), i.get("type", ""), i.get("name", ""), i.get("language", "")) for i in items]


@query_app.command("items")
def items(
    template: TemplateOption,
    q: Annotated[str, typer.Option("--q", help='Filter expression, e.g. \'type eq "News"\'.')] = "",
    content_type: Annotated[str, typer.Option("--type", help="Content type to list.")] = "",
    order_by: Annotated[str, typer.Option("--order-by", help="name:asc, updateddate:des, fields.<f>:asc ...")] = "",
    limit: Annotated[int, typer.Option(help="Page size.")] = 10,
    offset: Annotated[int, typer.Option(help="Page start.")] = 0,
    default: Annotated[str, typer.Option(help="Free-text search.")] = "",
    field: Annotated[str | None, typer.Option(help="Exact field match as NAME=VALUE.")] = None,
    project_dir: ProjectDirOption = None,
) -> None:
    """Run a collection query the way the content list component does."""
    params = {"q": q, "orderBy": order_by, "limit": str(limit), "offset": str(offset), "default": default}
    if content_type:
        params["contentType"] = content_type
    if field:
        name, sep, value = field.partition("=")
        if not sep or not name:
            raise typer.BadParameter("expected NAME=VALUE", param_hint="--field")
        params[f"field:{name}"] = value

    content_set = _open(project_dir, template)
    result = query_items(content_set, parse_query(params), keyed=False)
    if result is None:
        console.print("(0 rows)")
        return

    rows = result["items"]
    _render_table(["id", "type", "name", "language"], _item_rows(rows))
    if "totalResults" in result:
        console.print(
            f"total {result['totalResults']}, offset {result['offset']}, count {result['count']}, "
            f"has more: {result['hasMore']}"
        )


@query_app.command("item")
def item(
    item_id: Annotated[str, typer.Argument(help="Item id or slug.")],
    template: TemplateOption,
    language: Annotated[str, typer.Option(help="Language variation to return.")] = "",
    project_dir: ProjectDirOption = None,
) -> None:
    """Fetch one item by id or slug and print it as JSON."""
    content_set = _open(project_dir, template)
    result = asyncio.run(get_items(content_set, ItemRequest(ids=[item_id], language=language)))
    if result is None:
        console.print("[yellow]No item found[/yellow]")
        raise typer.Exit(code=1)
    console.print_json(json.dumps(result))


@query_app.command("templates")
def templates(project_dir: ProjectDirOption = None) -> None:
    """List local templates."""
    rows = [(t.name, t.type) for t in _get_source_tree(project_dir).templates()]
    _render_table(["name", "type"], rows)
