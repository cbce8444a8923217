# src/catalog_state/cli/runner.py

"""Headless catalog browser: load, filter, sort and print one page."""

import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from catalog_state.config.settings import Settings
from catalog_state.errors import InvalidCommandError
from catalog_state.models.criteria import price_preset_changes
from catalog_state.models.item import Item
from catalog_state.models.load_state import Collection, LoadStatus
from catalog_state.services.catalog_engine import CatalogEngine
from catalog_state.sources.base_source import CatalogSource
from catalog_state.sources.http_source import HttpCatalogSource
from catalog_state.sources.json_file_source import JsonFileCatalogSource
from catalog_state.sources.mock_source import MockCatalogSource

logger = logging.getLogger("catalog_state.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def resolve_source(
    file_path: str | None,
    url: str | None,
    seed: int | None = None,
) -> CatalogSource:
    """Pick the item source: JSON file, then URL, then the mock catalog."""
    if file_path is not None:
        return JsonFileCatalogSource(Path(file_path))
    url = url or Settings.CATALOG_URL
    if url:
        return HttpCatalogSource(url)
    return MockCatalogSource(seed=seed)


def parse_tags(tags_csv: str | None) -> list[str] | None:
    if not tags_csv:
        return None
    return [t.strip() for t in tags_csv.split(",") if t.strip()] or None


def items_to_dicts(items: tuple[Item, ...]) -> list[dict[str, object]]:
    """Serialise items to plain dicts (camelCase, as loaded) for JSON."""
    return [
        {
            "id": i.id,
            "name": i.name,
            "price": i.price,
            "originalPrice": i.original_price,
            "discount": i.discount,
            "category": i.category,
            "tags": list(i.tags),
            "rating": i.rating,
            "sales": i.sales,
            "inStock": i.in_stock,
            "createdAt": i.created_at.isoformat(),
        }
        for i in items
    ]


def _print_table(items: tuple[Item, ...], title: str) -> None:
    """Render a Rich table of the page to stdout."""
    table = Table(title=title, show_lines=True, title_style="bold cyan")
    table.add_column("ID", style="dim", width=5)
    table.add_column("Name", max_width=40)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Category", style="magenta")
    table.add_column("Rating", justify="center")
    table.add_column("Sales", justify="right")
    table.add_column("Stock", justify="center")

    for i in items:
        price = f"{i.price:,.2f}"
        if i.is_marked_down:
            price += f" [dim strike]{i.original_price:,.2f}[/dim strike]"
        table.add_row(
            str(i.id),
            i.name,
            price,
            i.category,
            f"{i.rating:.1f}",
            f"{i.sales:,}",
            "yes" if i.in_stock else "[red]no[/red]",
        )

    Console().print(table)


async def cli_browse(
    source: CatalogSource,
    category: str | None = None,
    min_price: float | None = None,
    max_price: float | None = None,
    price_preset: str | None = None,
    search: str | None = None,
    tags_csv: str | None = None,
    in_stock: bool = False,
    sort: str | None = None,
    page: int = 1,
    page_size: int | None = None,
    output_format: str = "json",
    recommendations: bool = False,
) -> int:
    """Load the catalog, apply criteria and print one page.

    Returns an exit code (0=ok, 1=fail).
    """
    engine = CatalogEngine()

    _err.print(f"[bold]Loading catalog[/bold] [dim]source={source.source_name}[/dim]")
    states = await engine.load_all(source)

    catalog = states[Collection.CATALOG]
    if catalog.status is LoadStatus.REJECTED:
        _err.print(f"[red]Catalog load failed: {catalog.error}[/red]")
        return 1
    recs = states[Collection.RECOMMENDATIONS]
    if recs.status is LoadStatus.REJECTED:
        _err.print(f"[yellow]Recommendations unavailable: {recs.error}[/yellow]")

    try:
        # Explicit --min-price/--max-price win over the preset's bounds
        if price_preset is not None:
            preset = price_preset_changes(price_preset)
            if min_price is None:
                min_price = preset["min_price"]
            if max_price is None:
                max_price = preset["max_price"]
        engine.update_criteria(
            category=category,
            min_price=min_price,
            max_price=max_price,
            search_term=search,
            tags=parse_tags(tags_csv),
            in_stock_only=in_stock,
            sort_key=sort,
        )
        engine.set_pagination(page=page, page_size=page_size)
    except InvalidCommandError as exc:
        logger.warning("Rejected CLI criteria: %s", exc)
        _err.print(f"[red]{exc}[/red]")
        return 1

    snap = engine.snapshot()
    items = (
        snap.recommendations if recommendations else engine.current_page()
    )

    if recommendations:
        _err.print(f"[green]✓ {len(items)} recommended items[/green]")
    elif snap.total_items == 0:
        _err.print("[yellow]No items match the current criteria.[/yellow]")
    else:
        _err.print(
            f"[green]✓ {snap.total_items} of {snap.canonical_count} items"
            f" match, page {snap.cursor.page}/{engine.page_count()}"
            f" ({len(items)} shown)[/green]"
        )

    if output_format == "table":
        title = (
            "Recommended"
            if recommendations
            else f"Catalog page {snap.cursor.page}"
        )
        _print_table(items, title)
    else:
        json.dump(items_to_dicts(items), sys.stdout, ensure_ascii=False, indent=2)
        sys.stdout.write("\n")

    return 0
