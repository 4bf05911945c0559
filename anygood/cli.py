"""
Anygood command line.

Usage:
    anygood [--config PATH] <command> ...

    anygood parse <text...>               # Show parsed fields and category
    anygood classify <text...>            # Print the keyword category
    anygood dupes <items.json>            # List duplicate groups
    anygood search <items.json> <query>   # Ranked search results

Items files are JSON arrays of objects with text/description/link/tags.
"""

import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .capture import resolve_category
from .classifier import classify
from .logging import configure_logging, get_logger
from .models import Item
from .utils import get_duplicate_detector, get_parser, get_search_engine, load_config

console = Console()
log = get_logger("cli", "main")


def load_items(path: str) -> list[Item]:
    """Read a JSON array of item objects."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON array of items")
    return [Item.from_dict(entry) for entry in data if isinstance(entry, dict)]


def cmd_parse(text: str, config: dict) -> int:
    parser = get_parser(config)
    candidate = asyncio.run(parser.parse(text))
    category = resolve_category(candidate, text)

    table = Table(show_header=False, box=None)
    table.add_column("field", style="bold")
    table.add_column("value")
    for key, value in candidate.to_dict().items():
        table.add_row(key, "" if value is None else str(value))
    table.add_row("resolved", category.value)

    console.print(Panel(table, title="Parsed", expand=False))
    return 0


def cmd_classify(text: str) -> int:
    console.print(classify(text).value)
    return 0


def cmd_dupes(path: str, config: dict) -> int:
    items = load_items(path)
    detector = get_duplicate_detector(config)
    groups = detector.find_duplicates(items)

    if not groups:
        console.print("[green]No duplicates found[/green]")
        return 0

    table = Table(title=f"{len(groups)} duplicate group(s)")
    table.add_column("Indices")
    table.add_column("Items")
    table.add_column("Confidence", justify="right")
    for group in groups:
        table.add_row(
            ", ".join(str(i) for i in group.indices),
            " | ".join(item.text for item in group.items),
            f"{group.confidence:.2f}",
        )
    console.print(table)
    return 0


def cmd_search(path: str, query: str, config: dict) -> int:
    items = load_items(path)
    engine = get_search_engine(config)
    engine.build_index(items)
    results = engine.search(query, items)

    if not results:
        console.print("[yellow]No matches[/yellow]")
        return 0

    table = Table(title=f"Results for '{query}'")
    table.add_column("#", justify="right")
    table.add_column("Item")
    table.add_column("Score", justify="right")
    for result in results:
        table.add_row(str(result.index), result.item.text, f"{result.score:.1f}")
    console.print(table)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    config_path = None
    if len(args) >= 2 and args[0] == "--config":
        config_path, args = args[1], args[2:]

    if not args or args[0] in ("-h", "--help", "help"):
        console.print(__doc__)
        return 0

    config = load_config(config_path)
    configure_logging((config.get("logging") or {}).get("level", "WARNING"))

    command, rest = args[0], args[1:]
    try:
        if command == "parse" and rest:
            return cmd_parse(" ".join(rest), config)
        if command == "classify" and rest:
            return cmd_classify(" ".join(rest))
        if command == "dupes" and len(rest) == 1:
            return cmd_dupes(rest[0], config)
        if command == "search" and len(rest) >= 2:
            return cmd_search(rest[0], " ".join(rest[1:]), config)
    except (OSError, ValueError) as e:
        log.error("cli.command.failed", command=command, error=str(e))
        console.print(f"[red]Error:[/red] {e}")
        return 1

    console.print(f"[red]Unknown or incomplete command:[/red] {' '.join(args)}")
    console.print(__doc__)
    return 2


if __name__ == "__main__":
    sys.exit(main())
