"""
Command-Line Interface

CLI commands for CreativeRecall operations.

Commands:
    creative-recall search  - Semantic search over a user's content
    creative-recall embed   - Batch-embed entities from a JSON file
    creative-recall log     - Append a session event (and embed it)
    creative-recall usage   - AI usage report from the session log

Usage:
    # Search
    creative-recall search "vocal mixing ideas" --user u-1 --type task --limit 5

    # Batch embed
    creative-recall embed items.json --data ./recall_data

    # Log an event
    creative-recall log "Finished the bridge" --user u-1 --event-type milestone_reached

    # Usage over the last 30 days
    creative-recall usage --days 30

Environment variables (and a .env file in the working directory) are read
through RecallConfig.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

__all__ = ["main", "app"]

app = typer.Typer(
    name="creative-recall",
    help="Semantic memory for creative work",
    no_args_is_help=True,
)
console = Console()

DATA_OPTION_HELP = "Store directory"
CONFIG_OPTION_HELP = "TOML config file"


@app.callback()
def _configure(
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Enable debug logging",
    ),
) -> None:
    """Load .env and configure logging before any command runs."""
    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)


def _load_config(config: Optional[Path]):
    from creative_recall.config import RecallConfig

    if config is not None:
        return RecallConfig.from_file(config)
    return RecallConfig()


def _read_items(path: Path) -> list[dict[str, Any]]:
    """
    Read batch items from a JSON array.

    Each item has ``entityType`` and ``entityId`` plus either ready-made
    ``content`` or raw ``fields`` to canonicalize.
    """
    from creative_recall.memory.canonical import canonicalize

    raw = json.loads(path.read_text())
    if not isinstance(raw, list):
        raise typer.BadParameter("expected a JSON array of items")

    items: list[dict[str, Any]] = []
    for entry in raw:
        if not isinstance(entry, dict):
            raise typer.BadParameter("every item must be a JSON object")
        item = dict(entry)
        fields = item.pop("fields", None)
        if "content" not in item and isinstance(fields, dict):
            item["content"] = canonicalize(item.get("entityType", ""), fields)
        items.append(item)
    return items


@app.command()
def search(
    query: str = typer.Argument(..., help="Natural-language query"),
    user: str = typer.Option(..., "--user", "-u", help="User whose content is searched"),
    entity_type: Optional[list[str]] = typer.Option(
        None,
        "--type", "-t",
        help="Entity type to search (repeatable): note, task, project, session_event",
    ),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Maximum results"),
    threshold: Optional[float] = typer.Option(
        None,
        "--threshold",
        help="Minimum similarity (0-1)",
    ),
    data: Path = typer.Option(Path("./recall_data"), "--data", "-d", help=DATA_OPTION_HELP),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
) -> None:
    """Search a user's notes, tasks, and projects by meaning."""

    async def _run() -> None:
        from creative_recall.api.recall import CreativeRecall

        async with CreativeRecall(data, _load_config(config)) as recall:
            response = await recall.search_with_status(
                query,
                user,
                entity_types=entity_type or None,
                limit=limit,
                threshold=threshold,
            )

        if not response.results:
            console.print("[yellow]No results.[/]")
            return

        table = Table(title=f"Results for: {query}")
        table.add_column("Type", style="cyan")
        table.add_column("ID", style="dim")
        table.add_column("Title / Content")
        table.add_column("Similarity", justify="right", style="green")

        for result in response.results:
            title = result.metadata.get("title") or result.content_snippet[:80]
            table.add_row(
                result.entity_type.value,
                result.entity_id,
                str(title),
                f"{result.similarity:.2f}",
            )
        console.print(table)

        if response.fallback:
            console.print("[yellow]Fallback mode: results may be less relevant.[/]")

    asyncio.run(_run())


@app.command()
def embed(
    items_file: Path = typer.Argument(..., help="JSON array of items", exists=True),
    data: Path = typer.Option(Path("./recall_data"), "--data", "-d", help=DATA_OPTION_HELP),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
) -> None:
    """Batch-embed entities listed in a JSON file."""
    items = _read_items(items_file)

    async def _run() -> None:
        from creative_recall.api.recall import CreativeRecall

        async with CreativeRecall(data, _load_config(config)) as recall:
            result = await recall.embed_entities(items)

        style = "green" if result.failed == 0 else "yellow"
        console.print(Panel(
            f"[{style}]Embedded {result.success} of {result.total} items[/]\n\n"
            f"  Succeeded: {result.success}\n"
            f"  Failed: {result.failed}",
            title="Batch Embedding Complete",
        ))

    asyncio.run(_run())


@app.command()
def log(
    content: str = typer.Argument(..., help="Event description"),
    user: str = typer.Option(..., "--user", "-u", help="Acting user"),
    event_type: str = typer.Option(
        "note_captured",
        "--event-type", "-e",
        help="Session event type",
    ),
    project: Optional[str] = typer.Option(None, "--project", "-p", help="Owning project id"),
    data: Path = typer.Option(Path("./recall_data"), "--data", "-d", help=DATA_OPTION_HELP),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
) -> None:
    """Append a session event and embed it."""
    from creative_recall.types import SessionEventType

    try:
        kind = SessionEventType(event_type)
    except ValueError:
        valid = ", ".join(t.value for t in SessionEventType)
        raise typer.BadParameter(f"unknown event type '{event_type}' (expected one of: {valid})")

    async def _run() -> None:
        from creative_recall.api.recall import CreativeRecall

        async with CreativeRecall(data, _load_config(config)) as recall:
            event_id = await recall.log_session_now(
                user,
                kind,
                content,
                project_id=project,
            )

        if event_id is None:
            console.print("[red]Could not log the event (see logs).[/]")
            raise typer.Exit(code=1)
        console.print(f"[green]Logged {kind.value}[/] [dim]{event_id}[/]")

    asyncio.run(_run())


@app.command()
def usage(
    days: Optional[int] = typer.Option(None, "--days", help="Lookback window in days (max 90)"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="Restrict to one user"),
    data: Path = typer.Option(Path("./recall_data"), "--data", "-d", help=DATA_OPTION_HELP),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help=CONFIG_OPTION_HELP),
) -> None:
    """Show AI usage aggregated from the session log."""

    async def _run() -> None:
        from creative_recall.api.recall import CreativeRecall

        async with CreativeRecall(data, _load_config(config)) as recall:
            report = await recall.usage_report(days, user_id=user)

        if report is None:
            console.print("[red]Could not read the session log (see logs).[/]")
            raise typer.Exit(code=1)

        console.print(Panel(
            f"  Events: {report.total_events}\n"
            f"  Stored embeddings: {report.embeddings_total}\n"
            f"  Since: {report.since:%Y-%m-%d %H:%M} UTC",
            title=f"AI Usage (last {report.days} days)",
        ))

        for title, counts in (
            ("By event type", report.by_event_type),
            ("By function", report.by_function),
            ("By user", report.by_user),
        ):
            if not counts:
                continue
            table = Table(title=title)
            table.add_column("Key", style="cyan")
            table.add_column("Count", justify="right", style="green")
            for key, count in sorted(counts.items(), key=lambda kv: kv[1], reverse=True):
                table.add_row(key, str(count))
            console.print(table)

        if report.daily_trend:
            trend = Table(title="Daily trend")
            trend.add_column("Date", style="cyan")
            trend.add_column("Count", justify="right", style="green")
            for day in report.daily_trend:
                trend.add_row(day.date, str(day.count))
            console.print(trend)

    asyncio.run(_run())


def main() -> None:
    """Entry point for the CLI."""
    app()
