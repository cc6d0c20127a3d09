"""CLI for the tier rating engine."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated, TypeVar

import pydantic
import structlog
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from tier_rating import __version__
from tier_rating.app import TierRatingApp
from tier_rating.core.config import TierRatingConfig, load_config
from tier_rating.core.errors import TierRatingError
from tier_rating.models import ContentStats, TierList
from tier_rating.scoring import create_scoring

T = TypeVar("T")

DEFAULT_DATABASE_URL = "sqlite:///tier_rating.db"

# Configure structlog
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

app = typer.Typer(
    name="tier-rating",
    help="Tier Rating - rate content by level, track aggregate scores, and curate tier lists",
    add_completion=False,
)
lists_app = typer.Typer(help="Create and reorder tier lists", add_completion=False)
app.add_typer(lists_app, name="list")
console = Console()

ConfigOption = Annotated[
    Path | None, typer.Option("--config", "-c", help="Path to config YAML file")
]
DatabaseOption = Annotated[
    str | None, typer.Option("--db", help="SQLAlchemy database URL")
]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-V", help="Verbose output")]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"tier-rating v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
) -> None:
    """Tier Rating CLI."""


def _configure_logging(verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def _load(config_path: Path | None) -> TierRatingConfig:
    return load_config(config_path) if config_path else TierRatingConfig()


@contextmanager
def _exit_on_error() -> Iterator[None]:
    """Print known errors and exit with code 1."""
    try:
        yield
    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e
    except pydantic.ValidationError as e:
        console.print(f"[red]Invalid configuration:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e
    except TierRatingError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1) from e


def _run(
    config_path: Path | None,
    database_url: str | None,
    verbose: bool,
    action: Callable[[TierRatingApp], Awaitable[T]],
) -> T:
    """Build the app and run one async action."""
    _configure_logging(verbose)
    with _exit_on_error():
        config = _load(config_path)
        url = database_url or config.get_database_url() or DEFAULT_DATABASE_URL
        tier_app = TierRatingApp(config, database_url=url)
        try:
            return asyncio.run(action(tier_app))
        finally:
            tier_app.close()


def _print_stats(stats: ContentStats) -> None:
    console.print(f"[bold]{stats.content_id}[/bold]")
    console.print(f"  Ratings: {stats.count}")
    console.print(f"  Mean score: {stats.mean:.2f}")
    for key, count in stats.distribution.items():
        console.print(f"  {key}: {count}")


def _print_tier_list(tier_list: TierList, config: TierRatingConfig) -> None:
    table = Table(title=f"{tier_list.name} ({tier_list.id})")
    table.add_column("Bucket")
    table.add_column("Items")
    for key, items in tier_list.buckets.items():
        table.add_row(config.bucket_name(key), ", ".join(items))
    console.print(table)


def _parse_dimensions(values: list[str]) -> dict[str, str]:
    dimensions = {}
    for value in values:
        name, sep, level = value.partition("=")
        if not sep or not name or not level:
            raise typer.BadParameter(f"Expected NAME=LEVEL, got '{value}'")
        dimensions[name] = level
    return dimensions


@app.command()
def levels(config_path: ConfigOption = None) -> None:
    """Show the configured rating levels and tier thresholds."""
    with _exit_on_error():
        config = _load(config_path)
    table = Table(title="Levels")
    table.add_column("Key")
    table.add_column("Name")
    table.add_column("Score", justify="right")
    table.add_column("Tier")
    for level in config.levels:
        table.add_row(level.key, level.name, str(level.score), level.tier or "")
    console.print(table)

    console.print("[bold]Thresholds:[/bold]")
    for threshold in config.classifier.thresholds:
        console.print(f"  >= {threshold.min_score:g}: {threshold.label}")
    console.print(f"  otherwise: {config.classifier.fallback}")


@app.command()
def classify(
    score: Annotated[float, typer.Argument(help="Score to classify")],
    config_path: ConfigOption = None,
) -> None:
    """Classify a numeric score into a tier."""
    with _exit_on_error():
        _, classifier = create_scoring(_load(config_path))
    console.print(classifier.classify(score))


@app.command()
def rate(
    content_id: Annotated[str, typer.Argument(help="Content identifier")],
    rater_id: Annotated[str, typer.Argument(help="Rater identifier")],
    level: Annotated[str, typer.Argument(help="Overall level key")],
    dimension: Annotated[
        list[str] | None,
        typer.Option("--dimension", "-d", help="Secondary level as NAME=LEVEL"),
    ] = None,
    comment: Annotated[str | None, typer.Option("--comment", help="Free-text comment")] = None,
    tag: Annotated[list[str] | None, typer.Option("--tag", "-t", help="Tag (repeatable)")] = None,
    config_path: ConfigOption = None,
    database_url: DatabaseOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Submit or replace a rating and show the updated stats."""
    levels_arg = {"overall": level, **_parse_dimensions(dimension or [])}

    async def _action(tier_app: TierRatingApp) -> ContentStats:
        result = await tier_app.submit_rating(content_id, rater_id, levels_arg, comment, tag)
        return result.stats

    stats = _run(config_path, database_url, verbose, _action)
    console.print("[green]Rating saved[/green]")
    _print_stats(stats)


@app.command()
def unrate(
    content_id: Annotated[str, typer.Argument(help="Content identifier")],
    rater_id: Annotated[str, typer.Argument(help="Rater identifier")],
    config_path: ConfigOption = None,
    database_url: DatabaseOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Delete a rating and show the updated stats."""

    async def _action(tier_app: TierRatingApp) -> ContentStats:
        return await tier_app.ratings.delete_rating(content_id, rater_id)

    stats = _run(config_path, database_url, verbose, _action)
    console.print("[green]Rating deleted[/green]")
    _print_stats(stats)


@app.command()
def stats(
    content_id: Annotated[str, typer.Argument(help="Content identifier")],
    config_path: ConfigOption = None,
    database_url: DatabaseOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Show aggregate stats for a content item."""

    async def _action(tier_app: TierRatingApp) -> ContentStats:
        return await tier_app.get_content_stats(content_id)

    _print_stats(_run(config_path, database_url, verbose, _action))


@app.command()
def tiers(
    config_path: ConfigOption = None,
    database_url: DatabaseOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Group all rated content into tiers by mean score."""

    async def _action(tier_app: TierRatingApp) -> dict[str, list[ContentStats]]:
        return await tier_app.ratings.group_by_tier()

    groups = _run(config_path, database_url, verbose, _action)
    table = Table(title="Tiers")
    table.add_column("Tier")
    table.add_column("Content")
    for label, items in groups.items():
        table.add_row(label, ", ".join(f"{s.content_id} ({s.mean:.2f})" for s in items))
    console.print(table)


@app.command()
def summary(
    config_path: ConfigOption = None,
    database_url: DatabaseOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Show totals across all rated content."""

    async def _action(tier_app: TierRatingApp):
        return await tier_app.ratings.summary()

    result = _run(config_path, database_url, verbose, _action)
    console.print(f"  Total ratings: {result.total_ratings}")
    console.print(f"  Average score: {result.average_score:.2f}")
    console.print(f"  Rated content: {result.content_count}")


@lists_app.command("create")
def list_create(
    name: Annotated[str, typer.Argument(help="Tier list name")],
    description: Annotated[str | None, typer.Option("--description", help="Description")] = None,
    seed: Annotated[
        bool, typer.Option("--seed", help="Pre-fill buckets from current content stats")
    ] = False,
    config_path: ConfigOption = None,
    database_url: DatabaseOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Create a tier list."""

    async def _action(tier_app: TierRatingApp) -> TierList:
        if seed:
            return await tier_app.seed_tier_list(name, description)
        return await tier_app.tier_lists.create(name, description)

    _print_tier_list(_run(config_path, database_url, verbose, _action), _load(config_path))


@lists_app.command("show")
def list_show(
    list_id: Annotated[str, typer.Argument(help="Tier list id")],
    config_path: ConfigOption = None,
    database_url: DatabaseOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Show a tier list."""

    async def _action(tier_app: TierRatingApp) -> TierList:
        return await tier_app.tier_lists.get(list_id)

    _print_tier_list(_run(config_path, database_url, verbose, _action), _load(config_path))


@lists_app.command("add")
def list_add(
    list_id: Annotated[str, typer.Argument(help="Tier list id")],
    item: Annotated[str, typer.Argument(help="Item reference")],
    bucket: Annotated[str, typer.Option("--bucket", help="Target bucket")] = "unranked",
    config_path: ConfigOption = None,
    database_url: DatabaseOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Add an item to a tier list (unranked by default)."""

    async def _action(tier_app: TierRatingApp) -> TierList:
        return await tier_app.tier_lists.add_item(list_id, item, bucket)

    _print_tier_list(_run(config_path, database_url, verbose, _action), _load(config_path))


@lists_app.command("move")
def list_move(
    list_id: Annotated[str, typer.Argument(help="Tier list id")],
    item: Annotated[str, typer.Argument(help="Item reference")],
    from_bucket: Annotated[str, typer.Argument(help="Current bucket")],
    to_bucket: Annotated[str, typer.Argument(help="Destination bucket")],
    config_path: ConfigOption = None,
    database_url: DatabaseOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Move an item between buckets."""

    async def _action(tier_app: TierRatingApp) -> TierList:
        return await tier_app.move_tier_item(list_id, item, from_bucket, to_bucket)

    _print_tier_list(_run(config_path, database_url, verbose, _action), _load(config_path))


@app.command()
def validate(
    config_path: Annotated[Path, typer.Argument(help="Path to config YAML file")],
) -> None:
    """Validate a configuration file without running.

    Args:
        config_path: Path to YAML configuration file.
    """
    try:
        config = load_config(config_path)
        create_scoring(config)
        console.print("[green]Configuration is valid![/green]")
        console.print(f"  Levels: {len(config.levels)}")
        console.print(f"  Thresholds: {len(config.classifier.thresholds)}")
        console.print(f"  Buckets: {', '.join(config.bucket_keys)}")
        console.print(f"  Dimensions: {', '.join(config.dimensions) or '-'}")

    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e
    except TierRatingError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1) from e
    except Exception as e:
        console.print(f"[red]Validation error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e


@app.command()
def info() -> None:
    """Show tool information and example commands."""
    console.print("[bold]Tier Rating[/bold]")
    console.print(f"Version: {__version__}\n")

    console.print("[bold]Example Commands:[/bold]")
    console.print("  # Rate content")
    console.print("  tier-rating rate movie-42 alice ding -d technical=jia --tag classic\n")

    console.print("  # Show stats for one item")
    console.print("  tier-rating stats movie-42\n")

    console.print("  # Group everything into tiers")
    console.print("  tier-rating tiers\n")

    console.print("  # Seed a tier list from ratings and move an item")
    console.print("  tier-rating list create 'My list' --seed")
    console.print("  tier-rating list move <list-id> movie-42 unranked s\n")

    console.print("  # Validate config")
    console.print("  tier-rating validate config.yaml")


if __name__ == "__main__":
    app()
