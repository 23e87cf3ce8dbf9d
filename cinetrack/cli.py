"""CLI for cinetrack."""

import logging
import os
from datetime import date, datetime
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from cinetrack import __version__
from cinetrack.categorizer import categorize_continue_watching_items
from cinetrack.config import Config, ConfigError
from cinetrack.display import (
    get_category_config,
    get_recommendation_strength_config,
    get_urgency_level_config,
    get_watching_pattern_config,
)
from cinetrack.eligibility import (
    ATTENTION_DAYS,
    ContinueWatchingQuery,
    eligible_items,
    filter_continue_watching,
    shows_needing_attention,
)
from cinetrack.formatting import (
    calculate_time_to_finish_season,
    format_days_since_last_episode,
    format_watching_streak,
    get_next_episode_label,
)
from cinetrack.models import (
    ContinueWatchingItem,
    InvalidItemError,
    RECOMMENDATION_STRENGTHS,
    URGENCY_LEVELS,
    WATCHING_PATTERNS,
    WatchedEpisode,
    days_since,
)
from cinetrack.recommendations import generate_watching_recommendations
from cinetrack.sessions import ACTIVE_DAYS, detect_binge_sessions
from cinetrack.stats import compute_watching_stats
from cinetrack.storage import DataStore, StorageError
from cinetrack.tmdb_client import TmdbAuthError, TmdbClient, TmdbError

console = Console()
logger = logging.getLogger("cinetrack")


def get_data_dir() -> Path:
    """Get data directory from env or default."""
    env_dir = os.environ.get("CINETRACK_DATA_DIR")
    if env_dir:
        return Path(env_dir)
    return Path.cwd() / "data"


def load_config(required: bool = False) -> Config:
    """Load config, falling back to defaults unless it is required."""
    config = Config(data_dir=get_data_dir())
    if not config.exists() and not required:
        return config

    try:
        config.load()
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)
    return config


def setup_logging(verbose: bool, allow_invalid_config: bool = False) -> None:
    """Log to the data directory, and to the terminal with --verbose.

    An invalid config file is fatal unless ``allow_invalid_config`` is set,
    in which case logging falls back to the defaults with a warning.
    """
    config = Config(data_dir=get_data_dir())
    if config.exists():
        try:
            config.load()
        except ConfigError as e:
            if not allow_invalid_config:
                console.print(f"[red]Error:[/red] {e}")
                console.print("Run [bold]cinetrack setup[/bold] to rewrite it.")
                raise SystemExit(1)
            console.print(f"[yellow]Warning:[/yellow] {e}")
            config = Config(data_dir=get_data_dir())

    logger.setLevel(logging.DEBUG)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    file_handler = logging.FileHandler(config.log_path)
    file_handler.setLevel(config.log_level)
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    logger.addHandler(file_handler)

    if verbose:
        rich_handler = RichHandler(console=Console(stderr=True), show_path=False)
        rich_handler.setLevel(logging.DEBUG)
        logger.addHandler(rich_handler)


def fail_storage(e: StorageError) -> None:
    console.print(f"[red]Error:[/red] {e}")
    raise SystemExit(3)


def load_items(store: DataStore, as_of=None):
    try:
        return store.load_items(as_of=as_of)
    except StorageError as e:
        fail_storage(e)


def styled(display, text: str) -> str:
    return f"[{display.color}]{display.icon} {text}[/{display.color}]"


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx, verbose):
    """CineTrack - keep track of the shows you're watching."""
    # setup must still run so a broken config can be replaced
    setup_logging(verbose, allow_invalid_config=ctx.invoked_subcommand == "setup")


@cli.command()
def setup():
    """Interactive setup wizard to configure TMDB access."""
    config = Config(data_dir=get_data_dir())

    if config.exists():
        console.print(
            "[yellow]Configuration already exists at:[/yellow] "
            f"{config.config_path}"
        )
        if not click.confirm("Overwrite existing configuration?"):
            console.print("[dim]Setup cancelled.[/dim]")
            return

    console.print("\n[bold]CineTrack Setup[/bold]\n")

    api_key = click.prompt("TMDB API key", hide_input=True, type=str)
    language = click.prompt("Language", default="en-US", type=str)
    episode_length = click.prompt(
        "Average episode length (minutes)", default=config.episode_length, type=int
    )

    console.print("\n[dim]Checking API key with TMDB...[/dim]")
    client = TmdbClient(api_key=api_key, language=language)
    if not client.test_connection():
        console.print("[red]TMDB rejected the API key.[/red]")
        raise SystemExit(2)

    try:
        config.set_tmdb_credentials(api_key=api_key, language=language)
        config.set_episode_length(episode_length)
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)
    config.save()

    console.print("\n[green]✓ Setup complete![/green]")
    console.print(f"  Config saved to: {config.config_path}")
    console.print("\nRun [bold]cinetrack add[/bold] to start tracking a show.")


@cli.command()
@click.argument("tmdb_tv_id", type=int)
@click.option("--name", help="Show name (filled in by 'enrich' otherwise)")
@click.option("--season", default=1, show_default=True, help="Next season to watch")
@click.option("--episode", default=1, show_default=True, help="Next episode to watch")
@click.option("--watched", default=0, show_default=True, help="Episodes watched so far")
@click.option(
    "--last-watched",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    help="Date of the last episode (default: today)",
)
@click.option(
    "--pattern",
    type=click.Choice(WATCHING_PATTERNS),
    default="regular_watching",
    show_default=True,
)
@click.option("--streak", default=0, show_default=True, help="Consecutive days watched")
@click.option("--score", default=0.0, show_default=True, help="Priority score")
@click.option("--urgency", type=click.Choice(URGENCY_LEVELS))
@click.option("--strength", type=click.Choice(RECOMMENDATION_STRENGTHS))
def add(tmdb_tv_id, name, season, episode, watched, last_watched, pattern, streak,
        score, urgency, strength):
    """Add or replace a show in your continue watching list."""
    last_watched_date = last_watched.date() if last_watched else date.today()

    try:
        item = ContinueWatchingItem(
            tmdb_tv_id=tmdb_tv_id,
            total_episodes_watched=watched,
            last_watched_date=last_watched_date,
            next_season_number=season,
            next_episode_number=episode,
            is_hidden=False,
            is_completed=False,
            watching_pattern=pattern,
            days_since_last_episode=days_since(last_watched_date),
            watching_streak=streak,
            final_priority_score=score,
            urgency_level=urgency,
            recommendation_strength=strength,
            show_name=name,
        )
    except InvalidItemError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    store = DataStore(data_dir=get_data_dir())
    try:
        store.upsert_item(item)
    except StorageError as e:
        fail_storage(e)

    console.print(
        f"[green]✓ Tracking {item.display_name}[/green] "
        f"(next: {get_next_episode_label(season, episode)})"
    )


@cli.command("list")
@click.option(
    "--pattern",
    "patterns",
    type=click.Choice(WATCHING_PATTERNS),
    multiple=True,
    help="Only show these watching patterns",
)
@click.option("--limit", type=int, help="Maximum number of shows")
def list_shows(patterns, limit):
    """Show your continue watching list by category."""
    store = DataStore(data_dir=get_data_dir())
    items = load_items(store, as_of=date.today())

    if not items:
        console.print("[yellow]Your continue watching list is empty.[/yellow]")
        console.print("Run [bold]cinetrack add[/bold] to track a show.")
        return

    # Abandoned shows must not count against the limit
    query = ContinueWatchingQuery(watching_patterns=patterns or None, limit=limit)
    categories = categorize_continue_watching_items(
        filter_continue_watching(eligible_items(items), query)
    )

    if not categories:
        console.print("[yellow]Nothing to continue right now.[/yellow]")
        return

    for category in categories:
        category_config = get_category_config(category.category)
        table = Table(
            title=styled(category_config, f"{category_config.label} ({category.count})"),
            title_justify="left",
        )
        table.add_column("Show", style="cyan", no_wrap=True)
        table.add_column("Next", style="green")
        table.add_column("Last watched")
        table.add_column("Streak")
        table.add_column("Pattern")

        for item in category.items:
            pattern_config = get_watching_pattern_config(item.watching_pattern)
            next_label = get_next_episode_label(
                item.next_season_number, item.next_episode_number
            )
            if item.next_episode_name:
                next_label = f"{next_label} {item.next_episode_name}"
            table.add_row(
                item.display_name,
                next_label,
                format_days_since_last_episode(item.days_since_last_episode),
                format_watching_streak(item.watching_streak),
                styled(pattern_config, pattern_config.label),
            )

        console.print(table)


@cli.command()
def recommend():
    """Suggest what to watch next."""
    config = load_config()
    store = DataStore(data_dir=get_data_dir())
    items = load_items(store, as_of=date.today())

    recommendations = generate_watching_recommendations(
        items,
        limit=config.recommendation_limit,
        episode_length=config.episode_length,
    )

    if not recommendations:
        console.print("[yellow]No recommendations - add some shows first.[/yellow]")
        return

    table = Table(title="Watch Next")
    table.add_column("#", style="dim")
    table.add_column("Show", style="cyan", no_wrap=True)
    table.add_column("Episode", style="green")
    table.add_column("Why")
    table.add_column("Time")

    for rank, rec in enumerate(recommendations, start=1):
        show = rec.item.display_name
        if rec.item.recommendation_strength:
            strength = get_recommendation_strength_config(rec.item.recommendation_strength)
            show = f"{show} {strength.icon}"
        if rec.item.urgency_level:
            urgency = get_urgency_level_config(rec.item.urgency_level)
            show = f"{show} {urgency.icon}"
        table.add_row(
            str(rank),
            show,
            get_next_episode_label(rec.item.next_season_number, rec.item.next_episode_number),
            rec.reasoning,
            rec.time_commitment,
        )

    console.print(table)


@cli.command()
@click.option("--days", default=ATTENTION_DAYS, show_default=True, type=float,
              help="Minimum days since last episode")
def attention(days):
    """List shows you haven't watched in a while."""
    store = DataStore(data_dir=get_data_dir())
    items = shows_needing_attention(load_items(store, as_of=date.today()), min_days=days)

    if not items:
        console.print("[green]You're up to date on all your shows.[/green]")
        return

    table = Table(title="Needs Attention")
    table.add_column("Show", style="cyan", no_wrap=True)
    table.add_column("Next", style="green")
    table.add_column("Last watched", style="yellow")

    for item in items:
        table.add_row(
            item.display_name,
            get_next_episode_label(item.next_season_number, item.next_episode_number),
            format_days_since_last_episode(item.days_since_last_episode),
        )

    console.print(table)


@cli.command()
def stats():
    """Show watching statistics."""
    store = DataStore(data_dir=get_data_dir())
    items = load_items(store)

    if not items:
        console.print("[yellow]No shows tracked yet.[/yellow]")
        return

    summary = compute_watching_stats(items)

    table = Table(title="Watching Stats")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Active Shows", str(summary.active_shows))
    table.add_row("Completed Shows", str(summary.completed_shows))
    table.add_row("Episodes Watched", str(summary.total_episodes_watched))
    table.add_row("Average per Show", str(summary.average_episodes_per_show))
    table.add_row("Longest Streak", format_watching_streak(summary.longest_streak))
    table.add_row("Binge Watching", str(summary.binge_shows))
    table.add_row("Regular Viewing", str(summary.regular_shows))
    table.add_row("Casual Viewing", str(summary.casual_shows))

    console.print(table)


@cli.command()
@click.argument("tmdb_tv_id", type=int)
def hide(tmdb_tv_id):
    """Hide a show from continue watching."""
    store = DataStore(data_dir=get_data_dir())
    try:
        item = store.hide_item(tmdb_tv_id)
    except StorageError as e:
        fail_storage(e)
    console.print(f"[green]✓ Hidden {item.display_name}[/green]")


@cli.command()
@click.argument("tmdb_tv_id", type=int)
def complete(tmdb_tv_id):
    """Mark a show as completed."""
    store = DataStore(data_dir=get_data_dir())
    try:
        item = store.mark_completed(tmdb_tv_id)
    except StorageError as e:
        fail_storage(e)
    console.print(f"[green]✓ Completed {item.display_name}[/green]")


@cli.command()
@click.argument("tmdb_tv_id", type=int)
def remove(tmdb_tv_id):
    """Remove a show from continue watching."""
    store = DataStore(data_dir=get_data_dir())
    try:
        store.remove_item(tmdb_tv_id)
    except StorageError as e:
        fail_storage(e)
    console.print(f"[green]✓ Removed show {tmdb_tv_id}[/green]")


@cli.command("next-episode")
@click.argument("tmdb_tv_id", type=int)
@click.argument("season", type=int)
@click.argument("episode", type=int)
@click.option("--notes", help="Reminder for this show")
def next_episode(tmdb_tv_id, season, episode, notes):
    """Set the next episode to watch."""
    store = DataStore(data_dir=get_data_dir())
    try:
        item = store.set_next_episode(tmdb_tv_id, season, episode, notes=notes)
    except StorageError as e:
        fail_storage(e)
    except InvalidItemError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)
    console.print(
        f"[green]✓ {item.display_name}[/green] next: "
        f"{get_next_episode_label(item.next_season_number, item.next_episode_number)}"
    )


@cli.command()
@click.argument("tmdb_tv_id", type=int)
@click.argument("level", type=int)
def priority(tmdb_tv_id, level):
    """Set a manual priority (1-10) for a show."""
    if not 1 <= level <= 10:
        console.print(f"[red]Error:[/red] Priority must be between 1 and 10, got {level}")
        raise SystemExit(1)

    store = DataStore(data_dir=get_data_dir())
    try:
        item = store.set_priority(tmdb_tv_id, level)
    except StorageError as e:
        fail_storage(e)
    console.print(f"[green]✓ {item.display_name}[/green] priority set to {level}")


@cli.command()
@click.argument("tmdb_tv_id", type=int)
def reset(tmdb_tv_id):
    """Clear the manual priority and notes of a show."""
    store = DataStore(data_dir=get_data_dir())
    try:
        item = store.clear_overrides(tmdb_tv_id)
    except StorageError as e:
        fail_storage(e)
    console.print(f"[green]✓ Cleared priority and notes for {item.display_name}[/green]")


@cli.command()
@click.argument("tmdb_tv_id", type=int)
@click.argument("season", type=int)
@click.argument("episode", type=int)
@click.option(
    "--at",
    "watched_at",
    type=click.DateTime(formats=["%Y-%m-%d %H:%M", "%Y-%m-%dT%H:%M", "%Y-%m-%d"]),
    help="When you watched it (default: now)",
)
def watch(tmdb_tv_id, season, episode, watched_at):
    """Log an episode you just watched."""
    try:
        watched = WatchedEpisode(
            tmdb_tv_id=tmdb_tv_id,
            season_number=season,
            episode_number=episode,
            watched_at=watched_at or datetime.now(),
        )
    except InvalidItemError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    store = DataStore(data_dir=get_data_dir())
    try:
        item = store.record_watch(watched)
    except StorageError as e:
        fail_storage(e)

    label = get_next_episode_label(season, episode)
    if item is None:
        console.print(f"[green]✓ Logged {label}[/green] of show {tmdb_tv_id}")
        return
    console.print(
        f"[green]✓ Logged {label}[/green] of {item.display_name} "
        f"(next: {get_next_episode_label(item.next_season_number, item.next_episode_number)})"
    )


@cli.command()
@click.option("--days", default=ACTIVE_DAYS, show_default=True, type=float,
              help="How many days back to look")
def binges(days):
    """List recent binge watching sessions."""
    config = load_config()
    store = DataStore(data_dir=get_data_dir())
    try:
        watches = store.load_watches()
    except StorageError as e:
        fail_storage(e)
    names = {item.tmdb_tv_id: item.display_name for item in load_items(store)}

    sessions = detect_binge_sessions(
        watches, active_days=days, episode_length=config.episode_length
    )

    if not sessions:
        console.print("[yellow]No binge sessions found.[/yellow]")
        console.print("Log episodes with [bold]cinetrack watch[/bold].")
        return

    table = Table(title="Binge Sessions")
    table.add_column("Show", style="cyan", no_wrap=True)
    table.add_column("Started")
    table.add_column("Episodes", style="green")
    table.add_column("Seasons")
    table.add_column("Runtime")
    table.add_column("Status")

    for session in sessions:
        table.add_row(
            names.get(session.tmdb_tv_id, f"TMDB #{session.tmdb_tv_id}"),
            session.session_start.strftime("%Y-%m-%d %H:%M"),
            str(session.episodes_in_session),
            ", ".join(str(s) for s in session.season_numbers),
            calculate_time_to_finish_season(1, session.total_runtime_minutes),
            "[green]Active[/green]" if session.is_active else "[dim]Ended[/dim]",
        )

    console.print(table)


@cli.command()
def enrich():
    """Fetch show and next episode details from TMDB."""
    config = load_config(required=True)

    if not config.tmdb_configured:
        console.print("[red]TMDB not configured.[/red]")
        console.print("Run [bold]cinetrack setup[/bold] first.")
        raise SystemExit(1)

    store = DataStore(data_dir=get_data_dir())
    items = load_items(store)

    if not items:
        console.print("[yellow]No shows to enrich.[/yellow]")
        return

    client = TmdbClient(api_key=config.tmdb_api_key, language=config.tmdb_language)
    enriched = []

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task("Fetching from TMDB...", total=None)
            for item in items:
                progress.update(task, description=f"Fetching {item.display_name}...")
                enriched.append(client.enrich_item(item))
            progress.remove_task(task)
    except TmdbAuthError as e:
        console.print(f"[red]Authorization failed:[/red] {e}")
        console.print("Run [bold]cinetrack setup[/bold] to update your API key.")
        raise SystemExit(2)
    except TmdbError as e:
        console.print(f"[red]TMDB request failed:[/red] {e}")
        raise SystemExit(2)

    store.save_items(enriched)
    console.print(f"\n[green]✓ Enriched {len(enriched)} shows[/green]")


if __name__ == "__main__":
    cli()
