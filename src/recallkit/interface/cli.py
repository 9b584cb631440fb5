"""recallkit CLI: study commands and configuration."""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from recallkit.application.config import AppConfig, resolve_config
from recallkit.application.factory import build_store
from recallkit.application.scheduler import SchedulingStore
from recallkit.domain.errors import RecallError

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="recallkit: spaced-repetition vocabulary scheduler.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage recallkit configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    catalog: Annotated[
        Path | None, typer.Option("--catalog", "-c", help="Catalog file (YAML or JSON).")
    ] = None,
    data_dir: Annotated[
        Path | None, typer.Option("--data-dir", help="Directory holding saved progress.")
    ] = None,
    backend: Annotated[
        str | None, typer.Option(help="Snapshot backend: json, memory.")
    ] = None,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
):
    """Global settings for recallkit."""
    ctx.ensure_object(dict)
    ctx.obj["overrides"] = {
        "catalog_path": catalog,
        "data_dir": data_dir,
        "backend": backend,
        # -v bumps the default verbosity of 1; unset leaves env/file values alone
        "verbose": 1 + verbose if verbose else None,
    }


def _resolve(ctx: typer.Context) -> AppConfig:
    try:
        config = resolve_config((ctx.obj or {}).get("overrides"))
    except ValidationError as e:
        _fail(e)
    _apply_verbosity(config.verbose)
    return config


def _apply_verbosity(verbose: int) -> None:
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.getLogger("recallkit").setLevel(level)


def _open_store(ctx: typer.Context) -> SchedulingStore:
    config = _resolve(ctx)
    try:
        return build_store(config)
    except RecallError as e:
        _fail(e)


def _fail(error: Exception):
    typer.secho(f"Error: {error}", fg="red", err=True)
    raise typer.Exit(1)


def _format_ts(ts_ms: int | None) -> str:
    if ts_ms is None:
        return "never"
    return datetime.fromtimestamp(ts_ms / 1000).strftime("%Y-%m-%d %H:%M")


# ---------------------------------------------------------------------------
# Study commands
# ---------------------------------------------------------------------------


@app.command()
def due(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """List the items due for review now, in catalog order."""
    store = _open_store(ctx)
    items = store.get_due_words()

    if json_output:
        typer.echo(json.dumps([{"id": it.id, **it.payload} for it in items], indent=2))
        return

    if not items:
        typer.secho("Nothing due. Come back later.", fg="green")
        return

    for it in items:
        state = store.get_state(it.id)
        label = "new" if state is None else f"interval {state.interval}d"
        typer.echo(f"{it.id:>6}  {_describe(it.payload)}  ({label})")
    typer.echo(f"\nDue: {len(items)}")


def _describe(payload: dict) -> str:
    for key in ("word", "term", "front", "text"):
        if key in payload:
            return str(payload[key])
    return json.dumps(payload, ensure_ascii=False)


@app.command()
def answer(
    ctx: typer.Context,
    item_id: Annotated[int, typer.Argument(help="Catalog id of the item.")],
    grade: Annotated[int, typer.Argument(help="Recall quality, 0 (blackout) to 5 (perfect).")],
):
    """[bold green]Grade[/bold green] a recall attempt and reschedule the item."""
    store = _open_store(ctx)
    try:
        state = store.submit_answer(item_id, grade)
    except RecallError as e:
        _fail(e)

    typer.echo(
        f"Item {item_id}: next review in {state.interval} day(s) "
        f"(streak {state.repetition}, EF {state.easiness_factor:.2f})"
    )


@app.command()
def memo(
    ctx: typer.Context,
    item_id: Annotated[int, typer.Argument(help="Catalog id of the item.")],
    text: Annotated[str, typer.Argument(help="Note to attach.")],
):
    """Attach a note to an item without changing its schedule."""
    store = _open_store(ctx)
    try:
        store.set_memo(item_id, text)
    except RecallError as e:
        _fail(e)
    typer.echo(f"Memo saved for item {item_id}.")


@app.command()
def limit(
    ctx: typer.Context,
    value: Annotated[int, typer.Argument(help="New items allowed per day.")],
):
    """Set the daily quota of new items."""
    store = _open_store(ctx)
    try:
        store.set_daily_new_limit(value)
    except RecallError as e:
        _fail(e)
    typer.echo(f"Daily new limit: {value}")


@app.command()
def interval(
    ctx: typer.Context,
    item_id: Annotated[int, typer.Argument(help="Catalog id of the item.")],
):
    """Show an item's current review interval (0 if never studied)."""
    store = _open_store(ctx)
    typer.echo(str(store.get_review_interval(item_id)))


@app.command()
def status(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Summarize progress: due, learning, scheduled and unseen items."""
    store = _open_store(ctx)
    s = store.summary()

    if json_output:
        typer.echo(
            json.dumps(
                {
                    "total": s.total_items,
                    "due": s.due_total,
                    "due_reviews": s.due_reviews,
                    "new_available": s.new_available,
                    "learning": s.learning,
                    "scheduled": s.scheduled,
                    "unseen": s.unseen,
                    "new_learned_today": s.new_learned_today,
                    "daily_new_limit": s.daily_new_limit,
                    "last_studied_at": store.last_studied_at,
                },
                indent=2,
            )
        )
        return

    typer.echo(
        f"Items: {s.total_items}  Unseen: {s.unseen}"
        f"  Learning: {s.learning}  Scheduled: {s.scheduled}"
    )
    typer.echo(f"Due now: {s.due_total} ({s.due_reviews} reviews, {s.new_available} new)")
    typer.echo(f"New today: {s.new_learned_today}/{s.daily_new_limit}")
    typer.echo(f"Last studied: {_format_ts(store.last_studied_at)}")


@app.command()
def reset(
    ctx: typer.Context,
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Bypass confirmation.")
    ] = False,
):
    """Forget all progress. The daily limit is kept."""
    if not force:
        typer.confirm("Erase all review progress?", abort=True)

    store = _open_store(ctx)
    try:
        store.reset_progress()
    except RecallError as e:
        _fail(e)
    typer.secho("Progress reset.", fg="yellow")


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    config = _resolve(ctx)
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))