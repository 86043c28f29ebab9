"""memit CLI — deck management, study sessions and statistics."""

import json
import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

from memit.application.session import StartOutcome
from memit.application.study_service import StudyService
from memit.domain.srs.models import Rating
from memit.interface._common import _resolve_with_overrides, run_with_service

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="memit: spaced repetition flashcards in your terminal.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

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
# Subgroups
# ---------------------------------------------------------------------------

decks_app = typer.Typer(help="Create, import and export decks.", no_args_is_help=True)
app.add_typer(decks_app, name="decks")

cards_app = typer.Typer(help="Manage cards inside a deck.", no_args_is_help=True)
app.add_typer(cards_app, name="cards")

config_app = typer.Typer(help="Manage memit configuration.")
app.add_typer(config_app, name="config")


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
    data_dir: Annotated[
        Path | None, typer.Option(help="Directory holding decks and statistics.")
    ] = None,
):
    """Global settings for memit."""
    ctx.ensure_object(dict)
    overrides = {"data_dir": data_dir, "verbose": 1 + verbose if verbose else None}
    ctx.obj["overrides"] = {k: v for k, v in overrides.items() if v is not None}


# ---------------------------------------------------------------------------
# Decks subgroup
# ---------------------------------------------------------------------------


@decks_app.command("list")
def decks_list(ctx: typer.Context):
    """List decks with total, due and new card counts."""

    async def run(service: StudyService):
        if not service.decks:
            typer.secho("No decks yet. Import one with 'memit decks import'.", fg="yellow")
            return
        now = service.now()
        for deck in service.decks:
            typer.echo(
                f"{deck.id}  {deck.name}  "
                f"total={deck.total_count} due={deck.due_count(now)} new={deck.new_count}"
            )

    run_with_service(ctx, run)


@decks_app.command("create")
def decks_create(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Deck name.")],
    description: Annotated[str, typer.Option(help="Optional description.")] = "",
):
    """Create an empty deck."""

    async def run(service: StudyService):
        deck = await service.create_deck(name, description=description)
        typer.secho(f"Created deck '{deck.name}' ({deck.id}).", fg="green")

    run_with_service(ctx, run)


@decks_app.command("import")
def decks_import(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="CSV file with front;back or front,back rows.")],
    name: Annotated[str | None, typer.Option(help="Deck name. Defaults to the file name.")] = None,
):
    """Import a deck from a delimited-text file."""

    async def run(service: StudyService):
        deck = await service.import_deck(path, name or path.stem)
        typer.secho(
            f"Imported {len(deck.cards)} cards into '{deck.name}' ({deck.id}).", fg="green"
        )

    run_with_service(ctx, run)


@decks_app.command("export")
def decks_export(
    ctx: typer.Context,
    deck_id: Annotated[str, typer.Argument(help="Deck ID.")],
    out: Annotated[
        Path | None, typer.Option("--out", "-o", help="Output file or directory.")
    ] = None,
    comma: Annotated[bool, typer.Option("--comma", help="Use ',' instead of ';'.")] = False,
    header: Annotated[bool, typer.Option("--header/--no-header", help="Write a header row.")] = True,
):
    """Export a deck's active cards as delimited text."""
    from memit.infrastructure.adapters.csv_io import ExportFormat, export_deck, export_filename

    async def run(service: StudyService):
        deck = service.get_deck(deck_id)
        fmt = ExportFormat.COMMA if comma else ExportFormat.SEMICOLON
        content = export_deck(deck, fmt=fmt, include_header=header)
        if out is None:
            typer.echo(content, nl=False)
            return
        target = out / export_filename(deck, service.now().date()) if out.is_dir() else out
        target.write_text(content, encoding="utf-8")
        typer.secho(f"Exported '{deck.name}' to {target}.", fg="green")

    run_with_service(ctx, run)


# ---------------------------------------------------------------------------
# Cards subgroup
# ---------------------------------------------------------------------------


@cards_app.command("add")
def cards_add(
    ctx: typer.Context,
    deck_id: Annotated[str, typer.Argument(help="Deck ID.")],
    front: Annotated[str, typer.Argument(help="Question side.")],
    back: Annotated[str, typer.Argument(help="Answer side.")],
):
    """Add a card to a deck."""

    async def run(service: StudyService):
        card = await service.add_card(deck_id, front, back)
        typer.secho(f"Added card {card.id}.", fg="green")

    run_with_service(ctx, run)


# ---------------------------------------------------------------------------
# Study
# ---------------------------------------------------------------------------

_RATING_PROMPT = "  ".join(f"{r.value}={r.title}" for r in Rating)
_RATING_CHOICES = {str(r.value) for r in Rating}


def _prompt_rating() -> Rating | None:
    """Ask until a valid rating (or q) is given. None means quit."""
    while True:
        answer = typer.prompt(f"Rate [{_RATING_PROMPT}] (q to quit)").strip().lower()
        if answer == "q":
            return None
        if answer in _RATING_CHOICES:
            return Rating(int(answer))
        typer.secho("Please enter 1, 2, 3 or 4.", fg="yellow")


@app.command()
def study(
    ctx: typer.Context,
    deck_id: Annotated[str, typer.Argument(help="Deck ID to study.")],
    reverse: Annotated[
        bool | None,
        typer.Option("--reverse/--no-reverse", help="Show the back first and answer with the front."),
    ] = None,
):
    """[bold green]Study[/bold green] the due and new cards of a deck."""
    config = _resolve_with_overrides(ctx, study_reversed=reverse)

    async def run(service: StudyService):
        outcome = await service.start_session(deck_id)
        if outcome is StartOutcome.NO_CARDS:
            typer.secho("Nothing to study right now.", fg="yellow")
            return

        session = service.session
        while service.session is not None:
            card = session.current_card
            shown, hidden = (card.back, card.front) if config.study_reversed else (card.front, card.back)
            typer.echo(f"\n[{session.graded_count + 1}/{session.total_in_session}] {shown}")
            answer = typer.prompt(
                "Press Enter to show the answer (q to quit)", default="", show_default=False
            )
            if answer.strip().lower() == "q":
                await service.end_session()
                typer.secho("Session abandoned. Progress so far was saved.", fg="yellow")
                return

            service.flip()
            typer.echo(f"  -> {hidden}")

            rating = _prompt_rating()
            if rating is None:
                await service.end_session()
                typer.secho("Session abandoned. Progress so far was saved.", fg="yellow")
                return
            graded = await service.rate(rating)
            typer.echo(f"  next review in {graded.review_state.interval_days} day(s)")

        stats = session.session_stats
        typer.secho(
            f"\nSession complete: {stats.total_studied} cards "
            f"({stats.new_cards_studied} new, {stats.review_cards_studied} reviews), "
            f"accuracy {stats.accuracy:.0%}.",
            fg="green",
        )

    run_with_service(ctx, run, config=config)


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------


@app.command()
def stats(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Show lifetime and today's study statistics."""

    async def run(service: StudyService):
        g = service.global_stats
        data = {
            "total_cards_studied": g.total_cards_studied,
            "total_new_cards_studied": g.total_new_cards_studied,
            "total_review_cards_studied": g.total_review_cards_studied,
            "study_sessions": g.study_sessions,
            "accuracy": round(g.accuracy, 4),
            "last_study_at": g.last_study_at.isoformat() if g.last_study_at else None,
            "today_date": g.today_date.isoformat(),
            "today_cards_studied": g.today_cards_studied,
            "today_new_cards": g.today_new_cards,
            "today_reviews": g.today_reviews,
            "today_correct": g.today_correct,
            "today_accuracy": round(g.today_accuracy, 4),
        }
        if json_output:
            typer.echo(json.dumps(data, indent=2))
            return
        typer.echo(f"Lifetime: {g.total_cards_studied} cards in {g.study_sessions} sessions")
        typer.echo(f"  new={g.total_new_cards_studied} reviews={g.total_review_cards_studied}")
        typer.echo(f"  accuracy={g.accuracy:.0%}")
        typer.echo(f"Today ({g.today_date.isoformat()}): {g.today_cards_studied} cards")
        typer.echo(f"  new={g.today_new_cards} reviews={g.today_reviews} correct={g.today_correct}")

    run_with_service(ctx, run)


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    config = _resolve_with_overrides(ctx)
    typer.echo(json.dumps(config.model_dump(mode="json"), indent=2))


def main():
    app()


if __name__ == "__main__":
    main()
