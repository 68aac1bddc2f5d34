"""Main entry point for the anigraph demonstration CLI.

Sets up the Typer CLI application, performs dependency injection (Composition
Root), defines the commands, and delegates every request to CatalogClient.
"""

import asyncio
import logging
import signal
from typing import Any, Awaitable, Callable, Dict

import typer
from typing_extensions import Annotated

from anigraph.core.catalog_client import CatalogClient, log_event
from anigraph.domain.errors import CatalogError, OperationCancelledError
from anigraph.domain.interfaces.user_interface import UserInterface
from anigraph.domain.models.media import MediaSeason
from anigraph.infrastructure.cli.display import ConsoleDisplay
from anigraph.infrastructure.config.settings import (
    get_config, get_log_file, get_log_level, load_configuration, set_config,
)
from anigraph.infrastructure.monitoring.logger_setup import setup_logging
from anigraph.infrastructure.resilience.cancellation import CancellationToken
from anigraph.version import __version__

logger = logging.getLogger(__name__)

Work = Callable[[CatalogClient, UserInterface, CancellationToken], Awaitable[None]]

# --- Dependency Injection (Manual) ---

def create_dependencies() -> Dict[str, Any]:
    """Creates and wires up the dependencies for one command.

    This acts as the Composition Root.
    """
    load_configuration()
    setup_logging(log_level=get_log_level(), log_file=get_log_file())

    verbose = bool(get_config('cli.verbose', False))
    dependencies: Dict[str, Any] = {
        'ui': ConsoleDisplay(),
        'client': CatalogClient.from_config(event_listener=log_event if verbose else None),
    }
    logger.debug("Dependencies initialized.")
    return dependencies

# --- Helper for Running Async Commands ---

async def _run_with_interrupt(work: Work, client: CatalogClient, ui: UserInterface) -> None:
    """Runs `work` with a token that Ctrl+C fires, closing the client afterwards."""
    token = CancellationToken()
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, token.cancel, "interrupted by user")
        handler_installed = True
    except (NotImplementedError, RuntimeError):
        # Windows event loops and non-main threads do not support this
        handler_installed = False

    try:
        async with client:
            await work(client, ui, token)
    finally:
        if handler_installed:
            loop.remove_signal_handler(signal.SIGINT)

def run_command(work: Work) -> None:
    """Runs an async command body, mapping library errors onto exit codes."""
    dependencies = create_dependencies()
    ui: UserInterface = dependencies['ui']
    client: CatalogClient = dependencies['client']
    try:
        asyncio.run(_run_with_interrupt(work, client, ui))
    except OperationCancelledError:
        ui.display_warning("Cancelled.")
        raise typer.Exit(code=130)
    except CatalogError as e:
        logger.error(f"Command failed: {e}", exc_info=True)
        ui.display_error(str(e))
        raise typer.Exit(code=1)

# --- Typer App Definition ---

app = typer.Typer(
    name="anigraph",
    help=f"anigraph v{__version__}: browse the AniList media catalog from the terminal.",
    add_completion=False,
)

IdArgument = Annotated[int, typer.Argument(help="AniList id.")]
LimitOption = Annotated[
    int,
    typer.Option("--limit", "-n", min=0, help="Maximum number of results to show (0 = all)."),
]

def _limit(value: int):
    return value or None

@app.command()
def media(media_id: IdArgument):
    """Show one media entry."""
    async def work(client: CatalogClient, ui: UserInterface, token: CancellationToken) -> None:
        result = await client.get_media_by_id(media_id, cancel=token)
        if result is None:
            ui.display_warning(f"No media found for id {media_id}.")
            return
        ui.display_media(result)
    run_command(work)

@app.command()
def related(media_id: IdArgument):
    """Show the sequels, prequels, adaptations... of a media entry."""
    async def work(client: CatalogClient, ui: UserInterface, token: CancellationToken) -> None:
        edges = await client.get_related_media(media_id, cancel=token)
        if not edges:
            ui.display_warning(f"No related media found for id {media_id}.")
            return
        ui.display_related_media(edges)
    run_command(work)

@app.command()
def characters(media_id: IdArgument):
    """List the characters of a media entry."""
    async def work(client: CatalogClient, ui: UserInterface, token: CancellationToken) -> None:
        edges = await client.get_characters(media_id, cancel=token)
        if not edges:
            ui.display_warning(f"No characters found for media {media_id}.")
            return
        ui.display_character_edges(edges)
    run_command(work)

@app.command()
def character(character_id: IdArgument):
    """Show one character."""
    async def work(client: CatalogClient, ui: UserInterface, token: CancellationToken) -> None:
        result = await client.get_character_by_id(character_id, cancel=token)
        if result is None:
            ui.display_warning(f"No character found for id {character_id}.")
            return
        ui.display_character(result)
    run_command(work)

@app.command()
def search(
    text: Annotated[str, typer.Argument(help="Title to search for.")],
    limit: LimitOption = 25,
):
    """Search media by title."""
    async def work(client: CatalogClient, ui: UserInterface, token: CancellationToken) -> None:
        results = await client.search_media(text, cancel=token).to_list(_limit(limit))
        if not results:
            ui.display_info(f"No media matched '{text}'.")
            return
        ui.display_media_list(results, title=f"Search: {text}")
    run_command(work)

@app.command()
def seasonal(
    season: Annotated[MediaSeason, typer.Argument(case_sensitive=False, help="Season of the year.")],
    year: Annotated[int, typer.Argument(help="Season year, e.g. 2024.")],
    limit: LimitOption = 25,
):
    """List the media of a season, most popular first."""
    async def work(client: CatalogClient, ui: UserInterface, token: CancellationToken) -> None:
        results = await client.get_seasonal_media(season, year, cancel=token).to_list(_limit(limit))
        if not results:
            ui.display_info(f"No media found for {season.value} {year}.")
            return
        ui.display_media_list(results, title=f"{season.value} {year}")
    run_command(work)

@app.command(name="search-characters")
def search_characters(
    text: Annotated[str, typer.Argument(help="Character name to search for.")],
    limit: LimitOption = 25,
):
    """Search characters by name."""
    async def work(client: CatalogClient, ui: UserInterface, token: CancellationToken) -> None:
        results = await client.search_characters(text, cancel=token).to_list(_limit(limit))
        if not results:
            ui.display_info(f"No characters matched '{text}'.")
            return
        ui.display_character_list(results, title=f"Characters: {text}")
    run_command(work)

@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log requests, waits and retries."),
    ] = False,
):
    """Browse the AniList media catalog."""
    if verbose:
        set_config('cli.verbose', True)
        set_config('logging.level', 'INFO')

# --- Main Execution Guard ---

def cli_entry_point():
    """Function called by the console script entry point in pyproject.toml."""
    app()

if __name__ == "__main__":
    cli_entry_point()
