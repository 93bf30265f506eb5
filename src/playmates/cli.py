"""CLI interface for Playmates."""

import asyncio
import os
from pathlib import Path

import typer
import uvicorn
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from playmates.compare import compare_achievements, find_common_achievable_games
from playmates.config import CONFIG_DIR, ConfigError, Settings
from playmates.errors import PlaymatesError
from playmates.logs import setup_logging
from playmates.steam import SteamAPIError, SteamClient

# Load .env file - try current directory, then config directory
load_dotenv(Path.cwd() / ".env")
load_dotenv(CONFIG_DIR / ".env")

app = typer.Typer(
    name="playmates",
    help="Compare Steam libraries and achievements with your friends",
    no_args_is_help=True,
)
console = Console()


def _client() -> SteamClient:
    return SteamClient(os.getenv("STEAM_API_KEY"), timeout=float(os.getenv("REQUEST_TIMEOUT", "10")))


def _run(coro):
    """Run a coroutine, turning provider and comparison errors into a clean exit."""
    try:
        return asyncio.run(coro)
    except (SteamAPIError, PlaymatesError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


def _games_table(title: str, games) -> Table:
    table = Table(title=title)
    table.add_column("App ID", justify="right", style="dim")
    table.add_column("Name")
    for game in games:
        table.add_row(str(game.app_id), game.name)
    return table


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Interface to bind (default: HOST or 127.0.0.1)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to listen on (default: PORT or 3000)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Run the web server."""
    try:
        settings = Settings.from_env(load_files=False)
    except ConfigError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    setup_logging(settings.log_level)
    uvicorn.run(
        "playmates.web.app:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_config=None,
    )


@app.command()
def games(steam_id: str = typer.Argument(..., help="Steam64 ID of the player")):
    """List a player's owned games."""

    async def fetch():
        async with _client() as client:
            return await client.get_owned_games(steam_id)

    owned = _run(fetch())
    console.print(_games_table(f"{len(owned)} games owned by {steam_id}", owned))


@app.command("common-games")
def common_games(
    user_id: str = typer.Argument(..., help="Your Steam64 ID"),
    friend_id: str = typer.Argument(..., help="Your friend's Steam64 ID"),
):
    """List games you both own that have achievements."""
    setup_logging(os.getenv("LOG_LEVEL", "WARNING"))

    async def fetch():
        async with _client() as client:
            return await find_common_achievable_games(client, user_id, friend_id)

    with console.status("[dim]Comparing libraries...[/dim]"):
        common = _run(fetch())

    if not common:
        console.print("[yellow]No games with achievements in common.[/yellow]")
        return
    console.print(_games_table(f"{len(common)} games in common", common))


@app.command()
def compare(
    user_id: str = typer.Argument(..., help="Your Steam64 ID"),
    friend_id: str = typer.Argument(..., help="Your friend's Steam64 ID"),
    app_id: int = typer.Argument(..., help="Steam app ID of the game"),
):
    """Compare achievement progress for one game."""
    setup_logging(os.getenv("LOG_LEVEL", "WARNING"))

    async def fetch():
        async with _client() as client:
            return await compare_achievements(client, user_id, friend_id, app_id)

    result = _run(fetch())

    table = Table(title=f"App {app_id}: {result.total} achievements")
    table.add_column("Player")
    table.add_column("Unlocked", justify="right")
    table.add_column("Completion", justify="right")
    table.add_row("You", str(result.user.unlocked), f"{result.user.percentage}%")
    table.add_row("Friend", str(result.friend.unlocked), f"{result.friend.percentage}%")
    console.print(table)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
