"""Command-line client for the repository importer.

Usage:
    python -m client login TOKEN    # exchange a Google ID token for a session
    python -m client watch          # poll and print the active import
    python -m client recent         # list the five newest projects
    python -m client logout         # drop the cached session
"""

import asyncio
from typing import Optional

import httpx
import typer

from client.poller import ImportStatusPoller
from client.progress import recent_project_lines
from client.session import SessionContext, sign_in
from core.config import configs

app = typer.Typer(
    name="repo-importer-client",
    help="Sign in and follow repository imports",
    add_completion=False,
    no_args_is_help=True,
)


def load_session() -> SessionContext:
    session = SessionContext.restore(configs.SESSION_CACHE_PATH)
    if not session.is_authenticated:
        typer.echo(f"No cached session at {configs.SESSION_CACHE_PATH}, run 'login' first", err=True)
        raise typer.Exit(1)
    return session


def print_lines(lines) -> None:
    typer.echo("\n".join(lines))


@app.command("login")
def login(
    token: str = typer.Argument(..., help="Google ID token"),
    base_url: str = typer.Option(configs.API_BASE_URL, "--base-url", help="Server address"),
) -> None:
    """Sign in and cache the session."""

    async def _login():
        async with httpx.AsyncClient(base_url=base_url, timeout=10.0) as client:
            return await sign_in(SessionContext(cache_path=configs.SESSION_CACHE_PATH), client, token, configs.API)

    try:
        user = asyncio.run(_login())
    except httpx.HTTPStatusError as e:
        typer.echo(f"Sign-in rejected: {e.response.status_code}", err=True)
        raise typer.Exit(1)
    except httpx.RequestError as e:
        typer.echo(f"Cannot reach {base_url}: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(f"Signed in as {user.get('name') or user.get('email')}")


@app.command("watch")
def watch(
    interval: float = typer.Option(configs.POLL_INTERVAL, "--interval", "-i", help="Seconds between polls"),
    iterations: Optional[int] = typer.Option(None, "--iterations", "-n", help="Stop after this many polls"),
) -> None:
    """Poll the project list and print the active import."""
    session = load_session()

    async def _watch():
        async with ImportStatusPoller(
            session,
            base_url=configs.API_BASE_URL,
            api_prefix=configs.API,
            on_update=lambda progress: print_lines(progress.lines()),
        ) as poller:
            await poller.run(interval=interval, iterations=iterations)

    try:
        asyncio.run(_watch())
    except KeyboardInterrupt:
        pass
    if not session.is_authenticated:
        raise typer.Exit(1)


@app.command("recent")
def recent(
    limit: int = typer.Option(5, "--limit", "-l", help="How many projects to show"),
) -> None:
    """Show the newest projects with their status."""
    session = load_session()

    async def _recent():
        async with ImportStatusPoller(session, base_url=configs.API_BASE_URL, api_prefix=configs.API) as poller:
            return await poller.refresh(), poller.projects

    fetched, projects = asyncio.run(_recent())
    if not fetched:
        typer.echo("Could not fetch projects", err=True)
        raise typer.Exit(1)
    print_lines(recent_project_lines(projects, limit))


@app.command("logout")
def logout() -> None:
    """Forget the cached session."""
    SessionContext.restore(configs.SESSION_CACHE_PATH).invalidate()
    typer.echo("Signed out")


if __name__ == "__main__":
    app()
