from __future__ import annotations

import asyncio
from typing import List, NoReturn, Optional

import typer

from github_finder.config import Settings, get_settings
from github_finder.errors import GitHubFinderError
from github_finder.logging import configure_logging, get_logger
from github_finder.models import RelationshipType, UserProfile, UserSummary
from github_finder.service import open_directory

app = typer.Typer(add_completion=False)
LOGGER = get_logger(__name__)


def load_settings() -> Settings:
    try:
        settings = get_settings()
    except Exception as exc:  # noqa: BLE001
        configure_logging()
        typer.secho(f"Failed to load settings: {exc}", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1)
    configure_logging(settings.log_level)
    LOGGER.debug("Using GitHub API at %s", settings.api_base_url)
    return settings


def fail(error: GitHubFinderError) -> NoReturn:
    typer.secho(f"{error.code}: {error.message}", err=True, fg=typer.colors.RED)
    raise typer.Exit(code=1)


def echo_profile(profile: UserProfile) -> None:
    typer.secho(profile.name or "Not Found", bold=True)
    typer.echo(f"@{profile.login}")
    typer.echo(profile.bio or "No Description/Bio Available")
    typer.echo(f"Followers: {profile.followers}  Following: {profile.following}")
    typer.echo(f"Avatar: {profile.avatar_url}")


def echo_rows(rows: List[UserSummary]) -> None:
    for row in rows:
        typer.echo(f"{row.login}\t{row.avatar_url}")


@app.command()
def user(
    username: str = typer.Argument(..., help="GitHub username to look up."),
    refresh: bool = typer.Option(False, "--refresh/--no-refresh", help="Bypass the profile cache."),
) -> None:
    """Show a user's profile."""
    settings = load_settings()

    async def run() -> None:
        async with open_directory(settings) as directory:
            coordinator = directory.profile(username)
            await coordinator.load(force_refresh=refresh)
            if coordinator.profile is None:
                typer.secho(coordinator.visible_error or "User not found", err=True, fg=typer.colors.RED)
                raise typer.Exit(code=1)
            echo_profile(coordinator.profile)

    asyncio.run(run())


def list_relationship(
    username: str,
    relationship: RelationshipType,
    *,
    pages: int,
    settings: Settings,
) -> None:
    async def run() -> None:
        async with open_directory(settings) as directory:
            try:
                profile = await directory.client.fetch_user(username)
            except GitHubFinderError as exc:
                fail(exc)

            coordinator = directory.relationship_list(profile, relationship)
            coordinator.start()
            await coordinator.drain()
            while coordinator.state.current_page < pages and coordinator.load_more():
                await coordinator.drain()
            coordinator.close()

            state = coordinator.state
            typer.secho(
                f"{relationship.title} of {profile.login}: {len(state.rows)} user(s) across {state.current_page} page(s)",
                fg=typer.colors.GREEN,
            )
            echo_rows(state.rows)
            if state.last_error is not None:
                typer.secho(
                    f"Stopped early: {state.last_error.message}",
                    err=True,
                    fg=typer.colors.YELLOW,
                )

    asyncio.run(run())


@app.command()
def followers(
    username: str = typer.Argument(..., help="GitHub username whose followers to list."),
    pages: int = typer.Option(1, min=1, help="Number of pages to load."),
) -> None:
    """List the users following USERNAME."""
    settings = load_settings()
    list_relationship(username, RelationshipType.FOLLOWERS, pages=pages, settings=settings)


@app.command()
def following(
    username: str = typer.Argument(..., help="GitHub username whose followed users to list."),
    pages: int = typer.Option(1, min=1, help="Number of pages to load."),
) -> None:
    """List the users USERNAME follows."""
    settings = load_settings()
    list_relationship(username, RelationshipType.FOLLOWING, pages=pages, settings=settings)


@app.command()
def search(
    query: str = typer.Argument(..., help="Text matched against login, name and bio."),
) -> None:
    """Search users across GitHub."""
    settings = load_settings()

    async def run() -> Optional[List[UserSummary]]:
        async with open_directory(settings) as directory:
            try:
                return await directory.client.search_users(query)
            except GitHubFinderError as exc:
                fail(exc)

    results = asyncio.run(run()) or []
    if not results:
        typer.secho("No users matched.", fg=typer.colors.BLUE)
        return
    typer.secho(f"Found {len(results)} user(s):", fg=typer.colors.GREEN)
    echo_rows(results)


def main() -> None:
    app(prog_name="github-finder")


if __name__ == "__main__":
    main()
