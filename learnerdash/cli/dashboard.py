"""
Learner Dashboard CLI

Terminal front end for the LMS learner dashboard: profile greeting,
bookmarked courses, notifications, interests and course detail.

Usage:
    learnerdash login --token <jwt>       # Store the bearer token
    learnerdash profile                   # Greeting header
    learnerdash bookmarks list --all      # Every bookmarked course
    learnerdash bookmarks toggle <id>     # Add/remove a bookmark
    learnerdash notifications list        # Unread notifications
    learnerdash notifications read <id>   # Mark one read
    learnerdash interests add "Data Science"
    learnerdash course <id> --module <m>  # Course detail, one module expanded
"""

from __future__ import annotations

import asyncio
import sys
from typing import Annotated, Awaitable, Callable, Optional

import httpx
import typer
from loguru import logger
from rich.console import Console, RenderableType
from rich.prompt import Confirm

from config import get_settings
from learnerdash.cli.render import (
    bookmarks_table,
    course_view,
    failure_panel,
    interests_view,
    notice_banner,
    notifications_table,
    profile_header,
)
from learnerdash.controllers.base import ListController, LoadState
from learnerdash.controllers.interests import InterestsController
from learnerdash.controllers.screen import DashboardContext, Screen
from learnerdash.core.credentials import CredentialStore
from learnerdash.core.notices import Notice
from learnerdash.storage.local_store import LocalStore

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="learnerdash",
    help="Learner dashboard for the LMS platform",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

bookmarks_app = typer.Typer(name="bookmarks", help="Bookmarked courses", no_args_is_help=True)
notifications_app = typer.Typer(
    name="notifications", help="Unread notifications", no_args_is_help=True
)
interests_app = typer.Typer(name="interests", help="Interest categories", no_args_is_help=True)

app.add_typer(bookmarks_app)
app.add_typer(notifications_app)
app.add_typer(interests_app)

console = Console()

# Test hook: an httpx transport injected in place of the network.
_transport: httpx.AsyncBaseTransport | None = None


class ConsoleNavigator:
    """Navigation for a terminal: announce the route instead of switching pages."""

    def __init__(self) -> None:
        self.history: list[str] = []

    def navigate(self, route: str) -> None:
        self.history.append(route)
        logger.info(f"Navigating to {route}")
        if route == get_settings().login_route:
            console.print("[yellow]→ Please log in again: learnerdash login --token <token>[/]")
        else:
            console.print(f"[yellow]→ {route}[/]")


ScreenBody = Callable[[Screen], Awaitable[Optional[RenderableType]]]


def _run_screen(flow: Callable[[DashboardContext], Screen], body: ScreenBody) -> None:
    """Mount a screen, run its body, print the result and the notice banner."""
    settings = get_settings()

    async def run() -> bool:
        context = DashboardContext.build(settings, ConsoleNavigator(), _transport)
        screen = flow(context)
        shown: list[Notice] = []

        def remember(notice: Optional[Notice]) -> None:
            if notice is not None:
                shown.append(notice)

        screen.notices.subscribe(remember)
        try:
            renderable = await body(screen)
            if renderable is not None:
                console.print(renderable)
            # Latest notice, even if its timer already dismissed it.
            if shown:
                console.print(notice_banner(shown[-1], settings.theme))
            await screen.settle()
            return renderable is not None and not screen.failed
        finally:
            screen.close()
            await context.close()

    if not asyncio.run(run()):
        raise typer.Exit(1)


async def _load_or_fail(controller: ListController, theme: str) -> Optional[RenderableType]:
    """Fetch on mount; on failure offer a retry when attached to a terminal."""
    await controller.load()
    while controller.state is LoadState.FAILED:
        if not (controller.can_retry and console.is_interactive):
            return failure_panel(controller.error or "Request failed", controller.can_retry, theme)
        console.print(f"[red]{controller.error}[/]")
        if not Confirm.ask("Retry?", default=True):
            return failure_panel(controller.error or "Request failed", False, theme)
        await controller.retry()
    return None


# =============================================================================
# Session Commands
# =============================================================================


@app.command()
def login(
    token: Annotated[
        str, typer.Option("--token", "-t", prompt=True, hide_input=True, help="Bearer token")
    ],
) -> None:
    """Store the bearer token issued by the LMS login page."""
    settings = get_settings()
    CredentialStore(LocalStore(settings.storage_path)).set(token.strip())
    console.print("[green]✓ Logged in[/]")


@app.command()
def logout() -> None:
    """Forget the stored bearer token."""
    settings = get_settings()
    CredentialStore(LocalStore(settings.storage_path)).clear()
    console.print("[green]✓ Logged out[/]")


@app.command()
def profile(
    page: Annotated[str, typer.Option("--page", "-p", help="Page name for the greeting")] = "dashboard",
) -> None:
    """Show the dashboard header for the logged-in learner."""
    theme = get_settings().theme

    async def body(screen: Screen) -> Optional[RenderableType]:
        controller = screen.profile()
        failed = await _load_or_fail(controller, theme)
        return failed if failed is not None else profile_header(controller, page)

    _run_screen(Screen.profile_flow, body)


@app.command()
def course(
    course_id: Annotated[str, typer.Argument(help="Course ID")],
    module: Annotated[
        Optional[str], typer.Option("--module", "-m", help="Module ID to expand")
    ] = None,
) -> None:
    """Show course details and its curriculum."""
    theme = get_settings().theme

    async def body(screen: Screen) -> Optional[RenderableType]:
        controller = screen.course(course_id)
        failed = await _load_or_fail(controller, theme)
        if failed is not None:
            return failed
        if module:
            controller.toggle_module(module)
        return course_view(controller, theme)

    _run_screen(Screen.course_flow, body)


# =============================================================================
# Bookmarks
# =============================================================================


@bookmarks_app.command("list")
def bookmarks_list(
    show_all: Annotated[bool, typer.Option("--all", "-a", help="Show every bookmark")] = False,
) -> None:
    """List bookmarked courses (first three unless --all)."""
    theme = get_settings().theme

    async def body(screen: Screen) -> Optional[RenderableType]:
        controller = screen.bookmarks()
        failed = await _load_or_fail(controller, theme)
        if failed is not None:
            return failed
        if show_all:
            controller.view_all()
        return bookmarks_table(controller, theme)

    _run_screen(Screen.course_flow, body)


@bookmarks_app.command("toggle")
def bookmarks_toggle(
    course_ids: Annotated[list[str], typer.Argument(help="Course ID(s); repeat to toggle again")],
) -> None:
    """Add a course to bookmarks, or remove it if already bookmarked."""
    theme = get_settings().theme

    async def body(screen: Screen) -> Optional[RenderableType]:
        controller = screen.bookmarks()
        failed = await _load_or_fail(controller, theme)
        if failed is not None:
            return failed
        # Each click is issued before the previous one settles.
        results = await asyncio.gather(*(controller.toggle(cid) for cid in course_ids))
        if not all(results):
            return None
        return bookmarks_table(controller, theme)

    _run_screen(Screen.course_flow, body)


# =============================================================================
# Notifications
# =============================================================================


@notifications_app.command("list")
def notifications_list() -> None:
    """Show unread notifications and the unread badge."""
    theme = get_settings().theme

    async def body(screen: Screen) -> Optional[RenderableType]:
        controller = screen.notifications()
        failed = await _load_or_fail(controller, theme)
        return failed if failed is not None else notifications_table(controller, theme)

    _run_screen(Screen.profile_flow, body)


@notifications_app.command("read")
def notifications_read(
    notification_id: Annotated[str, typer.Argument(help="Notification ID")],
) -> None:
    """Mark one notification as read."""
    theme = get_settings().theme

    async def body(screen: Screen) -> Optional[RenderableType]:
        controller = screen.notifications()
        failed = await _load_or_fail(controller, theme)
        if failed is not None:
            return failed
        if not await controller.mark_read(notification_id):
            if screen.notices.current is None:
                console.print(f"[yellow]No unread notification {notification_id}[/]")
            return None
        return notifications_table(controller, theme)

    _run_screen(Screen.profile_flow, body)


@notifications_app.command("read-all")
def notifications_read_all() -> None:
    """Mark every notification as read."""
    theme = get_settings().theme

    async def body(screen: Screen) -> Optional[RenderableType]:
        controller = screen.notifications()
        failed = await _load_or_fail(controller, theme)
        if failed is not None:
            return failed
        if not await controller.mark_all_read():
            return None
        return notifications_table(controller, theme)

    _run_screen(Screen.profile_flow, body)


# =============================================================================
# Interests
# =============================================================================


def _interests_command(
    search: str = "",
    show_all: bool = False,
    change: Optional[Callable[[InterestsController], bool]] = None,
    message: str = "",
) -> None:
    theme = get_settings().theme

    async def body(screen: Screen) -> Optional[RenderableType]:
        controller = screen.interests()
        if change is not None:
            if change(controller):
                console.print(f"[green]✓ {message}[/]")
            else:
                console.print("[yellow]Interests unchanged[/]")
        failed = await _load_or_fail(controller, theme)
        if failed is not None:
            return failed
        controller.search = search
        if show_all:
            controller.toggle_view()
        return interests_view(controller, theme)

    _run_screen(Screen.profile_flow, body)


@interests_app.command("list")
def interests_list(
    search: Annotated[str, typer.Option("--search", "-s", help="Filter categories")] = "",
    show_all: Annotated[bool, typer.Option("--all", "-a", help="Show every category")] = False,
) -> None:
    """Show saved interests, available categories and associated courses."""
    _interests_command(search, show_all)


@interests_app.command("add")
def interests_add(category: Annotated[str, typer.Argument(help="Category name")]) -> None:
    """Save an interest category locally."""
    _interests_command(change=lambda c: c.add(category), message=f"Added interest: {category}")


@interests_app.command("remove")
def interests_remove(category: Annotated[str, typer.Argument(help="Category name")]) -> None:
    """Remove a saved interest category."""
    _interests_command(change=lambda c: c.remove(category), message=f"Removed interest: {category}")


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """CLI entry point."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=get_settings().log_level.upper(),
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )

    app()


if __name__ == "__main__":
    main()
