"""
Rich renderables for dashboard sections.

Rendering is read-only: every function takes a controller and returns
something Console.print() accepts.
"""

from __future__ import annotations

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.style import Style
from rich.table import Table
from rich.text import Text

from learnerdash.controllers.bookmarks import BookmarksController
from learnerdash.controllers.course_detail import CourseDetailController
from learnerdash.controllers.interests import InterestsController
from learnerdash.controllers.notifications import NotificationsController
from learnerdash.controllers.profile import ProfileController
from learnerdash.core.notices import Notice, NoticeKind

THEMES = {
    "light": {
        "primary": "#49BBBD",
        "accent": "#B8860B",
        "success": "#2E8B57",
        "error": "#CC3333",
        "dim": "#666666",
    },
    "dark": {
        "primary": "#59C1C3",
        "accent": "#FFD700",
        "success": "#00FF88",
        "error": "#FF4444",
        "dim": "#999999",
    },
}


def palette(theme: str) -> dict[str, str]:
    return THEMES.get(theme, THEMES["light"])


def notice_banner(notice: Notice, theme: str = "light") -> Panel:
    colors = palette(theme)
    color = {
        NoticeKind.ERROR: colors["error"],
        NoticeKind.SUCCESS: colors["success"],
    }.get(notice.kind, colors["primary"])
    return Panel(
        Text(notice.text),
        title=notice.kind.value.upper(),
        subtitle="✕ dismiss",
        border_style=Style(color=color),
    )


def failure_panel(message: str, can_retry: bool, theme: str = "light") -> Panel:
    body = Text(message)
    if can_retry:
        body.append("\n\nRun the command again to retry.", style="dim")
    return Panel(body, border_style=Style(color=palette(theme)["error"]))


def _price(amount: float) -> str:
    return f"₹{int(amount) if float(amount).is_integer() else amount}"


def profile_header(controller: ProfileController, page: str = "dashboard") -> Panel:
    name = controller.display_name or "..."
    return Panel(
        f"[bold]{name}[/bold]  [dim]({controller.initials})[/dim]\n{controller.greeting(page)}",
        title="Learner Dashboard",
        border_style="cyan",
    )


def bookmarks_table(controller: BookmarksController, theme: str = "light") -> RenderableType:
    colors = palette(theme)
    if not controller.courses:
        return Text("You haven't bookmarked any courses yet.", style=colors["dim"])

    table = Table(title="My Bookmarked Courses")
    table.add_column("", width=2)
    table.add_column("ID", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Price", justify="right")
    table.add_column("Instructor")

    for course in controller.visible:
        mark = "★" if controller.is_bookmarked(course.id) else "☆"
        if course.discount_price:
            price = f"{_price(course.discount_price)} [strike dim]{_price(course.price)}[/]"
        else:
            price = _price(course.price)
        table.add_row(mark, course.id, course.title, price, course.instructor_name)

    if controller.can_view_all:
        hint = Text(
            f"Showing {len(controller.visible)} of {len(controller.courses)}. "
            "Use --all to view all bookmarked courses.",
            style=colors["dim"],
        )
        return Group(table, hint)
    return table


def notifications_table(controller: NotificationsController, theme: str = "light") -> RenderableType:
    colors = palette(theme)
    badge = controller.badge or "0"
    title = f"Notifications [{colors['accent']}]({badge} unread)[/]"
    if not controller.items:
        return Panel(Text("You're all caught up.", style=colors["dim"]), title=title)

    table = Table(title=title)
    table.add_column("ID", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Message")
    table.add_column("Received", style="dim")
    for item in controller.items:
        table.add_row(item.id, item.title, item.message, item.created_at or "")
    return table


def interests_view(controller: InterestsController, theme: str = "light") -> RenderableType:
    colors = palette(theme)
    parts: list[RenderableType] = []

    mine = ", ".join(controller.interests) if controller.interests else "No Interests"
    parts.append(Panel(mine, title="My Interests", border_style=colors["primary"]))

    if controller.no_matches:
        parts.append(Text("No matching categories found", style=colors["dim"]))
    elif controller.visible_categories:
        shown = controller.visible_categories
        line = Text("Categories: ", style="bold")
        line.append(", ".join(shown))
        remaining = len(controller.categories) - len(shown)
        if remaining > 0:
            line.append(f"  (+{remaining} more, use --all)", style=colors["dim"])
        parts.append(line)

    associated = controller.associated_courses
    if associated:
        table = Table(title="Associated Courses")
        table.add_column("Title", style="bold")
        table.add_column("Category")
        table.add_column("Price", justify="right")
        table.add_column("Instructor")
        for course in associated:
            table.add_row(
                course.title,
                course.category or "No category",
                _price(course.effective_price),
                course.instructor_name,
            )
        parts.append(table)

    return Group(*parts)


def course_view(controller: CourseDetailController, theme: str = "light") -> RenderableType:
    colors = palette(theme)
    course = controller.course
    if course is None:
        return Text("Course not found", style=colors["error"])

    price = course.price
    if course.original_price:
        price += f" [strike dim]{course.original_price}[/]"
    if course.discount_percent and course.discount_percent > 0:
        price += f" [{colors['accent']}]{course.discount_percent}% OFF[/]"

    header = Panel(
        f"[bold]{course.title}[/bold]\n{course.description}\n\n"
        f"{course.students:,} students • {course.duration} • {course.level}\n"
        f"Instructor: {course.instructor}\n"
        f"Price: {price}",
        title=course.category,
        subtitle=f"Updated {course.last_updated}",
        border_style=colors["primary"],
    )

    details = Table(show_header=False, box=None)
    details.add_column(style="dim")
    details.add_column()
    details.add_row("Language", course.language)
    details.add_row("Subtitles", ", ".join(course.subtitles))
    details.add_row("Certificate", "✓ Included" if course.certificate else "Not included")
    for feature in course.features:
        details.add_row("•", feature)

    curriculum = Table(title=f"Curriculum  [dim]{controller.curriculum_summary}[/dim]")
    curriculum.add_column("#", justify="right")
    curriculum.add_column("Module")
    curriculum.add_column("Previews", justify="right")
    for index, module in enumerate(controller.modules, start=1):
        expanded = controller.is_expanded(module.id)
        previews = module.preview_count
        curriculum.add_row(
            str(index),
            f"{'▾' if expanded else '▸'} {module.title} [dim]({module.id})[/dim]",
            f"{previews} preview{'s' if previews != 1 else ''}",
        )
        if expanded:
            for lesson in module.lessons:
                tag = " [green]FREE[/green]" if lesson.preview else ""
                curriculum.add_row("", f"    {lesson.title}{tag}", lesson.duration or "")

    return Group(header, details, curriculum)
