"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests,
including an in-memory LMS backend served through httpx.MockTransport.
"""
import asyncio
import sys
from pathlib import Path
from typing import Any

import httpx
import pytest
import pytest_asyncio

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import Settings  # noqa: E402
from learnerdash.controllers.screen import DashboardContext, Screen  # noqa: E402

API_ROOT = "https://lms.test/api/v1"
STUDENTS_ROOT = f"{API_ROOT}/students"
VALID_TOKEN = "test-token"


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


def make_course(course_id: str, title: str, category: str, price: float = 499, **extra: Any) -> dict:
    return {
        "_id": course_id,
        "title": title,
        "description": f"{title} from the ground up",
        "category": category,
        "price": price,
        "instructor": {"firstName": "Asha", "lastName": "Rao"},
        **extra,
    }


class FakeLms:
    """
    In-memory LMS backend.

    Serves the student, catalog and notification endpoints under API_ROOT and
    records every request it receives. Authenticated endpoints answer 401
    unless the bearer token equals `token`.
    """

    def __init__(self) -> None:
        self.token = VALID_TOKEN
        self.profile: dict[str, Any] = {"firstName": "Priya", "lastName": "Sharma"}
        self.courses: dict[str, dict] = {
            c["_id"]: c
            for c in [
                make_course("c1", "Python Basics", "Programming"),
                make_course("c2", "Data Science 101", "Data Science", price=799, discountPrice=999),
                make_course("c3", "UX Foundations", "Design", price=0),
                make_course("c4", "Cloud Ops", "DevOps"),
                make_course("c5", "Marketing Analytics", "Marketing"),
            ]
        }
        self.bookmarked: list[str] = ["c1", "c2"]
        self.notifications: list[dict] = [
            {"_id": "n1", "title": "Welcome", "message": "Thanks for joining", "isRead": False},
            {"_id": "n2", "title": "New lesson", "message": "Lesson 4 is live", "isRead": False},
        ]
        # Server-side unread total; None means "count the unread list".
        self.unread_total: int | None = None
        self.requests: list[httpx.Request] = []
        self._failures: dict[tuple[str, str], tuple[int, Any]] = {}

    # -------------------------------------------------------------------------
    # Test controls
    # -------------------------------------------------------------------------

    def fail(self, method: str, path: str, status: int, body: Any = None) -> None:
        """Answer `method path` (relative to API_ROOT) with an error status."""
        self._failures[(method, path)] = (status, body or {"success": False, "message": f"HTTP {status}"})

    def recover(self) -> None:
        self._failures.clear()

    def calls(self, method: str, path: str) -> int:
        return sum(
            1 for r in self.requests if r.method == method and r.url.path == f"/api/v1{path}"
        )

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    # -------------------------------------------------------------------------
    # Routing
    # -------------------------------------------------------------------------

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        # Yield once so concurrent requests interleave like real network calls.
        await asyncio.sleep(0)

        path = request.url.path.removeprefix("/api/v1")
        method = request.method

        if (method, path) in self._failures:
            status, body = self._failures[(method, path)]
            return httpx.Response(status, json=body)

        if path.startswith("/courses") and method == "GET":
            return self._catalog(path)

        if request.headers.get("Authorization") != f"Bearer {self.token}":
            return httpx.Response(401, json={"success": False, "message": "Invalid token"})

        if path.startswith("/students"):
            return self._students(method, path.removeprefix("/students"))
        if path.startswith("/notifications"):
            return self._notifications(method, path, request)
        return httpx.Response(404, json={"success": False, "message": "Not found"})

    def _catalog(self, path: str) -> httpx.Response:
        if path == "/courses":
            return _ok(list(self.courses.values()))
        course = self.courses.get(path.removeprefix("/courses/"))
        if course is None:
            return httpx.Response(404, json={"success": False, "message": "Course not found"})
        return _ok(course)

    def _students(self, method: str, path: str) -> httpx.Response:
        if path == "/profile":
            return _ok(self.profile)
        if path == "/courses/bookmarked":
            return _ok([self.courses[c] for c in self.bookmarked])

        course_id = path.removeprefix("/courses/").removesuffix("/bookmark")
        if method == "POST":
            if course_id not in self.bookmarked:
                self.bookmarked.append(course_id)
            return _ok(None, "Course bookmarked")
        if method == "DELETE":
            if course_id in self.bookmarked:
                self.bookmarked.remove(course_id)
            return _ok(None, "Bookmark removed")
        return httpx.Response(405)

    def _notifications(self, method: str, path: str, request: httpx.Request) -> httpx.Response:
        unread = [n for n in self.notifications if not n["isRead"]]
        if method == "GET":
            limit = int(request.url.params.get("limit", 10))
            total = self.unread_total if self.unread_total is not None else len(unread)
            body = {
                "success": True,
                "data": unread[:limit],
                "pagination": {"total": total, "page": 1, "limit": limit},
            }
            return httpx.Response(200, json=body)

        if path == "/notifications/read-all":
            for n in self.notifications:
                n["isRead"] = True
            self.unread_total = 0 if self.unread_total is not None else None
            return _ok(None, "All notifications marked as read")

        notification_id = path.removeprefix("/notifications/").removesuffix("/read")
        for n in self.notifications:
            if n["_id"] == notification_id:
                n["isRead"] = True
                if self.unread_total:
                    self.unread_total -= 1
                return _ok(n)
        return httpx.Response(404, json={"success": False, "message": "Notification not found"})


def _ok(data: Any, message: str = "") -> httpx.Response:
    return httpx.Response(200, json={"success": True, "data": data, "message": message})


class RecordingNavigator:
    """Navigator that remembers every route instead of switching pages."""

    def __init__(self) -> None:
        self.routes: list[str] = []

    def navigate(self, route: str) -> None:
        self.routes.append(route)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at the fake hosts and a temporary data dir."""
    return Settings(
        profile_base_url=STUDENTS_ROOT,
        catalog_base_url=API_ROOT,
        notifications_base_url=API_ROOT,
        data_dir=tmp_path / "data",
        redirect_delay_seconds=0.01,
    )


@pytest.fixture
def fake_lms():
    """Fresh in-memory LMS backend."""
    return FakeLms()


@pytest.fixture
def navigator():
    return RecordingNavigator()


@pytest_asyncio.fixture
async def context(settings, fake_lms, navigator):
    """Logged-in dashboard context wired to the fake backend."""
    context = DashboardContext.build(settings, navigator, fake_lms.transport)
    context.credentials.set(VALID_TOKEN)
    yield context
    await context.close()


@pytest_asyncio.fixture
async def screen(context):
    """A mounted course-flow screen (3s notices)."""
    screen = Screen.course_flow(context)
    yield screen
    screen.close()
