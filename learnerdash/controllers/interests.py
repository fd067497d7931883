"""
Interest categories.

Interests are a local preference: a set of category strings kept in the
LocalStore under "myInterests" as a JSON array. They are read once when the
controller is built and written on every change, with no server round trip.
The catalog is fetched anonymously to offer categories and show the courses
associated with the chosen interests.
"""

from __future__ import annotations

import json

from loguru import logger

from learnerdash.controllers.base import ListController
from learnerdash.core.lms_api import LmsApi
from learnerdash.core.models import CourseSummary
from learnerdash.core.session_guard import SessionGuard
from learnerdash.storage.local_store import LocalStore

INTERESTS_KEY = "myInterests"
INITIAL_VISIBLE = 5


def load_interests(store: LocalStore) -> list[str]:
    raw = store.get(INTERESTS_KEY)
    if not raw:
        return []
    try:
        values = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning(f"Discarding unreadable {INTERESTS_KEY} value")
        return []
    if not isinstance(values, list):
        return []

    interests: list[str] = []
    for value in values:
        if isinstance(value, str) and value not in interests:
            interests.append(value)
    return interests


class InterestsController(ListController[list[CourseSummary]]):
    name = "interests"

    def __init__(self, guard: SessionGuard, api: LmsApi, store: LocalStore):
        super().__init__(guard)
        self.api = api
        self.store = store
        self.courses: list[CourseSummary] = []
        self.interests: list[str] = load_interests(store)
        self.search = ""
        self.visible_count = INITIAL_VISIBLE

    async def _fetch(self) -> list[CourseSummary]:
        return await self.api.list_courses()

    def _apply(self, data: list[CourseSummary]) -> None:
        self.courses = data

    def _persist(self) -> None:
        self.store.set(INTERESTS_KEY, json.dumps(self.interests))

    def add(self, category: str) -> bool:
        if category in self.interests:
            return False
        self.interests = [*self.interests, category]
        self._persist()
        return True

    def remove(self, category: str) -> bool:
        if category not in self.interests:
            return False
        self.interests = [item for item in self.interests if item != category]
        self._persist()
        return True

    @property
    def categories(self) -> list[str]:
        """Catalog categories matching the search, minus chosen ones, sorted."""
        needle = self.search.casefold()
        unique = {course.category for course in self.courses if course.category}
        return sorted(
            (c for c in unique if needle in c.casefold() and c not in self.interests),
            key=lambda c: (c.casefold(), c),
        )

    @property
    def visible_categories(self) -> list[str]:
        return self.categories[: self.visible_count]

    @property
    def no_matches(self) -> bool:
        return bool(self.search) and not self.categories

    def toggle_view(self) -> None:
        """Expand to every category, or collapse back to the first five."""
        total = len(self.categories)
        self.visible_count = total if self.visible_count < total else INITIAL_VISIBLE

    @property
    def associated_courses(self) -> list[CourseSummary]:
        chosen = set(self.interests)
        return [course for course in self.courses if course.category in chosen]
