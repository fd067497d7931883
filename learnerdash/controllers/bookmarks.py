"""
Bookmarked courses.

Membership is owned by the server. The local mirror is replaced by a full
re-fetch after every successful toggle; while toggles are still in flight
their intent is layered over the mirror, so the icon always shows the last
click even if an earlier toggle's re-fetch lands in between.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass

from loguru import logger

from learnerdash.controllers.base import ListController, LoadState
from learnerdash.core.api_client import ApiResult
from learnerdash.core.errors import ApiFailure, LocalPreconditionFailure
from learnerdash.core.lms_api import LmsApi
from learnerdash.core.models import CourseSummary
from learnerdash.core.mutator import KeyedSerializer, OptimisticMutator
from learnerdash.core.notices import NoticeKind
from learnerdash.core.session_guard import SessionGuard

PREVIEW_COUNT = 3


@dataclass(frozen=True)
class BookmarkAction:
    course_id: str
    add: bool


def apply_bookmark(membership: frozenset[str], action: BookmarkAction) -> frozenset[str]:
    if action.add:
        return membership | {action.course_id}
    return membership - {action.course_id}


class BookmarksController(ListController[list[CourseSummary]]):
    name = "bookmarks"

    def __init__(
        self,
        guard: SessionGuard,
        api: LmsApi,
        serializer: KeyedSerializer | None = None,
    ):
        super().__init__(guard)
        self.api = api
        self.courses: list[CourseSummary] = []
        self.show_all = False
        self._intents: dict[str, bool] = {}
        self._in_flight: Counter[str] = Counter()
        self._mutator: OptimisticMutator[frozenset[str], BookmarkAction] = OptimisticMutator(
            apply=apply_bookmark,
            send=self._send,
            key=lambda action: f"course:{action.course_id}",
            serializer=serializer,
            failure_message="Bookmark operation failed",
        )

    async def _fetch(self) -> list[CourseSummary]:
        return await self.api.get_bookmarked_courses()

    def _apply(self, data: list[CourseSummary]) -> None:
        self.courses = data

    async def _send(self, action: BookmarkAction) -> ApiResult:
        if action.add:
            return await self.api.add_bookmark(action.course_id)
        return await self.api.remove_bookmark(action.course_id)

    # =========================================================================
    # Projections
    # =========================================================================

    @property
    def server_membership(self) -> frozenset[str]:
        return frozenset(course.id for course in self.courses)

    @property
    def membership(self) -> frozenset[str]:
        """Server mirror with pending toggles applied."""
        ids = set(self.server_membership)
        for course_id, add in self._intents.items():
            if add:
                ids.add(course_id)
            else:
                ids.discard(course_id)
        return frozenset(ids)

    def is_bookmarked(self, course_id: str) -> bool:
        return course_id in self.membership

    def is_pending(self, course_id: str) -> bool:
        return self._in_flight[course_id] > 0

    @property
    def visible(self) -> list[CourseSummary]:
        if self.show_all:
            return list(self.courses)
        return self.courses[:PREVIEW_COUNT]

    @property
    def can_view_all(self) -> bool:
        return len(self.courses) > PREVIEW_COUNT and not self.show_all

    def view_all(self) -> None:
        self.show_all = True

    # =========================================================================
    # Mutation
    # =========================================================================

    async def toggle(self, course_id: str) -> bool:
        """
        Flip bookmark membership for a course.

        The HTTP verb is chosen from the membership visible right now,
        including toggles that have not settled yet.

        Returns:
            True when the server accepted the change.
        """
        if self._closed:
            return False
        if not self.guard.credentials.present:
            self.guard.handle(LocalPreconditionFailure("Please login to manage bookmarks"))
            return False

        current = self.membership
        action = BookmarkAction(course_id=course_id, add=course_id not in current)
        mutation = self._mutator.mutate(current, action)

        self._intents[course_id] = action.add
        self._in_flight[course_id] += 1
        logger.debug(f"Bookmark {'add' if action.add else 'remove'} queued for {course_id}")

        try:
            await mutation.commit(reconcile=lambda: self._reconcile(action))
        except ApiFailure as failure:
            self._settle(course_id)
            if not self._closed:
                self.guard.handle(failure)
            return False

        self._settle(course_id)
        return True

    async def _reconcile(self, action: BookmarkAction) -> None:
        if self._closed:
            return
        self.guard.notices.show(
            "Added to bookmarks" if action.add else "Removed from bookmarks",
            NoticeKind.SUCCESS,
        )
        # Re-fetch only after the write settled; still inside the course's lock.
        await self.load()
        if self.state is LoadState.FAILED:
            logger.warning(f"Bookmark re-fetch failed after {action}")

    def _settle(self, course_id: str) -> None:
        self._in_flight[course_id] -= 1
        if self._in_flight[course_id] <= 0:
            del self._in_flight[course_id]
            self._intents.pop(course_id, None)
