"""
Screen wiring.

A DashboardContext holds the process-wide collaborators (settings, storage,
credential, API). A Screen is one mounted view: it owns a NoticeBus, a
SessionGuard and the controllers bound to them, and tears them all down
together on close().
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeVar

import httpx

from config import Settings
from learnerdash.controllers.base import ListController, LoadState
from learnerdash.controllers.bookmarks import BookmarksController
from learnerdash.controllers.course_detail import CourseDetailController
from learnerdash.controllers.interests import InterestsController
from learnerdash.controllers.notifications import NotificationsController
from learnerdash.controllers.profile import ProfileController
from learnerdash.core.credentials import CredentialStore
from learnerdash.core.lms_api import LmsApi
from learnerdash.core.mutator import KeyedSerializer
from learnerdash.core.notices import NoticeBus
from learnerdash.core.session_guard import Navigator, SessionGuard
from learnerdash.storage.local_store import LocalStore

C = TypeVar("C", bound=ListController)


@dataclass
class DashboardContext:
    """Process-wide collaborators shared by every screen."""

    settings: Settings
    store: LocalStore
    credentials: CredentialStore
    api: LmsApi
    navigator: Navigator

    @classmethod
    def build(
        cls,
        settings: Settings,
        navigator: Navigator,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> DashboardContext:
        store = LocalStore(settings.storage_path)
        credentials = CredentialStore(store)
        return cls(
            settings=settings,
            store=store,
            credentials=credentials,
            api=LmsApi(settings, credentials, transport),
            navigator=navigator,
        )

    async def close(self) -> None:
        await self.api.close()


class Screen:
    """One mounted view with its own notice banner and session guard."""

    def __init__(self, context: DashboardContext, notice_duration: float):
        self.context = context
        self.notices = NoticeBus(duration=notice_duration)
        self.guard = SessionGuard(
            credentials=context.credentials,
            notices=self.notices,
            navigator=context.navigator,
            login_route=context.settings.login_route,
            redirect_delay=context.settings.redirect_delay_seconds,
        )
        self.serializer = KeyedSerializer()
        self._controllers: list[ListController] = []

    @classmethod
    def profile_flow(cls, context: DashboardContext) -> Screen:
        return cls(context, context.settings.profile_notice_seconds)

    @classmethod
    def course_flow(cls, context: DashboardContext) -> Screen:
        return cls(context, context.settings.course_notice_seconds)

    def _mount(self, controller: C) -> C:
        self._controllers.append(controller)
        return controller

    def profile(self) -> ProfileController:
        return self._mount(ProfileController(self.guard, self.context.api))

    def bookmarks(self) -> BookmarksController:
        return self._mount(BookmarksController(self.guard, self.context.api, self.serializer))

    def notifications(self) -> NotificationsController:
        return self._mount(
            NotificationsController(
                self.guard,
                self.context.api,
                page_size=self.context.settings.notifications_page_size,
                serializer=self.serializer,
            )
        )

    def interests(self) -> InterestsController:
        return self._mount(InterestsController(self.guard, self.context.api, self.context.store))

    def course(self, course_id: str) -> CourseDetailController:
        return self._mount(CourseDetailController(self.guard, self.context.api, course_id))

    @property
    def failed(self) -> bool:
        """True if any mounted controller ended in the failed state."""
        return any(c.state is LoadState.FAILED for c in self._controllers)

    async def settle(self) -> None:
        """Let a scheduled login redirect fire before the screen goes away."""
        await self.guard.wait_for_redirect()

    def close(self) -> None:
        for controller in self._controllers:
            controller.close()
        self.guard.close()
        self.notices.clear()
