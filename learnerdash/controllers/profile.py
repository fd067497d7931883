"""Profile greeting shown in the dashboard header."""

from __future__ import annotations

from typing import Optional

from learnerdash.controllers.base import ListController
from learnerdash.core.lms_api import LmsApi
from learnerdash.core.models import Profile
from learnerdash.core.session_guard import SessionGuard


class ProfileController(ListController[Profile]):
    name = "profile"

    def __init__(self, guard: SessionGuard, api: LmsApi):
        super().__init__(guard)
        self.api = api
        self.profile: Optional[Profile] = None

    async def _fetch(self) -> Profile:
        return await self.api.get_profile()

    def _apply(self, data: Profile) -> None:
        self.profile = data

    @property
    def display_name(self) -> Optional[str]:
        return self.profile.display_name if self.profile else None

    @property
    def initials(self) -> str:
        return self.profile.initials if self.profile else "JP"

    def greeting(self, page: str = "dashboard") -> str:
        return f"Welcome back! Here's your {page.lower()} overview"
