"""Course detail and its curriculum accordion."""

from __future__ import annotations

from typing import Optional

from learnerdash.controllers.base import ListController
from learnerdash.core.catalog import CourseDetail, CourseModule
from learnerdash.core.lms_api import LmsApi
from learnerdash.core.session_guard import SessionGuard


class CourseDetailController(ListController[CourseDetail]):
    """Modules start collapsed; expanding one collapses the other."""

    name = "course"

    def __init__(self, guard: SessionGuard, api: LmsApi, course_id: str):
        super().__init__(guard)
        self.api = api
        self.course_id = course_id
        self.course: Optional[CourseDetail] = None
        self.expanded_module: Optional[str] = None

    async def _fetch(self) -> CourseDetail:
        return await self.api.get_course(self.course_id)

    def _apply(self, data: CourseDetail) -> None:
        self.course = data
        self.expanded_module = None

    @property
    def modules(self) -> list[CourseModule]:
        return self.course.modules if self.course else []

    def toggle_module(self, module_id: str) -> None:
        self.expanded_module = None if self.expanded_module == module_id else module_id

    def is_expanded(self, module_id: str) -> bool:
        return self.expanded_module == module_id

    @property
    def curriculum_summary(self) -> str:
        if self.course is None:
            return ""
        return (
            f"{len(self.course.modules)} sections • "
            f"{self.course.lesson_count} lessons • {self.course.duration}"
        )
