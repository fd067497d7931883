"""
LMS API endpoints consumed by the dashboard.

The platform splits its API across hosts (student profile/bookmarks, course
catalog, notifications); each gets its own ApiClient, all sharing one
CredentialStore.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx

from config import Settings
from learnerdash.core.api_client import ApiClient, ApiResult, Pagination, expect_success
from learnerdash.core.catalog import CourseDetail, CourseRecord, fill_defaults
from learnerdash.core.credentials import CredentialStore
from learnerdash.core.errors import ValidationOrBusinessFailure
from learnerdash.core.models import CourseSummary, Notification, Profile


@dataclass
class NotificationPage:
    items: list[Notification] = field(default_factory=list)
    pagination: Pagination | None = None

    @property
    def total(self) -> int:
        """Server-reported unread total; may exceed len(items)."""
        if self.pagination is None:
            return len(self.items)
        return self.pagination.total


def _as_list(data: Any) -> list[dict[str, Any]]:
    return [item for item in (data or []) if isinstance(item, dict)]


class LmsApi:
    """One method per consumed endpoint."""

    def __init__(
        self,
        settings: Settings,
        credentials: CredentialStore,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        timeout = settings.request_timeout_seconds
        self.profile = ApiClient(settings.profile_base_url, credentials, timeout, transport)
        self.catalog = ApiClient(settings.catalog_base_url, credentials, timeout, transport)
        self.notifications = ApiClient(
            settings.notifications_base_url, credentials, timeout, transport
        )

    async def __aenter__(self) -> LmsApi:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        for client in (self.profile, self.catalog, self.notifications):
            await client.close()

    # =========================================================================
    # Catalog (anonymous-tolerant)
    # =========================================================================

    async def list_courses(self) -> list[CourseSummary]:
        result = await self.catalog.request(
            "GET", "/courses", authenticated=False, fallback_message="Error fetching courses"
        )
        expect_success(result, "Failed to fetch courses")
        return [CourseSummary.from_dict(c) for c in _as_list(result.data)]

    async def get_course(self, course_id: str) -> CourseDetail:
        result = await self.catalog.request(
            "GET",
            f"/courses/{course_id}",
            authenticated=False,
            fallback_message="Error fetching course details",
        )
        expect_success(result, "Failed to fetch course details")
        if not isinstance(result.data, dict):
            raise ValidationOrBusinessFailure("Course not found", result.status)
        return fill_defaults(CourseRecord.from_dict(result.data))

    # =========================================================================
    # Student profile and bookmarks
    # =========================================================================

    async def get_profile(self) -> Profile:
        result = await self.profile.request(
            "GET",
            "/profile",
            fallback_message="Unable to retrieve profile data. Please try again later.",
        )
        expect_success(result, "Unable to retrieve profile data. Please try again later.")
        return Profile.from_dict(result.data)

    async def get_bookmarked_courses(self) -> list[CourseSummary]:
        result = await self.profile.request(
            "GET", "/courses/bookmarked", fallback_message="Failed to load bookmarks"
        )
        expect_success(result, "Failed to fetch bookmarks")
        return [CourseSummary.from_dict(c) for c in _as_list(result.data)]

    async def add_bookmark(self, course_id: str) -> ApiResult:
        return await self.profile.request(
            "POST", f"/courses/{course_id}/bookmark", fallback_message="Bookmark operation failed"
        )

    async def remove_bookmark(self, course_id: str) -> ApiResult:
        return await self.profile.request(
            "DELETE",
            f"/courses/{course_id}/bookmark",
            fallback_message="Bookmark operation failed",
        )

    # =========================================================================
    # Notifications
    # =========================================================================

    async def list_notifications(self, page: int = 1, limit: int = 10) -> NotificationPage:
        result = await self.notifications.request(
            "GET",
            "/notifications",
            params={"page": page, "limit": limit, "isRead": "false"},
            fallback_message="Failed to fetch notifications",
        )
        expect_success(result, "Failed to fetch notifications")
        return NotificationPage(
            items=[Notification.from_dict(n) for n in _as_list(result.data)],
            pagination=result.pagination,
        )

    async def mark_notification_read(self, notification_id: str) -> ApiResult:
        return await self.notifications.request(
            "PATCH",
            f"/notifications/{notification_id}/read",
            fallback_message="Failed to mark notification as read",
        )

    async def mark_all_notifications_read(self) -> ApiResult:
        return await self.notifications.request(
            "PUT",
            "/notifications/read-all",
            fallback_message="Failed to mark notifications as read",
        )
