"""
Unread notifications.

The badge shows the server's unread total (pagination.total), which is not
the length of the fetched page: a page of 10 can sit under a badge of 42.
Marking one notification read trusts the optimistic result (item removed,
badge decremented) instead of re-fetching.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from learnerdash.controllers.base import ListController
from learnerdash.core.api_client import ApiResult
from learnerdash.core.errors import ApiFailure
from learnerdash.core.lms_api import LmsApi, NotificationPage
from learnerdash.core.models import Notification
from learnerdash.core.mutator import KeyedSerializer, OptimisticMutator
from learnerdash.core.notices import NoticeKind
from learnerdash.core.session_guard import SessionGuard

MARK_ALL_KEY = "notification:*"


@dataclass(frozen=True)
class NotificationsView:
    items: tuple[Notification, ...] = field(default_factory=tuple)
    unread_count: int = 0


def apply_mark_read(view: NotificationsView, notification_id: str) -> NotificationsView:
    remaining = tuple(n for n in view.items if n.id != notification_id)
    if len(remaining) == len(view.items):
        return view
    return NotificationsView(items=remaining, unread_count=max(0, view.unread_count - 1))


def apply_mark_all_read(view: NotificationsView, _: str) -> NotificationsView:
    return NotificationsView()


class NotificationsController(ListController[NotificationPage]):
    name = "notifications"

    def __init__(
        self,
        guard: SessionGuard,
        api: LmsApi,
        page_size: int = 10,
        serializer: KeyedSerializer | None = None,
    ):
        super().__init__(guard)
        self.api = api
        self.page_size = page_size
        self.view = NotificationsView()
        serializer = serializer or KeyedSerializer()
        self._mark_one: OptimisticMutator[NotificationsView, str] = OptimisticMutator(
            apply=apply_mark_read,
            send=self.api.mark_notification_read,
            key=lambda notification_id: f"notification:{notification_id}",
            serializer=serializer,
            failure_message="Failed to mark notification as read",
        )
        self._mark_all: OptimisticMutator[NotificationsView, str] = OptimisticMutator(
            apply=apply_mark_all_read,
            send=self._send_mark_all,
            key=lambda _: MARK_ALL_KEY,
            serializer=serializer,
            failure_message="Failed to mark notifications as read",
        )

    async def _fetch(self) -> NotificationPage:
        return await self.api.list_notifications(page=1, limit=self.page_size)

    def _apply(self, data: NotificationPage) -> None:
        self.view = NotificationsView(items=tuple(data.items), unread_count=data.total)

    async def _send_mark_all(self, _: str) -> ApiResult:
        return await self.api.mark_all_notifications_read()

    @property
    def items(self) -> list[Notification]:
        return list(self.view.items)

    @property
    def unread_count(self) -> int:
        return self.view.unread_count

    @property
    def badge(self) -> str:
        return str(self.unread_count) if self.unread_count > 0 else ""

    async def mark_read(self, notification_id: str) -> bool:
        """
        Remove one notification locally, then confirm with the server.

        On failure the item is put back where it was and the count restored.
        """
        if self._closed:
            return False

        position = next(
            (i for i, n in enumerate(self.view.items) if n.id == notification_id), None
        )
        if position is None:
            logger.debug(f"Notification {notification_id} is not in the unread list")
            return False

        item = self.view.items[position]
        mutation = self._mark_one.mutate(self.view, notification_id)
        self.view = mutation.optimistic_state

        try:
            await mutation.commit()
        except ApiFailure as failure:
            if self._closed:
                return False
            self._restore(item, position)
            self.guard.handle(failure)
            return False
        return True

    def _restore(self, item: Notification, position: int) -> None:
        if any(n.id == item.id for n in self.view.items):
            return
        items = list(self.view.items)
        items.insert(min(position, len(items)), item)
        self.view = NotificationsView(items=tuple(items), unread_count=self.view.unread_count + 1)

    async def mark_all_read(self) -> bool:
        """Fire-and-forget: clear locally; a failure is reported, not reverted."""
        if self._closed:
            return False

        mutation = self._mark_all.mutate(self.view, MARK_ALL_KEY)
        self.view = mutation.optimistic_state

        try:
            await mutation.commit()
        except ApiFailure as failure:
            if not self._closed:
                self.guard.handle(failure)
            return False

        if not self._closed:
            self.guard.notices.show("All notifications marked as read", NoticeKind.SUCCESS)
        return True
