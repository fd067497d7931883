"""
Notice Bus - the single transient banner of a screen.

A screen owns one NoticeBus. Showing a notice replaces whatever was there and
restarts the auto-dismiss timer, so there is never more than one pending timer
no matter how quickly notices arrive.

Usage:
    notices = NoticeBus(duration=3.0)
    notices.subscribe(render_banner)
    notices.show("Added to bookmarks", NoticeKind.SUCCESS)
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from loguru import logger


class NoticeKind(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    text: str
    kind: NoticeKind = NoticeKind.INFO


NoticeListener = Callable[[Optional[Notice]], None]


class NoticeBus:
    """Holds at most one live Notice and its auto-dismiss timer."""

    def __init__(self, duration: float = 3.0):
        self.duration = duration
        self._current: Notice | None = None
        self._timer: asyncio.TimerHandle | None = None
        self._listeners: list[NoticeListener] = []

    @property
    def current(self) -> Notice | None:
        return self._current

    @property
    def timer_pending(self) -> bool:
        return self._timer is not None

    def subscribe(self, listener: NoticeListener) -> Callable[[], None]:
        """Register a change listener. Returns an unsubscribe callable."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def show(self, text: str, kind: NoticeKind = NoticeKind.INFO) -> Notice:
        notice = Notice(text=text, kind=NoticeKind(kind))
        self._cancel_timer()
        self._current = notice
        logger.debug(f"Notice [{notice.kind.value}]: {text}")

        loop = _running_loop()
        if loop is not None and self.duration > 0:
            self._timer = loop.call_later(self.duration, self._expire)

        self._emit()
        return notice

    def clear(self) -> None:
        """Dismiss the current notice, if any."""
        self._cancel_timer()
        if self._current is not None:
            self._current = None
            self._emit()

    def _expire(self) -> None:
        self._timer = None
        self._current = None
        self._emit()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _emit(self) -> None:
        for listener in list(self._listeners):
            listener(self._current)


def _running_loop() -> asyncio.AbstractEventLoop | None:
    # Outside an event loop notices stay until cleared.
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None
