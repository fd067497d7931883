"""
Session Guard

Boundary logic between the API client and a screen. Every failure caught by
a controller is handed to SessionGuard.handle():

  - AuthenticationFailure: clear the credential, show the session-expired
    notice, schedule one redirect to the login route.
  - anything else: show the failure message; the user retries manually.
    Once a redirect is scheduled, later failures are only logged.

One guard lives as long as its screen, and redirects at most once during that
lifetime however many calls fail.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Protocol

from loguru import logger

from learnerdash.core.credentials import CredentialStore
from learnerdash.core.errors import (
    LOGIN_REQUIRED_MESSAGE,
    ApiFailure,
    AuthenticationFailure,
    LocalPreconditionFailure,
)
from learnerdash.core.notices import NoticeBus, NoticeKind

SESSION_EXPIRED_MESSAGE = "Session expired. Please log in again."


class Navigator(Protocol):
    """Routing collaborator. The dashboard only ever needs the login route."""

    def navigate(self, route: str) -> None: ...


class SessionGuard:
    def __init__(
        self,
        credentials: CredentialStore,
        notices: NoticeBus,
        navigator: Navigator,
        login_route: str = "/login",
        redirect_delay: float = 2.0,
    ):
        self.credentials = credentials
        self.notices = notices
        self.navigator = navigator
        self.login_route = login_route
        self.redirect_delay = redirect_delay
        self._redirect_scheduled = False
        self._redirect_handle: asyncio.TimerHandle | None = None
        self._redirected: asyncio.Future[None] | None = None

    @property
    def redirect_scheduled(self) -> bool:
        return self._redirect_scheduled

    async def wait_for_redirect(self) -> None:
        """Block until a scheduled redirect has fired (or was cancelled)."""
        if self._redirected is not None and not self._redirected.done():
            await asyncio.shield(self._redirected)

    def ensure_credential(self) -> str:
        """Return the token, or fail locally before any request is made."""
        token = self.credentials.get()
        if not token:
            raise LocalPreconditionFailure(LOGIN_REQUIRED_MESSAGE)
        return token

    def handle(self, failure: ApiFailure) -> bool:
        """
        Surface a failure to the user.

        Returns:
            True when the failure ended the session; the caller must stop
            handling the operation.
        """
        if isinstance(failure, AuthenticationFailure):
            self._expire_session(failure)
            return True
        if self._redirect_scheduled:
            # Calls racing the logout; the session-expired notice stays up.
            logger.debug(f"Suppressing {failure!r} after session expiry")
            return True

        logger.info(f"Operation failed ({type(failure).__name__}): {failure.message}")
        self.notices.show(failure.message, NoticeKind.ERROR)
        return False

    def _expire_session(self, failure: AuthenticationFailure) -> None:
        self.credentials.clear()
        if self._redirect_scheduled:
            logger.debug(f"Ignoring repeated auth failure: {failure!r}")
            return

        logger.warning(f"Authentication failed with status {failure.status}; logging out")
        self._redirect_scheduled = True
        self.notices.show(SESSION_EXPIRED_MESSAGE, NoticeKind.ERROR)
        self._schedule(lambda: self.navigator.navigate(self.login_route))

    def _schedule(self, callback: Callable[[], None]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            callback()
            return
        self._redirected = loop.create_future()
        self._redirect_handle = loop.call_later(self.redirect_delay, self._fire, callback)

    def _fire(self, callback: Callable[[], None]) -> None:
        self._redirect_handle = None
        try:
            callback()
        finally:
            if self._redirected is not None and not self._redirected.done():
                self._redirected.set_result(None)

    def close(self) -> None:
        """Screen teardown: drop a redirect that has not fired yet."""
        if self._redirect_handle is not None:
            self._redirect_handle.cancel()
            self._redirect_handle = None
        if self._redirected is not None and not self._redirected.done():
            self._redirected.set_result(None)
