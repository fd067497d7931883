"""
Unit tests for SessionGuard: logout and login redirect on auth failures.
"""

import asyncio

import pytest

from learnerdash.core.credentials import CredentialStore
from learnerdash.core.errors import (
    AuthenticationFailure,
    LocalPreconditionFailure,
    TransportFailure,
)
from learnerdash.core.notices import NoticeBus, NoticeKind
from learnerdash.core.session_guard import SESSION_EXPIRED_MESSAGE, SessionGuard
from learnerdash.storage.local_store import LocalStore


class TestSessionGuard:
    """Tests for SessionGuard.handle()."""

    @pytest.mark.asyncio
    async def test_auth_failure_logs_out_and_redirects(self, screen, context, navigator):
        guard = screen.guard

        assert guard.handle(AuthenticationFailure("Invalid token", 401)) is True

        assert context.credentials.get() is None
        assert screen.notices.current.text == SESSION_EXPIRED_MESSAGE
        assert screen.notices.current.kind is NoticeKind.ERROR
        # Redirect is delayed so the notice can render first.
        assert navigator.routes == []

        await screen.settle()
        assert navigator.routes == ["/login"]

    @pytest.mark.asyncio
    async def test_repeated_auth_failures_redirect_once(self, screen, navigator):
        shown = []
        screen.notices.subscribe(shown.append)

        screen.guard.handle(AuthenticationFailure("Invalid token", 401))
        screen.guard.handle(AuthenticationFailure("Forbidden", 403))
        screen.guard.handle(LocalPreconditionFailure("Authentication required. Please log in."))
        await screen.settle()
        await asyncio.sleep(0.03)

        assert navigator.routes == ["/login"]
        assert [n.text for n in shown if n is not None] == [SESSION_EXPIRED_MESSAGE]

    @pytest.mark.asyncio
    async def test_sibling_failure_keeps_session_expired_notice(self, screen, context, fake_lms, navigator):
        fake_lms.token = "rotated"
        fake_lms.fail("GET", "/notifications", 503)

        await screen.profile().load()
        # A sibling request that was already under way comes back with a 503.
        context.credentials.set("test-token")
        await screen.notifications().load()
        await screen.settle()

        assert screen.notices.current.text == SESSION_EXPIRED_MESSAGE
        assert navigator.routes == ["/login"]

    @pytest.mark.asyncio
    async def test_concurrent_401s_from_controllers(self, screen, context, fake_lms, navigator):
        fake_lms.token = "rotated"

        await asyncio.gather(
            screen.profile().load(),
            screen.bookmarks().load(),
            screen.notifications().load(),
        )
        await screen.settle()

        assert context.credentials.get() is None
        assert screen.notices.current.text == SESSION_EXPIRED_MESSAGE
        assert navigator.routes == ["/login"]
        assert screen.failed

    @pytest.mark.asyncio
    async def test_other_failures_keep_session(self, screen, context, navigator):
        assert screen.guard.handle(TransportFailure("Failed to load bookmarks", 503)) is False

        assert context.credentials.get() is not None
        assert screen.notices.current.text == "Failed to load bookmarks"
        await screen.settle()
        assert navigator.routes == []

    @pytest.mark.asyncio
    async def test_close_cancels_pending_redirect(self, screen, navigator):
        screen.guard.handle(AuthenticationFailure("Invalid token", 401))
        screen.close()
        await asyncio.sleep(0.03)

        assert navigator.routes == []

    def test_ensure_credential(self, tmp_path, navigator):
        credentials = CredentialStore(LocalStore(tmp_path / "storage.json"))
        guard = SessionGuard(credentials, NoticeBus(), navigator)

        with pytest.raises(LocalPreconditionFailure):
            guard.ensure_credential()
        credentials.set("abc")
        assert guard.ensure_credential() == "abc"

    def test_redirects_immediately_without_event_loop(self, tmp_path, navigator):
        credentials = CredentialStore(LocalStore(tmp_path / "storage.json"))
        credentials.set("abc")
        guard = SessionGuard(credentials, NoticeBus(), navigator, login_route="/signin")

        guard.handle(AuthenticationFailure("Invalid token", 401))

        assert navigator.routes == ["/signin"]
        assert not credentials.present
