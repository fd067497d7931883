"""
Core Module - session-aware synchronization with the LMS API.

Components:
- credentials: CredentialStore (bearer token in durable storage)
- api_client: ApiClient, ApiResult (one API host, classified failures)
- lms_api: LmsApi (every endpoint the dashboard consumes)
- session_guard: SessionGuard (logout + login redirect on 401/403)
- mutator: OptimisticMutator, KeyedSerializer (optimistic writes)
- notices: NoticeBus (one auto-dismissing banner per screen)
- catalog: fill_defaults (course detail normalization)
"""

from learnerdash.core.api_client import ApiClient, ApiResult, Pagination, expect_success
from learnerdash.core.catalog import CourseDetail, CourseRecord, fill_defaults
from learnerdash.core.credentials import CredentialStore
from learnerdash.core.errors import (
    ApiFailure,
    AuthenticationFailure,
    LocalPreconditionFailure,
    TransportFailure,
    ValidationOrBusinessFailure,
)
from learnerdash.core.lms_api import LmsApi, NotificationPage
from learnerdash.core.models import CourseSummary, Notification, Profile
from learnerdash.core.mutator import KeyedSerializer, Mutation, MutationStatus, OptimisticMutator
from learnerdash.core.notices import Notice, NoticeBus, NoticeKind
from learnerdash.core.session_guard import Navigator, SessionGuard

__all__ = [
    # Transport
    "ApiClient",
    "ApiResult",
    "Pagination",
    "expect_success",
    "LmsApi",
    "NotificationPage",
    # Failures
    "ApiFailure",
    "AuthenticationFailure",
    "LocalPreconditionFailure",
    "TransportFailure",
    "ValidationOrBusinessFailure",
    # Records
    "CourseDetail",
    "CourseRecord",
    "CourseSummary",
    "Notification",
    "Profile",
    "fill_defaults",
    # Session and state
    "CredentialStore",
    "Navigator",
    "SessionGuard",
    "KeyedSerializer",
    "Mutation",
    "MutationStatus",
    "OptimisticMutator",
    "Notice",
    "NoticeBus",
    "NoticeKind",
]
