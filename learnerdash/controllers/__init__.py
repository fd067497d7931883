"""
Controllers - one per dashboard section.

Each controller binds an LMS endpoint to a view projection and runs it through
the shared load/retry lifecycle in base.ListController.
"""

from learnerdash.controllers.base import ListController, LoadState
from learnerdash.controllers.bookmarks import BookmarksController
from learnerdash.controllers.course_detail import CourseDetailController
from learnerdash.controllers.interests import InterestsController
from learnerdash.controllers.notifications import NotificationsController
from learnerdash.controllers.profile import ProfileController
from learnerdash.controllers.screen import DashboardContext, Screen

__all__ = [
    "ListController",
    "LoadState",
    "BookmarksController",
    "CourseDetailController",
    "InterestsController",
    "NotificationsController",
    "ProfileController",
    "DashboardContext",
    "Screen",
]
