"""
learnerdash - terminal dashboard for a learning-management platform.

Renders the learner's bookmarks, interests, notifications and course detail,
and keeps them in sync with the remote LMS API.
"""

__version__ = "1.0.0"
