"""Durable client-side storage."""

from learnerdash.storage.local_store import LocalStore

__all__ = ["LocalStore"]
