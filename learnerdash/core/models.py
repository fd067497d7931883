"""
Client-side records for LMS API payloads.

Each record parses the server's camelCase JSON with from_dict() and keeps
only what the dashboard renders.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def _record_id(data: dict[str, Any]) -> str:
    return str(data.get("_id") or data.get("id") or "")


@dataclass
class Instructor:
    first_name: str = ""
    last_name: str = ""
    avatar: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Instructor | None:
        if not data:
            return None
        return cls(
            first_name=data.get("firstName", ""),
            last_name=data.get("lastName", ""),
            avatar=data.get("avatar"),
        )


@dataclass
class CourseSummary:
    """A course as listed by the catalog and bookmark endpoints."""

    id: str
    title: str = "Untitled Course"
    description: str = ""
    category: str | None = None
    thumbnail: str | None = None
    price: float = 0
    discount_price: float | None = None
    instructor: Instructor | None = None
    rating: float | None = None

    @property
    def instructor_name(self) -> str:
        if self.instructor and self.instructor.full_name:
            return self.instructor.full_name
        return "Unknown Instructor"

    @property
    def effective_price(self) -> float:
        return self.discount_price if self.discount_price else self.price

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CourseSummary:
        return cls(
            id=_record_id(data),
            title=data.get("title") or "Untitled Course",
            description=data.get("description") or "",
            category=data.get("category"),
            thumbnail=data.get("thumbnail"),
            price=data.get("price") or 0,
            discount_price=data.get("discountPrice"),
            instructor=Instructor.from_dict(data.get("instructor")),
            rating=data.get("rating"),
        )


@dataclass
class Notification:
    """An in-app notification. Unread ones are fetched page by page."""

    id: str
    title: str = ""
    message: str = ""
    created_at: str | None = None
    is_read: bool = False
    action_url: str | None = None
    related_entity: dict[str, Any] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Notification:
        return cls(
            id=_record_id(data),
            title=data.get("title", ""),
            message=data.get("message", ""),
            created_at=data.get("createdAt"),
            is_read=bool(data.get("isRead", False)),
            action_url=data.get("actionUrl"),
            related_entity=data.get("relatedEntity"),
        )


@dataclass
class Profile:
    """Student profile. Only the greeting fields are kept."""

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def display_name(self) -> str:
        return self.first_name or "User"

    @property
    def initials(self) -> str:
        if not self.first_name:
            return "JP"
        return "".join(part[0] for part in self.display_name.split()).upper()[:2]

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Profile:
        data = data or {}
        known = {"firstName", "lastName", "email"}
        return cls(
            first_name=data.get("firstName") or None,
            last_name=data.get("lastName") or None,
            email=data.get("email"),
            extra={k: v for k, v in data.items() if k not in known},
        )
