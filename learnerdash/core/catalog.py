"""
Course detail normalization.

The server's course record is sparse: marketing fields such as language,
subtitles or the feature list are often missing. The dashboard always shows
them, so fill_defaults() substitutes the client-side defaults once, at the API
boundary, and everything downstream works with a complete CourseDetail.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

DEFAULT_INSTRUCTOR_BIO = "Experienced instructor with expertise in the field."
DEFAULT_VIDEO_URL = "https://www.youtube.com/embed/dQw4w9WgXcQ"
DEFAULT_LANGUAGE = "English"
DEFAULT_SUBTITLES = ("English", "Hindi")
DEFAULT_LAST_UPDATED = "December 2024"
DEFAULT_LEARNING_OUTCOMES = (
    "Master key concepts and skills",
    "Apply knowledge to real-world projects",
    "Gain industry-relevant expertise",
)
DEFAULT_REQUIREMENTS = (
    "Basic computer skills",
    "Internet access",
    "Willingness to learn",
)


def default_features(duration_hours: float) -> list[str]:
    return [
        f"{_format_number(duration_hours)} hours of on-demand video",
        "Downloadable resources",
        "Access on mobile and desktop",
        "Certificate of completion",
        "Access to student community",
    ]


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _format_price(value: float) -> str:
    return f"₹{_format_number(value)}"


@dataclass
class Lesson:
    title: str
    type: str = "video"
    duration: str | None = None
    preview: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Lesson:
        return cls(
            title=data.get("title", ""),
            type=data.get("type", "video"),
            duration=data.get("duration"),
            preview=bool(data.get("preview", False)),
        )


@dataclass
class CourseModule:
    id: str
    title: str
    lessons: list[Lesson] = field(default_factory=list)

    @property
    def preview_count(self) -> int:
        return sum(1 for lesson in self.lessons if lesson.preview)

    @classmethod
    def from_dict(cls, data: dict[str, Any], index: int) -> CourseModule:
        return cls(
            id=str(data.get("id") or data.get("_id") or index),
            title=data.get("title", f"Module {index + 1}"),
            lessons=[Lesson.from_dict(lesson) for lesson in data.get("lessons") or []],
        )


@dataclass
class CourseRecord:
    """The server's course record as received. Absent fields stay None."""

    id: str
    title: str
    description: str = ""
    long_description: Optional[str] = None
    instructor_first_name: str = ""
    instructor_last_name: str = ""
    instructor_bio: Optional[str] = None
    instructor_image: Optional[str] = None
    rating: float = 0
    total_ratings: int = 0
    total_students: int = 0
    duration: float = 0
    level: str = ""
    category: str = ""
    price: float = 0
    discount_price: Optional[float] = None
    thumbnail: Optional[str] = None
    video_url: Optional[str] = None
    language: Optional[str] = None
    subtitles: Optional[list[str]] = None
    last_updated: Optional[str] = None
    certificate: Optional[bool] = None
    downloadable: Optional[bool] = None
    lifetime: Optional[bool] = None
    mobile_access: Optional[bool] = None
    modules: Optional[list[dict[str, Any]]] = None
    learning_outcomes: Optional[list[str]] = None
    requirements: Optional[list[str]] = None
    features: Optional[list[str]] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CourseRecord:
        instructor = data.get("instructor") or {}
        return cls(
            id=str(data.get("_id") or data.get("id") or ""),
            title=data.get("title", ""),
            description=data.get("description") or "",
            long_description=data.get("longDescription"),
            instructor_first_name=instructor.get("firstName", ""),
            instructor_last_name=instructor.get("lastName", ""),
            instructor_bio=data.get("instructorBio"),
            instructor_image=data.get("instructorImage"),
            rating=data.get("rating") or 0,
            total_ratings=data.get("totalRatings") or 0,
            total_students=data.get("totalStudents") or 0,
            duration=data.get("duration") or 0,
            level=data.get("level") or "",
            category=data.get("category") or "",
            price=data.get("price") or 0,
            discount_price=data.get("discountPrice"),
            thumbnail=data.get("thumbnail"),
            video_url=data.get("videoUrl"),
            language=data.get("language"),
            subtitles=data.get("subtitles"),
            last_updated=data.get("lastUpdated"),
            certificate=data.get("certificate"),
            downloadable=data.get("downloadable"),
            lifetime=data.get("lifetime"),
            mobile_access=data.get("mobileAccess"),
            modules=data.get("modules"),
            learning_outcomes=data.get("learningOutcomes"),
            requirements=data.get("requirements"),
            features=_feature_lines(data.get("features")),
        )


def _feature_lines(features: Optional[list[Any]]) -> Optional[list[str]]:
    if features is None:
        return None
    return [f.get("text", "") if isinstance(f, dict) else str(f) for f in features]


@dataclass
class CourseDetail:
    """Read-only course projection with every display field populated."""

    id: str
    title: str
    description: str
    long_description: str
    instructor: str
    instructor_bio: str
    instructor_image: str | None
    rating: float
    reviews: int
    students: int
    duration: str
    level: str
    category: str
    price: str
    original_price: str | None
    discount_percent: int | None
    image: str | None
    video_url: str
    language: str
    subtitles: list[str]
    last_updated: str
    certificate: bool
    downloadable: bool
    lifetime: bool
    mobile_access: bool
    modules: list[CourseModule]
    learning_outcomes: list[str]
    requirements: list[str]
    features: list[str]

    @property
    def lesson_count(self) -> int:
        return sum(len(module.lessons) for module in self.modules)


def _default(value: Any, fallback: Any) -> Any:
    # Explicit False/0/[] from the server is kept; only absent fields fall back.
    return fallback if value is None else value


def fill_defaults(record: CourseRecord) -> CourseDetail:
    """Normalize a sparse course record into a complete CourseDetail."""
    # On the detail page discountPrice is the list price shown struck through.
    price = "Free" if record.price == 0 else _format_price(record.price)
    original_price = None
    discount_percent = None
    if record.discount_price:
        original_price = _format_price(record.discount_price)
        discount_percent = round(
            (record.discount_price - record.price) / record.discount_price * 100
        )

    instructor = f"{record.instructor_first_name} {record.instructor_last_name}".strip()

    return CourseDetail(
        id=record.id,
        title=record.title,
        description=record.description,
        long_description=record.long_description or record.description,
        instructor=instructor or "Unknown Instructor",
        instructor_bio=record.instructor_bio or DEFAULT_INSTRUCTOR_BIO,
        instructor_image=record.instructor_image,
        rating=record.rating,
        reviews=record.total_ratings,
        students=record.total_students,
        duration=f"{_format_number(record.duration)} hours",
        level=record.level[:1].upper() + record.level[1:],
        category=record.category.lower(),
        price=price,
        original_price=original_price,
        discount_percent=discount_percent,
        image=record.thumbnail,
        video_url=record.video_url or DEFAULT_VIDEO_URL,
        language=record.language or DEFAULT_LANGUAGE,
        subtitles=_default(record.subtitles, list(DEFAULT_SUBTITLES)),
        last_updated=record.last_updated or DEFAULT_LAST_UPDATED,
        certificate=_default(record.certificate, True),
        downloadable=_default(record.downloadable, True),
        lifetime=_default(record.lifetime, True),
        mobile_access=_default(record.mobile_access, True),
        modules=[CourseModule.from_dict(m, i) for i, m in enumerate(record.modules or [])],
        learning_outcomes=_default(record.learning_outcomes, list(DEFAULT_LEARNING_OUTCOMES)),
        requirements=_default(record.requirements, list(DEFAULT_REQUIREMENTS)),
        features=_default(record.features, default_features(record.duration)),
    )
