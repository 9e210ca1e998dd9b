"""Core data models — shared Pydantic types for the attendance tracker.

Every stored record and every derived metric flows through these types. The
entity models mirror the persisted layout one-to-one: attributes are
snake_case in Python and camelCase on disk (``courseId``, ``rollNumber``,
``assignedSubjects``, ``profileId``, ``createdAt``).

This is a Tier 1 leaf module: it imports only from pydantic and the stdlib.
No project imports allowed — everything else imports from here.

Usage:
    from attendance_tracker.schemas import Student, AttendanceRecord, Notification
"""

from datetime import date, datetime, timezone
from typing import Any, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

Role = Literal["admin", "staff", "student"]
AttendanceStatus = Literal["present", "absent"]
NotificationType = Literal["warning", "info", "success"]


def new_id() -> str:
    """Returns a fresh opaque identifier for a new record."""
    return uuid4().hex


def as_utc(moment: datetime) -> datetime:
    """Returns moment as an aware UTC datetime. Naive values are taken as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


class Record(BaseModel):
    """Base for every persisted record.

    Accepts both attribute names and camelCase aliases on input. Use
    ``to_record()`` to produce the stored (aliased, JSON-safe) form.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_record(self) -> dict[str, Any]:
        """Serializes to the persisted shape — camelCase keys, JSON types only."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Academic structure
# ---------------------------------------------------------------------------


class Course(Record):
    """A degree programme, e.g. Information Technology (IT)."""

    id: str
    name: str
    code: str


class Subject(Record):
    """A taught subject belonging to one course.

    ``staff_id`` is the canonical staff assignment. ``course_id`` is not
    checked against the course collection.
    """

    id: str
    name: str
    code: str
    course_id: str
    staff_id: str | None = None


class Staff(Record):
    """A staff member.

    ``assigned_subjects`` is a stored back-reference to ``Subject.staff_id``.
    The two are written independently and may diverge.
    """

    id: str
    name: str
    email: str
    assigned_subjects: set[str] = Field(default_factory=set)

    @field_serializer("assigned_subjects")
    def _sorted_subjects(self, value: set[str]) -> list[str]:
        return sorted(value)


class Student(Record):
    """An enrolled student."""

    id: str
    name: str
    roll_number: str
    email: str
    course_id: str
    subjects: set[str] = Field(default_factory=set)

    @field_serializer("subjects")
    def _sorted_subjects(self, value: set[str]) -> list[str]:
        return sorted(value)


# ---------------------------------------------------------------------------
# Attendance
# ---------------------------------------------------------------------------


class AttendanceRecord(Record):
    """One student's mark for one subject on one calendar day.

    Natural key is (date, student_id, subject_id). Frozen — records are
    replaced, never edited.
    """

    model_config = ConfigDict(frozen=True)

    date: date
    student_id: str
    subject_id: str
    status: AttendanceStatus

    @property
    def key(self) -> tuple[date, str, str]:
        return (self.date, self.student_id, self.subject_id)


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------


class User(Record):
    """Login account.

    Frozen — users are identity objects. ``profile_id`` points at a Staff or
    Student id for those roles. The password is stored and compared as
    plain text.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    username: str
    password: str
    role: Role
    profile_id: str


class Notification(Record):
    """A message addressed to one user.

    Mutable only in ``read``; ``created_at`` is set once at creation.
    """

    id: str = Field(default_factory=new_id)
    user_id: str
    title: str
    message: str
    type: NotificationType
    read: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("created_at")
    @classmethod
    def _aware_created_at(cls, value: datetime) -> datetime:
        return as_utc(value)


# ---------------------------------------------------------------------------
# Derived read models (never persisted)
# ---------------------------------------------------------------------------


class TrendPoint(BaseModel):
    """Cumulative attendance after one more recorded session."""

    model_config = ConfigDict(frozen=True)

    date: date
    percentage: float


class SubjectAttendance(BaseModel):
    """A student's standing in one subject. ``percentage`` is rounded."""

    model_config = ConfigDict(frozen=True)

    subject_id: str
    name: str
    code: str
    present: int
    total: int
    percentage: int


class RosterEntry(BaseModel):
    """One student's rounded percentage within a single subject."""

    model_config = ConfigDict(frozen=True)

    student_id: str
    name: str
    percentage: int


class SubjectRoster(BaseModel):
    """Per-subject class overview, split around the attendance threshold."""

    model_config = ConfigDict(frozen=True)

    subject_id: str
    entries: list[RosterEntry] = Field(default_factory=list)
    meeting_threshold: int = 0
    below_threshold: int = 0


class DailyAttendance(BaseModel):
    """All marks for one subject on one day."""

    model_config = ConfigDict(frozen=True)

    date: date
    records: list[AttendanceRecord] = Field(default_factory=list)
    present: int = 0
    absent: int = 0


class DashboardStats(BaseModel):
    """Collection totals shown on the admin overview."""

    model_config = ConfigDict(frozen=True)

    total_students: int = 0
    total_staff: int = 0
    total_courses: int = 0
    total_subjects: int = 0
