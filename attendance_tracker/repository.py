"""Entity repository — typed access to the stored collections.

Wraps a KeyValueStore with one getter per collection and a generic
replace-all ``save``. Every write goes straight through to the store; there
is no cache, so anything returned here is a snapshot that must be re-read
after a write.

References between collections are advisory. Nothing here checks that a
Subject's course exists or that a Student's subjects belong to their course,
and deleting a record never cascades. Unresolved references come back as
sentinels (None, "N/A", "Unknown") instead of raising.

Tier 2 module: imports from attendance_tracker.hooks.interfaces (Tier 1) and
attendance_tracker.schemas (Tier 1).

Usage:
    from attendance_tracker.repository import EntityRepository, STUDENTS

    repo = EntityRepository(store)
    students = repo.get_students()
    repo.delete(STUDENTS, students[0].id)
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping
from datetime import date
from typing import TypeVar

from attendance_tracker.hooks.interfaces import KeyValueStore
from attendance_tracker.schemas import (
    AttendanceRecord,
    AttendanceStatus,
    Course,
    DashboardStats,
    Notification,
    Record,
    Staff,
    Student,
    Subject,
    User,
)

logger = logging.getLogger("attendance_tracker.repository")

# ---------------------------------------------------------------------------
# Persisted layout — collection key → record model
# ---------------------------------------------------------------------------

COURSES = "courses"
SUBJECTS = "subjects"
STAFF = "staff"
STUDENTS = "students"
ATTENDANCE = "attendance"
USERS = "users"
NOTIFICATIONS = "notifications"
CURRENT_USER = "currentUser"

COLLECTION_MODELS: dict[str, type[Record]] = {
    COURSES: Course,
    SUBJECTS: Subject,
    STAFF: Staff,
    STUDENTS: Student,
    ATTENDANCE: AttendanceRecord,
    USERS: User,
    NOTIFICATIONS: Notification,
}

UNASSIGNED = "Unassigned"
NOT_AVAILABLE = "N/A"
UNKNOWN = "Unknown"

R = TypeVar("R", bound=Record)


class EntityRepository:
    """Typed reads and writes over the seven stored collections.

    Args:
        store: The backing KeyValueStore. The repository holds no state of
            its own beyond this reference.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    @property
    def store(self) -> KeyValueStore:
        return self._store

    # -- Generic ------------------------------------------------------------

    def _load(self, collection: str, model: type[R]) -> list[R]:
        return [model.model_validate(raw) for raw in self._store.read(collection)]

    def load(self, collection: str) -> list[Record]:
        """Returns the typed records of any known collection.

        Raises:
            KeyError: If collection is not one of the stored collections.
        """
        return self._load(collection, COLLECTION_MODELS[collection])

    def save(self, collection: str, records: Iterable[Record]) -> None:
        """Replaces an entire collection. Durable when this returns.

        Args:
            collection: One of the collection keys, e.g. ``COURSES``.
            records: The complete new contents, in order.

        Raises:
            KeyError: If collection is not one of the stored collections.
        """
        model = COLLECTION_MODELS[collection]
        payload = []
        for record in records:
            if not isinstance(record, model):
                record = model.model_validate(record)
            payload.append(record.to_record())
        self._store.write(collection, payload)
        logger.debug("Saved %d record(s) to %s", len(payload), collection)

    def upsert(self, collection: str, record: Record) -> None:
        """Replaces the record with the same id, or appends it if new.

        Other records in the collection are written back unchanged.

        Raises:
            KeyError: If collection is not one of the id-keyed collections.
        """
        if collection == ATTENDANCE:
            raise KeyError(f"{collection} has no id; use save_attendance_session")
        records = self.load(collection)
        for index, existing in enumerate(records):
            if existing.id == record.id:  # type: ignore[attr-defined]
                records[index] = record
                break
        else:
            records.append(record)
        self.save(collection, records)

    def delete(self, collection: str, record_id: str) -> bool:
        """Removes the record with record_id. Never cascades.

        Returns:
            True if a record was removed, False if none had that id.

        Raises:
            KeyError: If collection is not one of the id-keyed collections.
        """
        if collection == ATTENDANCE:
            raise KeyError(f"{collection} has no id")
        records = self.load(collection)
        kept = [r for r in records if r.id != record_id]  # type: ignore[attr-defined]
        if len(kept) == len(records):
            return False
        self.save(collection, kept)
        return True

    # -- Collection getters -------------------------------------------------

    def get_courses(self) -> list[Course]:
        return self._load(COURSES, Course)

    def get_subjects(self) -> list[Subject]:
        return self._load(SUBJECTS, Subject)

    def get_staff(self) -> list[Staff]:
        return self._load(STAFF, Staff)

    def get_students(self) -> list[Student]:
        return self._load(STUDENTS, Student)

    def get_attendance(self) -> list[AttendanceRecord]:
        return self._load(ATTENDANCE, AttendanceRecord)

    def get_users(self) -> list[User]:
        return self._load(USERS, User)

    def get_notifications(self, user_id: str | None = None) -> list[Notification]:
        """Returns all notifications, or only those addressed to user_id."""
        notifications = self._load(NOTIFICATIONS, Notification)
        if user_id is None:
            return notifications
        return [n for n in notifications if n.user_id == user_id]

    # -- Lookups ------------------------------------------------------------

    @staticmethod
    def _by_id(records: Iterable[R], record_id: str | None) -> R | None:
        if record_id is None:
            return None
        return next((r for r in records if r.id == record_id), None)  # type: ignore[attr-defined]

    def find_course(self, course_id: str | None) -> Course | None:
        return self._by_id(self.get_courses(), course_id)

    def find_subject(self, subject_id: str | None) -> Subject | None:
        return self._by_id(self.get_subjects(), subject_id)

    def find_staff(self, staff_id: str | None) -> Staff | None:
        return self._by_id(self.get_staff(), staff_id)

    def find_student(self, student_id: str | None) -> Student | None:
        return self._by_id(self.get_students(), student_id)

    def find_user(self, user_id: str | None) -> User | None:
        return self._by_id(self.get_users(), user_id)

    def find_user_for_profile(self, profile_id: str, role: str) -> User | None:
        """Returns the first user with this role whose profile_id matches."""
        return next(
            (u for u in self.get_users() if u.role == role and u.profile_id == profile_id),
            None,
        )

    def course_name(self, course_id: str | None) -> str:
        course = self.find_course(course_id)
        return course.name if course else NOT_AVAILABLE

    def staff_name(self, staff_id: str | None) -> str:
        if not staff_id:
            return UNASSIGNED
        staff = self.find_staff(staff_id)
        return staff.name if staff else NOT_AVAILABLE

    def student_name(self, student_id: str | None) -> str:
        student = self.find_student(student_id)
        return student.name if student else UNKNOWN

    def subject_name(self, subject_id: str | None) -> str:
        subject = self.find_subject(subject_id)
        return subject.name if subject else UNKNOWN

    # -- Relationships ------------------------------------------------------

    def subjects_for_course(self, course_id: str) -> list[Subject]:
        return [s for s in self.get_subjects() if s.course_id == course_id]

    def subjects_for_staff(self, staff_id: str) -> list[Subject]:
        """Subjects whose staff_id points at this staff member."""
        return [s for s in self.get_subjects() if s.staff_id == staff_id]

    def staff_assignments(self) -> dict[str, set[str]]:
        """Staff id → subject ids, derived from Subject.staff_id on every call.

        Ignores the stored Staff.assigned_subjects back-references.
        """
        index: dict[str, set[str]] = defaultdict(set)
        for subject in self.get_subjects():
            if subject.staff_id:
                index[subject.staff_id].add(subject.id)
        return dict(index)

    def students_for_subject(self, subject_id: str) -> list[Student]:
        return [s for s in self.get_students() if subject_id in s.subjects]

    # -- Attendance ---------------------------------------------------------

    def attendance_for_student(self, student_id: str) -> list[AttendanceRecord]:
        return [r for r in self.get_attendance() if r.student_id == student_id]

    def attendance_for_subject(self, subject_id: str) -> list[AttendanceRecord]:
        return [r for r in self.get_attendance() if r.subject_id == subject_id]

    def save_attendance_session(
        self,
        day: date,
        subject_id: str,
        marks: Mapping[str, AttendanceStatus],
    ) -> list[AttendanceRecord]:
        """Replaces every record for (day, subject_id) with marks.

        Records for other days or subjects are kept in their original order;
        the new batch is appended after them. An empty marks mapping is a
        no-op, so a session with nobody marked never clears a saved day.

        Args:
            day: The calendar day being marked.
            subject_id: The subject being marked.
            marks: student_id → "present" / "absent".

        Returns:
            The newly written records, in marks order ([] when marks is
            empty).
        """
        if not marks:
            logger.info(
                "No marks for subject %s on %s, attendance left unchanged",
                subject_id, day.isoformat(),
            )
            return []
        kept = [
            r for r in self.get_attendance()
            if not (r.date == day and r.subject_id == subject_id)
        ]
        batch = [
            AttendanceRecord(date=day, student_id=student_id, subject_id=subject_id, status=status)
            for student_id, status in marks.items()
        ]
        self.save(ATTENDANCE, [*kept, *batch])
        logger.info(
            "Attendance saved for subject %s on %s: %d mark(s)",
            subject_id, day.isoformat(), len(batch),
        )
        return batch

    # -- Overview -----------------------------------------------------------

    def dashboard_stats(self) -> DashboardStats:
        return DashboardStats(
            total_students=len(self.get_students()),
            total_staff=len(self.get_staff()),
            total_courses=len(self.get_courses()),
            total_subjects=len(self.get_subjects()),
        )
