"""Bootstrap dataset — the records every fresh store starts with.

``seed_defaults`` writes each collection only when its key is entirely
absent from the store. A collection that exists but is empty (for example
after an admin deleted every course) is left alone, so seeding runs at most
once per store lifetime and is safe to call on every startup.
"""

import logging

from attendance_tracker.hooks.interfaces import KeyValueStore
from attendance_tracker.repository import (
    ATTENDANCE,
    COURSES,
    NOTIFICATIONS,
    STAFF,
    STUDENTS,
    SUBJECTS,
    USERS,
)
from attendance_tracker.schemas import Course, Record, Staff, Student, Subject, User

logger = logging.getLogger("attendance_tracker.seed")

DEFAULT_USERS: list[User] = [
    User(id="1", username="admin", password="admin123", role="admin", profile_id="1"),
    User(id="2", username="staff1", password="staff123", role="staff", profile_id="1"),
    User(id="3", username="student1", password="student123", role="student", profile_id="1"),
]

DEFAULT_COURSES: list[Course] = [
    Course(id="1", name="Information Technology", code="IT"),
    Course(id="2", name="Computer Science", code="CS"),
]

DEFAULT_SUBJECTS: list[Subject] = [
    Subject(id="1", name="Artificial Intelligence", code="AI101", course_id="1", staff_id="1"),
    Subject(id="2", name="Database Management Systems", code="DBMS101", course_id="1", staff_id="1"),
    Subject(id="3", name="Web Development", code="WEB101", course_id="1"),
]

DEFAULT_STAFF: list[Staff] = [
    Staff(id="1", name="Dr. John Smith", email="john@example.com", assigned_subjects={"1", "2"}),
]

DEFAULT_STUDENTS: list[Student] = [
    Student(
        id="1",
        name="Harshi",
        roll_number="IT001",
        email="harshi@example.com",
        course_id="1",
        subjects={"1", "2", "3"},
    ),
    Student(
        id="2",
        name="Priya Sharma",
        roll_number="IT002",
        email="priya@example.com",
        course_id="1",
        subjects={"1", "2"},
    ),
]

# Insertion order is the order collections are seeded in.
DEFAULT_DATASET: dict[str, list[Record]] = {
    USERS: DEFAULT_USERS,
    COURSES: DEFAULT_COURSES,
    SUBJECTS: DEFAULT_SUBJECTS,
    STAFF: DEFAULT_STAFF,
    STUDENTS: DEFAULT_STUDENTS,
    ATTENDANCE: [],
    NOTIFICATIONS: [],
}


def seed_defaults(store: KeyValueStore) -> list[str]:
    """Writes the bootstrap dataset into every collection key that is absent.

    Args:
        store: The store to seed.

    Returns:
        The collection keys that were written (empty on an already-seeded
        store).
    """
    seeded: list[str] = []
    for collection, records in DEFAULT_DATASET.items():
        if store.has(collection):
            continue
        store.write(collection, [record.to_record() for record in records])
        seeded.append(collection)

    if seeded:
        logger.info("Seeded default data: %s", ", ".join(seeded))
    return seeded
