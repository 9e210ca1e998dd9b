"""Attendance aggregator — pure percentage math over attendance records.

Nothing in here touches storage: every function takes the records it needs
and returns a number or a read model. Percentages are floats in [0, 100] and
are only rounded by the functions that produce presentation models
(``subject_breakdown``, ``subject_roster``). An empty set of records always
yields 0, never a ZeroDivisionError.

Tier 2 module: imports only from attendance_tracker.schemas (Tier 1).
"""

from __future__ import annotations

import math
from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date

from attendance_tracker.schemas import (
    AttendanceRecord,
    Course,
    DailyAttendance,
    RosterEntry,
    Student,
    Subject,
    SubjectAttendance,
    SubjectRoster,
    TrendPoint,
)

ATTENDANCE_THRESHOLD = 75.0


def rounded(value: float) -> int:
    """Rounds half up (62.5 → 63), the way percentages are displayed."""
    return math.floor(value + 0.5)


def count_present(records: Iterable[AttendanceRecord]) -> int:
    return sum(1 for r in records if r.status == "present")


def percentage(records: Sequence[AttendanceRecord]) -> float:
    """100 × present / total, or 0 for an empty sequence."""
    if not records:
        return 0.0
    return 100.0 * count_present(records) / len(records)


def student_percentage(student_id: str, records: Iterable[AttendanceRecord]) -> float:
    """Attendance percentage over every record for student_id, any subject."""
    return percentage([r for r in records if r.student_id == student_id])


def subject_percentage(
    student_id: str, subject_id: str, records: Iterable[AttendanceRecord]
) -> float:
    """Attendance percentage for one student in one subject."""
    return percentage(
        [r for r in records if r.student_id == student_id and r.subject_id == subject_id]
    )


def course_percentages(
    courses: Iterable[Course],
    students: Iterable[Student],
    records: Iterable[AttendanceRecord],
) -> dict[str, float]:
    """Average student percentage per course.

    Each student's percentage uses ALL of their records, not only those for
    the course's own subjects. Students with no records are left out of the
    average; a course with no such students reports 0.

    Returns:
        course id → percentage, in course order.
    """
    by_student: dict[str, list[AttendanceRecord]] = defaultdict(list)
    for record in records:
        by_student[record.student_id].append(record)

    students = list(students)
    result: dict[str, float] = {}
    for course in courses:
        scores = [
            percentage(by_student[s.id])
            for s in students
            if s.course_id == course.id and by_student.get(s.id)
        ]
        result[course.id] = sum(scores) / len(scores) if scores else 0.0
    return result


def attendance_trend(student_id: str, records: Iterable[AttendanceRecord]) -> list[TrendPoint]:
    """Cumulative attendance series, one point per record in date order.

    Point k is the present ratio over the first k+1 records. Records sharing
    a date keep their stored order.
    """
    ordered = sorted(
        (r for r in records if r.student_id == student_id), key=lambda r: r.date
    )
    points: list[TrendPoint] = []
    present = 0
    for index, record in enumerate(ordered, start=1):
        if record.status == "present":
            present += 1
        points.append(TrendPoint(date=record.date, percentage=100.0 * present / index))
    return points


def subject_breakdown(
    student_id: str,
    subject_ids: Iterable[str],
    subjects: Iterable[Subject],
    records: Iterable[AttendanceRecord],
) -> list[SubjectAttendance]:
    """Per-subject standing for one student.

    Subjects that no longer exist are reported with name "Unknown" and an
    empty code rather than dropped.
    """
    catalog = {s.id: s for s in subjects}
    own = [r for r in records if r.student_id == student_id]

    breakdown: list[SubjectAttendance] = []
    for subject_id in subject_ids:
        subject = catalog.get(subject_id)
        subject_records = [r for r in own if r.subject_id == subject_id]
        breakdown.append(
            SubjectAttendance(
                subject_id=subject_id,
                name=subject.name if subject else "Unknown",
                code=subject.code if subject else "",
                present=count_present(subject_records),
                total=len(subject_records),
                percentage=rounded(percentage(subject_records)),
            )
        )
    return breakdown


def subject_roster(
    subject_id: str,
    students: Iterable[Student],
    records: Iterable[AttendanceRecord],
    threshold: float = ATTENDANCE_THRESHOLD,
) -> SubjectRoster:
    """Class overview for one subject: every enrolled student's percentage.

    Percentages are restricted to the subject's records and rounded; the
    threshold split is made on the rounded value, as shown to staff.
    """
    subject_records = [r for r in records if r.subject_id == subject_id]
    entries = [
        RosterEntry(
            student_id=s.id,
            name=s.name,
            percentage=rounded(
                percentage([r for r in subject_records if r.student_id == s.id])
            ),
        )
        for s in students
        if subject_id in s.subjects
    ]
    meeting = sum(1 for e in entries if e.percentage >= threshold)
    return SubjectRoster(
        subject_id=subject_id,
        entries=entries,
        meeting_threshold=meeting,
        below_threshold=len(entries) - meeting,
    )


def history_by_date(subject_id: str, records: Iterable[AttendanceRecord]) -> list[DailyAttendance]:
    """Groups a subject's records by day, newest day first."""
    by_day: dict[date, list[AttendanceRecord]] = defaultdict(list)
    for record in records:
        if record.subject_id == subject_id:
            by_day[record.date].append(record)

    history = []
    for day in sorted(by_day, reverse=True):
        day_records = by_day[day]
        present = count_present(day_records)
        history.append(
            DailyAttendance(
                date=day,
                records=day_records,
                present=present,
                absent=len(day_records) - present,
            )
        )
    return history
