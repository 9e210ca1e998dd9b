"""Tests for attendance_tracker.aggregator — percentage math."""

from datetime import date

import pytest

from attendance_tracker import aggregator
from attendance_tracker.schemas import Course, Subject

D1 = date(2026, 3, 2)
D2 = date(2026, 3, 3)
D3 = date(2026, 3, 4)


class TestRounded:
    """Display rounding is half-up, not banker's rounding."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(62.5, 63), (66.666, 67), (33.333, 33), (0.5, 1), (2.5, 3), (100.0, 100), (0.0, 0)],
    )
    def test_half_up(self, value, expected) -> None:
        assert aggregator.rounded(value) == expected


class TestPercentage:
    """percentage() and its per-student / per-subject filters."""

    def test_empty_is_zero(self) -> None:
        assert aggregator.percentage([]) == 0

    def test_all_present(self, make_record) -> None:
        assert aggregator.percentage([make_record(), make_record(date=D2)]) == 100

    def test_mixed(self, make_record) -> None:
        records = [make_record(), make_record(date=D2, status="absent")]
        assert aggregator.percentage(records) == 50

    def test_two_present_two_absent_is_fifty(self, make_record) -> None:
        statuses = ["present", "present", "absent", "absent"]
        records = [make_record(date=date(2026, 3, 2 + i), status=s) for i, s in enumerate(statuses)]
        assert aggregator.percentage(records) == 50

    @pytest.mark.parametrize(
        ("present", "absent"),
        [(1, 0), (0, 1), (3, 1), (1, 2), (7, 5), (0, 9), (13, 0), (149, 51)],
    )
    def test_ratio_within_bounds(self, make_record, present, absent) -> None:
        records = [make_record(status="present") for _ in range(present)]
        records += [make_record(status="absent") for _ in range(absent)]
        result = aggregator.percentage(records)
        assert 0 <= result <= 100
        assert result == pytest.approx(100 * present / (present + absent))

    def test_unrounded(self, make_record) -> None:
        records = [make_record(), make_record(date=D2), make_record(date=D3, status="absent")]
        assert aggregator.percentage(records) == pytest.approx(200 / 3)

    def test_student_percentage_filters_student(self, make_record) -> None:
        records = [
            make_record(student_id="1"),
            make_record(student_id="2", status="absent"),
        ]
        assert aggregator.student_percentage("1", records) == 100
        assert aggregator.student_percentage("2", records) == 0
        assert aggregator.student_percentage("ghost", records) == 0

    def test_student_percentage_spans_subjects(self, make_record) -> None:
        records = [
            make_record(subject_id="1"),
            make_record(subject_id="2", status="absent"),
        ]
        assert aggregator.student_percentage("1", records) == 50

    def test_subject_percentage(self, make_record) -> None:
        records = [
            make_record(subject_id="1"),
            make_record(subject_id="2", status="absent"),
            make_record(subject_id="2", date=D2),
        ]
        assert aggregator.subject_percentage("1", "1", records) == 100
        assert aggregator.subject_percentage("1", "2", records) == 50
        assert aggregator.subject_percentage("1", "3", records) == 0


class TestCoursePercentages:
    """Per-course rollup averages student percentages."""

    def test_averages_students_with_records(self, make_record, make_student) -> None:
        courses = [Course(id="1", name="IT", code="IT")]
        a = make_student(course_id="1")
        b = make_student(course_id="1")
        records = [
            make_record(student_id=a.id),
            make_record(student_id=b.id, status="absent"),
            make_record(student_id=b.id, date=D2),
        ]
        # a: 100, b: 50
        assert aggregator.course_percentages(courses, [a, b], records) == {"1": 75.0}

    def test_students_without_records_excluded(self, make_record, make_student) -> None:
        courses = [Course(id="1", name="IT", code="IT")]
        a = make_student(course_id="1")
        idle = make_student(course_id="1")
        records = [make_record(student_id=a.id, status="absent"), make_record(student_id=a.id, date=D2)]
        assert aggregator.course_percentages(courses, [a, idle], records) == {"1": 50.0}

    def test_course_without_qualifying_students_is_zero(self, make_student) -> None:
        courses = [Course(id="1", name="IT", code="IT"), Course(id="2", name="CS", code="CS")]
        assert aggregator.course_percentages(courses, [make_student(course_id="1")], []) == {
            "1": 0.0,
            "2": 0.0,
        }

    def test_uses_all_records_of_student(self, make_record, make_student) -> None:
        """Records in subjects outside the course still count."""
        courses = [Course(id="1", name="IT", code="IT")]
        a = make_student(course_id="1", subjects={"1"})
        records = [
            make_record(student_id=a.id, subject_id="1"),
            make_record(student_id=a.id, subject_id="99", status="absent"),
        ]
        assert aggregator.course_percentages(courses, [a], records) == {"1": 50.0}


class TestAttendanceTrend:
    """Cumulative series in date order."""

    def test_cumulative_points(self, make_record) -> None:
        records = [
            make_record(date=D3, status="present"),
            make_record(date=D1, status="present"),
            make_record(date=D2, status="absent"),
        ]
        trend = aggregator.attendance_trend("1", records)
        assert [p.date for p in trend] == [D1, D2, D3]
        assert [p.percentage for p in trend] == pytest.approx([100.0, 50.0, 200 / 3])

    def test_same_day_keeps_stored_order(self, make_record) -> None:
        records = [
            make_record(subject_id="1", status="absent"),
            make_record(subject_id="2", status="present"),
        ]
        trend = aggregator.attendance_trend("1", records)
        assert [p.percentage for p in trend] == [0.0, 50.0]

    def test_other_students_ignored(self, make_record) -> None:
        assert aggregator.attendance_trend("1", [make_record(student_id="2")]) == []


class TestSubjectBreakdown:
    """Per-subject standing for one student."""

    def test_breakdown(self, make_record) -> None:
        subjects = [
            Subject(id="1", name="Artificial Intelligence", code="AI101", course_id="1"),
            Subject(id="2", name="Database Management Systems", code="DBMS101", course_id="1"),
        ]
        records = [
            make_record(subject_id="1"),
            make_record(subject_id="1", date=D2),
            make_record(subject_id="1", date=D3, status="absent"),
        ]
        first, second = aggregator.subject_breakdown("1", ["1", "2"], subjects, records)
        assert (first.name, first.code, first.present, first.total, first.percentage) == (
            "Artificial Intelligence", "AI101", 2, 3, 67,
        )
        assert (second.present, second.total, second.percentage) == (0, 0, 0)

    def test_missing_subject_reported_as_unknown(self, make_record) -> None:
        (entry,) = aggregator.subject_breakdown("1", ["gone"], [], [make_record(subject_id="gone")])
        assert entry.name == "Unknown"
        assert entry.code == ""
        assert entry.percentage == 100


class TestSubjectRoster:
    """Class overview split around the threshold."""

    def test_split_on_rounded_percentage(self, make_record, make_student) -> None:
        good = make_student(subjects={"1"})
        edge = make_student(subjects={"1"})
        poor = make_student(subjects={"1"})
        other = make_student(subjects={"2"})
        records = [
            make_record(student_id=good.id),
            # edge: 149 / 200 = 74.5% rounds to 75 and counts as meeting
            *[make_record(student_id=edge.id) for _ in range(149)],
            *[make_record(student_id=edge.id, status="absent") for _ in range(51)],
            make_record(student_id=poor.id, status="absent"),
            make_record(student_id=other.id, subject_id="2", status="absent"),
        ]
        roster = aggregator.subject_roster("1", [good, edge, poor, other], records)
        by_id = {e.student_id: e.percentage for e in roster.entries}
        assert by_id == {good.id: 100, edge.id: 75, poor.id: 0}
        assert roster.meeting_threshold == 2
        assert roster.below_threshold == 1

    def test_only_subject_records_count(self, make_record, make_student) -> None:
        student = make_student(subjects={"1", "2"})
        records = [
            make_record(student_id=student.id, subject_id="1"),
            make_record(student_id=student.id, subject_id="2", status="absent"),
        ]
        roster = aggregator.subject_roster("1", [student], records)
        assert roster.entries[0].percentage == 100

    def test_enrolled_without_records_below_threshold(self, make_student) -> None:
        roster = aggregator.subject_roster("1", [make_student(subjects={"1"})], [])
        assert roster.entries[0].percentage == 0
        assert roster.below_threshold == 1

    def test_custom_threshold(self, make_record, make_student) -> None:
        student = make_student(subjects={"1"})
        records = [make_record(student_id=student.id), make_record(student_id=student.id, date=D2, status="absent")]
        assert aggregator.subject_roster("1", [student], records, threshold=50).meeting_threshold == 1


class TestHistoryByDate:
    """Daily grouping, newest first."""

    def test_groups_and_counts(self, make_record) -> None:
        records = [
            make_record(date=D1, student_id="1"),
            make_record(date=D1, student_id="2", status="absent"),
            make_record(date=D2, student_id="1", status="absent"),
            make_record(date=D3, student_id="1", subject_id="2"),
        ]
        history = aggregator.history_by_date("1", records)
        assert [h.date for h in history] == [D2, D1]
        assert (history[1].present, history[1].absent) == (1, 1)
        assert (history[0].present, history[0].absent) == (0, 1)
        assert len(history[1].records) == 2

    def test_empty(self) -> None:
        assert aggregator.history_by_date("1", []) == []
