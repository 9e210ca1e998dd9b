"""Notification engine — low-attendance alerts and notification read state.

``evaluate_and_notify`` is the trigger: it is run for every affected student
after attendance is saved and again when a student opens their dashboard.
Both call sites share one dedup window, so a student below threshold gets at
most one "Low Attendance Alert" per rolling window (24 hours by default) no
matter how often the evaluation fires. Recovery is silent — no success
notification is ever emitted when attendance climbs back over threshold.

The engine keeps no state between calls. Everything is read from and written
back to the repository, and the clock can be pinned with ``now=`` for
deterministic behaviour.

Tier 3 module: imports from attendance_tracker.repository (Tier 2),
attendance_tracker.aggregator (Tier 2) and attendance_tracker.schemas (Tier 1).

Usage:
    from attendance_tracker.notifications import NotificationEngine

    engine = NotificationEngine(repo)
    engine.record_attendance(date(2026, 3, 2), "1", {"1": "present", "2": "absent"})
    engine.unread_count(user.id)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import date, datetime, timedelta, timezone

from attendance_tracker import aggregator
from attendance_tracker.repository import NOTIFICATIONS, EntityRepository
from attendance_tracker.schemas import (
    AttendanceRecord,
    AttendanceStatus,
    Notification,
    NotificationType,
    as_utc,
)

logger = logging.getLogger("attendance_tracker.notifications")

LOW_ATTENDANCE_TITLE = "Low Attendance Alert"
DEFAULT_ALERT_WINDOW = timedelta(hours=24)


def low_attendance_message(percentage: float, threshold: float) -> str:
    """Alert text; the percentage is rounded for display only."""
    return (
        f"Your attendance has dropped to {aggregator.rounded(percentage)}%. "
        f"Please attend classes regularly to meet the minimum "
        f"{aggregator.rounded(threshold)}% requirement."
    )


class NotificationEngine:
    """Creates, queries and updates notifications.

    Args:
        repository: Where attendance, users and notifications are read from
            and notifications are written to.
        threshold: Percentage below which a student is alerted.
        window: How long an existing alert suppresses a new one.
    """

    def __init__(
        self,
        repository: EntityRepository,
        *,
        threshold: float = aggregator.ATTENDANCE_THRESHOLD,
        window: timedelta = DEFAULT_ALERT_WINDOW,
    ) -> None:
        self._repo = repository
        self._threshold = float(threshold)
        self._window = window

    @property
    def threshold(self) -> float:
        return self._threshold

    @property
    def window(self) -> timedelta:
        return self._window

    # -- Trigger ------------------------------------------------------------

    def evaluate_and_notify(
        self, student_id: str, *, now: datetime | None = None
    ) -> Notification | None:
        """Alerts the student's user if their attendance is below threshold.

        No-ops (returning None) when the student has no records, is at or
        above threshold, has no student record or student login, or already
        received an alert inside the window.

        Args:
            student_id: The Student id (a User's profile_id).
            now: Evaluation time; defaults to the current UTC time.

        Returns:
            The notification that was created, or None.
        """
        now = now or datetime.now(timezone.utc)

        records = self._repo.attendance_for_student(student_id)
        if not records:
            logger.debug("Student %s has no attendance records, skipping", student_id)
            return None

        current = aggregator.percentage(records)
        if current >= self._threshold:
            return None

        user = self._repo.find_user_for_profile(student_id, role="student")
        if self._repo.find_student(student_id) is None or user is None:
            logger.debug("No student login for %s, alert not sent", student_id)
            return None

        if self._has_recent_alert(user.id, now):
            logger.debug("Alert for user %s suppressed (inside window)", user.id)
            return None

        notification = self.create(
            user_id=user.id,
            title=LOW_ATTENDANCE_TITLE,
            message=low_attendance_message(current, self._threshold),
            type="warning",
            now=now,
        )
        logger.info(
            "Low attendance alert for student %s: %.1f%%",
            student_id,
            current,
            extra={
                "student_id": student_id,
                "user_id": user.id,
                "percentage": current,
                "notification_id": notification.id,
            },
        )
        return notification

    def evaluate_many(
        self, student_ids: Iterable[str], *, now: datetime | None = None
    ) -> list[Notification]:
        """Runs evaluate_and_notify for each id; returns the alerts created."""
        now = now or datetime.now(timezone.utc)
        created = []
        for student_id in student_ids:
            notification = self.evaluate_and_notify(student_id, now=now)
            if notification is not None:
                created.append(notification)
        return created

    def record_attendance(
        self,
        day: date,
        subject_id: str,
        marks: Mapping[str, AttendanceStatus],
        *,
        now: datetime | None = None,
    ) -> list[AttendanceRecord]:
        """Saves one marking session, then evaluates every enrolled student.

        Every student enrolled in the subject is evaluated, not only those
        present in marks.

        Returns:
            The attendance records written for (day, subject_id); [] when
            marks is empty, in which case nothing is saved or evaluated.
        """
        batch = self._repo.save_attendance_session(day, subject_id, marks)
        if not batch:
            return batch
        enrolled = [s.id for s in self._repo.students_for_subject(subject_id)]
        self.evaluate_many(enrolled, now=now)
        return batch

    def _has_recent_alert(self, user_id: str, now: datetime) -> bool:
        cutoff = as_utc(now) - self._window
        return any(
            n.type == "warning"
            and n.title == LOW_ATTENDANCE_TITLE
            and n.created_at > cutoff
            for n in self._repo.get_notifications(user_id)
        )

    # -- Creation -----------------------------------------------------------

    def create(
        self,
        *,
        user_id: str,
        title: str,
        message: str,
        type: NotificationType,
        now: datetime | None = None,
    ) -> Notification:
        """Appends a new unread notification and returns it."""
        notification = Notification(
            user_id=user_id,
            title=title,
            message=message,
            type=type,
            read=False,
            created_at=now or datetime.now(timezone.utc),
        )
        notifications = self._repo.get_notifications()
        notifications.append(notification)
        self._repo.save(NOTIFICATIONS, notifications)
        return notification

    # -- Queries ------------------------------------------------------------

    def list_for_user(self, user_id: str) -> list[Notification]:
        """The user's notifications, newest first."""
        return sorted(
            self._repo.get_notifications(user_id),
            key=lambda n: n.created_at,
            reverse=True,
        )

    def unread_for_user(self, user_id: str) -> list[Notification]:
        return [n for n in self.list_for_user(user_id) if not n.read]

    def unread_count(self, user_id: str) -> int:
        return len(self.unread_for_user(user_id))

    # -- Read state ---------------------------------------------------------

    def mark_as_read(self, notification_id: str) -> None:
        """Sets read=True on one notification. Others are untouched."""
        notifications = self._repo.get_notifications()
        for n in notifications:
            if n.id == notification_id:
                n.read = True
        self._repo.save(NOTIFICATIONS, notifications)

    def mark_all_as_read(self, user_id: str) -> None:
        """Sets read=True on every notification for user_id, read or not."""
        notifications = self._repo.get_notifications()
        for n in notifications:
            if n.user_id == user_id:
                n.read = True
        self._repo.save(NOTIFICATIONS, notifications)

    def delete(self, notification_id: str) -> bool:
        """Removes one notification regardless of its read state."""
        return self._repo.delete(NOTIFICATIONS, notification_id)
