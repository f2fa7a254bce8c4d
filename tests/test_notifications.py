"""Tests for the notification service: creation, pull retrieval, read marking."""

import uuid
from datetime import timedelta

import pytest

from app.models.status import NotificationStatus, NotificationType
from app.services import notifications
from app.services.errors import NotFound

from conftest import NOW, make_report


class TestNotify:
    def test_defaults_to_reporter(self, session) -> None:
        report = make_report(session)
        notif = notifications.notify(session, report.case_number, "Please visit the library desk", now=NOW)

        assert notif.recipient_user_id == "student-1"
        assert notif.type == NotificationType.ContactMessage
        assert notif.status == NotificationStatus.unread
        assert notif.case_number == report.case_number

    def test_explicit_recipient(self, session) -> None:
        report = make_report(session)
        notif = notifications.notify(session, report.case_number, "FYI", recipient_id="staff-1")
        assert notif.recipient_user_id == "staff-1"

    def test_unknown_case(self, session) -> None:
        with pytest.raises(NotFound):
            notifications.notify(session, "LR-missing", "hello")


class TestListNotifications:
    def test_newest_first(self, session) -> None:
        report = make_report(session)
        for offset, text in enumerate(["first", "second", "third"]):
            notifications.notify(session, report.case_number, text, now=NOW + timedelta(minutes=offset))

        listed = notifications.list_notifications(session, "student-1")
        assert [n.message for n in listed] == ["third", "second", "first"]

    def test_only_recipient_rows(self, session) -> None:
        report = make_report(session)
        notifications.notify(session, report.case_number, "for the reporter")
        notifications.notify(session, report.case_number, "for staff", recipient_id="staff-1")

        listed = notifications.list_notifications(session, "staff-1")
        assert [n.message for n in listed] == ["for staff"]

    def test_listing_is_side_effect_free(self, session) -> None:
        report = make_report(session)
        notifications.notify(session, report.case_number, "hello")

        first = notifications.list_notifications(session, "student-1")
        second = notifications.list_notifications(session, "student-1")

        assert [n.notification_id for n in first] == [n.notification_id for n in second]
        assert all(n.status == NotificationStatus.unread for n in second)

    def test_unknown_user_gets_empty_list(self, session) -> None:
        assert notifications.list_notifications(session, "nobody") == []


class TestReadState:
    def test_mark_read_and_count(self, session) -> None:
        report = make_report(session)
        first = notifications.notify(session, report.case_number, "one", now=NOW)
        notifications.notify(session, report.case_number, "two", now=NOW + timedelta(minutes=1))
        assert notifications.count_unread(session, "student-1") == 2

        notifications.mark_notification_read(session, first.notification_id, "student-1")

        assert notifications.count_unread(session, "student-1") == 1
        unread = notifications.list_notifications(session, "student-1", unread_only=True)
        assert [n.message for n in unread] == ["two"]

    def test_cannot_mark_someone_elses(self, session) -> None:
        report = make_report(session)
        notif = notifications.notify(session, report.case_number, "private")

        with pytest.raises(NotFound):
            notifications.mark_notification_read(session, notif.notification_id, "student-2")

    def test_unknown_notification(self, session) -> None:
        with pytest.raises(NotFound):
            notifications.mark_notification_read(session, uuid.uuid4(), "student-1")
