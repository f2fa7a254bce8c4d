"""Tests for matching: preconditions, 1:1 pairing, races and the claim hint."""

import pytest
from sqlmodel import Session, select

from app.models.found_item import FoundItem
from app.models.lost_report import LostReport
from app.models.notification import Notification
from app.models.status import FoundStatus, LostStatus, NotificationType
from app.services import lifecycle
from app.services.errors import AlreadyMatched, Conflict, NotFound
from app.services.matching import claimable_item_names, match_found_item_to_report
from app.services.record_store import RecordStore

from conftest import NOW, make_found, make_report


class TestMatch:
    def test_scenario_b_pairs_both_records(self, session) -> None:
        item = make_found(session)
        report = make_report(session)

        result = match_found_item_to_report(session, item.found_item_id, report.case_number, now=NOW)

        assert result.found_item.status == FoundStatus.Matched
        assert result.found_item.matched_case_number == report.case_number
        assert result.lost_report.status == LostStatus.Matched
        assert result.lost_report.matched_found_item_id == item.found_item_id

        sent = session.exec(select(Notification)).all()
        assert len(sent) == 1
        assert sent[0].type == NotificationType.MatchFound
        assert sent[0].recipient_user_id == "student-1"
        assert sent[0].case_number == report.case_number

    def test_missing_found_item(self, session) -> None:
        report = make_report(session)
        with pytest.raises(NotFound):
            match_found_item_to_report(session, "FI-missing", report.case_number)

    def test_missing_report(self, session) -> None:
        item = make_found(session)
        with pytest.raises(NotFound):
            match_found_item_to_report(session, item.found_item_id, "LR-missing")

    def test_matched_item_cannot_match_again(self, session) -> None:
        item = make_found(session)
        first = make_report(session)
        second = make_report(session, name="Red Umbrella", reporter="student-2")
        match_found_item_to_report(session, item.found_item_id, first.case_number, now=NOW)

        with pytest.raises(AlreadyMatched):
            match_found_item_to_report(session, item.found_item_id, second.case_number, now=NOW)

        session.refresh(second)
        assert second.status == LostStatus.Reported
        assert second.matched_found_item_id is None

    def test_matched_report_cannot_match_again(self, session) -> None:
        first = make_found(session)
        second = make_found(session, name="Black Backpack")
        report = make_report(session)
        match_found_item_to_report(session, first.found_item_id, report.case_number, now=NOW)

        with pytest.raises(AlreadyMatched):
            match_found_item_to_report(session, second.found_item_id, report.case_number, now=NOW)

        session.refresh(second)
        assert second.status == FoundStatus.Found

    def test_archived_records_are_ineligible(self, session, admin_actor) -> None:
        item = make_found(session)
        report = make_report(session)
        lifecycle.archive_found_item(session, item.found_item_id, admin_actor, now=NOW)

        with pytest.raises(AlreadyMatched):
            match_found_item_to_report(session, item.found_item_id, report.case_number, now=NOW)

    def test_claimed_item_is_ineligible(self, session) -> None:
        item = make_found(session)
        report = make_report(session)
        lifecycle.mark_found_as_claimed(session, item.found_item_id, now=NOW)

        with pytest.raises(AlreadyMatched):
            match_found_item_to_report(session, item.found_item_id, report.case_number, now=NOW)


class TestConcurrentMatching:
    def test_stale_found_item_read_loses_race(self, session, engine, monkeypatch) -> None:
        item = make_found(session)
        first = make_report(session)
        second = make_report(session, name="Blue Rucksack", reporter="student-2")

        stale = FoundItem(**item.model_dump())

        # another admin pairs the item first
        with Session(engine) as other:
            match_found_item_to_report(other, item.found_item_id, first.case_number, now=NOW)

        monkeypatch.setattr(RecordStore, "get_found_item", lambda self, _id: stale)

        with pytest.raises(Conflict):
            match_found_item_to_report(session, item.found_item_id, second.case_number, now=NOW)

        with Session(engine) as fresh:
            assert fresh.get(LostReport, second.case_number).status == LostStatus.Reported
            assert fresh.get(FoundItem, item.found_item_id).matched_case_number == first.case_number

    def test_stale_report_read_loses_race(self, session, engine, monkeypatch) -> None:
        first = make_found(session)
        second = make_found(session, name="Navy Backpack")
        report = make_report(session)

        stale = LostReport(**report.model_dump())

        with Session(engine) as other:
            match_found_item_to_report(other, first.found_item_id, report.case_number, now=NOW)

        monkeypatch.setattr(RecordStore, "get_lost_report", lambda self, _id: stale)

        with pytest.raises(Conflict):
            match_found_item_to_report(session, second.found_item_id, report.case_number, now=NOW)

        # the loser's found-item write was rolled back with the rest
        with Session(engine) as fresh:
            loser = fresh.get(FoundItem, second.found_item_id)
            assert loser.status == FoundStatus.Found
            assert loser.matched_case_number is None


class TestPairingConstraint:
    def test_store_rejects_second_holder_of_a_case(self, session) -> None:
        first = make_found(session)
        second = make_found(session, name="Grey Backpack")
        report = make_report(session)
        match_found_item_to_report(session, first.found_item_id, report.case_number, now=NOW)

        store = RecordStore(session)
        with pytest.raises(Conflict):
            with store.transaction():
                store.update_found_item(
                    second.found_item_id,
                    expected=FoundStatus.Found,
                    status=FoundStatus.Matched,
                    matched_case_number=report.case_number,
                )

        session.refresh(second)
        assert second.status == FoundStatus.Found

    def test_conditional_update_rejects_unexpected_status(self, session) -> None:
        item = make_found(session)
        store = RecordStore(session)

        with pytest.raises(Conflict):
            with store.transaction():
                store.update_found_item(
                    item.found_item_id,
                    expected=FoundStatus.Matched,
                    status=FoundStatus.Claimed,
                )

        session.refresh(item)
        assert item.status == FoundStatus.Found


class TestClaimableNames:
    def test_lists_unpaired_report_names(self, session) -> None:
        make_report(session, name="Blue Backpack")
        make_report(session, name="Blue Backpack", reporter="student-2")
        found_report = make_report(session, name="Calculator")
        lifecycle.mark_lost_as_found(session, found_report.case_number, now=NOW)

        matched = make_report(session, name="Red Umbrella")
        item = make_found(session, name="Red Umbrella")
        match_found_item_to_report(session, item.found_item_id, matched.case_number, now=NOW)

        assert claimable_item_names(session) == ["Blue Backpack", "Calculator"]

    def test_empty_store(self, session) -> None:
        assert claimable_item_names(session) == []
