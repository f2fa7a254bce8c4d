"""
Lifecycle operations for lost reports and found items.

Each operation validates (admin gate, existence, state), then writes through
``RecordStore`` conditional updates inside one transaction, then emits the
notification for the transition. Legal edges live in ``transitions``.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlmodel import Session, select

from app.models.found_item import FoundItem
from app.models.lost_report import LostReport
from app.models.status import FoundStatus, LostStatus, NotificationType
from app.services.errors import DependencyExists, PolicyViolation, TransitionResult
from app.services.notifications import emit_after_commit
from app.services.record_store import RecordStore
from app.services.transitions import (
    LOST_DELETABLE,
    LOST_TERMINAL,
    Action,
    found_sources,
    next_found_status,
    next_lost_status,
)
from app.utils.admin_gate import Actor, require_admin

logger = logging.getLogger(__name__)

IDLE_RETENTION_DAYS = 30
DEFAULT_DISPOSITION = "Returned_to_Owner"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_record_id(prefix: str, now: Optional[datetime] = None) -> str:
    now = now or utcnow()
    return f"{prefix}-{now:%Y%m%d}-{uuid.uuid4().hex[:10].upper()}"


def idle_days(date_reported: datetime, now: datetime) -> int:
    # calendar days; sqlite hands datetimes back naive, so compare dates only
    return (now.date() - date_reported.date()).days


def is_idle(report: LostReport, now: datetime) -> bool:
    return idle_days(report.date_reported, now) > IDLE_RETENTION_DAYS


def _refreshed(session: Session, *records):
    for record in records:
        if record is not None:
            session.refresh(record)


# Creation


def create_lost_report(
    session: Session,
    reporter_id: str,
    item_name: str,
    item_type: str,
    description: str,
    last_seen_date: datetime,
    last_seen_location: str,
    item_color: Optional[str] = None,
    brand: Optional[str] = None,
    now: Optional[datetime] = None,
) -> LostReport:
    now = now or utcnow()

    report = LostReport(
        case_number=new_record_id("LR", now),
        date_reported=now,
        reporter_id=reporter_id,
        item_name=item_name,
        item_type=item_type,
        item_color=item_color,
        brand=brand,
        description=description,
        last_seen_date=last_seen_date,
        last_seen_location=last_seen_location,
        status=LostStatus.Reported,
    )

    RecordStore(session).add(report)
    logger.info("Lost report %s created by %s", report.case_number, reporter_id)

    return report


def log_found_item(
    session: Session,
    logged_by: str,
    custodian_office_id: str,
    item_name: str,
    item_color: str,
    description: str,
    found_date: datetime,
    found_location: str,
    now: Optional[datetime] = None,
) -> FoundItem:
    now = now or utcnow()

    item = FoundItem(
        found_item_id=new_record_id("FI", now),
        date_logged=now,
        logged_by=logged_by,
        custodian_office_id=custodian_office_id,
        item_name=item_name,
        item_color=item_color,
        description=description,
        found_date=found_date,
        found_location=found_location,
        status=FoundStatus.Found,
    )

    RecordStore(session).add(item)
    logger.info("Found item %s logged at office %s", item.found_item_id, custodian_office_id)

    return item


# Lost report transitions


def mark_lost_as_found(
    session: Session, case_number: str, now: Optional[datetime] = None
) -> TransitionResult:
    """Signal that a reported item turned up; pairing happens separately via matching."""
    store = RecordStore(session)
    report = store.get_lost_report(case_number)

    current = LostStatus(report.status)
    target = next_lost_status(current, Action.mark_found)

    with store.transaction():
        store.update_lost_report(case_number, expected=current, status=target)

    logger.info("Lost report %s: %s -> %s", case_number, current.value, target.value)

    warnings = emit_after_commit(
        session,
        recipient_user_id=report.reporter_id,
        case_number=case_number,
        type=NotificationType.MarkedFound,
        message=f"Good news! Your lost item '{report.item_name}' has been marked as found.",
        now=now,
    )

    _refreshed(session, report)
    return TransitionResult(lost_report=report, warnings=warnings)


def mark_lost_unclaimed(session: Session, case_number: str) -> TransitionResult:
    store = RecordStore(session)
    report = store.get_lost_report(case_number)

    current = LostStatus(report.status)
    target = next_lost_status(current, Action.expire)

    with store.transaction():
        store.update_lost_report(case_number, expected=current, status=target)

    logger.info("Lost report %s: %s -> %s", case_number, current.value, target.value)

    _refreshed(session, report)
    return TransitionResult(lost_report=report)


def archive_lost_report(
    session: Session,
    case_number: str,
    actor: Actor,
    now: Optional[datetime] = None,
) -> TransitionResult:
    """
    Archive a lost report.

    Allowed unconditionally for matched reports, and for any report that is
    neither claimed nor archived once it has been idle for more than
    ``IDLE_RETENTION_DAYS`` calendar days. Archiving a matched report drops
    its pairing reference.
    """
    require_admin(actor, "archive lost reports")

    now = now or utcnow()
    store = RecordStore(session)
    report = store.get_lost_report(case_number)

    current = LostStatus(report.status)
    eligible = current == LostStatus.Matched or (
        current not in LOST_TERMINAL and is_idle(report, now)
    )

    if not eligible:
        raise PolicyViolation(
            f"Lost report '{case_number}' in status '{current.value}' reported "
            f"{idle_days(report.date_reported, now)} days ago cannot be archived"
        )

    target = next_lost_status(current, Action.archive)

    with store.transaction():
        store.update_lost_report(
            case_number,
            expected=current,
            status=target,
            archived_at=now,
            matched_found_item_id=None,
        )

    logger.info("Lost report %s archived by %s (was %s)", case_number, actor.user_id, current.value)

    warnings = emit_after_commit(
        session,
        recipient_user_id=report.reporter_id,
        case_number=case_number,
        type=NotificationType.Archived,
        message=f"Your report for '{report.item_name}' has been archived.",
        now=now,
    )

    _refreshed(session, report)
    return TransitionResult(lost_report=report, warnings=warnings)


def delete_lost_report(session: Session, case_number: str, actor: Actor) -> TransitionResult:
    """Hard-delete an unpaired report. Never cascades to found items."""
    require_admin(actor, "delete lost reports")

    store = RecordStore(session)
    report = store.get_lost_report(case_number)

    current = LostStatus(report.status)

    if current not in LOST_DELETABLE or report.matched_found_item_id:
        raise DependencyExists(
            f"Lost report '{case_number}' in status '{current.value}' is linked to a "
            "found item or resolved and cannot be deleted"
        )

    holder = store.found_item_referencing(case_number)
    if holder:
        raise DependencyExists(
            f"Found item '{holder.found_item_id}' still references lost report '{case_number}'"
        )

    deleted = LostReport(**report.model_dump())

    with store.transaction():
        store.delete_lost_report(case_number, expected=current)

    # the row is gone; keep the session from reloading it
    session.expunge(report)

    logger.info("Lost report %s deleted by %s", case_number, actor.user_id)

    return TransitionResult(lost_report=deleted)


# Found item transitions


def archivable_found_items(session: Session) -> List[FoundItem]:
    """Found items an admin may still archive, oldest first."""
    return list(session.exec(
        select(FoundItem)
        .where(FoundItem.status.in_(list(found_sources(Action.archive))))
        .order_by(FoundItem.date_logged)
    ).all())


def archive_found_item(
    session: Session,
    found_item_id: str,
    actor: Actor,
    disposition: Optional[str] = None,
    now: Optional[datetime] = None,
) -> TransitionResult:
    require_admin(actor, "archive found items")

    now = now or utcnow()
    store = RecordStore(session)
    item = store.get_found_item(found_item_id)

    current = FoundStatus(item.status)
    target = next_found_status(current, Action.archive)

    with store.transaction():
        store.update_found_item(
            found_item_id,
            expected=current,
            status=target,
            disposition=disposition or DEFAULT_DISPOSITION,
            archived_at=now,
        )

    logger.info("Found item %s archived by %s (was %s)", found_item_id, actor.user_id, current.value)

    _refreshed(session, item)
    return TransitionResult(found_item=item)


def mark_found_unclaimed(session: Session, found_item_id: str) -> TransitionResult:
    store = RecordStore(session)
    item = store.get_found_item(found_item_id)

    current = FoundStatus(item.status)
    target = next_found_status(current, Action.expire)

    with store.transaction():
        store.update_found_item(found_item_id, expected=current, status=target)

    logger.info("Found item %s: %s -> %s", found_item_id, current.value, target.value)

    _refreshed(session, item)
    return TransitionResult(found_item=item)


def mark_found_as_claimed(
    session: Session, found_item_id: str, now: Optional[datetime] = None
) -> TransitionResult:
    """
    Hand a found item over to its owner.

    When the item is paired with a lost report, the report moves to Claimed
    in the same transaction; if it cannot, neither record changes.
    """
    store = RecordStore(session)
    item = store.get_found_item(found_item_id)

    current = FoundStatus(item.status)
    target = next_found_status(current, Action.claim)

    report = None
    if item.matched_case_number:
        report = store.get_lost_report(item.matched_case_number)
        report_current = LostStatus(report.status)
        report_target = next_lost_status(report_current, Action.claim)

    with store.transaction():
        store.update_found_item(found_item_id, expected=current, status=target)
        if report is not None:
            store.update_lost_report(
                report.case_number, expected=report_current, status=report_target
            )

    logger.info(
        "Found item %s claimed (paired report: %s)",
        found_item_id, report.case_number if report else None,
    )

    warnings = []
    if report is not None:
        warnings = emit_after_commit(
            session,
            recipient_user_id=report.reporter_id,
            case_number=report.case_number,
            type=NotificationType.Claimed,
            message=f"Your item '{report.item_name}' has been collected and the case is closed.",
            now=now,
        )

    _refreshed(session, item, report)
    return TransitionResult(lost_report=report, found_item=item, warnings=warnings)
