import logging
from datetime import datetime
from typing import List, Optional

from sqlmodel import Session, select

from app.models.lost_report import LostReport
from app.models.status import FoundStatus, LostStatus, NotificationType
from app.services.errors import AlreadyMatched, TransitionResult
from app.services.notifications import emit_after_commit
from app.services.record_store import RecordStore
from app.services.transitions import (
    Action,
    can_transition_found,
    can_transition_lost,
    lost_sources,
    next_found_status,
    next_lost_status,
)

logger = logging.getLogger(__name__)


def match_found_item_to_report(
    session: Session,
    found_item_id: str,
    case_number: str,
    now: Optional[datetime] = None,
) -> TransitionResult:
    """
    Pair one found item with one lost report.

    Both records move to Matched and reference each other, or neither
    changes. A concurrent pairing of either record surfaces as ``Conflict``.
    """
    store = RecordStore(session)
    item = store.get_found_item(found_item_id)
    report = store.get_lost_report(case_number)

    item_status = FoundStatus(item.status)
    report_status = LostStatus(report.status)

    if not can_transition_found(item_status, Action.match):
        raise AlreadyMatched(
            f"Found item '{found_item_id}' is '{item_status.value}' and cannot be matched"
        )

    if not can_transition_lost(report_status, Action.match):
        raise AlreadyMatched(
            f"Lost report '{case_number}' is '{report_status.value}' and cannot be matched"
        )

    with store.transaction():
        store.update_found_item(
            found_item_id,
            expected=item_status,
            status=next_found_status(item_status, Action.match),
            matched_case_number=case_number,
        )
        store.update_lost_report(
            case_number,
            expected=report_status,
            status=next_lost_status(report_status, Action.match),
            matched_found_item_id=found_item_id,
        )

    logger.info("Matched found item %s with lost report %s", found_item_id, case_number)

    warnings = emit_after_commit(
        session,
        recipient_user_id=report.reporter_id,
        case_number=case_number,
        type=NotificationType.MatchFound,
        message=(
            f"A found item matching your report '{report.item_name}' is being held "
            f"at {item.found_location}. Please contact the custodian office to collect it."
        ),
        now=now,
    )

    session.refresh(item)
    session.refresh(report)

    return TransitionResult(lost_report=report, found_item=item, warnings=warnings)


def claimable_item_names(session: Session) -> List[str]:
    """
    Names of lost reports still waiting for a pairing.

    Only a display hint for which found items look claimable; claiming always
    re-validates through ``mark_found_as_claimed``.
    """
    names = session.exec(
        select(LostReport.item_name)
        .where(LostReport.status.in_(list(lost_sources(Action.match))))
        .distinct()
        .order_by(LostReport.item_name)
    ).all()

    return list(names)
