from typing import Iterable

from pydantic import BaseModel
from sqlmodel import Session, select

from app.models.found_item import FoundItem
from app.models.lost_report import LostReport
from app.models.status import FoundStatus, LostStatus


class DashboardStats(BaseModel):
    total_lost: int
    total_found: int
    total_claimed: int  # counted on the lost-report side
    total_matched: int
    total_archived: int
    found_rate: float
    claim_rate: float


def compute_statistics(
    lost_statuses: Iterable[LostStatus], found_statuses: Iterable[FoundStatus]
) -> DashboardStats:
    """Derive dashboard counts from the current statuses of every record."""
    lost = [LostStatus(s) for s in lost_statuses]
    found = [FoundStatus(s) for s in found_statuses]

    total_lost = len(lost)
    total_found = len(found)
    total_claimed = lost.count(LostStatus.Claimed)

    return DashboardStats(
        total_lost=total_lost,
        total_found=total_found,
        total_claimed=total_claimed,
        total_matched=lost.count(LostStatus.Matched) + found.count(FoundStatus.Matched),
        total_archived=lost.count(LostStatus.Archived) + found.count(FoundStatus.Archived),
        found_rate=total_found / total_lost if total_lost else 0.0,
        claim_rate=total_claimed / total_found if total_found else 0.0,
    )


def load_statistics(session: Session) -> DashboardStats:
    lost_statuses = session.exec(select(LostReport.status)).all()
    found_statuses = session.exec(select(FoundItem.status)).all()

    return compute_statistics(lost_statuses, found_statuses)
