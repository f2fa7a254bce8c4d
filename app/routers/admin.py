from typing import List, Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlmodel import Session, select

from app.db.db import get_session
from app.models.found_item import FoundItem
from app.models.lost_report import LostReport
from app.models.status import FoundStatus, LostStatus
from app.services.lifecycle import archivable_found_items
from app.services.matching import claimable_item_names
from app.services.statistics import DashboardStats, load_statistics
from app.utils.auth_helper import require_admin_role
from app.utils.directory import DirectoryEntry

router = APIRouter()


# Response Models
class LostItemNames(BaseModel):
    names: List[str]
    success: bool = True


@router.get("/stats", response_model=DashboardStats)
def get_overview_stats(
    session: Session = Depends(get_session),
    admin: DirectoryEntry = Depends(require_admin_role),
):
    """Counts and ratios over the current record state"""
    return load_statistics(session)


@router.get("/lost-items")
def get_lost_reports(
    status: Optional[LostStatus] = None,
    session: Session = Depends(get_session),
    admin: DirectoryEntry = Depends(require_admin_role),
):
    query = select(LostReport).order_by(LostReport.date_reported.desc())

    if status:
        query = query.where(LostReport.status == status)

    return {"items": session.exec(query).all()}


@router.get("/found-items")
def get_found_items(
    status: Optional[FoundStatus] = None,
    session: Session = Depends(get_session),
    admin: DirectoryEntry = Depends(require_admin_role),
):
    query = select(FoundItem).order_by(FoundItem.date_logged.desc())

    if status:
        query = query.where(FoundItem.status == status)

    return {"items": session.exec(query).all()}


@router.get("/lost-item-names", response_model=LostItemNames)
def get_lost_item_names(
    session: Session = Depends(get_session),
    admin: DirectoryEntry = Depends(require_admin_role),
):
    """Display hint for the dashboard; claiming re-validates server-side"""
    return LostItemNames(names=claimable_item_names(session))


@router.get("/archivable-found-items")
def get_archivable_found_items(
    session: Session = Depends(get_session),
    admin: DirectoryEntry = Depends(require_admin_role),
):
    return {"items": archivable_found_items(session)}
