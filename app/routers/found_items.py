from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from app.db.db import get_session
from app.models.found_item import FoundItem
from app.models.status import Role
from app.services import lifecycle, matching
from app.utils.admin_gate import Actor
from app.utils.auth_helper import get_actor, require_staff_or_admin
from app.utils.directory import DirectoryEntry
from app.utils.form_validator import ArchiveFoundRequest, FoundItemCreate, MatchRequest

router = APIRouter()


@router.post("/")
def log_found_item(
    payload: FoundItemCreate,
    session: Session = Depends(get_session),
    staff: DirectoryEntry = Depends(require_staff_or_admin),
):
    office_id = payload.officeId if staff.role == Role.admin else staff.office_id

    if not office_id:
        raise HTTPException(status_code=400, detail="A custodian office is required")

    if staff.role == Role.staff and payload.officeId and payload.officeId != staff.office_id:
        raise HTTPException(status_code=403, detail="Staff can only log items for their own office")

    item = lifecycle.log_found_item(
        session,
        logged_by=staff.public_id,
        custodian_office_id=office_id,
        item_name=payload.itemName,
        item_color=payload.itemColor,
        description=payload.description,
        found_date=payload.foundDate,
        found_location=payload.foundLocation,
    )

    return {
        "success": True,
        "foundItemId": item.found_item_id,
        "found_item": item.model_dump(mode="json"),
    }


@router.get("/{found_item_id}")
def get_found_item(
    found_item_id: str,
    session: Session = Depends(get_session),
    staff: DirectoryEntry = Depends(require_staff_or_admin),
):
    item = session.get(FoundItem, found_item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Found item not found")

    return item


@router.post("/{found_item_id}/match")
def match_with_report(
    found_item_id: str,
    payload: MatchRequest,
    session: Session = Depends(get_session),
    staff: DirectoryEntry = Depends(require_staff_or_admin),
):
    return matching.match_found_item_to_report(
        session, found_item_id, payload.caseNumber
    ).to_response()


@router.post("/{found_item_id}/mark-claimed")
def mark_found_as_claimed(
    found_item_id: str,
    session: Session = Depends(get_session),
    staff: DirectoryEntry = Depends(require_staff_or_admin),
):
    return lifecycle.mark_found_as_claimed(session, found_item_id).to_response()


@router.post("/{found_item_id}/mark-unclaimed")
def mark_found_unclaimed(
    found_item_id: str,
    session: Session = Depends(get_session),
    staff: DirectoryEntry = Depends(require_staff_or_admin),
):
    return lifecycle.mark_found_unclaimed(session, found_item_id).to_response()


@router.post("/{found_item_id}/archive")
def archive_found_item(
    found_item_id: str,
    payload: ArchiveFoundRequest,
    session: Session = Depends(get_session),
    actor: Actor = Depends(get_actor),
):
    return lifecycle.archive_found_item(
        session, found_item_id, actor, disposition=payload.disposition
    ).to_response()
