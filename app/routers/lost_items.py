from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from app.db.db import get_session
from app.models.lost_report import LostReport
from app.models.status import Role
from app.services import lifecycle, notifications
from app.utils.admin_gate import Actor
from app.utils.auth_helper import get_actor, get_directory_entry, require_staff_or_admin
from app.utils.directory import DirectoryEntry
from app.utils.form_validator import LostReportCreate, NotifyRequest

router = APIRouter()


@router.post("/")
def report_lost_item(
    payload: LostReportCreate,
    session: Session = Depends(get_session),
    entry: DirectoryEntry = Depends(get_directory_entry),
):
    report = lifecycle.create_lost_report(
        session,
        reporter_id=entry.public_id,
        item_name=payload.itemName,
        item_type=payload.itemType,
        item_color=payload.itemColor,
        brand=payload.brand,
        description=payload.description,
        last_seen_date=payload.lastSeenDate,
        last_seen_location=payload.lastSeenLocation,
    )

    return {
        "success": True,
        "caseNumber": report.case_number,
        "lost_report": report.model_dump(mode="json"),
    }


@router.get("/mine")
def get_my_lost_reports(
    session: Session = Depends(get_session),
    entry: DirectoryEntry = Depends(get_directory_entry),
):
    items = session.exec(
        select(LostReport)
        .where(LostReport.reporter_id == entry.public_id)
        .order_by(LostReport.date_reported.desc())
    ).all()

    return {"items": items}


@router.get("/{case_number}")
def get_lost_report(
    case_number: str,
    session: Session = Depends(get_session),
    entry: DirectoryEntry = Depends(get_directory_entry),
):
    report = session.get(LostReport, case_number)
    if not report:
        raise HTTPException(status_code=404, detail="Lost report not found")

    if entry.role == Role.student and report.reporter_id != entry.public_id:
        raise HTTPException(status_code=403, detail="Not authorized to view this report")

    return report


@router.post("/{case_number}/mark-found")
def mark_lost_as_found(
    case_number: str,
    session: Session = Depends(get_session),
    staff: DirectoryEntry = Depends(require_staff_or_admin),
):
    return lifecycle.mark_lost_as_found(session, case_number).to_response()


@router.post("/{case_number}/mark-unclaimed")
def mark_lost_unclaimed(
    case_number: str,
    session: Session = Depends(get_session),
    staff: DirectoryEntry = Depends(require_staff_or_admin),
):
    return lifecycle.mark_lost_unclaimed(session, case_number).to_response()


@router.post("/{case_number}/notify")
def contact_reporter(
    case_number: str,
    payload: NotifyRequest,
    session: Session = Depends(get_session),
    staff: DirectoryEntry = Depends(require_staff_or_admin),
):
    notification = notifications.notify(
        session, case_number, payload.message, recipient_id=payload.recipientId
    )

    return {
        "success": True,
        "notificationId": str(notification.notification_id),
    }


@router.post("/{case_number}/archive")
def archive_lost_report(
    case_number: str,
    session: Session = Depends(get_session),
    actor: Actor = Depends(get_actor),
):
    return lifecycle.archive_lost_report(session, case_number, actor).to_response()


@router.delete("/{case_number}")
def delete_lost_report(
    case_number: str,
    session: Session = Depends(get_session),
    actor: Actor = Depends(get_actor),
):
    return lifecycle.delete_lost_report(session, case_number, actor).to_response()
