import uuid
from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.db.db import get_session
from app.services import notifications as notification_service
from app.utils.auth_helper import get_directory_entry
from app.utils.directory import DirectoryEntry


router = APIRouter()

@router.get("/")
def get_my_notifications(
    unread_only: bool = False,
    session: Session = Depends(get_session),
    entry: DirectoryEntry = Depends(get_directory_entry),
):
    notifications = notification_service.list_notifications(
        session, entry.public_id, unread_only=unread_only
    )

    return {"notifications": notifications}

@router.get("/count")
def get_unread_notifications_count(
    session: Session = Depends(get_session),
    entry: DirectoryEntry = Depends(get_directory_entry),
):
    return { "count": notification_service.count_unread(session, entry.public_id) }

@router.post("/{notification_id}/mark-read")
def mark_notification_read(
    notification_id: uuid.UUID,
    session: Session = Depends(get_session),
    entry: DirectoryEntry = Depends(get_directory_entry),
):
    notification_service.mark_notification_read(session, notification_id, entry.public_id)

    return {"ok": True}
