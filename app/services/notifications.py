"""
Notification service.

Notifications are append-only records pulled by their recipient. Lifecycle
transitions call ``emit_after_commit`` once their own write has committed; a
failure there is logged and handed back as a warning instead of undoing the
transition.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, func, select

from app.models.lost_report import LostReport
from app.models.notification import Notification
from app.models.status import NotificationStatus, NotificationType
from app.services.errors import NotFound

logger = logging.getLogger(__name__)


def _create_notification(
    session: Session,
    recipient_user_id: str,
    case_number: str,
    type: NotificationType,
    message: str,
    now: Optional[datetime] = None,
) -> Notification:
    notification = Notification(
        recipient_user_id=recipient_user_id,
        case_number=case_number,
        type=type,
        message=message,
        date=now or datetime.now(timezone.utc),
    )

    session.add(notification)
    session.commit()
    session.refresh(notification)

    return notification


def emit_after_commit(
    session: Session,
    recipient_user_id: str,
    case_number: str,
    type: NotificationType,
    message: str,
    now: Optional[datetime] = None,
) -> List[str]:
    """Create a transition notification; returns warnings instead of raising."""
    try:
        _create_notification(session, recipient_user_id, case_number, type, message, now)
    except SQLAlchemyError:
        session.rollback()
        logger.exception(
            "Failed to create %s notification for case %s", type.value, case_number
        )
        return [f"{type.value} notification for case {case_number} could not be delivered"]

    logger.info("Queued %s notification for %s", type.value, recipient_user_id)
    return []


def notify(
    session: Session,
    case_number: str,
    message: str,
    recipient_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Notification:
    """Send a contact message about a case; defaults to the case's reporter."""
    report = session.get(LostReport, case_number)
    if not report:
        raise NotFound(f"Lost report '{case_number}' not found")

    return _create_notification(
        session,
        recipient_user_id=recipient_id or report.reporter_id,
        case_number=case_number,
        type=NotificationType.ContactMessage,
        message=message,
        now=now,
    )


def list_notifications(
    session: Session, user_id: str, unread_only: bool = False
) -> List[Notification]:
    query = (
        select(Notification)
        .where(Notification.recipient_user_id == user_id)
        .order_by(Notification.date.desc())
    )

    if unread_only:
        query = query.where(Notification.status == NotificationStatus.unread)

    return list(session.exec(query).all())


def count_unread(session: Session, user_id: str) -> int:
    return session.exec(
        select(func.count(Notification.notification_id))
        .where(Notification.recipient_user_id == user_id)
        .where(Notification.status == NotificationStatus.unread)
    ).one()


def mark_notification_read(
    session: Session, notification_id: uuid.UUID, user_id: str
) -> Notification:
    notif = session.exec(
        select(Notification)
        .where(Notification.notification_id == notification_id)
        .where(Notification.recipient_user_id == user_id)
    ).first()

    if not notif:
        raise NotFound("Notification not found")

    notif.status = NotificationStatus.read
    session.add(notif)
    session.commit()
    session.refresh(notif)

    return notif
