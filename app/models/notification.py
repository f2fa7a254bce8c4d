import uuid
from sqlmodel import Field, SQLModel
from datetime import datetime, timezone

from app.models.status import NotificationStatus, NotificationType


class Notification(SQLModel, table=True):
    __tablename__ = "notifications"

    notification_id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), index=True)

    # Ownership
    recipient_user_id: str = Field(index=True)

    # Related report; plain reference so deleting a report never touches history
    case_number: str = Field(index=True)

    # Notification fields
    type: NotificationType = Field(index=True)
    message: str

    status: NotificationStatus = Field(default=NotificationStatus.unread)
