from typing import Optional
from sqlmodel import Field, SQLModel
from datetime import datetime, timezone

from app.models.status import LostStatus


class LostReport(SQLModel, table=True):
    __tablename__ = "lost_reports"

    case_number: str = Field(primary_key=True)
    date_reported: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Reporter info
    reporter_id: str = Field(index=True)  # users.public_id

    # Item fields
    item_name: str = Field(index=True)
    item_type: str
    item_color: Optional[str] = None
    brand: Optional[str] = None
    description: str
    last_seen_date: datetime
    last_seen_location: str

    # Lifecycle
    status: LostStatus = Field(default=LostStatus.Reported, index=True)
    matched_found_item_id: Optional[str] = Field(default=None, unique=True)
    archived_at: Optional[datetime] = None
