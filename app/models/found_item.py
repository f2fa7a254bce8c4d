from typing import Optional
from sqlmodel import Field, SQLModel
from datetime import datetime, timezone

from app.models.status import FoundStatus


class FoundItem(SQLModel, table=True):
    __tablename__ = "found_items"

    found_item_id: str = Field(primary_key=True)
    date_logged: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Custodian info
    custodian_office_id: str = Field(index=True)
    logged_by: str  # users.public_id of the staff member or admin

    # Item fields
    item_name: str = Field(index=True)
    item_color: str
    description: str
    found_date: datetime
    found_location: str

    # Lifecycle
    status: FoundStatus = Field(default=FoundStatus.Found, index=True)
    matched_case_number: Optional[str] = Field(default=None, unique=True)
    disposition: Optional[str] = None  # e.g. "Returned_to_Owner", set on archival
    archived_at: Optional[datetime] = None
