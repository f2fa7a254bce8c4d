from typing import Optional
from sqlmodel import Field, SQLModel
from datetime import datetime, timezone

from app.models.status import Role


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    public_id: str = Field(index=True, unique=True)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    name: str
    email: str

    role: Role = Field(default=Role.student)
    office_id: Optional[str] = Field(default=None, foreign_key="offices.office_id")  # staff only
