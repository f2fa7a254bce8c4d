from typing import Optional

from pydantic import BaseModel
from sqlmodel import Session, select

from app.models.found_item import FoundItem
from app.models.lost_report import LostReport
from app.models.office import Office
from app.models.status import Role
from app.models.user import User


class DirectoryEntry(BaseModel):
    public_id: str
    name: str
    role: Role
    office_id: Optional[str] = None
    office_name: Optional[str] = None


def lookup_user(session: Session, public_id: str) -> Optional[DirectoryEntry]:
    result = session.exec(
        select(User, Office)
        .join(Office, User.office_id == Office.office_id, isouter=True)
        .where(User.public_id == public_id)
    ).first()

    if not result:
        return None

    user, office = result

    return DirectoryEntry(
        public_id=user.public_id,
        name=user.name,
        role=user.role,
        office_id=user.office_id,
        office_name=office.name if office else None,
    )


def department_view(session: Session, office_id: str):
    """Found items held by an office together with the reports paired to them."""
    office = session.get(Office, office_id)
    if not office:
        return None

    found_items = session.exec(
        select(FoundItem)
        .where(FoundItem.custodian_office_id == office_id)
        .order_by(FoundItem.date_logged.desc())
    ).all()

    case_numbers = [i.matched_case_number for i in found_items if i.matched_case_number]

    lost_reports = []
    if case_numbers:
        lost_reports = session.exec(
            select(LostReport)
            .where(LostReport.case_number.in_(case_numbers))
            .order_by(LostReport.date_reported.desc())
        ).all()

    return office, list(found_items), list(lost_reports)
