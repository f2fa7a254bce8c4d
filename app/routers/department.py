from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from app.db.db import get_session
from app.models.status import Role
from app.utils.auth_helper import get_directory_entry, require_staff_or_admin
from app.utils.directory import DirectoryEntry, department_view, lookup_user


router = APIRouter()


@router.get("/staff/{public_id}")
def get_staff(
    public_id: str,
    session: Session = Depends(get_session),
    entry: DirectoryEntry = Depends(get_directory_entry),
):
    staff = lookup_user(session, public_id)

    if not staff or staff.role == Role.student:
        raise HTTPException(status_code=404, detail="Staff member not found")

    return {"success": True, "staff": staff}


@router.get("/department-lost-found/{office_id}")
def get_department_lost_found(
    office_id: str,
    session: Session = Depends(get_session),
    staff: DirectoryEntry = Depends(require_staff_or_admin),
):
    # staff only see the office they belong to
    if staff.role == Role.staff and staff.office_id != office_id:
        raise HTTPException(status_code=403, detail="Not authorized to view this office")

    result = department_view(session, office_id)
    if not result:
        raise HTTPException(status_code=404, detail="Office not found")

    office, found_items, lost_reports = result

    return {
        "success": True,
        "office": office.name,
        "foundItems": found_items,
        "lostItems": lost_reports,
    }
