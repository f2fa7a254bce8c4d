import os
from typing import Optional
from fastapi import Depends, Header, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt, JWTError
from sqlmodel import Session

from app.db.db import get_session
from app.models.status import Role
from app.utils.admin_gate import Actor, AdminGate
from app.utils.directory import DirectoryEntry, lookup_user

bearer_scheme_required = HTTPBearer(auto_error=True)


def get_current_user_required(token: HTTPAuthorizationCredentials = Depends(bearer_scheme_required)):
    try:
        payload = jwt.decode(
            token.credentials,
            os.getenv("JWT_SECRET"),
            algorithms=["HS256"],
        )
        return payload
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")


def get_directory_entry(
    session: Session = Depends(get_session),
    current_user=Depends(get_current_user_required),
) -> DirectoryEntry:
    entry = lookup_user(session, current_user["sub"])

    if not entry:
        raise HTTPException(status_code=404, detail="User not found")

    return entry


def require_admin_role(entry: DirectoryEntry = Depends(get_directory_entry)) -> DirectoryEntry:
    if entry.role != Role.admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return entry


def require_staff_or_admin(entry: DirectoryEntry = Depends(get_directory_entry)) -> DirectoryEntry:
    if entry.role not in (Role.staff, Role.admin):
        raise HTTPException(status_code=403, detail="Staff access required")
    return entry


def get_admin_gate(request: Request) -> AdminGate:
    return request.app.state.admin_gate


def get_actor(
    entry: DirectoryEntry = Depends(get_directory_entry),
    gate: AdminGate = Depends(get_admin_gate),
    x_admin_secret: Optional[str] = Header(default=None),
) -> Actor:
    # the gate decision travels with the caller instead of being looked up later
    return Actor(
        user_id=entry.public_id,
        role=entry.role,
        office_id=entry.office_id,
        admin_authorized=gate.authorize(x_admin_secret),
    )
