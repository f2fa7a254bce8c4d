import hmac
import logging
from dataclasses import dataclass
from typing import Optional

from app.models.status import Role
from app.services.errors import Unauthorized

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Actor:
    """Caller context handed to every lifecycle operation."""

    user_id: Optional[str] = None
    role: Optional[Role] = None
    office_id: Optional[str] = None
    admin_authorized: bool = False


class AdminGate:
    """Compares a caller-supplied secret against the server-held one."""

    def __init__(self, secret: Optional[str]):
        self._secret = secret or ""

    def authorize(self, supplied: Optional[str]) -> bool:
        # an unset server secret authorizes nobody
        if not self._secret or not supplied:
            return False

        return hmac.compare_digest(supplied.encode(), self._secret.encode())


def require_admin(actor: Optional[Actor], operation: str):
    if actor is None or not actor.admin_authorized:
        logger.warning(
            "Admin gate rejected %s for user %s",
            operation, actor.user_id if actor else None,
        )
        raise Unauthorized(f"Admin authorization required to {operation}")
