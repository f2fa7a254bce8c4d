"""
Error taxonomy and result type for lifecycle operations.

Every failure a caller can recover from is a ``LifecycleError`` carrying an
``ErrorKind``, so routes and callers branch on the kind instead of matching
message strings. Successful transitions return a ``TransitionResult``.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from app.models.found_item import FoundItem
from app.models.lost_report import LostReport


class ErrorKind(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    ALREADY_MATCHED = "ALREADY_MATCHED"
    DEPENDENCY_EXISTS = "DEPENDENCY_EXISTS"
    POLICY_VIOLATION = "POLICY_VIOLATION"
    UNAUTHORIZED = "UNAUTHORIZED"
    CONFLICT = "CONFLICT"


class LifecycleError(Exception):
    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(LifecycleError):
    kind = ErrorKind.NOT_FOUND


class InvalidTransition(LifecycleError):
    kind = ErrorKind.INVALID_TRANSITION


class AlreadyMatched(LifecycleError):
    kind = ErrorKind.ALREADY_MATCHED


class DependencyExists(LifecycleError):
    kind = ErrorKind.DEPENDENCY_EXISTS


class PolicyViolation(LifecycleError):
    kind = ErrorKind.POLICY_VIOLATION


class Unauthorized(LifecycleError):
    kind = ErrorKind.UNAUTHORIZED


class Conflict(LifecycleError):
    kind = ErrorKind.CONFLICT


@dataclass
class TransitionResult:
    lost_report: Optional[LostReport] = None
    found_item: Optional[FoundItem] = None
    # non-fatal problems after the transition committed (e.g. notification failed)
    warnings: List[str] = field(default_factory=list)

    def to_response(self) -> dict:
        body = {"success": True, "warnings": self.warnings}

        if self.lost_report is not None:
            body["lost_report"] = self.lost_report.model_dump(mode="json")
        if self.found_item is not None:
            body["found_item"] = self.found_item.model_dump(mode="json")

        return body
