"""
Conditional-write layer over the SQLModel session.

Every state change goes through ``update_lost_report`` / ``update_found_item``
/ ``delete_lost_report``. Each issues a single UPDATE/DELETE whose WHERE
clause repeats the status the caller validated against; if another request
changed the row first, no row matches and ``Conflict`` is raised. Writes made
inside ``transaction()`` commit together or not at all.
"""

import logging
from contextlib import contextmanager
from typing import Iterable, Optional, Union

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.models.found_item import FoundItem
from app.models.lost_report import LostReport
from app.models.status import FoundStatus, LostStatus
from app.services.errors import Conflict, NotFound

logger = logging.getLogger(__name__)


def _as_set(expected) -> frozenset:
    if isinstance(expected, (LostStatus, FoundStatus)):
        return frozenset({expected})
    return frozenset(expected)


class RecordStore:
    def __init__(self, session: Session):
        self.session = session

    # Reads

    def get_lost_report(self, case_number: str) -> LostReport:
        report = self.session.get(LostReport, case_number)
        if not report:
            raise NotFound(f"Lost report '{case_number}' not found")
        return report

    def get_found_item(self, found_item_id: str) -> FoundItem:
        item = self.session.get(FoundItem, found_item_id)
        if not item:
            raise NotFound(f"Found item '{found_item_id}' not found")
        return item

    def found_item_referencing(self, case_number: str) -> Optional[FoundItem]:
        return self.session.exec(
            select(FoundItem).where(FoundItem.matched_case_number == case_number)
        ).first()

    # Inserts

    def add(self, record):
        with self.transaction():
            self.session.add(record)
        self.session.refresh(record)
        return record

    # Conditional writes

    @contextmanager
    def transaction(self):
        """Commit everything staged in the block, or roll all of it back."""
        try:
            yield self
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.warning("Unique constraint rejected write: %s", e.orig)
            raise Conflict("Record conflicts with an existing record")
        except Exception:
            self.session.rollback()
            raise

    def update_lost_report(
        self,
        case_number: str,
        expected: Union[LostStatus, Iterable[LostStatus]],
        **values,
    ):
        expected = _as_set(expected)
        result = self.session.exec(
            update(LostReport)
            .where(LostReport.case_number == case_number)
            .where(LostReport.status.in_(list(expected)))
            .values(**values)
            .execution_options(synchronize_session=False)
        )

        if result.rowcount != 1:
            logger.warning(
                "Conditional update lost for report %s (expected %s)",
                case_number, sorted(s.value for s in expected),
            )
            raise Conflict(f"Lost report '{case_number}' changed concurrently")

    def update_found_item(
        self,
        found_item_id: str,
        expected: Union[FoundStatus, Iterable[FoundStatus]],
        **values,
    ):
        expected = _as_set(expected)
        result = self.session.exec(
            update(FoundItem)
            .where(FoundItem.found_item_id == found_item_id)
            .where(FoundItem.status.in_(list(expected)))
            .values(**values)
            .execution_options(synchronize_session=False)
        )

        if result.rowcount != 1:
            logger.warning(
                "Conditional update lost for found item %s (expected %s)",
                found_item_id, sorted(s.value for s in expected),
            )
            raise Conflict(f"Found item '{found_item_id}' changed concurrently")

    def delete_lost_report(
        self,
        case_number: str,
        expected: Union[LostStatus, Iterable[LostStatus]],
    ):
        expected = _as_set(expected)
        result = self.session.exec(
            delete(LostReport)
            .where(LostReport.case_number == case_number)
            .where(LostReport.status.in_(list(expected)))
            .where(LostReport.matched_found_item_id.is_(None))
            .execution_options(synchronize_session=False)
        )

        if result.rowcount != 1:
            logger.warning("Conditional delete lost for report %s", case_number)
            raise Conflict(f"Lost report '{case_number}' changed concurrently")
