"""Record store for the two donation collections.

``LedgerRepository`` backs the resettable "current" total, ``HistoryRepository``
the permanent log. Both speak in terms of ``TimeRange`` / ``PageQuery`` rather
than raw SQLAlchemy expressions, and every database fault comes out as a
``StorageError``.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Generic, Optional, TypeVar

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from charitybox.core.clock import to_utc
from charitybox.core.exceptions import StorageError
from charitybox.models.donation import HistoryEntry, LedgerEntry

logger = logging.getLogger(__name__)

Entry = TypeVar("Entry", LedgerEntry, HistoryEntry)


@dataclass(frozen=True)
class TimeRange:
    """Filter on ``recorded_at``. ``start`` is inclusive; ``end`` is exclusive
    unless ``end_inclusive`` is set. ``None`` on either side means unbounded."""

    start: Optional[datetime] = None
    end: Optional[datetime] = None
    end_inclusive: bool = False


@dataclass(frozen=True)
class PageQuery:
    limit: int
    offset: int = 0
    newest_first: bool = True


@dataclass(frozen=True)
class Totals:
    total: int
    count: int

    @property
    def average(self) -> int:
        if not self.count:
            return 0
        # round half up, like the dashboard always did
        return (2 * self.total + self.count) // (2 * self.count)


class DonationRepository(Generic[Entry]):
    model = None
    label = "donation"

    def __init__(self, db: Session):
        self.db = db

    def _fail(self, action: str, exc: SQLAlchemyError) -> StorageError:
        logger.error("Failed to %s %s records: %s", action, self.label, exc)
        return StorageError(f"Error {action} {self.label} data", detail=str(exc))

    def _where(self, stmt, window: Optional[TimeRange]):
        if window is None:
            return stmt
        column = self.model.recorded_at
        if window.start is not None:
            stmt = stmt.where(column >= to_utc(window.start))
        if window.end is not None:
            end = to_utc(window.end)
            stmt = stmt.where(column <= end if window.end_inclusive else column < end)
        return stmt

    def add(self, amount: int, device_id: str, recorded_at: datetime) -> Entry:
        """Stage a new row and flush it; the caller owns the commit."""
        entry = self.model(amount=amount, device_id=device_id, recorded_at=to_utc(recorded_at))
        try:
            self.db.add(entry)
            self.db.flush()
        except SQLAlchemyError as exc:
            raise self._fail("saving", exc) from exc
        return entry

    def sum_and_count(self, window: Optional[TimeRange] = None) -> Totals:
        stmt = self._where(
            select(func.coalesce(func.sum(self.model.amount), 0), func.count(self.model.id)),
            window,
        )
        try:
            total, count = self.db.execute(stmt).one()
        except SQLAlchemyError as exc:
            raise self._fail("reading", exc) from exc
        return Totals(total=int(total or 0), count=int(count or 0))

    def sum_count_avg(self, window: Optional[TimeRange] = None) -> tuple[int, int, int]:
        totals = self.sum_and_count(window)
        return totals.total, totals.count, totals.average

    def count(self, window: Optional[TimeRange] = None) -> int:
        return self.sum_and_count(window).count

    def find_page(self, query: PageQuery, window: Optional[TimeRange] = None) -> tuple[list[Entry], int]:
        """Rows ordered by ``recorded_at`` plus the unpaginated match count."""
        if query.newest_first:
            order = (self.model.recorded_at.desc(), self.model.created_at.desc())
        else:
            order = (self.model.recorded_at.asc(), self.model.created_at.asc())
        stmt = self._where(select(self.model), window).order_by(*order).offset(query.offset).limit(query.limit)
        try:
            rows = list(self.db.scalars(stmt).all())
        except SQLAlchemyError as exc:
            raise self._fail("reading", exc) from exc
        return rows, self.count(window)

    def find_top(self, limit: int) -> list[Entry]:
        """Largest amounts first; equal amounts keep the order they were recorded in."""
        stmt = (
            select(self.model)
            .order_by(self.model.amount.desc(), self.model.recorded_at.asc())
            .limit(limit)
        )
        try:
            return list(self.db.scalars(stmt).all())
        except SQLAlchemyError as exc:
            raise self._fail("reading", exc) from exc


class LedgerRepository(DonationRepository[LedgerEntry]):
    model = LedgerEntry
    label = "ledger"

    def clear_all(self) -> int:
        """Delete every ledger row and commit. Returns the number removed."""
        try:
            result = self.db.execute(delete(LedgerEntry))
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise self._fail("resetting", exc) from exc
        return result.rowcount or 0


class HistoryRepository(DonationRepository[HistoryEntry]):
    """Append-only: there is deliberately no delete or update here."""

    model = HistoryEntry
    label = "history"
