"""Read side of the donation ledger.

Totals, daily and period figures come from the resettable ledger; the history
page and the top donations come from the permanent history. After a reset the
first group drops to zero while the second does not.
"""

import logging
import math
from datetime import datetime, tzinfo
from typing import Any, Optional

from sqlalchemy.orm import Session

from charitybox.core import clock
from charitybox.core.exceptions import InvalidInput
from charitybox.repositories.donations import HistoryRepository, LedgerRepository, PageQuery, TimeRange

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
DEFAULT_TOP_LIMIT = 5
MAX_TOP_LIMIT = 20
# offsets are bound as BIGINT
MAX_OFFSET = 2**63 - 1


def _parse_int(value: Any, name: str, default: int) -> int:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        raise InvalidInput(f"{name} must be an integer")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        raise InvalidInput(f"{name} must be an integer")


def clamp(value: int, lower: int, upper: Optional[int] = None) -> int:
    value = max(value, lower)
    return min(value, upper) if upper is not None else value


def pagination(page: Any = None, limit: Any = None) -> tuple[int, int]:
    limit = clamp(_parse_int(limit, "limit", DEFAULT_PAGE_SIZE), 1, MAX_PAGE_SIZE)
    page = clamp(_parse_int(page, "page", DEFAULT_PAGE), 1, MAX_OFFSET // limit + 1)
    return page, limit


def ledger_total(db: Session) -> dict:
    totals = LedgerRepository(db).sum_and_count()
    return {"total": totals.total, "count": totals.count}


def daily_stats(db: Session, now: datetime, tz: tzinfo) -> dict:
    window = clock.day_window(now, tz)
    totals = LedgerRepository(db).sum_and_count(TimeRange(start=window.start, end=window.end))
    return {
        "date": window.start.date().isoformat(),
        "total": totals.total,
        "count": totals.count,
    }


def period_stats(db: Session, period: str, now: datetime, tz: tzinfo) -> dict:
    window = clock.period_window(period, now, tz)
    total, count, average = LedgerRepository(db).sum_count_avg(
        TimeRange(start=window.start, end=window.end, end_inclusive=True)
    )
    return {
        "period": period,
        "periodName": clock.PERIOD_NAMES[period.lower()],
        "startDate": clock.to_utc(window.start),
        "endDate": clock.to_utc(window.end),
        "total": total,
        "count": count,
        "average": average,
    }


def history_page(db: Session, page: Any = None, limit: Any = None) -> dict:
    page, limit = pagination(page, limit)
    rows, total = HistoryRepository(db).find_page(PageQuery(limit=limit, offset=(page - 1) * limit))
    return {
        "rows": rows,
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": math.ceil(total / limit),
    }


def top_limit(limit: Any = None) -> int:
    return clamp(_parse_int(limit, "limit", DEFAULT_TOP_LIMIT), 1, MAX_TOP_LIMIT)


def top_donations(db: Session, limit: Any = None) -> list:
    return HistoryRepository(db).find_top(top_limit(limit))


def reset_ledger(db: Session) -> dict:
    deleted = LedgerRepository(db).clear_all()
    logger.info("Ledger reset: %d records deleted", deleted)
    return {"deletedCount": deleted}
