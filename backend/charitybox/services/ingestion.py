import logging
from datetime import datetime
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from charitybox.core.clock import utcnow
from charitybox.core.exceptions import InvalidInput, StorageError
from charitybox.core.formatting import format_rupiah
from charitybox.models.donation import LedgerEntry
from charitybox.repositories.donations import HistoryRepository, LedgerRepository

logger = logging.getLogger(__name__)

AMOUNT_ERROR = "Amount must be a valid positive number"

# largest value a BIGINT column holds
MAX_AMOUNT = 2**63 - 1


def validate_amount(amount: Any) -> int:
    # bool is an int subclass, but True is not a donation
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        raise InvalidInput(AMOUNT_ERROR)
    if isinstance(amount, float):
        if not amount.is_integer():
            raise InvalidInput("Amount must be a whole number")
        amount = int(amount)
    if amount <= 0:
        raise InvalidInput(AMOUNT_ERROR)
    if amount > MAX_AMOUNT:
        raise InvalidInput(f"Amount must not exceed {MAX_AMOUNT}")
    return amount


def resolve_device_id(device_id: Any, default: str) -> str:
    if device_id is None or device_id == "":
        return default
    if not isinstance(device_id, str):
        raise InvalidInput("deviceId must be a string")
    return device_id


def record_donation(
    db: Session,
    amount: Any,
    device_id: Any = None,
    *,
    default_device_id: str,
    now: Optional[datetime] = None,
) -> LedgerEntry:
    """
    Store one donation in both the ledger and the history.

    Both rows get the same amount, device and timestamp and are committed
    together. If either insert or the commit fails the session is rolled back
    and StorageError is raised; nothing is recorded in that case.
    """
    amount = validate_amount(amount)
    device_id = resolve_device_id(device_id, default_device_id)
    recorded_at = now or utcnow()

    try:
        ledger_entry = LedgerRepository(db).add(amount, device_id, recorded_at)
        HistoryRepository(db).add(amount, device_id, recorded_at)
        db.commit()
    except StorageError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Failed to commit donation: %s", exc)
        raise StorageError("Error saving donation data to the database", detail=str(exc)) from exc

    db.refresh(ledger_entry)
    logger.info("New donation: %s from %s", format_rupiah(amount), device_id)
    return ledger_entry
