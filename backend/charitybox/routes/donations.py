from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from charitybox.core.clock import get_zone, utcnow
from charitybox.core.config import Settings
from charitybox.core.formatting import format_count, format_rupiah
from charitybox.deps import get_db, get_settings
from charitybox.schemas.donation import DonationCreate, serialize_donation
from charitybox.services import aggregation
from charitybox.services.ingestion import record_donation

router = APIRouter(prefix="/api", tags=["Donations"])


# --- Endpoint for the ESP32 box ---
@router.post("/donation")
def create_donation(
    payload: DonationCreate,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    entry = record_donation(
        db,
        payload.amount,
        payload.device_id,
        default_device_id=settings.DEFAULT_DEVICE_ID,
    )
    return {
        "success": True,
        "message": "Donation saved to the database",
        "data": serialize_donation(entry),
    }


@router.get("/total")
def total(db: Session = Depends(get_db)):
    result = aggregation.ledger_total(db)
    return {
        "success": True,
        "total": result["total"],
        "count": result["count"],
        "formatted": {
            "total": format_rupiah(result["total"]),
            "count": format_count(result["count"]),
        },
    }


@router.get("/history")
def history(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    db: Session = Depends(get_db),
):
    result = aggregation.history_page(db, page, limit)
    return {
        "success": True,
        "data": [serialize_donation(row) for row in result["rows"]],
        "pagination": {
            "page": result["page"],
            "limit": result["limit"],
            "total": result["total"],
            "totalPages": result["totalPages"],
        },
    }


@router.get("/daily-stats")
def daily_stats(db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    result = aggregation.daily_stats(db, utcnow(), get_zone(settings.TIMEZONE))
    return {
        "success": True,
        "date": result["date"],
        "total": result["total"],
        "count": result["count"],
        "formatted": {
            "total": format_rupiah(result["total"]),
            "count": format_count(result["count"], "hari ini"),
        },
    }


@router.get("/stats/{period}")
def period_stats(
    period: str,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    result = aggregation.period_stats(db, period, utcnow(), get_zone(settings.TIMEZONE))
    return {
        "success": True,
        "period": result["period"],
        "periodName": result["periodName"],
        "startDate": result["startDate"].isoformat(),
        "endDate": result["endDate"].isoformat(),
        "stats": {
            "total": result["total"],
            "count": result["count"],
            "average": result["average"],
        },
        "formatted": {
            "total": format_rupiah(result["total"]),
            "count": format_count(result["count"]),
            "average": f"{format_rupiah(result['average'])} per donasi",
        },
    }


@router.get("/top-donations")
def top_donations(limit: Optional[str] = None, db: Session = Depends(get_db)):
    limit = aggregation.top_limit(limit)
    rows = aggregation.top_donations(db, limit)
    return {
        "success": True,
        "data": [serialize_donation(row) for row in rows],
        "message": f"{limit} largest donations",
    }


# --- Reset the ledger, history is kept ---
@router.delete("/reset-donations")
def reset_donations(db: Session = Depends(get_db)):
    result = aggregation.reset_ledger(db)
    return {
        "success": True,
        "message": "All donation data has been reset",
        "deletedCount": result["deletedCount"],
        "note": "Donation history is kept",
    }
