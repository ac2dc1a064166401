# charitybox/models/donation.py
import uuid
from sqlalchemy import Column, String, DateTime, BigInteger, CheckConstraint, Uuid
from sqlalchemy.orm import declared_attr
from sqlalchemy.sql import func
from charitybox.database import Base


class DonationColumns:
    """Columns shared by the resettable ledger and the permanent history."""

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    amount = Column(BigInteger, nullable=False)
    device_id = Column(String, nullable=False)
    recorded_at = Column(DateTime(timezone=True), nullable=False, index=True)

    # storage bookkeeping only
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @declared_attr
    def __table_args__(cls):
        return (CheckConstraint("amount > 0", name=f"ck_{cls.__tablename__}_amount_positive"),)


class LedgerEntry(DonationColumns, Base):
    __tablename__ = "donations"


class HistoryEntry(DonationColumns, Base):
    __tablename__ = "donation_history"
