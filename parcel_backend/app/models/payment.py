"""
Payment database model.

Append-only record of a completed parcel payment.
"""

from sqlalchemy import Column, Integer, String, Float, DateTime
from parcel_backend.app.db.session import Base


class Payment(Base):
    """
    Payment record.

    One is expected per paid parcel, but ``parcel_id`` is neither
    unique nor a foreign key: payments outlive parcel deletion.
    """
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    parcel_id = Column(Integer, nullable=False, index=True)
    email = Column(String(255), nullable=True, index=True)
    amount = Column(Float, nullable=True)
    payment_method = Column(String(100), nullable=True)
    transaction_id = Column(String(255), nullable=True)
    paid_at = Column(DateTime(timezone=True), nullable=False, index=True)

    def __repr__(self):
        return f"<Payment(id={self.id}, parcel_id={self.parcel_id}, amount={self.amount})>"
