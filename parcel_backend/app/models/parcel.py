"""
Parcel database model.

A parcel is a shipment booked by a sender and moved through the delivery
lifecycle by admins and riders.
"""

from sqlalchemy import Column, Integer, String, DateTime, Enum, JSON
from parcel_backend.app.db.session import Base
from parcel_backend.app.models.enums import enum_values
from parcel_backend.app.models.parcel_enums import DeliveryStatus, PaymentStatus, CashoutStatus


class Parcel(Base):
    """
    Parcel model for the delivery platform.

    Sender-supplied booking fields (parcel type, weight, addresses, cost, ...)
    are free-form and kept in ``details``; only the fields the lifecycle
    reads or filters on are columns.
    """
    __tablename__ = "parcels"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Sender email
    created_by = Column(String(255), nullable=True, index=True)
    tracking_id = Column(String(100), nullable=True, index=True)

    # Lifecycle status
    delivery_status = Column(
        Enum(DeliveryStatus, values_callable=enum_values, native_enum=False, length=40),
        default=DeliveryStatus.PENDING,
        nullable=False,
        index=True,
    )
    payment_status = Column(
        Enum(PaymentStatus, values_callable=enum_values, native_enum=False, length=20),
        default=PaymentStatus.UNPAID,
        nullable=False,
        index=True,
    )
    cashout_status = Column(
        Enum(CashoutStatus, values_callable=enum_values, native_enum=False, length=20),
        default=CashoutStatus.NONE,
        nullable=False,
    )

    # Rider assignment
    assigned_rider_id = Column(Integer, nullable=True, index=True)
    assigned_rider_email = Column(String(255), nullable=True, index=True)
    assigned_rider_name = Column(String(255), nullable=True)

    details = Column(JSON, nullable=False, default=dict)

    # Timestamps
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    assigned_at = Column(DateTime(timezone=True), nullable=True)
    picked_at = Column(DateTime(timezone=True), nullable=True)
    delivered_at = Column(DateTime(timezone=True), nullable=True)
    cashed_out_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<Parcel(id={self.id}, created_by='{self.created_by}', delivery_status='{self.delivery_status.value}')>"
