"""
Parcel status enumerations.
"""

import enum


class DeliveryStatus(str, enum.Enum):
    """
    Parcel delivery status.

    Status flow:
        PENDING → RIDER_ASSIGNED → IN_TRANSIT → DELIVERED | SERVICE_CENTER_DELIVERED
    """
    PENDING = "pending"
    RIDER_ASSIGNED = "rider_assigned"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    SERVICE_CENTER_DELIVERED = "service_center_delivered"


# Statuses a rider may cash out from
COMPLETED_DELIVERY_STATUSES = (
    DeliveryStatus.DELIVERED,
    DeliveryStatus.SERVICE_CENTER_DELIVERED,
)

# Statuses shown on a rider's open task list
OPEN_DELIVERY_STATUSES = (
    DeliveryStatus.RIDER_ASSIGNED,
    DeliveryStatus.IN_TRANSIT,
)


class PaymentStatus(str, enum.Enum):
    UNPAID = "unpaid"
    PAID = "paid"


class CashoutStatus(str, enum.Enum):
    NONE = "none"
    CASHED_OUT = "cashed_out"
