# foodcourt/domain/enums.py
from enum import Enum


class Role(str, Enum):
    CUSTOMER = "Customer"
    STALL_OWNER = "StallOwner"
    FOOD_COURT_OWNER = "FoodCourtOwner"


class OrderStatus(str, Enum):
    PENDING = "Pending"
    PREPARING = "Preparing"
    READY_FOR_PICKUP = "Ready for Pickup"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class PaymentStatus(str, Enum):
    """Order-side payment state, written by the payment flow only."""
    PENDING = "Pending"
    PAID = "Paid"
    FAILED = "Failed"
    CASH_ON_DELIVERY = "Cash on Delivery"


class PaymentMethod(str, Enum):
    BIKASH = "Bikash"
    NAGAD = "Nagad"
    ROCKET = "Rocket"
    CASH_ON_DELIVERY = "Cash on Delivery"


class PaymentRecordStatus(str, Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    FAILED = "Failed"
    REFUNDED = "Refunded"
