# foodcourt/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, model_validator
from typing import Any, Dict, List, Optional
from decimal import Decimal
from datetime import datetime

from foodcourt.domain.enums import OrderStatus, PaymentMethod, Role
from foodcourt.utils.dates import as_utc


# ---------------------------------------------------------------- users

class UserCreate(BaseModel):
    """Schema for registering a user."""

    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    role: Role = Role.CUSTOMER


class UserRead(BaseModel):
    id: int
    name: str
    email: str
    role: Role

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------- stalls

class StallCreate(BaseModel):
    """Schema for opening a stall."""

    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    category: str = Field(..., min_length=1, max_length=50)
    rent: Decimal = Field(Decimal("0.00"), ge=0)


class StallUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    rent: Optional[Decimal] = Field(None, ge=0)
    is_active: Optional[bool] = None


class StallOut(BaseModel):
    id: int
    owner_id: int
    name: str
    description: Optional[str] = None
    category: str
    rent: Decimal
    is_active: bool
    average_rating: Decimal
    total_ratings: int

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------- menu

class MenuItemCreate(BaseModel):
    """Schema for adding a dish to a stall's menu."""

    stall_id: int = Field(..., gt=0)
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    category: str = Field(..., min_length=1, max_length=50)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    stock: int = Field(0, ge=0)


class MenuItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    stock: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None


class MenuItemOut(BaseModel):
    id: int
    stall_id: int
    name: str
    description: Optional[str] = None
    category: str
    price: Decimal
    stock: int
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------- cart

class CartItemIn(BaseModel):
    """Schema for adding a menu item to the cart."""

    menu_item_id: int = Field(..., gt=0, description="Menu item id (> 0)")
    quantity: int = Field(..., gt=0, description="Quantity (> 0)")


class CartItemUpdate(BaseModel):
    # lower bound is checked by the cart service so the error is InvalidQuantity
    quantity: int


class CartLineOut(BaseModel):
    id: int
    menu_item_id: int
    quantity: int
    unit_price: Decimal

    model_config = ConfigDict(from_attributes=True)


class CartOut(BaseModel):
    cart_id: int
    user_id: int
    items: List[CartLineOut]
    total_amount: Decimal


# ---------------------------------------------------------------- orders

class DeliveryAddress(BaseModel):
    street: Optional[str] = Field(None, max_length=200)
    city: Optional[str] = Field(None, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    zip_code: Optional[str] = Field(None, max_length=20)
    country: Optional[str] = Field(None, max_length=100)


class OrderCreate(BaseModel):
    """Schema for checking out the current cart."""

    payment_method: PaymentMethod
    delivery_address: Optional[DeliveryAddress] = None
    order_notes: Optional[str] = Field(None, max_length=500)


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderFilters(BaseModel):
    """
    Optional read-side filters. Each one set is an independent predicate,
    an order is returned only if all of them match.
    """

    status: Optional[OrderStatus] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    min_amount: Optional[Decimal] = Field(None, ge=0)
    max_amount: Optional[Decimal] = Field(None, ge=0)
    stall_id: Optional[int] = Field(None, gt=0)

    @model_validator(mode="after")
    def check_ranges(self):
        if self.date_from and self.date_to and self.date_from > self.date_to:
            raise ValueError("date_from must not be after date_to")
        if (
            self.min_amount is not None
            and self.max_amount is not None
            and self.min_amount > self.max_amount
        ):
            raise ValueError("min_amount must not exceed max_amount")
        return self


class OrderLineOut(BaseModel):
    menu_item_id: int
    stall_id: int
    quantity: int
    price: Decimal

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    id: int
    customer_id: int
    items: List[OrderLineOut]
    total_amount: Decimal
    status: OrderStatus
    payment_status: str
    payment_method: str
    delivery_address: Optional[dict] = None
    order_notes: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------- payments

class PaymentCreate(BaseModel):
    order_id: int = Field(..., gt=0)
    payment_method: PaymentMethod
    transaction_id: Optional[str] = Field(None, max_length=100)
    gateway_response: Optional[dict] = None


class PaymentOut(BaseModel):
    id: int
    order_id: int
    user_id: int
    amount: Decimal
    payment_method: str
    transaction_id: Optional[str] = None
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------- ratings

class RatingCreate(BaseModel):
    stall_id: int = Field(..., gt=0)
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=500)


class RatingOut(BaseModel):
    id: int
    user_id: int
    stall_id: int
    rating: int
    comment: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ---------------------------------------------------------------- analytics

class DashboardStats(BaseModel):
    total_stalls: int
    total_orders: int
    total_revenue: Decimal
    pending_orders: int


class RecentOrder(BaseModel):
    id: int
    order_number: str
    customer: str
    total_amount: Decimal
    status: str
    created_at: datetime


class TopStall(BaseModel):
    id: int
    name: str
    revenue: Decimal
    orders: int


class SalesPoint(BaseModel):
    date: str
    revenue: Decimal


# ---------------------------------------------------------------- reports

class ReportRange(BaseModel):
    """Date range of a report: both bounds or none (all time)."""

    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @model_validator(mode="after")
    def check_range(self):
        if (self.start_date is None) != (self.end_date is None):
            raise ValueError("start_date and end_date must be given together")
        if self.start_date and as_utc(self.start_date) > as_utc(self.end_date):
            raise ValueError("start_date must not be after end_date")
        return self


class SalesReportQuery(ReportRange):
    stall_id: Optional[int] = Field(None, gt=0, description="Only orders with a line from this stall")


class ReportOut(BaseModel):
    id: int
    type: str
    title: str
    description: Optional[str] = None
    data: Dict[str, Any]
    filters: Optional[Dict[str, Any]] = None
    generated_by: int
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class Message(BaseModel):
    message: str
