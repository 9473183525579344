"""
Pydantic schemas for the order API.

These schemas define the public API contract for order placement and the
denormalized order records shown to staff.
"""

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

UUID_PATTERN = (
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)

# =============================================================================
# Order Placement
# =============================================================================


class MenuLineSchema(BaseModel):
    """A menu item in an order creation request."""

    item_id: int = Field(..., gt=0)
    quantity: int = Field(..., ge=1)
    unit_price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    supplement_id: int | None = Field(default=None, gt=0)


class BreakfastLineSchema(BaseModel):
    """A breakfast in an order creation request."""

    breakfast_id: int = Field(..., gt=0)
    quantity: int = Field(..., ge=1)
    unit_price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    option_ids: list[int] = Field(default_factory=list)


class OrderCreateRequest(BaseModel):
    """Request body for POST /api/orders."""

    model_config = ConfigDict(populate_by_name=True)

    items: list[MenuLineSchema] = Field(default_factory=list)
    breakfast_items: list[BreakfastLineSchema] = Field(
        default_factory=list, alias="breakfastItems"
    )
    total_price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    order_type: str = Field(..., max_length=20)
    delivery_address: str | None = Field(default=None, max_length=500)
    promotion_id: int | None = Field(default=None, gt=0)
    table_id: int | None = Field(default=None, gt=0)
    request_id: str = Field(..., pattern=UUID_PATTERN)


class OrderCreateResponse(BaseModel):
    """Response for POST /api/orders."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = "Order created"
    order_id: int = Field(..., alias="orderId")


# =============================================================================
# Order Records
# =============================================================================


class MenuLineDetailSchema(BaseModel):
    """A menu item line in an order record."""

    id: int
    item_id: int
    name: str
    image_url: str
    quantity: int
    unit_price: Decimal
    supplement_id: int | None = None
    supplement_name: str | None = None
    supplement_price: Decimal | None = None


class BreakfastOptionDetailSchema(BaseModel):
    """A selected breakfast option in an order record."""

    id: int
    group_id: int
    option_name: str
    additional_price: Decimal


class BreakfastLineDetailSchema(BaseModel):
    """A breakfast line in an order record."""

    id: int
    breakfast_id: int
    name: str
    image_url: str
    quantity: int
    unit_price: Decimal
    options: list[BreakfastOptionDetailSchema] = Field(default_factory=list)


class OrderDetailSchema(BaseModel):
    """Denormalized order: header, table and every line."""

    id: int
    total_price: Decimal
    order_type: str
    delivery_address: str | None
    table_id: int | None
    table_number: str | None
    promotion_id: int | None
    session_id: str
    approved: bool
    created_at: datetime
    items: list[MenuLineDetailSchema] = Field(default_factory=list)
    breakfast_items: list[BreakfastLineDetailSchema] = Field(default_factory=list)


class ValidationErrorDetail(BaseModel):
    """A single validation error."""

    field: str
    message: str


class ValidationErrorResponse(BaseModel):
    """Response for validation errors."""

    error: Literal["validation_error"]
    details: list[ValidationErrorDetail]
