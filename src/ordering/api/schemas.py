"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands and aggregates.
"""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class ShippingAddressSchema(BaseModel):
    """Accepts snake_case or camelCase keys; always serializes snake_case."""

    full_name: str = Field(validation_alias=AliasChoices("full_name", "fullName"))
    address_line1: str = Field(validation_alias=AliasChoices("address_line1", "addressLine1"))
    address_line2: str | None = Field(default=None, validation_alias=AliasChoices("address_line2", "addressLine2"))
    city: str
    state: str
    postal_code: str = Field(validation_alias=AliasChoices("postal_code", "postalCode"))
    country: str


# ---------------------------------------------------------------------------
# Cart Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(ge=1, default=1)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "prod-001",
                    "quantity": 2,
                }
            ]
        }
    }


class UpdateCartItemRequest(BaseModel):
    quantity: int  # zero or less removes the line


class CartLineResponse(BaseModel):
    id: str
    product_id: str
    quantity: int


class CartResponse(BaseModel):
    user_id: str
    items: list[CartLineResponse]


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class CreateOrderRequest(BaseModel):
    user_id: str
    shipping_address: ShippingAddressSchema = Field(
        validation_alias=AliasChoices("shipping_address", "shippingAddress")
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "user_id": "user-001",
                    "shipping_address": {
                        "full_name": "Ada Lovelace",
                        "address_line1": "12 Gallery Road",
                        "city": "Portland",
                        "state": "OR",
                        "postal_code": "97201",
                        "country": "US",
                    },
                }
            ]
        }
    }


class ProcessPaymentRequest(BaseModel):
    customer_id: str | None = None


class ConfirmOrderRequest(BaseModel):
    payment_intent_id: str


class ShipOrderRequest(BaseModel):
    tracking_number: str


class CancelOrderRequest(BaseModel):
    reason: str | None = None


class RefundOrderRequest(BaseModel):
    amount: float | None = Field(default=None, ge=0)
    reason: str | None = None


# ---------------------------------------------------------------------------
# Order Response Schemas
# ---------------------------------------------------------------------------
class OrderItemResponse(BaseModel):
    id: str
    product_id: str
    product_name: str | None = None
    artwork_title: str | None = None
    artist_name: str | None = None
    quantity: int
    unit_price: float
    total_price: float
    currency: str


class OrderResponse(BaseModel):
    id: str
    user_id: str
    status: str
    total_amount: float
    currency: str
    shipping_address: ShippingAddressSchema | None = None
    tracking_number: str | None = None
    payment_intent_id: str | None = None
    created_at: datetime | None = None
    items: list[OrderItemResponse]

    @classmethod
    def from_order(cls, order) -> "OrderResponse":
        total = order.total_amount
        return cls(
            id=str(order.id),
            user_id=str(order.user_id),
            status=order.status,
            total_amount=total.amount,
            currency=total.currency,
            shipping_address=(
                ShippingAddressSchema.model_validate(order.shipping_address.to_dict())
                if order.shipping_address
                else None
            ),
            tracking_number=order.tracking_number,
            payment_intent_id=order.payment_intent_id,
            created_at=order.created_at,
            items=[
                OrderItemResponse(
                    id=str(item.id),
                    product_id=str(item.product_id),
                    product_name=item.product_name,
                    artwork_title=item.artwork_title,
                    artist_name=item.artist_name,
                    quantity=item.quantity,
                    unit_price=item.unit_price.amount,
                    total_price=item.total_price.amount,
                    currency=item.unit_price.currency,
                )
                for item in order.items
            ],
        )


class PaymentIntentResponse(BaseModel):
    payment_intent_id: str
    client_secret: str | None = None
    amount: float
    currency: str
    status: str


class RefundResponse(BaseModel):
    refund_id: str
    amount: float
    status: str
    reason: str | None = None


class StatusResponse(BaseModel):
    status: str = "ok"
