"""FastAPI routes for the Ordering domain — carts and orders."""

import json

from fastapi import APIRouter, Depends, Request

from ordering.api.schemas import (
    AddToCartRequest,
    CancelOrderRequest,
    CartLineResponse,
    CartResponse,
    ConfirmOrderRequest,
    CreateOrderRequest,
    OrderResponse,
    PaymentIntentResponse,
    ProcessPaymentRequest,
    RefundOrderRequest,
    RefundResponse,
    ShipOrderRequest,
    StatusResponse,
    UpdateCartItemRequest,
)
from ordering.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartItem
from ordering.order.cancellation import CancelOrder, RefundOrder
from ordering.order.confirmation import ConfirmOrder
from ordering.order.creation import CreateOrder
from ordering.order.fulfillment import DeliverOrder, ShipOrder, StartProcessing
from ordering.order.payment import ProcessPayment
from ordering.order.queries import GetOrder, GetUserOrders
from ordering.services import OrderingServices


def get_services(request: Request) -> OrderingServices:
    return request.app.state.ordering_services


def _cart_response(services: OrderingServices, user_id: str) -> CartResponse:
    lines = services.cart_store.get_cart_items(user_id)
    return CartResponse(
        user_id=user_id,
        items=[CartLineResponse(id=line.id, product_id=line.product_id, quantity=line.quantity) for line in lines],
    )


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/carts", tags=["carts"])


@cart_router.get("/{user_id}", response_model=CartResponse)
async def get_cart(user_id: str, services: OrderingServices = Depends(get_services)) -> CartResponse:
    return _cart_response(services, user_id)


@cart_router.post("/{user_id}/items", status_code=201, response_model=CartResponse)
async def add_cart_item(
    user_id: str,
    body: AddToCartRequest,
    services: OrderingServices = Depends(get_services),
) -> CartResponse:
    command = AddToCart(
        user_id=user_id,
        product_id=body.product_id,
        quantity=body.quantity,
    )
    services.add_to_cart.handle(command)
    return _cart_response(services, user_id)


@cart_router.put("/{user_id}/items/{product_id}", response_model=CartResponse)
async def update_cart_item(
    user_id: str,
    product_id: str,
    body: UpdateCartItemRequest,
    services: OrderingServices = Depends(get_services),
) -> CartResponse:
    command = UpdateCartItem(
        user_id=user_id,
        product_id=product_id,
        quantity=body.quantity,
    )
    services.update_cart_item.handle(command)
    return _cart_response(services, user_id)


@cart_router.delete("/{user_id}/items/{product_id}", response_model=CartResponse)
async def remove_cart_item(
    user_id: str,
    product_id: str,
    services: OrderingServices = Depends(get_services),
) -> CartResponse:
    services.remove_from_cart.handle(RemoveFromCart(user_id=user_id, product_id=product_id))
    return _cart_response(services, user_id)


@cart_router.delete("/{user_id}", response_model=StatusResponse)
async def clear_cart(user_id: str, services: OrderingServices = Depends(get_services)) -> StatusResponse:
    services.clear_cart.handle(ClearCart(user_id=user_id))
    return StatusResponse(status="cleared")


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
async def create_order(
    body: CreateOrderRequest,
    services: OrderingServices = Depends(get_services),
) -> OrderResponse:
    """Convert the user's cart into a pending order."""
    command = CreateOrder(
        user_id=body.user_id,
        shipping_address=json.dumps(body.shipping_address.model_dump()),
    )
    order = services.create_order.handle(command)
    return OrderResponse.from_order(order)


@order_router.get("", response_model=list[OrderResponse])
async def list_user_orders(user_id: str, services: OrderingServices = Depends(get_services)) -> list[OrderResponse]:
    orders = services.get_user_orders.handle(GetUserOrders(user_id=user_id))
    return [OrderResponse.from_order(order) for order in orders]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, services: OrderingServices = Depends(get_services)) -> OrderResponse:
    order = services.get_order.handle(GetOrder(order_id=order_id))
    return OrderResponse.from_order(order)


@order_router.post("/{order_id}/payment", response_model=PaymentIntentResponse)
async def process_payment(
    order_id: str,
    body: ProcessPaymentRequest | None = None,
    services: OrderingServices = Depends(get_services),
) -> PaymentIntentResponse:
    """Open a payment intent for a pending order's total."""
    command = ProcessPayment(
        order_id=order_id,
        customer_id=body.customer_id if body else None,
    )
    intent = services.process_payment.handle(command)
    return PaymentIntentResponse(
        payment_intent_id=intent.id,
        client_secret=intent.client_secret,
        amount=intent.amount,
        currency=intent.currency,
        status=intent.status,
    )


@order_router.post("/{order_id}/confirm", response_model=OrderResponse)
async def confirm_order(
    order_id: str,
    body: ConfirmOrderRequest,
    services: OrderingServices = Depends(get_services),
) -> OrderResponse:
    command = ConfirmOrder(
        order_id=order_id,
        payment_intent_id=body.payment_intent_id,
    )
    order = services.confirm_order.handle(command)
    return OrderResponse.from_order(order)


@order_router.post("/{order_id}/processing", response_model=OrderResponse)
async def start_processing(order_id: str, services: OrderingServices = Depends(get_services)) -> OrderResponse:
    order = services.start_processing.handle(StartProcessing(order_id=order_id))
    return OrderResponse.from_order(order)


@order_router.post("/{order_id}/ship", response_model=OrderResponse)
async def ship_order(
    order_id: str,
    body: ShipOrderRequest,
    services: OrderingServices = Depends(get_services),
) -> OrderResponse:
    command = ShipOrder(
        order_id=order_id,
        tracking_number=body.tracking_number,
    )
    order = services.ship_order.handle(command)
    return OrderResponse.from_order(order)


@order_router.post("/{order_id}/deliver", response_model=OrderResponse)
async def deliver_order(order_id: str, services: OrderingServices = Depends(get_services)) -> OrderResponse:
    order = services.deliver_order.handle(DeliverOrder(order_id=order_id))
    return OrderResponse.from_order(order)


@order_router.post("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: str,
    body: CancelOrderRequest | None = None,
    services: OrderingServices = Depends(get_services),
) -> OrderResponse:
    command = CancelOrder(
        order_id=order_id,
        reason=body.reason if body else None,
    )
    order = services.cancel_order.handle(command)
    return OrderResponse.from_order(order)


@order_router.post("/{order_id}/refund", response_model=RefundResponse)
async def refund_order(
    order_id: str,
    body: RefundOrderRequest | None = None,
    services: OrderingServices = Depends(get_services),
) -> RefundResponse:
    command = RefundOrder(
        order_id=order_id,
        amount=body.amount if body else None,
        reason=body.reason if body else None,
    )
    result = services.refund_order.handle(command)
    return RefundResponse(
        refund_id=result.id,
        amount=result.amount,
        status=result.status,
        reason=result.reason,
    )
