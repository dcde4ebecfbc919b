"""Composition of the ordering handlers.

build_services() wires every handler to its collaborators exactly once.
Anything not passed in falls back to the in-memory adapters, and the
payment provider falls back to build_payment_service().
"""

from dataclasses import dataclass

import structlog

from ordering.cart.items import (
    AddToCartHandler,
    ClearCartHandler,
    RemoveFromCartHandler,
    UpdateCartItemHandler,
)
from ordering.order.cancellation import CancelOrderHandler, RefundOrderHandler
from ordering.order.confirmation import ConfirmOrderHandler
from ordering.order.creation import CreateOrderHandler
from ordering.order.fulfillment import DeliverOrderHandler, ShipOrderHandler, StartProcessingHandler
from ordering.order.payment import ProcessPaymentHandler
from ordering.order.queries import GetOrderHandler, GetUserOrdersHandler
from ordering.order.repository import OrderRepository
from ordering.outbox import EventOutbox, InMemoryOutbox
from ordering.storage.memory_adapter import InMemoryCartStore, InMemoryCatalog, InMemoryOrderStore
from ordering.storage.port import ArtistLedger, CartStore, CatalogStore, OrderStore
from payments.gateway import PaymentService, build_payment_service

logger = structlog.get_logger(__name__)


@dataclass
class OrderingServices:
    cart_store: CartStore
    catalog: CatalogStore
    ledger: ArtistLedger
    order_store: OrderStore
    payments: PaymentService
    outbox: EventOutbox

    add_to_cart: AddToCartHandler
    update_cart_item: UpdateCartItemHandler
    remove_from_cart: RemoveFromCartHandler
    clear_cart: ClearCartHandler
    create_order: CreateOrderHandler
    process_payment: ProcessPaymentHandler
    confirm_order: ConfirmOrderHandler
    start_processing: StartProcessingHandler
    ship_order: ShipOrderHandler
    deliver_order: DeliverOrderHandler
    cancel_order: CancelOrderHandler
    refund_order: RefundOrderHandler
    get_order: GetOrderHandler
    get_user_orders: GetUserOrdersHandler


def build_services(
    cart_store: CartStore | None = None,
    catalog: CatalogStore | None = None,
    ledger: ArtistLedger | None = None,
    order_store: OrderStore | None = None,
    payments: PaymentService | None = None,
    outbox: EventOutbox | None = None,
) -> OrderingServices:
    cart_store = cart_store or InMemoryCartStore()
    catalog = catalog or InMemoryCatalog()
    if ledger is None:
        if not isinstance(catalog, ArtistLedger):
            raise TypeError("An ArtistLedger is required when the catalog does not implement one")
        ledger = catalog
    order_store = order_store or InMemoryOrderStore()
    payments = payments or build_payment_service()
    outbox = outbox or InMemoryOutbox()

    orders = OrderRepository(order_store)
    logger.debug(
        "Ordering services built",
        cart_store=type(cart_store).__name__,
        order_store=type(order_store).__name__,
        payments=type(payments).__name__,
    )

    return OrderingServices(
        cart_store=cart_store,
        catalog=catalog,
        ledger=ledger,
        order_store=order_store,
        payments=payments,
        outbox=outbox,
        add_to_cart=AddToCartHandler(cart_store, catalog),
        update_cart_item=UpdateCartItemHandler(cart_store),
        remove_from_cart=RemoveFromCartHandler(cart_store),
        clear_cart=ClearCartHandler(cart_store),
        create_order=CreateOrderHandler(cart_store, catalog, orders, outbox),
        process_payment=ProcessPaymentHandler(orders, payments),
        confirm_order=ConfirmOrderHandler(orders, payments, catalog, ledger, outbox),
        start_processing=StartProcessingHandler(orders, outbox),
        ship_order=ShipOrderHandler(orders, outbox),
        deliver_order=DeliverOrderHandler(orders, outbox),
        cancel_order=CancelOrderHandler(orders, outbox),
        refund_order=RefundOrderHandler(orders, payments, outbox),
        get_order=GetOrderHandler(orders),
        get_user_orders=GetUserOrdersHandler(orders),
    )
