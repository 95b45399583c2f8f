"""
Authorize a paid Mollie payment: place the order and announce it.
"""
from __future__ import annotations

from typing import Any

from application.ports.events import EventDispatcher
from core.logging_config import get_logger
from domain.commerce.entity import Order, Transaction
from domain.commerce.repository import OrderRepository
from domain.payment.entity import PaymentIntent
from domain.payment.events import OrderPaid


logger = get_logger(__name__)


class AuthorizeMolliePayment:
    """Marks the order as paid and dispatches ``OrderPaid``.

    Callers decide whether authorization is due; no idempotency check here.
    """

    def __init__(self, order_repository: OrderRepository, events: EventDispatcher, payment_adapter: Any) -> None:
        self.order_repository = order_repository
        self.events = events
        self.payment_adapter = payment_adapter

    async def __call__(self, order: Order, intent: PaymentIntent, transaction: Transaction) -> Order:
        order.mark_paid()
        order = await self.order_repository.update(order)
        logger.info(
            "order_payment_authorized",
            order_id=order.id,
            transaction_id=transaction.id,
            payment_id=intent.id,
            amount=intent.amount,
        )
        await self.events.dispatch(OrderPaid(order, self.payment_adapter, intent))
        return order
