"""
Payment adapter base class.

An adapter connects one payment driver to the commerce model: it creates
payment intents for carts, records them as transactions and turns gateway
notifications into order events. Concrete adapters implement the driver
specific parts; persistence goes through an injected unit of work factory.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional

from application.dtos.payments import WebhookOutcome
from application.ports.events import EventDispatcher
from core.logging_config import get_logger
from domain.commerce.entity import Cart, Order, Transaction
from domain.common.exceptions import CartNotFoundException
from domain.common.unit_of_work import AbstractUnitOfWork
from domain.payment.entity import PaymentIntent
from shared.codes.payment_codes import TransactionStatus


logger = get_logger(__name__)

UnitOfWorkFactory = Callable[[], AbstractUnitOfWork]


class PaymentAdapter(ABC):
    def __init__(self, uow_factory: UnitOfWorkFactory, events: EventDispatcher) -> None:
        self._uow_factory = uow_factory
        self._events = events
        self._type: str = "mollie"

    @property
    def events(self) -> EventDispatcher:
        return self._events

    @abstractmethod
    def get_driver(self) -> str:
        """Driver key the adapter is registered under."""

    def get_type(self) -> str:
        """Payment method type of the last intent, or "mollie" before any intent."""
        return self._type

    def set_type(self, type_: str) -> None:
        self._type = type_

    @abstractmethod
    async def create_intent(
        self,
        cart: Cart,
        meta: Optional[Mapping[str, Any]] = None,
        amount: Optional[int] = None,
    ) -> PaymentIntent: ...

    @abstractmethod
    async def handle_webhook(self, payment_id: Optional[str]) -> WebhookOutcome: ...

    async def create_intent_for_cart(
        self,
        cart_id: int,
        meta: Optional[Mapping[str, Any]] = None,
        amount: Optional[int] = None,
    ) -> PaymentIntent:
        async with self._uow_factory() as uow:
            cart = await uow.cart_repository.get_by_id(cart_id)
        if cart is None:
            raise CartNotFoundException(cart_id)
        return await self.create_intent(cart, meta, amount)

    async def create_transaction(
        self,
        cart: Cart,
        intent: PaymentIntent,
        *,
        type_: str = "intent",
        meta: Optional[dict] = None,
    ) -> Transaction:
        """Record the intent against the cart's draft order, creating the order if needed."""
        async with self._uow_factory() as uow:
            order = await uow.order_repository.get_draft_for_cart(cart.id)
            if order is None:
                order = await uow.order_repository.create(Order.from_cart(cart))
            now = datetime.now(timezone.utc)
            transaction = await uow.transaction_repository.create(
                Transaction(
                    id=None,
                    order_id=order.id,
                    type=type_,
                    driver=self.get_driver(),
                    amount=intent.amount,
                    reference=intent.id,
                    status=intent.status,
                    success=intent.status == TransactionStatus.PAID,
                    card_type=self.get_type(),
                    meta=meta or {},
                    created_at=now,
                    updated_at=now,
                )
            )
            await uow.commit()
        logger.info(
            "transaction_recorded",
            driver=self.get_driver(),
            cart_id=cart.id,
            order_id=order.id,
            reference=transaction.reference,
            status=transaction.status,
        )
        return transaction

    async def set_transaction_status(
        self,
        transaction: Transaction,
        status: str,
        *,
        uow: Optional[AbstractUnitOfWork] = None,
    ) -> Transaction:
        """Persist a new status; opens its own unit of work when none is given."""
        transaction.set_status(status, success=status == TransactionStatus.PAID)
        if uow is not None:
            updated = await uow.transaction_repository.update(transaction)
        else:
            async with self._uow_factory() as own:
                updated = await own.transaction_repository.update(transaction)
                await own.commit()
        logger.info(
            "transaction_status_updated",
            driver=self.get_driver(),
            transaction_id=transaction.id,
            reference=transaction.reference,
            status=status,
        )
        return updated
