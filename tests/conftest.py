"""Pytest bootstrap configuration.

Ensure environment variables are set before test collection and module
imports that depend on application settings, and provide in-memory
persistence plus a fake Mollie SDK.
"""
import os

# Keep the import-time engine off the developer database
os.environ.setdefault("DATABASE__URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DEBUG", "false")

import copy
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Optional

import pytest
from mollie.api.error import NotFoundError

from core.settings import MollieSettings
from domain.commerce.entity import Cart, CartLine, Order, Transaction
from domain.commerce.repository import CartRepository, OrderRepository, TransactionRepository
from domain.common.unit_of_work import AbstractUnitOfWork
from domain.payment.events import OrderPaymentEvent
from application.services.mollie_adapter import MolliePaymentAdapter
from infrastructure.events.dispatcher import InMemoryEventDispatcher
from infrastructure.external.payments.mollie_client import MollieClient


WEBHOOK_URL = "https://shop.test/api/v1/mollie/webhook"
REDIRECT_URL = "https://shop.test/checkout/complete"


# ---------------------------------------------------------------------------
# Fake Mollie SDK
# ---------------------------------------------------------------------------

class FakePayments:
    """Stands in for ``Client.payments``; records payloads and serves stored payments."""

    def __init__(self) -> None:
        self.created: list[dict] = []
        self.get_calls: list[str] = []
        self.payments: dict[str, SimpleNamespace] = {}
        self.create_error: Optional[Exception] = None
        self.get_error: Optional[Exception] = None
        self._seq = 0

    def create(self, data: dict) -> SimpleNamespace:
        if self.create_error is not None:
            raise self.create_error
        self._seq += 1
        payment_id = f"tr_test{self._seq:04d}"
        payment = SimpleNamespace(
            id=payment_id,
            status="open",
            amount=dict(data["amount"]),
            checkout_url=f"https://www.mollie.com/checkout/test-mode?method={data.get('method')}&token={self._seq}",
            method=data.get("method"),
            description=data.get("description"),
            paid_at=None,
            metadata=data.get("metadata"),
        )
        self.created.append(data)
        self.payments[payment_id] = payment
        return payment

    def get(self, payment_id: str) -> SimpleNamespace:
        self.get_calls.append(payment_id)
        if self.get_error is not None:
            raise self.get_error
        if payment_id not in self.payments:
            raise NotFoundError({
                "status": 404,
                "title": "Not Found",
                "detail": f"No payment exists with token {payment_id}.",
            })
        return self.payments[payment_id]

    def set_status(self, payment_id: str, status: str) -> None:
        payment = self.payments[payment_id]
        payment.status = status
        if status == "paid":
            payment.paid_at = "2024-05-01T12:00:00+00:00"
            payment.checkout_url = None


@pytest.fixture
def sdk():
    return SimpleNamespace(payments=FakePayments())


@pytest.fixture
def mollie_settings():
    return MollieSettings(driver="mollie", redirect_url=REDIRECT_URL, webhook_url=WEBHOOK_URL)


@pytest.fixture
def gateway(mollie_settings, sdk):
    return MollieClient(mollie_settings, sdk=sdk)


# ---------------------------------------------------------------------------
# In-memory persistence
# ---------------------------------------------------------------------------

class InMemoryStore:
    def __init__(self) -> None:
        self.carts: dict[int, Cart] = {}
        self.orders: dict[int, Order] = {}
        self.transactions: dict[int, Transaction] = {}
        self.commits = 0
        self.rollbacks = 0
        self._ids = {"cart": 0, "order": 0, "transaction": 0}

    def next_id(self, kind: str) -> int:
        self._ids[kind] += 1
        return self._ids[kind]

    def add_cart(self, cart: Cart) -> Cart:
        if cart.id is None:
            cart.id = self.next_id("cart")
        self.carts[cart.id] = copy.deepcopy(cart)
        return cart

    def add_transaction(self, transaction: Transaction) -> Transaction:
        if transaction.id is None:
            transaction.id = self.next_id("transaction")
        self.transactions[transaction.id] = copy.deepcopy(transaction)
        return transaction


class InMemoryCartRepository(CartRepository):
    def __init__(self, store: InMemoryStore):
        self.store = store

    async def create(self, cart: Cart) -> Cart:
        return copy.deepcopy(self.store.add_cart(copy.deepcopy(cart)))

    async def get_by_id(self, cart_id: int) -> Optional[Cart]:
        cart = self.store.carts.get(cart_id)
        return copy.deepcopy(cart) if cart else None


class InMemoryOrderRepository(OrderRepository):
    def __init__(self, store: InMemoryStore):
        self.store = store

    async def create(self, order: Order) -> Order:
        order = copy.deepcopy(order)
        order.id = self.store.next_id("order")
        self.store.orders[order.id] = order
        return copy.deepcopy(order)

    async def get_by_id(self, order_id: int) -> Optional[Order]:
        order = self.store.orders.get(order_id)
        return copy.deepcopy(order) if order else None

    async def get_draft_for_cart(self, cart_id: int) -> Optional[Order]:
        drafts = [o for o in self.store.orders.values() if o.cart_id == cart_id and o.placed_at is None]
        return copy.deepcopy(max(drafts, key=lambda o: o.id)) if drafts else None

    async def update(self, order: Order) -> Order:
        self.store.orders[order.id] = copy.deepcopy(order)
        return copy.deepcopy(order)


class InMemoryTransactionRepository(TransactionRepository):
    def __init__(self, store: InMemoryStore):
        self.store = store

    async def create(self, transaction: Transaction) -> Transaction:
        return copy.deepcopy(self.store.add_transaction(copy.deepcopy(transaction)))

    async def get_by_reference(self, reference: str) -> Optional[Transaction]:
        for tx in self.store.transactions.values():
            if tx.reference == reference:
                return copy.deepcopy(tx)
        return None

    async def update(self, transaction: Transaction) -> Transaction:
        self.store.transactions[transaction.id] = copy.deepcopy(transaction)
        return copy.deepcopy(transaction)


class InMemoryUnitOfWork(AbstractUnitOfWork):
    def __init__(self, store: InMemoryStore):
        super().__init__()
        self.store = store
        self.cart_repository = InMemoryCartRepository(store)
        self.order_repository = InMemoryOrderRepository(store)
        self.transaction_repository = InMemoryTransactionRepository(store)

    async def commit(self) -> None:
        self._committed = True
        self.store.commits += 1

    async def rollback(self) -> None:
        self.store.rollbacks += 1


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def uow_factory(store):
    return lambda: InMemoryUnitOfWork(store)


@pytest.fixture
def cart(store):
    return store.add_cart(
        Cart(
            id=None,
            currency="EUR",
            lines=[CartLine(purchasable="sku-1", unit_price=450, quantity=2, id=1)],
            shipping_total=100,
            created_at=datetime.now(timezone.utc),
        )
    )


# ---------------------------------------------------------------------------
# Events and adapter
# ---------------------------------------------------------------------------

@pytest.fixture
def events():
    return InMemoryEventDispatcher()


@pytest.fixture
def received_events(events):
    received: list = []
    events.subscribe(OrderPaymentEvent, received.append)
    return received


@pytest.fixture
def adapter(gateway, uow_factory, events, mollie_settings):
    return MolliePaymentAdapter(gateway=gateway, uow_factory=uow_factory, events=events, config=mollie_settings)
