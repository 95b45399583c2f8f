"""
Commerce domain entities: cart, order and the payment transaction ledger.

Amounts are integer minor units (cents). Keep this layer free of
infrastructure dependencies.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from domain.common.exceptions import DomainValidationException


def _ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Normalize naive datetimes to UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


class OrderStatus:
    AWAITING_PAYMENT = "awaiting-payment"
    PAYMENT_RECEIVED = "payment-received"


@dataclass
class CartLine:
    purchasable: str
    unit_price: int
    quantity: int = 1
    id: Optional[int] = None

    def __post_init__(self):
        if self.quantity < 1:
            raise DomainValidationException(
                f"Quantity must be at least 1: {self.quantity}",
                field="quantity",
            )
        if self.unit_price < 0:
            raise DomainValidationException(
                f"Unit price must not be negative: {self.unit_price}",
                field="unit_price",
            )

    @property
    def sub_total(self) -> int:
        return self.unit_price * self.quantity


@dataclass
class Cart:
    """
    Shopping cart.

    Business rules:
    1. Currency is an ISO-4217 alpha-3 code
    2. The calculated total never drops below zero
    """

    id: Optional[int]
    currency: str = "EUR"
    lines: list[CartLine] = field(default_factory=list)
    shipping_total: int = 0
    discount_total: int = 0
    meta: dict = field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.currency or len(self.currency) != 3 or not self.currency.isalpha():
            raise DomainValidationException(
                f"Invalid currency code: {self.currency}",
                field="currency",
            )
        self.currency = self.currency.upper()
        if self.meta is None:
            self.meta = {}
        self.created_at = _ensure_utc(self.created_at)
        self.updated_at = _ensure_utc(self.updated_at)

    @property
    def sub_total(self) -> int:
        return sum(line.sub_total for line in self.lines)

    def calculate(self) -> int:
        """Cart total in minor units."""
        return max(self.sub_total + self.shipping_total - self.discount_total, 0)


@dataclass
class Order:
    """Order placed from a cart; the target of payment outcome events."""

    id: Optional[int]
    cart_id: int
    currency: str
    total: int
    status: str = OrderStatus.AWAITING_PAYMENT
    placed_at: Optional[datetime] = None
    meta: dict = field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if self.meta is None:
            self.meta = {}
        self.placed_at = _ensure_utc(self.placed_at)
        self.created_at = _ensure_utc(self.created_at)
        self.updated_at = _ensure_utc(self.updated_at)

    @classmethod
    def from_cart(cls, cart: Cart) -> "Order":
        """Draft order for a cart, awaiting payment."""
        if cart.id is None:
            raise DomainValidationException("Cart must be persisted before ordering", field="cart_id")
        now = datetime.now(timezone.utc)
        return cls(
            id=None,
            cart_id=cart.id,
            currency=cart.currency,
            total=cart.calculate(),
            status=OrderStatus.AWAITING_PAYMENT,
            created_at=now,
            updated_at=now,
        )

    def is_placed(self) -> bool:
        return self.placed_at is not None

    def mark_paid(self) -> None:
        """Payment received; the order counts as placed from now on."""
        now = datetime.now(timezone.utc)
        self.status = OrderStatus.PAYMENT_RECEIVED
        self.placed_at = now
        self.updated_at = now


@dataclass
class Transaction:
    """
    Ledger record linking a gateway payment (``reference``) to an order.

    ``reference`` is unique: exactly one transaction per gateway payment id.
    """

    id: Optional[int]
    order_id: Optional[int]
    type: str
    driver: str
    amount: int
    reference: str
    status: str
    success: bool = False
    card_type: Optional[str] = None
    meta: dict = field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.reference:
            raise DomainValidationException("Transaction reference is required", field="reference")
        if self.meta is None:
            self.meta = {}
        self.created_at = _ensure_utc(self.created_at)
        self.updated_at = _ensure_utc(self.updated_at)

    def set_status(self, status: str, *, success: bool) -> None:
        self.status = status
        self.success = success
        self.updated_at = datetime.now(timezone.utc)
