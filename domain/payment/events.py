"""
Order payment domain events.

Dispatched by payment adapters when a webhook reports a payment outcome.
Each event carries the order, the adapter that handled the payment and the
intent snapshot built from the gateway payment.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
import uuid

from domain.commerce.entity import Order
from domain.payment.entity import PaymentIntent


@dataclass
class OrderPaymentEvent:
    order: Order
    payment_adapter: Any
    payment_intent: PaymentIntent
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def name(self) -> str:
        return type(self).__name__


@dataclass
class OrderPaid(OrderPaymentEvent):
    pass


@dataclass
class OrderPaymentCanceled(OrderPaymentEvent):
    pass


@dataclass
class OrderPaymentFailed(OrderPaymentEvent):
    pass
