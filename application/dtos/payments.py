"""
Payment DTOs (Pydantic v2) used at application boundaries.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, Field, field_validator

from shared.codes.payment_codes import MollieStatus


class GatewayPayment(BaseModel):
    """Live payment as reported by the gateway. Never persisted."""

    id: str
    status: str
    amount_value: str
    currency: str
    checkout_url: Optional[str] = None
    method: Optional[str] = None
    description: Optional[str] = None
    paid_at: Optional[datetime] = None
    metadata: Optional[Any] = None

    def is_open(self) -> bool:
        return self.status == MollieStatus.OPEN.value

    def is_pending(self) -> bool:
        return self.status == MollieStatus.PENDING.value

    def is_authorized(self) -> bool:
        return self.status == MollieStatus.AUTHORIZED.value

    def is_paid(self) -> bool:
        return self.status == MollieStatus.PAID.value or self.paid_at is not None

    def is_canceled(self) -> bool:
        return self.status == MollieStatus.CANCELED.value

    def is_expired(self) -> bool:
        return self.status == MollieStatus.EXPIRED.value

    def is_failed(self) -> bool:
        return self.status == MollieStatus.FAILED.value


class CreateIntentRequest(BaseModel):
    cart_id: int
    meta: dict[str, Any] = Field(default_factory=dict)
    # Override of the cart total, in minor units
    amount: Optional[int] = Field(default=None, gt=0)

    @field_validator("meta")
    @classmethod
    def _stringify_meta(cls, v: dict[str, Any]) -> dict[str, Any]:
        return {k: (str(val) if val is not None else None) for k, val in (v or {}).items()}


class PaymentIntentResponse(BaseModel):
    id: str
    status: str
    amount: int
    meta: dict[str, str] = Field(default_factory=dict)


class WebhookOutcome(BaseModel):
    """Result of webhook handling, rendered verbatim as the HTTP response."""

    status_code: int = 200
    body: dict[str, Any]

    @classmethod
    def message(cls, message: str) -> "WebhookOutcome":
        return cls(status_code=200, body={"message": message})

    @classmethod
    def error(cls, status_code: int, error: str) -> "WebhookOutcome":
        return cls(status_code=status_code, body={"error": error})

    @property
    def is_success(self) -> bool:
        return self.status_code < 400
