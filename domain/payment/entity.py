"""
Payment domain value objects: the payment intent and supported methods.

Keep this layer free of infrastructure dependencies.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional


class PaymentMethod(str, Enum):
    """Mollie payment method identifiers accepted at intent creation."""

    ALMA = "alma"
    APPLEPAY = "applepay"
    BANCONTACT = "bancontact"
    BANKTRANSFER = "banktransfer"
    BELFIUS = "belfius"
    BILLIE = "billie"
    BLIK = "blik"
    CREDITCARD = "creditcard"
    DIRECTDEBIT = "directdebit"
    EPS = "eps"
    GIFTCARD = "giftcard"
    IDEAL = "ideal"
    IN3 = "in3"
    KBC = "kbc"
    KLARNAPAYLATER = "klarnapaylater"
    KLARNAPAYNOW = "klarnapaynow"
    KLARNASLICEIT = "klarnasliceit"
    MYBANK = "mybank"
    PAYPAL = "paypal"
    PAYSAFECARD = "paysafecard"
    PRZELEWY24 = "przelewy24"
    RIVERTY = "riverty"
    SOFORT = "sofort"
    TRUSTLY = "trustly"
    TWINT = "twint"
    VOUCHER = "voucher"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["PaymentMethod"]:
        """Case-insensitive lookup, None when unknown."""
        if not value:
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None

    @property
    def requires_issuer(self) -> bool:
        return self in ISSUER_REQUIRED_METHODS


# Bank redirect methods where the customer's bank must be chosen up front
ISSUER_REQUIRED_METHODS = frozenset({PaymentMethod.IDEAL})


@dataclass(frozen=True)
class PaymentIntent:
    """Snapshot of a requested payment at the gateway.

    ``amount`` is in minor units; ``meta`` carries the hosted checkout URL.
    """

    id: str
    status: str
    amount: int
    meta: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "meta", MappingProxyType(dict(self.meta or {})))

    @property
    def checkout_url(self) -> Optional[str]:
        return self.meta.get("mollie_checkout_url")

    def to_dict(self) -> dict:
        return {"id": self.id, "status": self.status, "amount": self.amount, "meta": dict(self.meta)}
