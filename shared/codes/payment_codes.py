"""
Payment specific codes plus the Mollie and transaction status vocabularies.
"""
from __future__ import annotations

from enum import Enum, IntEnum


class PaymentCode(IntEnum):
    # Generic success
    SUCCESS = 0

    # Provider/Network errors (6xxxx)
    PROVIDER_ERROR = 60000
    GATEWAY_ERROR = 60001
    MISSING_METADATA = 60005


class MollieStatus(str, Enum):
    """Payment statuses reported by Mollie."""

    OPEN = "open"
    PENDING = "pending"
    AUTHORIZED = "authorized"
    PAID = "paid"
    CANCELED = "canceled"
    EXPIRED = "expired"
    FAILED = "failed"


class TransactionStatus:
    """Statuses this adapter writes onto a host transaction."""

    PAID = "paid"
    CANCELLED = "cancelled"
    FAILED = "failed"
    EXPIRED = "expired"

