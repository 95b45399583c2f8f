"""
Factory for payment gateway clients.
"""
from __future__ import annotations

from typing import Optional

from core.settings import MollieSettings, payment_settings
from application.ports.payment_gateway import PaymentGateway


def get_mollie_client(config: Optional[MollieSettings] = None) -> PaymentGateway:
    from .mollie_client import MollieClient
    return MollieClient(config or payment_settings.mollie)
