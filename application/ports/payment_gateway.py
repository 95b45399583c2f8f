"""
Payment gateway port (application/ports) exposing a replaceable protocol.

Application depends on this Protocol; infrastructure implements adapters.
"""
from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable

from application.dtos.payments import GatewayPayment


@runtime_checkable
class PaymentGateway(Protocol):
    """Gateway protocol for hosted-checkout payment providers.

    Implementations should be async and side-effect free beyond IO.
    """

    provider: str

    async def create_payment(
        self,
        total: int,
        method_type: str,
        method_issuer: Optional[str],
        description: str,
        amount: Optional[int] = None,
        *,
        currency: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> GatewayPayment: ...

    async def get_payment(self, payment_id: str) -> Optional[GatewayPayment]: ...

    def normalize_amount_to_integer(self, amount: str) -> int: ...
