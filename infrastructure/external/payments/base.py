"""
Base payment client implementing shared concerns: logging and error mapping.

Concrete providers should subclass and implement provider-specific logic.
"""
from __future__ import annotations

from typing import Any, Optional

from core.logging_config import get_logger
from application.dtos.payments import GatewayPayment
from application.ports.payment_gateway import PaymentGateway
from infrastructure.external.payments.exceptions import PaymentProviderError


logger = get_logger(__name__)


class BasePaymentClient(PaymentGateway):
    provider: str = "base"

    # Default implementations raise to force override where needed
    async def create_payment(  # type: ignore[override]
        self,
        total: int,
        method_type: str,
        method_issuer: Optional[str],
        description: str,
        amount: Optional[int] = None,
        *,
        currency: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> GatewayPayment:
        raise NotImplementedError

    async def get_payment(self, payment_id: str) -> Optional[GatewayPayment]:  # type: ignore[override]
        raise NotImplementedError

    # Helpers
    def _provider_error(self, exc: Exception, **details: Any) -> PaymentProviderError:
        return PaymentProviderError(
            str(exc) or exc.__class__.__name__,
            provider=self.provider,
            provider_code=exc.__class__.__name__,
            details=details or None,
        )

    def _log(self, event: str, **kwargs) -> None:
        logger.info(
            event,
            provider=self.provider,
            **kwargs,
        )
