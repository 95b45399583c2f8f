"""
Mollie Payments API wrapper using the official mollie-api-python SDK.

Notes on SDK usage:
- `mollie.api.client.Client` is keyed per instance via `set_api_key`, so each
  wrapper owns its client and nothing is written to module-level state.
- `retry=0` disables the SDK's built-in urllib3 retries; a failed create is
  surfaced to the caller instead of being silently re-submitted.
- `payments.get` raises `NotFoundError` for unknown ids, which is mapped to
  `None` here.
- The SDK is synchronous (requests), so calls run in a worker thread.
"""
from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from functools import partial
from typing import Any, Optional

import anyio
from mollie.api.client import Client
from mollie.api.error import Error as MollieError, NotFoundError

from application.dtos.payments import GatewayPayment
from core.settings import MollieSettings
from infrastructure.external.payments.base import BasePaymentClient


_MINOR_UNITS = Decimal(100)
_CENTS = Decimal("0.01")


class MollieClient(BasePaymentClient):
    provider = "mollie"

    def __init__(self, config: MollieSettings, sdk: Optional[Any] = None):
        self._config = config
        if sdk is None:
            if not config.api_key:
                raise RuntimeError("MOLLIE__API_KEY not configured")
            client_kwargs: dict[str, Any] = {
                "timeout": (config.timeout_connect, config.timeout_read),
                "retry": 0,
            }
            if config.api_endpoint:
                client_kwargs["api_endpoint"] = config.api_endpoint
            sdk = Client(**client_kwargs)
            sdk.set_api_key(config.api_key)
        self._sdk = sdk

    @property
    def sdk(self) -> Any:
        return self._sdk

    @staticmethod
    def normalize_amount_to_integer(amount: str) -> int:
        """Decimal string in major units -> integer minor units ("10.00" -> 1000)."""
        value = Decimal(str(amount)) * _MINOR_UNITS
        return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))

    @staticmethod
    def normalize_amount_to_string(amount: int) -> str:
        """Integer minor units -> two-decimal string (1000 -> "10.00")."""
        value = Decimal(int(amount)) / _MINOR_UNITS
        return str(value.quantize(_CENTS, rounding=ROUND_HALF_UP))

    def _build_payload(
        self,
        total: int,
        method_type: str,
        method_issuer: Optional[str],
        description: str,
        amount: Optional[int],
        currency: str,
        metadata: Optional[dict[str, Any]],
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "amount": {
                "currency": currency.upper(),
                "value": self.normalize_amount_to_string(amount if amount is not None else total),
            },
            "description": description,
            "redirectUrl": self._config.redirect_url,
            "method": method_type,
        }
        if self._config.webhook_url:
            payload["webhookUrl"] = self._config.webhook_url
        if method_issuer:
            payload["issuer"] = method_issuer
        if metadata:
            payload["metadata"] = metadata
        return payload

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
        payload = self._build_payload(total, method_type, method_issuer, description, amount, currency, metadata)
        self._log(
            "mollie_payment_create_request",
            method=method_type,
            amount=payload["amount"]["value"],
            currency=payload["amount"]["currency"],
        )
        try:
            payment = await anyio.to_thread.run_sync(partial(self._sdk.payments.create, payload))
        except MollieError as exc:
            raise self._provider_error(exc, method=method_type) from exc
        result = self._to_gateway_payment(payment)
        self._log("mollie_payment_created", payment_id=result.id, status=result.status)
        return result

    async def get_payment(self, payment_id: str) -> Optional[GatewayPayment]:  # type: ignore[override]
        try:
            payment = await anyio.to_thread.run_sync(partial(self._sdk.payments.get, payment_id))
        except NotFoundError:
            self._log("mollie_payment_not_found", payment_id=payment_id)
            return None
        except MollieError as exc:
            raise self._provider_error(exc, payment_id=payment_id) from exc
        result = self._to_gateway_payment(payment)
        self._log("mollie_payment_fetched", payment_id=result.id, status=result.status)
        return result

    @staticmethod
    def _to_gateway_payment(payment: Any) -> GatewayPayment:
        amount = getattr(payment, "amount", None) or {}
        return GatewayPayment(
            id=str(payment.id),
            status=str(payment.status),
            amount_value=str(amount.get("value", "0.00")),
            currency=str(amount.get("currency", "EUR")),
            checkout_url=getattr(payment, "checkout_url", None),
            method=getattr(payment, "method", None),
            description=getattr(payment, "description", None),
            paid_at=getattr(payment, "paid_at", None),
            metadata=getattr(payment, "metadata", None),
        )
