"""
Payment adapter exceptions mapped to unified BusinessException variants.
"""
from __future__ import annotations

from typing import Optional

from domain.common.exceptions import BusinessException
from shared.codes.payment_codes import PaymentCode


class MissingMetadataException(BusinessException):
    """Required payment metadata (method type, issuer) is absent or invalid."""

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(
            code=PaymentCode.MISSING_METADATA,
            message=message,
            error_type="MissingMetadata",
            field=field,
        )


class PaymentGatewayError(BusinessException):
    """Remote payment creation failed; wraps whatever the gateway raised."""

    def __init__(self, message: str, *, provider: str, details: Optional[dict] = None):
        full_details = {"provider": provider}
        if details:
            full_details.update(details)
        super().__init__(
            code=PaymentCode.GATEWAY_ERROR,
            message=message,
            error_type="PaymentGatewayError",
            details=full_details,
        )
