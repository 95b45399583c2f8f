"""Payment domain exports."""
from .entity import PaymentIntent, PaymentMethod, ISSUER_REQUIRED_METHODS
from .events import OrderPaid, OrderPaymentCanceled, OrderPaymentFailed, OrderPaymentEvent
from .exceptions import MissingMetadataException, PaymentGatewayError

__all__ = [
    "PaymentIntent",
    "PaymentMethod",
    "ISSUER_REQUIRED_METHODS",
    "OrderPaid",
    "OrderPaymentCanceled",
    "OrderPaymentFailed",
    "OrderPaymentEvent",
    "MissingMetadataException",
    "PaymentGatewayError",
]
