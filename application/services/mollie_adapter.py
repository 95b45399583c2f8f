"""
Mollie hosted-checkout payment adapter.

Intent creation validates the requested payment method, creates the payment
at Mollie and records it as an ``intent`` transaction. Webhook handling
re-fetches the payment (Mollie posts only its id) and applies the first
matching rule:

- paid, transaction not yet paid: authorize the order, status ``paid``
- canceled: ``OrderPaymentCanceled``, status ``cancelled``
- failed: ``OrderPaymentFailed``, status ``failed``
- expired: ``OrderPaymentFailed``, status ``expired``
- anything else: no change

Only the paid rule looks at the stored status. Repeated cancel/fail/expire
deliveries dispatch and write again.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

from application.dtos.payments import GatewayPayment, WebhookOutcome
from application.ports.events import EventDispatcher
from application.ports.payment_gateway import PaymentGateway
from application.services.authorize_payment import AuthorizeMolliePayment
from application.services.payment_adapter import PaymentAdapter, UnitOfWorkFactory
from core.logging_config import get_logger
from core.settings import MollieSettings
from domain.commerce.entity import Cart, Order, Transaction
from domain.common.unit_of_work import AbstractUnitOfWork
from domain.payment.entity import PaymentIntent, PaymentMethod
from domain.payment.events import OrderPaymentCanceled, OrderPaymentFailed
from domain.payment.exceptions import MissingMetadataException, PaymentGatewayError
from shared.codes.payment_codes import TransactionStatus


logger = get_logger(__name__)


class MolliePaymentAdapter(PaymentAdapter):
    def __init__(
        self,
        gateway: PaymentGateway,
        uow_factory: UnitOfWorkFactory,
        events: EventDispatcher,
        config: Optional[MollieSettings] = None,
    ) -> None:
        super().__init__(uow_factory, events)
        self.gateway = gateway
        self.config = config or MollieSettings()

    def get_driver(self) -> str:
        return self.config.driver

    # Metadata validation

    def validate_payment_method_type(self, payment_method_type: Optional[str]) -> PaymentMethod:
        if not payment_method_type:
            raise MissingMetadataException("Payment method type is required", field="payment_method_type")
        method = PaymentMethod.parse(payment_method_type)
        if method is None:
            raise MissingMetadataException(
                "Payment method type is not a valid Mollie payment method type",
                field="payment_method_type",
            )
        return method

    def validate_payment_issuer(self, payment_issuer: Optional[str]) -> str:
        if not payment_issuer:
            raise MissingMetadataException("Payment issuer is required", field="payment_method_issuer")
        return payment_issuer

    # Intent creation

    async def create_intent(
        self,
        cart: Cart,
        meta: Optional[Mapping[str, Any]] = None,
        amount: Optional[int] = None,
    ) -> PaymentIntent:
        meta = meta or {}
        method = self.validate_payment_method_type(meta.get("payment_method_type"))
        issuer: Optional[str] = None
        if method.requires_issuer:
            issuer = self.validate_payment_issuer(meta.get("payment_method_issuer"))

        try:
            payment = await self.gateway.create_payment(
                cart.calculate(),
                method.value,
                issuer,
                f"Web payment for cart #{cart.id}",
                amount,
                currency=cart.currency,
                metadata={"cart_id": cart.id},
            )
        except Exception as exc:
            logger.warning("mollie_intent_failed", cart_id=cart.id, method=method.value, error=str(exc))
            raise PaymentGatewayError(
                f"Mollie payment failed: {exc}",
                provider=self.gateway.provider,
                details={"cart_id": cart.id},
            ) from exc

        intent = self._to_intent(payment.id, payment)

        transaction_meta = {
            "payment_method": method.value,
            "mollie_checkout_url": payment.checkout_url,
        }
        if issuer is not None:
            transaction_meta["payment_method_issuer"] = issuer

        self.set_type(method.value)
        await self.create_transaction(cart, intent, type_="intent", meta=transaction_meta)

        logger.info(
            "mollie_intent_created",
            cart_id=cart.id,
            payment_id=intent.id,
            status=intent.status,
            amount=intent.amount,
            method=method.value,
        )
        return intent

    # Webhook handling

    async def resolve_order(
        self,
        transaction: Transaction,
        *,
        uow: Optional[AbstractUnitOfWork] = None,
    ) -> Optional[Order]:
        """Order the transaction belongs to, or None when it cannot be found."""
        if transaction.order_id is None:
            return None
        if uow is not None:
            return await uow.order_repository.get_by_id(transaction.order_id)
        async with self._uow_factory() as own:
            return await own.order_repository.get_by_id(transaction.order_id)

    async def handle_webhook(self, payment_id: Optional[str]) -> WebhookOutcome:
        logger.info("mollie_webhook_received", payment_id=payment_id)
        if not payment_id:
            return self._reject(400, "Payment id is required", payment_id)

        payment = await self.gateway.get_payment(payment_id)
        if payment is None:
            return self._reject(404, "Payment not found", payment_id)

        async with self._uow_factory() as uow:
            transaction = await uow.transaction_repository.get_by_reference(payment.id)
            if transaction is None:
                return self._reject(404, f"Transaction not found for payment {payment.id}", payment_id)

            order = await self.resolve_order(transaction, uow=uow)
            if order is None:
                return self._reject(404, f"Order not found for transaction #{transaction.id}", payment_id)

            intent = self._to_intent(transaction.reference, payment)
            outcome = await self._apply(uow, payment, order, intent, transaction)
            await uow.commit()

        logger.info(
            "mollie_webhook_handled",
            payment_id=payment.id,
            status=payment.status,
            order_id=order.id,
            transaction_id=transaction.id,
            result=outcome.body.get("message"),
        )
        return outcome

    async def _apply(
        self,
        uow: AbstractUnitOfWork,
        payment: GatewayPayment,
        order: Order,
        intent: PaymentIntent,
        transaction: Transaction,
    ) -> WebhookOutcome:
        if payment.is_paid() and transaction.status != TransactionStatus.PAID:
            authorize = AuthorizeMolliePayment(uow.order_repository, self.events, self)
            await authorize(order, intent, transaction)
            await self.set_transaction_status(transaction, TransactionStatus.PAID, uow=uow)
            return WebhookOutcome.message("success")

        if payment.is_canceled():
            await self.events.dispatch(OrderPaymentCanceled(order, self, intent))
            await self.set_transaction_status(transaction, TransactionStatus.CANCELLED, uow=uow)
            return WebhookOutcome.message("cancelled")

        if payment.is_failed():
            await self.events.dispatch(OrderPaymentFailed(order, self, intent))
            await self.set_transaction_status(transaction, TransactionStatus.FAILED, uow=uow)
            return WebhookOutcome.message("failed")

        if payment.is_expired():
            await self.events.dispatch(OrderPaymentFailed(order, self, intent))
            await self.set_transaction_status(transaction, TransactionStatus.EXPIRED, uow=uow)
            return WebhookOutcome.message("expired")

        return WebhookOutcome.message("unknown event")

    def _to_intent(self, intent_id: str, payment: GatewayPayment) -> PaymentIntent:
        meta = {}
        if payment.checkout_url:
            meta["mollie_checkout_url"] = payment.checkout_url
        return PaymentIntent(
            id=intent_id,
            status=payment.status,
            amount=self.gateway.normalize_amount_to_integer(payment.amount_value),
            meta=meta,
        )

    @staticmethod
    def _reject(status_code: int, error: str, payment_id: Optional[str]) -> WebhookOutcome:
        logger.warning("mollie_webhook_rejected", payment_id=payment_id, status_code=status_code, error=error)
        return WebhookOutcome.error(status_code, error)
