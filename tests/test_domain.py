from dataclasses import FrozenInstanceError

import pytest

from domain.commerce.entity import Cart, CartLine, Order, Transaction
from domain.common.exceptions import DomainValidationException
from domain.payment.entity import PaymentIntent, PaymentMethod


def test_payment_method_parse_is_case_insensitive():
    assert PaymentMethod.parse("iDEAL") is PaymentMethod.IDEAL
    assert PaymentMethod.parse(" creditcard ") is PaymentMethod.CREDITCARD
    assert PaymentMethod.parse("cash") is None
    assert PaymentMethod.parse(None) is None


def test_only_ideal_requires_issuer():
    assert PaymentMethod.IDEAL.requires_issuer
    assert [m for m in PaymentMethod if m.requires_issuer] == [PaymentMethod.IDEAL]


def test_payment_intent_is_immutable():
    intent = PaymentIntent(id="tr_1", status="open", amount=1000, meta={"mollie_checkout_url": "https://x"})

    with pytest.raises(FrozenInstanceError):
        intent.status = "paid"
    with pytest.raises(TypeError):
        intent.meta["mollie_checkout_url"] = "https://y"
    assert intent.to_dict() == {
        "id": "tr_1",
        "status": "open",
        "amount": 1000,
        "meta": {"mollie_checkout_url": "https://x"},
    }


def test_cart_total_never_negative():
    cart = Cart(id=1, lines=[CartLine(purchasable="a", unit_price=100)], discount_total=500)

    assert cart.calculate() == 0


def test_cart_rejects_invalid_currency():
    with pytest.raises(DomainValidationException):
        Cart(id=1, currency="EURO")


def test_order_from_cart_requires_persisted_cart():
    with pytest.raises(DomainValidationException):
        Order.from_cart(Cart(id=None))


def test_order_mark_paid_places_order():
    order = Order.from_cart(Cart(id=3, lines=[CartLine(purchasable="a", unit_price=250, quantity=4)]))

    order.mark_paid()

    assert order.total == 1000
    assert order.status == "payment-received"
    assert order.is_placed()


def test_transaction_requires_reference():
    with pytest.raises(DomainValidationException):
        Transaction(id=None, order_id=1, type="intent", driver="mollie", amount=1, reference="", status="open")
