import pytest

from domain.commerce.entity import Order
from domain.payment.entity import PaymentIntent
from domain.payment.events import OrderPaid, OrderPaymentEvent, OrderPaymentFailed
from infrastructure.events.dispatcher import InMemoryEventDispatcher


def _order():
    return Order(id=1, cart_id=1, currency="EUR", total=1000)


@pytest.mark.asyncio
async def test_dispatch_reaches_sync_and_async_handlers_in_order():
    dispatcher = InMemoryEventDispatcher()
    calls = []

    def sync_handler(event):
        calls.append(("sync", event.name))

    async def async_handler(event):
        calls.append(("async", event.name))

    dispatcher.subscribe(OrderPaid, sync_handler)
    dispatcher.subscribe(OrderPaymentEvent, async_handler)

    await dispatcher.dispatch(OrderPaid(_order(), None, PaymentIntent(id="tr_1", status="paid", amount=1000)))

    assert calls == [("sync", "OrderPaid"), ("async", "OrderPaid")]


@pytest.mark.asyncio
async def test_dispatch_only_matches_subscribed_types():
    dispatcher = InMemoryEventDispatcher()
    paid = []
    dispatcher.subscribe(OrderPaid, paid.append)

    await dispatcher.dispatch(OrderPaymentFailed(_order(), None, PaymentIntent(id="tr_1", status="failed", amount=1000)))

    assert paid == []


@pytest.mark.asyncio
async def test_handler_errors_propagate():
    dispatcher = InMemoryEventDispatcher()

    def boom(event):
        raise RuntimeError("listener failed")

    dispatcher.subscribe(OrderPaid, boom)

    with pytest.raises(RuntimeError):
        await dispatcher.dispatch(OrderPaid(_order(), None, PaymentIntent(id="tr_1", status="paid", amount=1000)))
