import asyncio
import time

import pytest
from mollie.api.client import Client
from mollie.api.error import RequestError

from core.settings import MollieSettings
from infrastructure.external.payments.exceptions import PaymentProviderError
from infrastructure.external.payments.mollie_client import MollieClient
from shared.codes.payment_codes import PaymentCode


@pytest.mark.parametrize(
    "value, expected",
    [("10.00", 1000), ("0.01", 1), ("1234.50", 123450), ("7", 700)],
)
def test_normalize_amount_to_integer(value, expected):
    assert MollieClient.normalize_amount_to_integer(value) == expected


def test_normalize_amount_to_string():
    assert MollieClient.normalize_amount_to_string(1000) == "10.00"
    assert MollieClient.normalize_amount_to_string(1) == "0.01"
    assert MollieClient.normalize_amount_to_string(123450) == "1234.50"


@pytest.mark.asyncio
async def test_create_payment_sends_hosted_checkout_payload(gateway, sdk, mollie_settings):
    payment = await gateway.create_payment(
        1000,
        "ideal",
        "ideal_ABNANL2A",
        "Web payment for cart #1",
        currency="eur",
        metadata={"cart_id": 1},
    )

    payload = sdk.payments.created[0]
    assert payload == {
        "amount": {"currency": "EUR", "value": "10.00"},
        "description": "Web payment for cart #1",
        "redirectUrl": mollie_settings.redirect_url,
        "webhookUrl": mollie_settings.webhook_url,
        "method": "ideal",
        "issuer": "ideal_ABNANL2A",
        "metadata": {"cart_id": 1},
    }
    assert payment.id.startswith("tr_")
    assert payment.status == "open"
    assert payment.amount_value == "10.00"
    assert payment.currency == "EUR"
    assert payment.checkout_url.startswith("https://www.mollie.com/checkout/")
    assert payment.is_open()


@pytest.mark.asyncio
async def test_create_payment_amount_overrides_total(gateway, sdk):
    await gateway.create_payment(1000, "creditcard", None, "desc", 250, currency="EUR")

    payload = sdk.payments.created[0]
    assert payload["amount"]["value"] == "2.50"
    assert "issuer" not in payload
    assert "metadata" not in payload


@pytest.mark.asyncio
async def test_create_payment_omits_webhook_url_when_not_configured(sdk):
    client = MollieClient(MollieSettings(redirect_url="https://shop.test/done"), sdk=sdk)

    await client.create_payment(1000, "bancontact", None, "desc", currency="EUR")

    assert "webhookUrl" not in sdk.payments.created[0]


@pytest.mark.asyncio
async def test_create_payment_maps_sdk_errors(gateway, sdk):
    sdk.payments.create_error = RequestError("Unable to communicate with Mollie")

    with pytest.raises(PaymentProviderError) as exc_info:
        await gateway.create_payment(1000, "ideal", "ideal_INGBNL2A", "desc", currency="EUR")

    assert exc_info.value.code == PaymentCode.PROVIDER_ERROR
    assert exc_info.value.details["provider"] == "mollie"
    assert "Unable to communicate" in exc_info.value.message


@pytest.mark.asyncio
async def test_get_payment_returns_none_when_not_found(gateway):
    assert await gateway.get_payment("tr_missing") is None


@pytest.mark.asyncio
async def test_get_payment_reports_paid_state(gateway, sdk):
    created = await gateway.create_payment(1000, "ideal", "ideal_ABNANL2A", "desc", currency="EUR")
    sdk.payments.set_status(created.id, "paid")

    payment = await gateway.get_payment(created.id)

    assert payment.is_paid()
    assert payment.paid_at is not None
    assert payment.checkout_url is None


@pytest.mark.asyncio
async def test_get_payment_maps_other_sdk_errors(gateway, sdk):
    sdk.payments.get_error = RequestError("timeout")

    with pytest.raises(PaymentProviderError):
        await gateway.get_payment("tr_any")


def test_client_requires_api_key_without_injected_sdk():
    with pytest.raises(RuntimeError):
        MollieClient(MollieSettings(api_key=None))


def test_client_builds_its_own_keyed_sdk_client():
    client = MollieClient(MollieSettings(api_key="test_" + "a" * 30))

    assert isinstance(client.sdk, Client)


@pytest.mark.asyncio
async def test_sdk_calls_do_not_block_the_event_loop(gateway, sdk, monkeypatch):
    created = await gateway.create_payment(1000, "ideal", "ideal_ABNANL2A", "desc", currency="EUR")
    original_get = sdk.payments.get

    def slow_get(payment_id):
        time.sleep(0.5)
        return original_get(payment_id)

    monkeypatch.setattr(sdk.payments, "get", slow_get)

    gaps: list[float] = []

    async def ticker():
        last = time.monotonic()
        while True:
            await asyncio.sleep(0.02)
            now = time.monotonic()
            gaps.append(now - last)
            last = now

    task = asyncio.create_task(ticker())
    try:
        payment = await gateway.get_payment(created.id)
    finally:
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    assert payment.id == created.id
    assert len(gaps) >= 5
    assert max(gaps) < 0.2
