import pytest
from fastapi.testclient import TestClient
from mollie.api.error import RequestError

from api.dependencies import get_event_dispatcher, get_payment_gateway, get_uow_factory
from main import app


IDEAL_META = {"payment_method_type": "ideal", "payment_method_issuer": "ideal_ABNANL2A"}


@pytest.fixture
def client(gateway, uow_factory, events):
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_uow_factory] = lambda: uow_factory
    app.dependency_overrides[get_event_dispatcher] = lambda: events
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _create_intent(client, cart, meta=IDEAL_META):
    resp = client.post("/api/v1/payments/mollie/intents", json={"cart_id": cart.id, "meta": meta})
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]


def test_create_intent_returns_envelope(client, cart, sdk):
    data = _create_intent(client, cart)

    assert data["id"] in sdk.payments.payments
    assert data["status"] == "open"
    assert data["amount"] == 1000
    assert data["meta"]["mollie_checkout_url"].startswith("https://www.mollie.com/checkout/")


def test_create_intent_with_invalid_method_is_400(client, cart):
    resp = client.post(
        "/api/v1/payments/mollie/intents",
        json={"cart_id": cart.id, "meta": {"payment_method_type": "cash"}},
    )

    assert resp.status_code == 400
    body = resp.json()
    assert body["code"] == 60005
    assert body["message"] == "Payment method type is not a valid Mollie payment method type"
    assert body["error"]["type"] == "MissingMetadata"
    assert body["error"]["field"] == "payment_method_type"


def test_create_intent_for_unknown_cart_is_404(client):
    resp = client.post("/api/v1/payments/mollie/intents", json={"cart_id": 404, "meta": IDEAL_META})

    assert resp.status_code == 404
    assert resp.json()["error"]["type"] == "CartNotFound"


def test_create_intent_gateway_failure_is_502(client, cart, sdk):
    sdk.payments.create_error = RequestError("connection reset")

    resp = client.post("/api/v1/payments/mollie/intents", json={"cart_id": cart.id, "meta": IDEAL_META})

    assert resp.status_code == 502
    assert resp.json()["message"].startswith("Mollie payment failed: ")


def test_webhook_without_id_is_400(client, sdk):
    resp = client.post("/api/v1/mollie/webhook", data={})

    assert resp.status_code == 400
    assert resp.json() == {"error": "Payment id is required"}
    assert sdk.payments.get_calls == []


def test_webhook_with_undecodable_body_is_400(client, sdk):
    resp = client.post(
        "/api/v1/mollie/webhook",
        content=b"id=tr_\xff\xfeabc",
        headers={"content-type": "application/x-www-form-urlencoded"},
    )

    assert resp.status_code == 400
    assert resp.json() == {"error": "Payment id is required"}
    assert sdk.payments.get_calls == []

def test_webhook_unknown_payment_is_404(client):
    resp = client.post("/api/v1/mollie/webhook", data={"id": "tr_nope"})

    assert resp.status_code == 404
    assert resp.json() == {"error": "Payment not found"}


def test_webhook_paid_form_post(client, cart, sdk, store, received_events):
    payment_id = _create_intent(client, cart)["id"]
    sdk.payments.set_status(payment_id, "paid")

    resp = client.post("/api/v1/mollie/webhook", data={"id": payment_id})

    assert resp.status_code == 200
    assert resp.json() == {"message": "success"}
    assert [e.name for e in received_events] == ["OrderPaid"]
    [transaction] = store.transactions.values()
    assert transaction.status == "paid"


def test_webhook_accepts_query_string_id(client, cart, sdk):
    payment_id = _create_intent(client, cart)["id"]
    sdk.payments.set_status(payment_id, "canceled")

    resp = client.post(f"/api/v1/mollie/webhook?id={payment_id}")

    assert resp.status_code == 200
    assert resp.json() == {"message": "cancelled"}


def test_webhook_gateway_error_is_502_envelope(client, sdk):
    sdk.payments.get_error = RequestError("timeout")

    resp = client.post("/api/v1/mollie/webhook", data={"id": "tr_any"})

    assert resp.status_code == 502
    assert resp.json()["error"]["type"] == "PaymentProviderError"


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json()["data"] == {"status": "healthy"}
