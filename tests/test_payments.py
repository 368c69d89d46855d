from types import SimpleNamespace

import pytest
import stripe

import main


@pytest.fixture
def gateway(monkeypatch):
    calls = []

    def create(**params):
        calls.append(params)
        return SimpleNamespace(id="pi_123", client_secret="pi_123_secret_abc")

    monkeypatch.setattr(main, "STRIPE_SECRET_KEY", "sk_test_123")
    monkeypatch.setattr(stripe.PaymentIntent, "create", create)
    return calls


def test_payment_intent_forwards_amount_and_currency(client, gateway):
    resp = client.post("/api/payments", json={"amount": 6480, "currency": "sek"})
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "clientSecret": "pi_123_secret_abc"}

    params = gateway[0]
    assert params["amount"] == 6480
    assert params["currency"] == "sek"
    assert params["automatic_payment_methods"] == {"enabled": True}
    assert "setup_future_usage" not in params


def test_payment_intent_defaults_to_usd(client, gateway):
    client.post("/api/payments", json={"amount": 100})
    assert gateway[0]["currency"] == "usd"


def test_payment_intent_metadata_and_saved_method(client, gateway):
    client.post("/api/payments", json={
        "amount": 2500,
        "metadata": {"order_ref": "A-17"},
        "address": {"city": "Kalmar"},
        "save_payment_method": True,
    })
    params = gateway[0]
    assert params["metadata"] == {"order_ref": "A-17", "city": "Kalmar", "save_payment_method": "true"}
    assert params["setup_future_usage"] == "off_session"


@pytest.mark.parametrize("amount", [0, -5, "ten"])
def test_payment_intent_rejects_bad_amount(client, gateway, amount):
    assert client.post("/api/payments", json={"amount": amount}).status_code == 400
    assert gateway == []


def test_payment_gateway_failure(client, monkeypatch):
    def create(**params):
        raise RuntimeError("card network down")

    monkeypatch.setattr(main, "STRIPE_SECRET_KEY", "sk_test_123")
    monkeypatch.setattr(stripe.PaymentIntent, "create", create)
    resp = client.post("/api/payments", json={"amount": 100})
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "Payment processing failed"}


def test_payment_gateway_not_configured(client, monkeypatch):
    monkeypatch.setattr(main, "STRIPE_SECRET_KEY", None)
    assert client.post("/api/payments", json={"amount": 100}).status_code == 500
