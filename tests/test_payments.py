"""Tests for payment intents and the health endpoints."""

import pytest
import stripe

import main
from errors import UpstreamFailure
from payments import PaymentGateway, get_payment_gateway, to_minor_units


class FakeGateway:
    def __init__(self, fail=False):
        self.amounts = []
        self.fail = fail

    def create_intent(self, amount):
        if self.fail:
            raise UpstreamFailure("Failed to create payment intent", "card_declined")
        self.amounts.append(amount)
        return f"pi_{amount}_secret"


@pytest.fixture
def gateway(client):
    fake = FakeGateway()
    main.app.dependency_overrides[get_payment_gateway] = lambda: fake
    return fake


class TestPaymentIntent:
    def test_returns_client_secret_for_cents(self, client, gateway):
        response = client.post("/create-payment-intent", json={"price": 15})
        assert response.status_code == 200
        assert response.json() == {"clientSecret": "pi_1500_secret"}
        assert gateway.amounts == [1500]

    def test_rounds_to_whole_cents(self):
        assert to_minor_units(19.99) == 1999
        assert to_minor_units(0.1 + 0.2) == 30

    def test_non_positive_price_is_rejected(self, client, gateway):
        response = client.post("/create-payment-intent", json={"price": 0})
        assert response.status_code == 400
        assert gateway.amounts == []

    def test_sub_cent_price_is_rejected(self, client, gateway):
        response = client.post("/create-payment-intent", json={"price": 0.001})
        assert response.status_code == 400
        assert response.json()["message"] == "Price must be at least one cent"
        assert gateway.amounts == []

    def test_gateway_failure(self, client):
        main.app.dependency_overrides[get_payment_gateway] = lambda: FakeGateway(fail=True)
        response = client.post("/create-payment-intent", json={"price": 5})
        assert response.status_code == 500
        assert response.json()["error"] == "card_declined"

    def test_stripe_errors_become_upstream_failures(self, monkeypatch):
        def _declined(**kwargs):
            raise stripe.StripeError("Your card was declined.")

        monkeypatch.setattr(stripe.PaymentIntent, "create", _declined)
        with pytest.raises(UpstreamFailure):
            PaymentGateway("sk_test_x").create_intent(500)

    def test_stripe_call_arguments(self, monkeypatch):
        calls = []

        class _Intent:
            client_secret = "pi_secret"

        def _create(**kwargs):
            calls.append(kwargs)
            return _Intent()

        monkeypatch.setattr(stripe.PaymentIntent, "create", _create)
        assert PaymentGateway("sk_test_x", "usd").create_intent(2500) == "pi_secret"
        assert calls == [{"amount": 2500, "currency": "usd", "payment_method_types": ["card"], "api_key": "sk_test_x"}]


class TestHealth:
    def test_root(self, client):
        assert client.get("/").json() == {"message": "Asset Management Backend Running"}

    def test_database_check(self, client, mock_db):
        mock_db.assets.insert_one({"name": "Laptop"})
        body = client.get("/test").json()
        assert body["database"] == "ok"
        assert "assets" in body["collections"]
