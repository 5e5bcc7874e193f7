"""
Payment intents for subscription packages.

The client pays with the returned client secret and reports success to
``/user-payment-success`` itself; nothing here is persisted or checked
against the gateway afterwards.
"""

import logging

import stripe
from fastapi import APIRouter, Depends

from config import settings
from errors import UpstreamFailure, ValidationError
from schemas import PaymentIntentRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["payments"])


def to_minor_units(price: float) -> int:
    return int(round(price * 100))


class PaymentGateway:
    def __init__(self, api_key: str, currency: str = "usd"):
        self.api_key = api_key
        self.currency = currency

    def create_intent(self, amount: int) -> str:
        """Create a card payment intent for ``amount`` cents and return its client secret."""
        try:
            intent = stripe.PaymentIntent.create(
                amount=amount,
                currency=self.currency,
                payment_method_types=["card"],
                api_key=self.api_key,
            )
        except stripe.StripeError as e:
            logger.error("Payment intent for %d failed: %s", amount, e)
            raise UpstreamFailure("Failed to create payment intent", str(e))
        return intent.client_secret


def get_payment_gateway() -> PaymentGateway:
    return PaymentGateway(settings.STRIPE_SECRET_KEY, settings.PAYMENT_CURRENCY)


@router.post("/create-payment-intent")
def create_payment_intent(payload: PaymentIntentRequest, gateway: PaymentGateway = Depends(get_payment_gateway)):
    amount = to_minor_units(payload.price)
    if amount < 1:
        raise ValidationError("Price must be at least one cent", payload.price)
    client_secret = gateway.create_intent(amount)
    logger.info("Created payment intent for %d minor units", amount)
    return {"clientSecret": client_secret}
