# =============================================================================
# lib/stripe_client.py - Stripe Checkout Wrapper
# =============================================================================
# Thin wrapper over the Stripe hosted checkout API.
#
# Only two calls are needed by the application lifecycle:
# - create_checkout_session(): start a one-off payment for application fees
# - retrieve_checkout_session(): read back payment status + metadata
#
# Results are returned as small dataclasses so the service layer never
# touches StripeObject internals (and tests can fake the gateway easily).
#
# Usage:
#   gateway = StripeGateway(api_key=settings.STRIPE_SECRET_KEY)
#   session = gateway.create_checkout_session(...)
#   redirect(session.url)
# =============================================================================

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import stripe

logger = logging.getLogger(__name__)

PAID = "paid"


@dataclass(frozen=True)
class CheckoutSession:
    """The parts of a Stripe checkout session the API cares about."""
    id: str
    url: str | None = None
    payment_status: str | None = None
    payment_intent: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PAID


def _as_dict(value: Any) -> dict[str, Any]:
    """StripeObject is not a dict in current SDKs; convert via to_dict()."""
    if value is None:
        return {}
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return dict(value)


def _payment_intent_id(value: Any) -> str | None:
    """payment_intent is an id string, or an object when expanded."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        return value.get("id")
    return getattr(value, "id", None)


def _to_checkout_session(raw: Any) -> CheckoutSession:
    data = _as_dict(raw)
    metadata = _as_dict(data.get("metadata"))
    return CheckoutSession(
        id=data["id"],
        url=data.get("url"),
        payment_status=data.get("payment_status"),
        payment_intent=_payment_intent_id(data.get("payment_intent")),
        metadata={str(k): str(v) for k, v in metadata.items()},
    )


class StripeGateway:
    """
    Stripe checkout operations with an explicit network timeout.

    The API key is passed per request so no secret lives in module state.
    """

    def __init__(
        self,
        api_key: str,
        currency: str = "usd",
        timeout_seconds: int = 20,
        max_network_retries: int = 2,
    ):
        self._api_key = api_key
        self.currency = currency
        stripe.default_http_client = stripe.RequestsClient(timeout=timeout_seconds)
        stripe.max_network_retries = max_network_retries

    def create_checkout_session(
        self,
        *,
        amount_cents: int,
        product_name: str,
        customer_email: str,
        metadata: dict[str, Any],
        success_url: str,
        cancel_url: str,
        description: str | None = None,
    ) -> CheckoutSession:
        """
        Create a one-off payment checkout session.

        Metadata values are stringified because Stripe only stores strings.
        """
        product_data: dict[str, Any] = {"name": product_name}
        if description:
            product_data["description"] = description

        raw = stripe.checkout.Session.create(
            api_key=self._api_key,
            mode="payment",
            customer_email=customer_email,
            line_items=[
                {
                    "price_data": {
                        "currency": self.currency,
                        "unit_amount": amount_cents,
                        "product_data": product_data,
                    },
                    "quantity": 1,
                }
            ],
            metadata={k: "" if v is None else str(v) for k, v in metadata.items()},
            success_url=success_url,
            cancel_url=cancel_url,
        )
        session = _to_checkout_session(raw)
        logger.info(f"Created checkout session {session.id} for {customer_email}")
        return session

    def retrieve_checkout_session(self, session_id: str) -> CheckoutSession:
        raw = stripe.checkout.Session.retrieve(session_id, api_key=self._api_key)
        return _to_checkout_session(raw)
