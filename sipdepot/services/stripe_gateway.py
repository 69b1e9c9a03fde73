"""
Thin wrapper around the Stripe API.

One StripeGateway is built per process at application startup and handed to
routes through a dependency, so nothing here touches the global
``stripe.api_key``. Every call passes the key explicitly.
"""
import json
import logging
from typing import Any, Dict, Optional

import stripe

from sipdepot.core.config import settings
from sipdepot.core.exceptions import PaymentProviderError, WebhookVerificationError

logger = logging.getLogger(__name__)


class StripeGateway:
    def __init__(self, api_key: Optional[str], currency: str = "usd"):
        self.api_key = api_key
        self.currency = currency

    @classmethod
    def from_settings(cls) -> "StripeGateway":
        return cls(api_key=settings.STRIPE_SECRET_KEY, currency=settings.CURRENCY)

    def _require_key(self) -> str:
        if not self.api_key:
            logger.error("[STRIPE] STRIPE_SECRET_KEY is not configured")
            raise PaymentProviderError("Payments are not configured")
        return self.api_key

    # Connected accounts

    def retrieve_account(self, account_id: str):
        try:
            return stripe.Account.retrieve(account_id, api_key=self._require_key())
        except stripe.StripeError as e:
            logger.error(f"[STRIPE] Failed to retrieve account {account_id}: {str(e)}")
            raise PaymentProviderError("Failed to fetch payment account status", cause=e)

    def create_express_account(self) -> str:
        try:
            account = stripe.Account.create(
                api_key=self._require_key(),
                type="express",
                business_profile={
                    "url": settings.PLATFORM_URL,
                    "product_description": settings.PLATFORM_PRODUCT_DESCRIPTION,
                },
                capabilities={
                    "card_payments": {"requested": True},
                    "transfers": {"requested": True},
                },
            )
        except stripe.StripeError as e:
            logger.error(f"[STRIPE] Failed to create connected account: {str(e)}")
            raise PaymentProviderError("Failed to create payment account", cause=e)
        logger.info(f"[STRIPE] Created connected account {account.id}")
        return account.id

    def create_account_session(self, account_id: str, components: Dict[str, Any]) -> str:
        try:
            session = stripe.AccountSession.create(
                api_key=self._require_key(),
                account=account_id,
                components=components,
            )
        except stripe.StripeError as e:
            logger.error(f"[STRIPE] Failed to create account session for {account_id}: {str(e)}")
            raise PaymentProviderError("Failed to create account session", cause=e)
        return session.client_secret

    # Hosted checkout

    def create_checkout_session(self, **params):
        try:
            return stripe.checkout.Session.create(api_key=self._require_key(), **params)
        except stripe.StripeError as e:
            logger.error(f"[STRIPE] Failed to create checkout session: {str(e)}")
            raise PaymentProviderError("Failed to create checkout session", cause=e)

    # Webhooks

    @staticmethod
    def verify_webhook(
        payload: bytes,
        signature_header: Optional[str],
        secret: Optional[str],
        tolerance: int = stripe.Webhook.DEFAULT_TOLERANCE,
    ) -> Dict[str, Any]:
        """
        Check the Stripe-Signature header against the signing secret and
        return the event as a plain dict.
        """
        if not signature_header:
            raise WebhookVerificationError("Missing stripe-signature header")
        if not secret:
            # Caller is expected to check configuration first; never accept unsigned events.
            raise WebhookVerificationError("Webhook secret not configured")

        try:
            body = payload.decode("utf-8") if isinstance(payload, bytes) else payload
            stripe.WebhookSignature.verify_header(body, signature_header, secret, tolerance)
        except UnicodeDecodeError:
            raise WebhookVerificationError("Invalid payload")
        except stripe.SignatureVerificationError as e:
            logger.warning(f"[WEBHOOK] Signature verification failed: {str(e)}")
            raise WebhookVerificationError("Invalid signature")

        try:
            event = json.loads(body)
        except ValueError:
            raise WebhookVerificationError("Invalid payload")
        if not isinstance(event, dict) or not event.get("id") or "type" not in event:
            raise WebhookVerificationError("Invalid payload")
        return event
