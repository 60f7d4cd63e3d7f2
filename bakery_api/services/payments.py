"""
Bakery API — Payment gateway (Stripe PaymentIntents over HTTP)

A charge is created and confirmed in one call. Declines come back as a
failed ChargeResult carrying Stripe's message; transport faults raise
PaymentError directly.
"""
import logging
from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from bakery_api.core.config import get_settings
from bakery_api.core.errors import PaymentError

settings = get_settings()
logger = logging.getLogger(__name__)

SUCCEEDED = "succeeded"


@dataclass
class ChargeResult:
    status: str
    masked_last4: str | None = None
    failure_message: str | None = None
    reference: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == SUCCEEDED


class PaymentGateway(Protocol):
    async def charge(
        self, amount_minor_units: int, currency: str, method_token: str, receipt_email: str
    ) -> ChargeResult: ...


def _card_last4(intent: dict[str, Any]) -> str | None:
    charge = intent.get("latest_charge")
    if not isinstance(charge, dict):
        # API versions before 2022-11-15 embed the charge list instead
        charges = (intent.get("charges") or {}).get("data") or []
        charge = charges[0] if charges else None
    if not isinstance(charge, dict):
        return None
    card = (charge.get("payment_method_details") or {}).get("card") or {}
    return card.get("last4")


class StripeGateway:
    def __init__(
        self,
        secret_key: str | None = None,
        api_base: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._secret_key = secret_key if secret_key is not None else settings.STRIPE_SECRET_KEY
        self._api_base = api_base or settings.STRIPE_API_BASE
        self._transport = transport

    async def charge(
        self, amount_minor_units: int, currency: str, method_token: str, receipt_email: str
    ) -> ChargeResult:
        form = {
            "amount": str(amount_minor_units),
            "currency": currency,
            "description": settings.PAYMENT_DESCRIPTION,
            "payment_method": method_token,
            "payment_method_types[]": "card",
            "confirm": "true",
            "receipt_email": receipt_email,
            "expand[]": "latest_charge",
        }
        try:
            async with httpx.AsyncClient(
                base_url=self._api_base,
                auth=(self._secret_key, ""),
                timeout=settings.HTTP_TIMEOUT_SECONDS,
                transport=self._transport,
            ) as client:
                r = await client.post("/payment_intents", data=form)
        except httpx.TimeoutException:
            raise PaymentError("Payment processor did not respond in time. Please retry.")
        except httpx.RequestError as exc:
            logger.warning("Payment processor unreachable: %s", exc)
            raise PaymentError("Payment processor unreachable. Please retry.")

        try:
            body = r.json()
        except ValueError:
            body = {}

        if not r.is_success:
            error = body.get("error") or {}
            return ChargeResult(
                status=error.get("code") or "failed",
                failure_message=error.get("message") or f"Payment failed ({r.status_code})",
            )

        last_error = body.get("last_payment_error") or {}
        return ChargeResult(
            status=body.get("status", "unknown"),
            masked_last4=_card_last4(body),
            failure_message=last_error.get("message"),
            reference=body.get("id"),
        )


def get_payment_gateway() -> PaymentGateway:
    return StripeGateway()
