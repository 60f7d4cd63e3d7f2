"""
Bakery API — Order intake

Submission flow:
  1. Validate the payload against the rule set for its kind (422 on failure)
  2. Online orders only: charge the grand total; anything but "succeeded"
     stops here with PaymentError and nothing is stored
  3. Insert the order document under a fresh 10-character id
  4. Read the stored record back without the card suffix

A store failure after a successful charge is logged but the charge is not
reversed.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable

from fastapi import Depends

from bakery_api.core.config import get_settings
from bakery_api.core.errors import NotFoundError, PaymentError, PersistenceError, ValidationFailed
from bakery_api.core.ids import generate_order_id
from bakery_api.db.database import DocumentStore, get_store, id_filter
from bakery_api.schemas.order import (
    ORDER_COLLECTIONS,
    Address,
    CakeDetails,
    CakeType,
    CateringAddress,
    CateringOrder,
    CustomOrder,
    CustomOrderType,
    DeliveryMethod,
    Order,
    PaymentMethod,
    RegularOrder,
    SubmissionKind,
    Total,
)
from bakery_api.services.blobs import BlobStore, remove_image
from bakery_api.services.payments import ChargeResult, PaymentGateway, get_payment_gateway
from bakery_api.validation.engine import Require, validate
from bakery_api.validation.rules import (
    CASH_ORDER_RULES,
    CATERING_ADDRESS,
    CATERING_ORDER_RULES,
    CUSTOM_ORDER_RULES,
    ONLINE_ORDER_RULES,
    ORDER_ADDRESS,
)

settings = get_settings()
logger = logging.getLogger(__name__)

# Card digits stay in the store; they are never sent back to the storefront.
HIDE_CARD = {"last4": 0}

PAYMENT_FAULT_MESSAGE = "Payment could not be processed. Please try again."

RULES = {
    SubmissionKind.ONLINE: ONLINE_ORDER_RULES,
    SubmissionKind.CASH: CASH_ORDER_RULES,
    SubmissionKind.CUSTOM: CUSTOM_ORDER_RULES,
    SubmissionKind.CATERING: CATERING_ORDER_RULES,
}


class SubmissionState(str, Enum):
    VALIDATING = "validating"
    REJECTED = "rejected"
    VALIDATED = "validated"
    PAYMENT_PENDING = "payment_pending"
    PAYMENT_FAILED = "payment_failed"
    PAYMENT_CONFIRMED = "payment_confirmed"
    PERSISTING = "persisting"
    PERSIST_FAILED = "persist_failed"
    PERSISTED = "persisted"


@dataclass
class SubmissionResult:
    order: Order
    records: list[dict[str, Any]]


# ─── Building typed orders from validated payloads ────────────────────────────

def _address(data: dict[str, Any], block: Require, model: type[Address] | type[CateringAddress]):
    """The address is kept only when it validates (a pick-up may carry a bad one)."""
    if not isinstance(data.get("address"), list):
        return None
    errors, _ = block.run(data)
    if errors:
        return None
    return model.from_list(data["address"])


def _order_time(data: dict[str, Any]) -> str:
    value = data.get("orderTime")
    if isinstance(value, str) and value.strip():
        return value.strip()
    return datetime.now(tz=timezone.utc).isoformat()


def build_order(kind: SubmissionKind, data: dict[str, Any], order_id: str) -> Order:
    common = {
        "id": order_id,
        "order_time": _order_time(data),
        "name": data["name"],
        "delivery_method": DeliveryMethod(data["deliveryMethod"]),
        "date_for_order": data["dateForOrder"],
        "email": data["email"],
        "phone": data["phone"],
    }

    if kind in (SubmissionKind.ONLINE, SubmissionKind.CASH):
        return RegularOrder(
            **common,
            payment_method=PaymentMethod(data["paymentMethod"]),
            address=_address(data, ORDER_ADDRESS, Address),
            total=Total.from_list(data["total"]),
            cart=data["cart"],
        )

    if kind is SubmissionKind.CUSTOM:
        order_type = CustomOrderType(data["orderType"])
        if order_type is CustomOrderType.CAKE:
            cake_type, size, color, message = data["orderDetails"][:4]
            details: CakeDetails | str = CakeDetails(
                cake_type=CakeType(cake_type),
                size_or_shape_or_letter=size,
                color=color,
                message=message,
            )
        else:
            details = data["orderDetails"]
        return CustomOrder(
            **common,
            order_type=order_type,
            order_details=details,
            address=_address(data, ORDER_ADDRESS, Address),
        )

    if kind is SubmissionKind.CATERING:
        return CateringOrder(
            **common,
            event_type=data["eventType"],
            guest_count=int(data["guestNum"]),
            address=_address(data, CATERING_ADDRESS, CateringAddress),
            message=data["message"],
        )

    raise ValueError(f"Unknown submission kind: {kind!r}")


# ─── Orchestrator ─────────────────────────────────────────────────────────────

class OrderIntakeService:
    def __init__(
        self,
        store: DocumentStore,
        gateway: PaymentGateway,
        id_factory: Callable[[], str] = generate_order_id,
    ):
        self._store = store
        self._gateway = gateway
        self._id_factory = id_factory

    @staticmethod
    def _log(kind: SubmissionKind, order_id: str, state: SubmissionState) -> None:
        logger.info("Order %s (%s): %s", order_id, kind.value, state.value)

    async def submit(self, kind: SubmissionKind, payload: dict[str, Any]) -> SubmissionResult:
        self._log(kind, "-", SubmissionState.VALIDATING)
        result = validate(RULES[kind], payload)
        if not result.ok:
            self._log(kind, "-", SubmissionState.REJECTED)
            raise ValidationFailed(result.errors)

        order = build_order(kind, result.data, self._id_factory())
        self._log(kind, order.id, SubmissionState.VALIDATED)

        charge: ChargeResult | None = None
        if kind is SubmissionKind.ONLINE:
            charge = await self._charge(order, result.data["id"])
            order = order.model_copy(update={"masked_card_last4": charge.masked_last4})

        collection = ORDER_COLLECTIONS[order.kind]
        self._log(kind, order.id, SubmissionState.PERSISTING)
        try:
            await self._store.insert(collection, order.to_document())
            records = await self._store.find(collection, {"_id": order.id}, HIDE_CARD)
        except PersistenceError:
            self._log(kind, order.id, SubmissionState.PERSIST_FAILED)
            if charge is not None:
                logger.error(
                    "Order %s was charged (payment %s) but could not be stored",
                    order.id, charge.reference,
                )
            raise

        self._log(kind, order.id, SubmissionState.PERSISTED)
        return SubmissionResult(order=order, records=records)

    async def _charge(self, order: RegularOrder, method_token: str) -> ChargeResult:
        amount = order.total.grand_total_minor_units
        self._log(SubmissionKind.ONLINE, order.id, SubmissionState.PAYMENT_PENDING)
        try:
            charge = await self._gateway.charge(
                amount,
                settings.PAYMENT_CURRENCY,
                method_token,
                order.email,
            )
        except PaymentError:
            self._log(SubmissionKind.ONLINE, order.id, SubmissionState.PAYMENT_FAILED)
            raise
        except Exception as exc:
            logger.exception("Order %s: payment gateway fault", order.id)
            raise PaymentError(PAYMENT_FAULT_MESSAGE) from exc

        if not charge.succeeded:
            logger.warning(
                "Order %s: charge not successful (status=%s): %s",
                order.id, charge.status, charge.failure_message,
            )
            raise PaymentError(charge.failure_message or f"Payment {charge.status}")

        self._log(SubmissionKind.ONLINE, order.id, SubmissionState.PAYMENT_CONFIRMED)
        return charge


def get_order_service(
    store: DocumentStore = Depends(get_store),
    gateway: PaymentGateway = Depends(get_payment_gateway),
) -> OrderIntakeService:
    return OrderIntakeService(store, gateway)


# ─── Administration ───────────────────────────────────────────────────────────

async def list_orders(store: DocumentStore) -> list[list[dict[str, Any]]]:
    return [await store.find(collection) for collection in ORDER_COLLECTIONS.values()]


async def delete_order(
    store: DocumentStore, blobs: BlobStore, collection: str, order_id: str
) -> list[list[dict[str, Any]]]:
    if collection not in ORDER_COLLECTIONS.values():
        raise NotFoundError(f"Unknown order type '{collection}'")
    matches = await store.find(collection, id_filter(order_id))
    if not matches:
        raise NotFoundError("Order not found")
    await remove_image(blobs, matches[0])
    await store.delete_one(collection, id_filter(order_id))
    logger.info("Order %s deleted from %s", order_id, collection)
    return await list_orders(store)
