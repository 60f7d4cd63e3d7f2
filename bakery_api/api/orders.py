"""
Bakery API — Order submission routes

Paths match the storefront client. Validation failures answer 422 and
payment failures answer 200 with ``success: false`` (see core/errors.py).
"""
from typing import Any

from fastapi import APIRouter, Body, Depends

from bakery_api.schemas.order import SubmissionKind
from bakery_api.services.orders import OrderIntakeService, get_order_service

router = APIRouter(prefix="/api", tags=["orders"])


@router.post("/order/handlePayOnline")
async def pay_online(
    payload: dict[str, Any] = Body(...),
    service: OrderIntakeService = Depends(get_order_service),
):
    """Charge the card token in ``id`` for the grand total, then store the order."""
    result = await service.submit(SubmissionKind.ONLINE, payload)
    return {"message": "Payment Successful", "success": True, "order": result.records}


@router.post("/order/handleCashOrder")
async def cash_order(
    payload: dict[str, Any] = Body(...),
    service: OrderIntakeService = Depends(get_order_service),
):
    result = await service.submit(SubmissionKind.CASH, payload)
    return result.records


@router.post("/order/addCustomOrder")
async def custom_order(
    payload: dict[str, Any] = Body(...),
    service: OrderIntakeService = Depends(get_order_service),
):
    result = await service.submit(SubmissionKind.CUSTOM, payload)
    return result.records


@router.post("/catering/addCateringOrder")
async def catering_order(
    payload: dict[str, Any] = Body(...),
    service: OrderIntakeService = Depends(get_order_service),
):
    result = await service.submit(SubmissionKind.CATERING, payload)
    return result.records
