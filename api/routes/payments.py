"""
Payments API routes.

Mollie webhook plus an endpoint to start a hosted checkout for a cart.
Keep this thin: no SDK details here.
"""
from __future__ import annotations

import json
from typing import Optional
from urllib.parse import parse_qsl

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.dependencies import get_mollie_adapter
from application.dtos.payments import CreateIntentRequest, PaymentIntentResponse
from application.services.payment_adapter import PaymentAdapter
from core.logging_config import get_logger
from core.response import Response, success_response


router = APIRouter(tags=["Payments"])
logger = get_logger(__name__)


async def _extract_payment_id(request: Request) -> Optional[str]:
    """Mollie posts ``id=tr_xxx`` as a form; query string and JSON bodies are accepted too."""
    content_type = (request.headers.get("content-type") or "").lower()
    body = await request.body()
    payment_id: Optional[str] = None
    text: Optional[str] = None
    if body:
        try:
            text = body.decode("utf-8")
        except UnicodeDecodeError:
            logger.warning("mollie_webhook_body_undecodable", size=len(body))
    if text:
        if "application/json" in content_type:
            try:
                data = json.loads(text)
            except ValueError:
                data = None
            if isinstance(data, dict) and data.get("id") is not None:
                payment_id = str(data["id"])
        else:
            payment_id = dict(parse_qsl(text)).get("id")
    if not payment_id:
        payment_id = request.query_params.get("id")
    return payment_id.strip() if payment_id and payment_id.strip() else None


@router.post("/mollie/webhook")
async def mollie_webhook(
    request: Request,
    adapter: PaymentAdapter = Depends(get_mollie_adapter),
):
    payment_id = await _extract_payment_id(request)
    outcome = await adapter.handle_webhook(payment_id)
    return JSONResponse(content=outcome.body, status_code=outcome.status_code)


@router.post("/payments/mollie/intents", response_model=Response[PaymentIntentResponse])
async def create_mollie_intent(
    req: CreateIntentRequest,
    adapter: PaymentAdapter = Depends(get_mollie_adapter),
):
    intent = await adapter.create_intent_for_cart(req.cart_id, req.meta, req.amount)
    logger.info("mollie_intent_response", cart_id=req.cart_id, payment_id=intent.id)
    return success_response(data=PaymentIntentResponse(**intent.to_dict()))
