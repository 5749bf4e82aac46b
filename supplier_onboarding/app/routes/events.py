from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.concurrency import run_in_threadpool

from ..dependencies import get_answer_processor
from ..services.answer_processor import AnswerProcessor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["events"])


def decode_push_message(envelope: Any) -> Dict[str, Any]:
    """Decode the JSON payload of a Pub/Sub push envelope."""
    message = envelope.get("message") if isinstance(envelope, dict) else None
    if not message or "data" not in message:
        raise ValueError("Invalid Pub/Sub message payload.")
    try:
        payload = json.loads(base64.b64decode(message["data"], validate=True))
    except (binascii.Error, TypeError, ValueError) as exc:
        raise ValueError("Failed to decode Pub/Sub message.") from exc
    if not isinstance(payload, dict):
        raise ValueError("Pub/Sub message must carry a JSON object.")
    return payload


@router.post("/answer-submitted", status_code=status.HTTP_202_ACCEPTED)
async def answer_submitted(
    request: Request,
    processor: AnswerProcessor = Depends(get_answer_processor),
) -> Dict[str, str]:
    try:
        envelope = await request.json()
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Invalid Pub/Sub message payload.") from exc
    try:
        payload = decode_push_message(envelope)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    supplier_id = payload.get("supplierId")
    question_id = payload.get("questionId")
    if not supplier_id or not question_id:
        raise HTTPException(status_code=400, detail="Missing supplierId or questionId in message.")

    try:
        result = await run_in_threadpool(processor.process, supplier_id, question_id)
    except KeyError as exc:
        raise HTTPException(
            status_code=404, detail=f"Answer {question_id} for supplier {supplier_id} not found"
        ) from exc

    logger.info("Answer event %s/%s acknowledged with status %s.", supplier_id, question_id, result.value)
    return {"supplierId": supplier_id, "questionId": question_id, "status": result.value}
