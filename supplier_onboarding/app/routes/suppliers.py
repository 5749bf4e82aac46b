from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from .. import schemas
from ..dependencies import Store, get_onboarding_store
from ..store import OnboardingStoreError, SupplierNotFoundError, require_supplier

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/suppliers", tags=["suppliers"])


@router.put("/{supplier_id}", response_model=schemas.SupplierRecord)
def upsert_supplier(
    supplier_id: str,
    request: schemas.SupplierUpdateRequest,
    store: Store = Depends(get_onboarding_store),
) -> schemas.SupplierRecord:
    data = request.model_dump(by_alias=True, exclude_none=True, mode="json")
    try:
        return store.save_supplier(supplier_id, data)
    except OnboardingStoreError as exc:
        logger.exception("Error saving supplier record %s.", supplier_id)
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@router.get("/{supplier_id}", response_model=schemas.SupplierRecord)
def get_supplier(
    supplier_id: str,
    store: Store = Depends(get_onboarding_store),
) -> schemas.SupplierRecord:
    try:
        return require_supplier(store, supplier_id)
    except SupplierNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except OnboardingStoreError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@router.post("/{supplier_id}/interactions", status_code=201)
def log_interaction(
    supplier_id: str,
    request: schemas.InteractionRequest,
    store: Store = Depends(get_onboarding_store),
) -> dict:
    data = request.model_dump(exclude={"actionType"}, exclude_none=True)
    try:
        action_id = store.log_interaction(supplier_id, request.actionType, data)
    except OnboardingStoreError as exc:
        logger.exception("Error logging interaction for supplier %s.", supplier_id)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return {"success": True, "actionId": action_id}


@router.put("/{supplier_id}/recommendations/{buyer_id}")
def cache_recommendation(
    supplier_id: str,
    buyer_id: str,
    request: schemas.Recommendation,
    store: Store = Depends(get_onboarding_store),
) -> dict:
    try:
        document = store.cache_recommendation(supplier_id, buyer_id, request.model_dump(exclude_none=True))
    except OnboardingStoreError as exc:
        logger.exception("Error caching recommendation %s for supplier %s.", buyer_id, supplier_id)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return {
        "success": True,
        "buyerId": buyer_id,
        "generatedAt": document["generatedAt"].isoformat(),
        "expiresAt": document["expiresAt"].isoformat(),
    }
