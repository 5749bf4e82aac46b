from __future__ import annotations

import copy
import secrets
import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from . import schemas
from .settings import generative_settings, store_settings


class OnboardingStoreError(RuntimeError):
    """Raised when the document store cannot be read or written."""


class SupplierNotFoundError(ValueError):
    """Raised when a supplier document is required but absent."""


def require_supplier(store, supplier_id: str) -> schemas.SupplierRecord:
    supplier = store.get_supplier(supplier_id)
    if supplier is None:
        raise SupplierNotFoundError(f"Supplier {supplier_id} not found")
    return supplier


def build_answer_document(
    question_id: str,
    answer: Any,
    answer_type: str,
    ai_response: Optional[str] = None,
    *,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Build the partial document written for one answer submission.

    The response fields and the ``processed`` status are written together or
    not at all.
    """
    now = now or datetime.now(timezone.utc)
    document: Dict[str, Any] = {
        "questionId": question_id,
        "answer": answer,
        "answerType": answer_type,
        "submittedAt": now,
        "status": schemas.AnswerStatus.RECEIVED.value,
        "flags": [],
    }
    if ai_response:
        document["aiResponse"] = ai_response
        document["responseGeneratedAt"] = now
        document["status"] = schemas.AnswerStatus.PROCESSED.value
    return document


def build_interaction_document(
    action_type: schemas.InteractionType, data: Dict[str, Any], *, now: Optional[datetime] = None
) -> Dict[str, Any]:
    now = now or datetime.now(timezone.utc)
    action_id = f"{action_type.value}_{int(now.timestamp() * 1000)}_{secrets.token_hex(3)}"
    return {
        **{key: value for key, value in data.items() if value is not None},
        "actionId": action_id,
        "actionType": action_type.value,
        "timestamp": now,
    }


def build_recommendation_document(
    buyer_id: str, recommendation: Dict[str, Any], *, now: Optional[datetime] = None
) -> Dict[str, Any]:
    now = now or datetime.now(timezone.utc)
    return {
        "buyerId": buyer_id,
        "recommendation": recommendation,
        "generatedAt": now,
        "expiresAt": now + timedelta(days=store_settings.recommendation_ttl_days),
        "llmModel": generative_settings.model,
    }


class OnboardingStore:
    """Thread-safe in-memory onboarding document store.

    Mirrors the Firestore layout: one supplier document with nested answer,
    interaction and recommendation collections. Intended for local runs and
    tests; set ``STORE_BACKEND=firestore`` for deployments.
    """

    def __init__(self) -> None:
        self._suppliers: Dict[str, Dict[str, Any]] = {}
        self._answers: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._interactions: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._recommendations: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._lock = threading.Lock()

    # Answers

    def save_answer(
        self,
        supplier_id: str,
        question_id: str,
        answer: Any,
        answer_type: str,
        ai_response: Optional[str] = None,
    ) -> schemas.OnboardingAnswer:
        payload = build_answer_document(question_id, answer, answer_type, ai_response)
        with self._lock:
            answers = self._answers.setdefault(supplier_id, {})
            existing = answers.get(question_id)
            if existing is None:
                answers[question_id] = payload
            else:
                payload.pop("submittedAt")
                existing.update(payload)
            stored = copy.deepcopy(answers[question_id])
        return schemas.OnboardingAnswer.model_validate(stored)

    def update_answer(self, supplier_id: str, question_id: str, fields: Dict[str, Any]) -> None:
        with self._lock:
            try:
                document = self._answers[supplier_id][question_id]
            except KeyError as exc:
                raise KeyError(f"Answer {question_id} for supplier {supplier_id} not found") from exc
            document.update(fields)

    def get_all_answers(self, supplier_id: str) -> Dict[str, schemas.OnboardingAnswer]:
        with self._lock:
            documents = copy.deepcopy(self._answers.get(supplier_id, {}))
        return {
            question_id: schemas.OnboardingAnswer.model_validate(document)
            for question_id, document in documents.items()
        }

    def get_answer(self, supplier_id: str, question_id: str) -> Optional[schemas.OnboardingAnswer]:
        with self._lock:
            document = self._answers.get(supplier_id, {}).get(question_id)
            document = copy.deepcopy(document)
        if document is None:
            return None
        return schemas.OnboardingAnswer.model_validate(document)

    # Suppliers

    def save_supplier(self, supplier_id: str, data: Dict[str, Any]) -> schemas.SupplierRecord:
        now = datetime.now(timezone.utc)
        with self._lock:
            document = self._suppliers.get(supplier_id)
            if document is None:
                document = {"supplierId": supplier_id, "createdAt": now}
                self._suppliers[supplier_id] = document
            document.update(data)
            document["updatedAt"] = now
            stored = copy.deepcopy(document)
        return schemas.SupplierRecord.model_validate(stored)

    def get_supplier(self, supplier_id: str) -> Optional[schemas.SupplierRecord]:
        with self._lock:
            document = copy.deepcopy(self._suppliers.get(supplier_id))
        if document is None:
            return None
        return schemas.SupplierRecord.model_validate(document)

    def update_onboarding_status(self, supplier_id: str, status: schemas.OnboardingStatus) -> None:
        self.save_supplier(supplier_id, {"onboardingStatus": status.value})

    # Interaction history and recommendation cache

    def log_interaction(
        self, supplier_id: str, action_type: schemas.InteractionType, data: Dict[str, Any]
    ) -> str:
        document = build_interaction_document(action_type, data)
        with self._lock:
            self._interactions.setdefault(supplier_id, {})[document["actionId"]] = document
        return document["actionId"]

    def list_interactions(self, supplier_id: str) -> list[Dict[str, Any]]:
        """Read back the interaction log; no endpoint serves it, tests inspect it."""
        with self._lock:
            documents = copy.deepcopy(list(self._interactions.get(supplier_id, {}).values()))
        return sorted(documents, key=lambda doc: doc["timestamp"])

    def cache_recommendation(
        self, supplier_id: str, buyer_id: str, recommendation: Dict[str, Any]
    ) -> Dict[str, Any]:
        document = build_recommendation_document(buyer_id, recommendation)
        with self._lock:
            self._recommendations.setdefault(supplier_id, {})[buyer_id] = document
        return copy.deepcopy(document)

    def get_recommendation(self, supplier_id: str, buyer_id: str) -> Optional[Dict[str, Any]]:
        """Read back a cached recommendation; no endpoint serves it, tests inspect it."""
        with self._lock:
            return copy.deepcopy(self._recommendations.get(supplier_id, {}).get(buyer_id))
