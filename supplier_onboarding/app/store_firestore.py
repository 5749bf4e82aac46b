from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from google.api_core import exceptions as google_exceptions
from google.cloud import firestore

from . import schemas
from .settings import store_settings
from .store import (
    OnboardingStoreError,
    build_answer_document,
    build_interaction_document,
    build_recommendation_document,
)

logger = logging.getLogger(__name__)


class FirestoreOnboardingStore:
    """Firestore-backed onboarding store for Cloud Run deployments.

    Layout: ``suppliers/{supplierId}`` with the nested collections
    ``onboarding_answers/{questionId}``, ``interaction_history/{actionId}`` and
    ``ai_recommendations/{buyerId}``. Writes are merges unless noted; I/O
    errors surface as :class:`OnboardingStoreError` and are never retried here.
    """

    def __init__(self, client: firestore.Client) -> None:
        self._client = client
        self._suppliers = client.collection(store_settings.suppliers_collection)

    def _supplier_ref(self, supplier_id: str) -> firestore.DocumentReference:
        return self._suppliers.document(supplier_id)

    def _answers_ref(self, supplier_id: str) -> firestore.CollectionReference:
        return self._supplier_ref(supplier_id).collection(store_settings.answers_collection)

    # Answers

    def save_answer(
        self,
        supplier_id: str,
        question_id: str,
        answer: Any,
        answer_type: str,
        ai_response: Optional[str] = None,
    ) -> schemas.OnboardingAnswer:
        doc_ref = self._answers_ref(supplier_id).document(question_id)
        payload = build_answer_document(question_id, answer, answer_type, ai_response)
        try:
            snapshot = doc_ref.get()
            if snapshot.exists and (snapshot.to_dict() or {}).get("submittedAt"):
                payload.pop("submittedAt")
            doc_ref.set(payload, merge=True)
            stored = doc_ref.get().to_dict() or payload
        except google_exceptions.GoogleAPICallError as exc:
            logger.error("Error saving onboarding answer %s for %s: %s", question_id, supplier_id, exc)
            raise OnboardingStoreError(f"Failed to save answer {question_id}: {exc}") from exc
        return schemas.OnboardingAnswer.model_validate(stored)

    def update_answer(self, supplier_id: str, question_id: str, fields: Dict[str, Any]) -> None:
        doc_ref = self._answers_ref(supplier_id).document(question_id)
        try:
            doc_ref.update(fields)
        except google_exceptions.NotFound as exc:
            raise KeyError(f"Answer {question_id} for supplier {supplier_id} not found") from exc
        except google_exceptions.GoogleAPICallError as exc:
            raise OnboardingStoreError(f"Failed to update answer {question_id}: {exc}") from exc

    def get_all_answers(self, supplier_id: str) -> Dict[str, schemas.OnboardingAnswer]:
        try:
            docs = list(self._answers_ref(supplier_id).stream())
        except google_exceptions.GoogleAPICallError as exc:
            logger.error("Error fetching onboarding answers for %s: %s", supplier_id, exc)
            raise OnboardingStoreError(f"Failed to fetch answers: {exc}") from exc
        return {doc.id: schemas.OnboardingAnswer.model_validate(doc.to_dict() or {}) for doc in docs}

    def get_answer(self, supplier_id: str, question_id: str) -> Optional[schemas.OnboardingAnswer]:
        try:
            snapshot = self._answers_ref(supplier_id).document(question_id).get()
        except google_exceptions.GoogleAPICallError as exc:
            raise OnboardingStoreError(f"Failed to fetch answer {question_id}: {exc}") from exc
        if not snapshot.exists:
            return None
        return schemas.OnboardingAnswer.model_validate(snapshot.to_dict() or {})

    # Suppliers

    def save_supplier(self, supplier_id: str, data: Dict[str, Any]) -> schemas.SupplierRecord:
        doc_ref = self._supplier_ref(supplier_id)
        now = datetime.now(timezone.utc)
        payload = {**data, "supplierId": supplier_id, "updatedAt": now}
        try:
            snapshot = doc_ref.get()
            if not snapshot.exists:
                payload["createdAt"] = now
            doc_ref.set(payload, merge=True)
            stored = doc_ref.get().to_dict() or payload
        except google_exceptions.GoogleAPICallError as exc:
            logger.error("Error saving supplier record %s: %s", supplier_id, exc)
            raise OnboardingStoreError(f"Failed to save supplier {supplier_id}: {exc}") from exc
        return schemas.SupplierRecord.model_validate(stored)

    def get_supplier(self, supplier_id: str) -> Optional[schemas.SupplierRecord]:
        try:
            snapshot = self._supplier_ref(supplier_id).get()
        except google_exceptions.GoogleAPICallError as exc:
            raise OnboardingStoreError(f"Failed to fetch supplier {supplier_id}: {exc}") from exc
        if not snapshot.exists:
            return None
        return schemas.SupplierRecord.model_validate(snapshot.to_dict() or {})

    def update_onboarding_status(self, supplier_id: str, status: schemas.OnboardingStatus) -> None:
        # Merge rather than update(): the supplier document may not exist yet.
        try:
            self._supplier_ref(supplier_id).set(
                {
                    "supplierId": supplier_id,
                    "onboardingStatus": status.value,
                    "updatedAt": datetime.now(timezone.utc),
                },
                merge=True,
            )
        except google_exceptions.GoogleAPICallError as exc:
            logger.error("Error updating onboarding status for %s: %s", supplier_id, exc)
            raise OnboardingStoreError(f"Failed to update onboarding status: {exc}") from exc

    # Interaction history and recommendation cache

    def log_interaction(
        self, supplier_id: str, action_type: schemas.InteractionType, data: Dict[str, Any]
    ) -> str:
        document = build_interaction_document(action_type, data)
        try:
            (
                self._supplier_ref(supplier_id)
                .collection(store_settings.interactions_collection)
                .document(document["actionId"])
                .set(document)
            )
        except google_exceptions.GoogleAPICallError as exc:
            logger.error("Error logging interaction for %s: %s", supplier_id, exc)
            raise OnboardingStoreError(f"Failed to log interaction: {exc}") from exc
        return document["actionId"]

    def list_interactions(self, supplier_id: str) -> list[Dict[str, Any]]:
        """Read back the interaction log; no endpoint serves it, tests inspect it."""
        collection = self._supplier_ref(supplier_id).collection(store_settings.interactions_collection)
        try:
            docs = collection.order_by("timestamp").stream()
            return [doc.to_dict() or {} for doc in docs]
        except google_exceptions.GoogleAPICallError as exc:
            raise OnboardingStoreError(f"Failed to list interactions: {exc}") from exc

    def cache_recommendation(
        self, supplier_id: str, buyer_id: str, recommendation: Dict[str, Any]
    ) -> Dict[str, Any]:
        document = build_recommendation_document(buyer_id, recommendation)
        try:
            (
                self._supplier_ref(supplier_id)
                .collection(store_settings.recommendations_collection)
                .document(buyer_id)
                .set(document)
            )
        except google_exceptions.GoogleAPICallError as exc:
            logger.error("Error caching AI recommendation for %s/%s: %s", supplier_id, buyer_id, exc)
            raise OnboardingStoreError(f"Failed to cache recommendation: {exc}") from exc
        return document

    def get_recommendation(self, supplier_id: str, buyer_id: str) -> Optional[Dict[str, Any]]:
        """Read back a cached recommendation; no endpoint serves it, tests inspect it."""
        try:
            snapshot = (
                self._supplier_ref(supplier_id)
                .collection(store_settings.recommendations_collection)
                .document(buyer_id)
                .get()
            )
        except google_exceptions.GoogleAPICallError as exc:
            raise OnboardingStoreError(f"Failed to fetch recommendation: {exc}") from exc
        return snapshot.to_dict() if snapshot.exists else None
