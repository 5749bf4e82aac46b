from datetime import datetime, timedelta, timezone

import pytest

from supplier_onboarding.app import schemas
from supplier_onboarding.app.store import OnboardingStore, build_answer_document


def test_answer_document_response_fields_are_all_or_nothing():
    now = datetime(2025, 1, 1, tzinfo=timezone.utc)

    plain = build_answer_document("q4", 40, "number", now=now)
    assert plain["status"] == "received"
    assert "aiResponse" not in plain
    assert "responseGeneratedAt" not in plain

    answered = build_answer_document("q1", "boxes", "choice", "Great.", now=now)
    assert answered["status"] == "processed"
    assert answered["aiResponse"] == "Great."
    assert answered["responseGeneratedAt"] == now
    assert answered["flags"] == []


def test_resubmission_merges_and_keeps_submitted_at():
    store = OnboardingStore()
    first = store.save_answer("sup-1", "q1", "boxes", "choice", "Box text")
    store.update_answer("sup-1", "q1", {"reviewNote": "keep me"})

    second = store.save_answer("sup-1", "q1", "film", "choice")

    assert second.answer == "film"
    assert second.submitted_at == first.submitted_at
    assert second.model_extra["reviewNote"] == "keep me"
    assert len(store.get_all_answers("sup-1")) == 1


def test_update_missing_answer_raises_key_error():
    store = OnboardingStore()

    with pytest.raises(KeyError):
        store.update_answer("sup-1", "q1", {"status": "error"})


def test_save_supplier_merges_and_stamps_timestamps():
    store = OnboardingStore()
    created = store.save_supplier("sup-1", {"email": "ops@example.com", "displayName": "Acme Boxes"})
    updated = store.save_supplier("sup-1", {"domain": "example.com"})

    assert updated.email == "ops@example.com"
    assert updated.domain == "example.com"
    assert updated.created_at == created.created_at
    assert updated.updated_at >= created.updated_at


def test_status_update_creates_missing_supplier():
    store = OnboardingStore()
    store.update_onboarding_status("sup-2", schemas.OnboardingStatus.IN_PROGRESS)

    supplier = store.get_supplier("sup-2")
    assert supplier is not None
    assert supplier.onboarding_status == schemas.OnboardingStatus.IN_PROGRESS
    assert supplier.created_at is not None


def test_interaction_log_ids_and_order():
    store = OnboardingStore()
    first_id = store.log_interaction("sup-1", schemas.InteractionType.CALL, {"notes": "intro", "dealValue": None})
    store.log_interaction("sup-1", schemas.InteractionType.EMAIL, {"emailSubject": "Follow up"})

    prefix, millis, suffix = first_id.split("_")
    assert prefix == "CALL"
    assert millis.isdigit()
    assert suffix

    interactions = store.list_interactions("sup-1")
    assert [item["actionType"] for item in interactions] == ["CALL", "EMAIL"]
    assert "dealValue" not in interactions[0]


def test_recommendation_cache_expires_after_thirty_days():
    store = OnboardingStore()
    store.cache_recommendation("sup-1", "buyer-1", {"whyMatter": "old"})
    document = store.cache_recommendation("sup-1", "buyer-1", {"whyMatter": "new"})

    assert document["expiresAt"] - document["generatedAt"] == timedelta(days=30)
    assert document["llmModel"]
    assert store.get_recommendation("sup-1", "buyer-1")["recommendation"] == {"whyMatter": "new"}
    assert store.get_recommendation("sup-1", "buyer-2") is None
