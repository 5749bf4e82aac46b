import base64
import json

import pytest
from fastapi.testclient import TestClient

from supplier_onboarding.app import dependencies
from supplier_onboarding.app.main import app
from supplier_onboarding.app.questions import build_catalog
from supplier_onboarding.app.services.answer_processor import AnswerProcessor
from supplier_onboarding.app.services.onboarding import OnboardingService
from supplier_onboarding.app.services.response_selector import ResponseSelector
from supplier_onboarding.app.store import OnboardingStore, OnboardingStoreError
from supplier_onboarding.tests.fakes import FakeLLM


@pytest.fixture
def store():
    return OnboardingStore()


@pytest.fixture
def client(store):
    service = OnboardingService(
        store,
        ResponseSelector(paid_tier_enabled=False),
        build_catalog({"q1", "q2", "q3", "q6", "q7", "q9", "q10", "q13"}),
    )
    app.dependency_overrides[dependencies.get_onboarding_service] = lambda: service
    app.dependency_overrides[dependencies.get_onboarding_store] = lambda: store
    app.dependency_overrides[dependencies.get_answer_processor] = lambda: AnswerProcessor(store, FakeLLM("Nice."))
    yield TestClient(app)
    app.dependency_overrides.clear()


def _push(payload):
    data = base64.b64encode(json.dumps(payload).encode("utf-8")).decode("ascii")
    return {"message": {"data": data, "messageId": "1"}, "subscription": "projects/p/subscriptions/s"}


def test_health_and_banner(client):
    health = client.get("/health").json()
    assert health["success"] is True
    assert health["status"] == "healthy"
    assert health["timestamp"]

    banner = client.get("/").json()
    assert banner["endpoints"]["questions"] == "GET /api/onboarding/questions"


def test_questions_endpoint(client):
    body = client.get("/api/onboarding/questions").json()

    assert body["success"] is True
    assert body["totalQuestions"] == 17
    assert body["questions"][0]["id"] == "q1"
    assert body["questions"][0]["answerType"] == "choice"
    assert body["questions"][0]["hasAIResponse"] is True


def test_submit_answer_round_trip(client):
    response = client.post(
        "/api/onboarding/submit-answer",
        json={"supplierId": "sup-1", "questionId": "q1", "answer": "boxes", "answerType": "choice"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["aiResponse"]["source"] == "research"
    assert body["progress"] == {
        "answeredQuestions": 1,
        "totalQuestions": 17,
        "percentComplete": 6,
        "status": "in_progress",
    }
    assert body["nextQuestion"]["id"] == "q2"
    assert body["onboardingComplete"] is False

    answers = client.get("/api/onboarding/all-answers/sup-1").json()
    assert answers["totalAnswered"] == 1
    assert answers["answers"]["q1"]["answer"] == "boxes"
    assert answers["answers"]["q1"]["status"] == "processed"


@pytest.mark.parametrize(
    "payload",
    [
        {"questionId": "q1", "answer": "boxes"},
        {"supplierId": "sup-1", "answer": "boxes"},
        {"supplierId": "sup-1", "questionId": "q1"},
    ],
)
def test_submit_answer_missing_fields(client, store, payload):
    response = client.post("/api/onboarding/submit-answer", json=payload)

    assert response.status_code == 400
    assert response.json()["detail"] == "Missing required fields: supplierId, questionId, answer"
    assert store.get_all_answers("sup-1") == {}


def test_submit_answer_unknown_question(client):
    response = client.post(
        "/api/onboarding/submit-answer",
        json={"supplierId": "sup-1", "questionId": "q42", "answer": "x"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Question q42 not found"


class UnavailableStore(OnboardingStore):
    def save_answer(self, *args, **kwargs):
        raise OnboardingStoreError("Failed to save answer q1: 503 backend unavailable")


def test_submit_answer_store_failure_is_logged_and_returns_500(caplog):
    store = UnavailableStore()
    service = OnboardingService(store, ResponseSelector(paid_tier_enabled=False), build_catalog({"q1"}))
    app.dependency_overrides[dependencies.get_onboarding_service] = lambda: service
    try:
        response = TestClient(app).post(
            "/api/onboarding/submit-answer",
            json={"supplierId": "sup-1", "questionId": "q1", "answer": "boxes"},
        )
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json()["detail"].startswith("Failed to submit answer: ")
    assert "Error submitting answer q1 for supplier sup-1." in caplog.text
    assert store.get_supplier("sup-1") is None


def test_progress_includes_supplier_summary(client):
    client.put("/api/suppliers/sup-1", json={"email": "ops@example.com", "displayName": "Acme"})

    body = client.get("/api/onboarding/progress/sup-1").json()
    assert body["supplier"] == {"email": "ops@example.com", "displayName": "Acme"}
    assert body["progress"]["status"] == "not_started"

    unknown = client.get("/api/onboarding/progress/sup-unknown").json()
    assert unknown["supplier"] is None
    assert unknown["progress"]["answeredQuestions"] == 0


def test_supplier_endpoints(client):
    assert client.get("/api/suppliers/sup-1").status_code == 404

    saved = client.put("/api/suppliers/sup-1", json={"displayName": "Acme", "onboardingStatus": "paused"})
    assert saved.status_code == 200
    assert saved.json()["onboardingStatus"] == "paused"

    fetched = client.get("/api/suppliers/sup-1").json()
    assert fetched["displayName"] == "Acme"
    assert fetched["createdAt"]


def test_interactions_and_recommendations(client, store):
    logged = client.post(
        "/api/suppliers/sup-1/interactions",
        json={"actionType": "CALL", "companyName": "Buyer Co", "callDuration": 12.5},
    )
    assert logged.status_code == 201
    assert logged.json()["actionId"].startswith("CALL_")
    assert store.list_interactions("sup-1")[0]["companyName"] == "Buyer Co"

    cached = client.put(
        "/api/suppliers/sup-1/recommendations/buyer-1",
        json={
            "whyMatter": "Expanding plant",
            "howToApproach": "Call ops lead",
            "potentialRisks": "Incumbent supplier",
            "successProbability": 0.4,
        },
    )
    assert cached.status_code == 200
    assert cached.json()["buyerId"] == "buyer-1"
    assert store.get_recommendation("sup-1", "buyer-1")["recommendation"]["whyMatter"] == "Expanding plant"


def test_answer_event_processes_answer(client, store):
    store.save_answer("sup-1", "q2", 2012, "year")

    response = client.post("/events/answer-submitted", json=_push({"supplierId": "sup-1", "questionId": "q2"}))

    assert response.status_code == 202
    assert response.json()["status"] == "processed"
    assert store.get_answer("sup-1", "q2").ai_response == "Nice."


def test_answer_event_rejects_bad_payloads(client):
    assert client.post("/events/answer-submitted", json={}).status_code == 400
    assert client.post("/events/answer-submitted", json={"message": {"data": "%%%"}}).status_code == 400
    assert client.post("/events/answer-submitted", json=_push({"supplierId": "sup-1"})).status_code == 400


def test_answer_event_unknown_answer(client):
    response = client.post("/events/answer-submitted", json=_push({"supplierId": "sup-1", "questionId": "q1"}))

    assert response.status_code == 404
