import pytest

from supplier_onboarding.app import schemas
from supplier_onboarding.app.questions import build_catalog
from supplier_onboarding.app.services.onboarding import OnboardingService, OnboardingValidationError
from supplier_onboarding.app.services.response_selector import ResponseSelector
from supplier_onboarding.app.store import OnboardingStore
from supplier_onboarding.tests.fakes import FakeLLM

RESPONSE_IDS = {"q1", "q2", "q3", "q6", "q7", "q9", "q10", "q13"}


def _service(store=None, selector=None):
    return OnboardingService(
        store or OnboardingStore(),
        selector or ResponseSelector(paid_tier_enabled=False),
        build_catalog(RESPONSE_IDS),
    )


def test_first_answer_gets_research_response_and_progress():
    store = OnboardingStore()
    result = _service(store).submit_answer("sup-1", "q1", "boxes", "choice")

    assert result.success
    assert result.aiResponse.source == schemas.ResponseSource.RESEARCH
    assert "corrugated or folding box" in result.aiResponse.response
    assert result.progress.answeredQuestions == 1
    assert result.progress.totalQuestions == 17
    assert result.progress.percentComplete == 6
    assert result.progress.status == "in_progress"
    assert result.nextQuestion.id == "q2"
    assert not result.onboardingComplete

    stored = store.get_answer("sup-1", "q1")
    assert stored.status == schemas.AnswerStatus.PROCESSED
    assert stored.ai_response == result.aiResponse.response
    assert store.get_supplier("sup-1").onboarding_status == schemas.OnboardingStatus.IN_PROGRESS


def test_unknown_choice_falls_back_to_question_default():
    result = _service().submit_answer("sup-1", "q1", "xyz", "choice")

    assert result.aiResponse.response.startswith("Packaging manufacturing is a growth industry")


def test_question_without_response_is_received_only():
    store = OnboardingStore()
    result = _service(store).submit_answer("sup-1", "q4", 40, "number")

    assert result.aiResponse is None
    stored = store.get_answer("sup-1", "q4")
    assert stored.status == schemas.AnswerStatus.RECEIVED
    assert stored.ai_response is None


def test_answer_type_defaults_to_catalog_type():
    store = OnboardingStore()
    _service(store).submit_answer("sup-1", "q2", 2012)

    assert store.get_answer("sup-1", "q2").answer_type == schemas.AnswerType.YEAR


def test_answering_every_question_completes_onboarding():
    store = OnboardingStore()
    service = _service(store)

    for question in service.catalog:
        result = service.submit_answer("sup-1", question.id, "other")

    assert result.progress.percentComplete == 100
    assert result.progress.status == "completed"
    assert result.onboardingComplete
    assert result.nextQuestion is None
    assert store.get_supplier("sup-1").onboarding_status == schemas.OnboardingStatus.COMPLETED


def test_resubmission_does_not_double_count():
    service = _service()
    service.submit_answer("sup-1", "q1", "boxes")
    result = service.submit_answer("sup-1", "q1", "film")

    assert result.progress.answeredQuestions == 1
    assert "Film and flexible packaging" in result.aiResponse.response


@pytest.mark.parametrize(
    "supplier_id, question_id, provided",
    [(None, "q1", True), ("sup-1", None, True), ("sup-1", "q1", False), ("", "q1", True)],
)
def test_missing_fields_are_rejected_without_writes(supplier_id, question_id, provided):
    store = OnboardingStore()

    with pytest.raises(OnboardingValidationError) as exc_info:
        _service(store).submit_answer(supplier_id, question_id, "boxes", answer_provided=provided)

    assert "Missing required fields" in str(exc_info.value)
    assert store.get_all_answers("sup-1") == {}
    assert store.get_supplier("sup-1") is None


def test_unknown_question_and_bad_shapes_are_rejected():
    store = OnboardingStore()
    service = _service(store)

    with pytest.raises(OnboardingValidationError, match="Question q99 not found"):
        service.submit_answer("sup-1", "q99", "boxes")
    with pytest.raises(OnboardingValidationError):
        service.submit_answer("sup-1", "q1", {"nested": True})
    with pytest.raises(OnboardingValidationError):
        service.submit_answer("sup-1", "q1", "boxes", "checkbox")

    assert store.get_all_answers("sup-1") == {}


def test_paid_tier_uses_generated_response():
    llm = FakeLLM("Generated reply.")
    selector = ResponseSelector(llm, paid_tier_enabled=True)
    result = _service(selector=selector).submit_answer("sup-1", "q7", ["email", "linkedin"], "array")

    assert result.aiResponse.source == schemas.ResponseSource.VERTEX_AI
    assert result.aiResponse.response == "Generated reply."
    prompt, _ = llm.calls[0]
    assert "q7" in prompt


def test_paid_tier_skips_questions_without_response():
    llm = FakeLLM()
    selector = ResponseSelector(llm, paid_tier_enabled=True)
    result = _service(selector=selector).submit_answer("sup-1", "q4", 40)

    assert result.aiResponse is None
    assert llm.calls == []


def test_progress_and_all_answers_views():
    store = OnboardingStore()
    store.save_supplier("sup-1", {"email": "ops@example.com", "displayName": "Acme"})
    service = _service(store)
    service.submit_answer("sup-1", "q1", "labels")

    progress, supplier = service.get_progress("sup-1")
    answers, answers_progress = service.get_all_answers("sup-1")

    assert progress == answers_progress
    assert supplier.display_name == "Acme"
    assert list(answers) == ["q1"]

    empty_progress, missing = service.get_progress("sup-unknown")
    assert missing is None
    assert empty_progress.status == schemas.NOT_STARTED
