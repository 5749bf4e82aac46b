import pytest

from supplier_onboarding.app import schemas
from supplier_onboarding.app.services.answer_processor import AnswerProcessor
from supplier_onboarding.app.store import OnboardingStore
from supplier_onboarding.tests.fakes import FakeLLM


def _store_with(question_id, answer, answer_type="choice"):
    store = OnboardingStore()
    store.save_answer("sup-1", question_id, answer, answer_type)
    return store


def test_early_question_gets_full_response():
    store = _store_with("q3", "medium_volume")
    llm = FakeLLM("Noted, thanks.")

    status = AnswerProcessor(store, llm).process("sup-1", "q3")

    answer = store.get_answer("sup-1", "q3")
    assert status == schemas.AnswerStatus.PROCESSED
    assert answer.status == schemas.AnswerStatus.PROCESSED
    assert answer.ai_response == "Noted, thanks."
    assert answer.response_generated_at is not None
    assert llm.calls[0][1] == {}


def test_middle_question_caps_output_tokens():
    store = _store_with("q8", 12, "number")
    llm = FakeLLM()

    AnswerProcessor(store, llm).process("sup-1", "q8")

    assert llm.calls[0][1] == {"max_tokens": 200}


def test_late_question_is_marked_processed_only():
    store = _store_with("q14", "Midwest", "text")
    llm = FakeLLM()

    status = AnswerProcessor(store, llm).process("sup-1", "q14")

    assert status == schemas.AnswerStatus.PROCESSED
    assert llm.calls == []
    assert store.get_answer("sup-1", "q14").ai_response is None


def test_failure_marks_answer_as_error():
    store = _store_with("q1", "boxes")

    status = AnswerProcessor(store, FakeLLM(error=RuntimeError("boom"))).process("sup-1", "q1")

    assert status == schemas.AnswerStatus.ERROR
    assert store.get_answer("sup-1", "q1").status == schemas.AnswerStatus.ERROR


def test_missing_answer_raises_key_error():
    with pytest.raises(KeyError):
        AnswerProcessor(OnboardingStore(), FakeLLM()).process("sup-1", "q1")
