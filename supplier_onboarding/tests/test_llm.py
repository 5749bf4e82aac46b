from types import SimpleNamespace
from unittest.mock import MagicMock

from supplier_onboarding.app.services.llm import (
    FALLBACK_RESPONSE,
    SAFETY_INSTRUCTIONS,
    OnboardingLLM,
    build_answer_prompt,
)


def _client_returning(text, usage=None):
    client = MagicMock()
    client.models.generate_content.return_value = SimpleNamespace(text=text, usage_metadata=usage)
    return client


def test_prompt_embeds_json_answer():
    prompt = build_answer_prompt("q7", "array", ["email", "linkedin"])

    assert "question q7" in prompt
    assert "Answer type: array" in prompt
    assert '["email", "linkedin"]' in prompt


def test_guardrail_preamble_and_generation_options():
    client = _client_returning(
        "Thanks, noted.",
        SimpleNamespace(prompt_token_count=12, candidates_token_count=4),
    )
    llm = OnboardingLLM(client, model="gemini-test", guardrails_enabled=True)

    result = llm.generate("Hello", max_tokens=200)

    kwargs = client.models.generate_content.call_args.kwargs
    assert kwargs["model"] == "gemini-test"
    assert kwargs["contents"].startswith(SAFETY_INSTRUCTIONS)
    assert kwargs["contents"].endswith("Hello")
    assert kwargs["config"].max_output_tokens == 200
    assert kwargs["config"].temperature == 0.2
    assert kwargs["config"].top_p == 0.8
    assert kwargs["config"].top_k == 40
    assert result.text == "Thanks, noted."
    assert result.meta.input_tokens == 12
    assert result.meta.output_tokens == 4
    assert not result.meta.safety_blocked


def test_failure_returns_fallback():
    client = MagicMock()
    client.models.generate_content.side_effect = RuntimeError("quota")

    result = OnboardingLLM(client, model="gemini-test", guardrails_enabled=False).generate("Hello")

    assert result.text == FALLBACK_RESPONSE
    assert result.meta.safety_blocked


def test_empty_text_returns_fallback():
    llm = OnboardingLLM(_client_returning("   "), model="gemini-test", guardrails_enabled=False)

    result = llm.generate("Hello")

    assert result.text == FALLBACK_RESPONSE
    assert result.meta.safety_blocked
