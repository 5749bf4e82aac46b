from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from typing import Any, Optional

from google import genai
from google.genai import types

from ..settings import generative_settings
from .clients import get_genai_client

logger = logging.getLogger(__name__)

FALLBACK_RESPONSE = (
    "Thanks for sharing that. We've recorded your answer and will use it to better match you "
    "with qualified buyers. You can continue to the next question."
)

SAFETY_INSTRUCTIONS = """You are an assistant embedded in a B2B onboarding flow for a supplier intelligence platform.
- Be concise, professional, and neutral.
- Never promise specific revenue outcomes or legal guarantees.
- Never give legal, tax, or financial advice.
- If the user asks outside the scope of onboarding, respond with: "Let's focus on getting your account set up first.".
- Do not insult, argue, or speculate about the user.
- Do not mention internal model details or tokens.

Now, based on the supplier's answer, generate a short, helpful response."""


@dataclass(frozen=True)
class GuardrailConfig:
    max_tokens: int = generative_settings.max_output_tokens
    temperature: float = 0.2
    top_p: float = 0.8
    top_k: int = 40


@dataclass(frozen=True)
class LLMResponseMeta:
    model: str
    input_tokens: Optional[int] = None
    output_tokens: Optional[int] = None
    safety_blocked: bool = False


@dataclass(frozen=True)
class LLMResult:
    text: str
    meta: LLMResponseMeta


def build_answer_prompt(question_id: str, answer_type: str, answer: Any) -> str:
    return (
        f"The supplier answered the onboarding question {question_id}.\n\n"
        f"Answer type: {answer_type}\n"
        f"Answer value: {json.dumps(answer)}\n\n"
        "Write a short, 1-2 sentence response acknowledging their answer and guiding them to the "
        "next step of onboarding. Do not promise specific results or give legal/financial advice."
    )


class OnboardingLLM:
    """Generates onboarding acknowledgements with Gemini on Vertex AI.

    Every failure, including a missing client configuration, degrades to
    ``FALLBACK_RESPONSE``; callers never see an exception from ``generate``.
    """

    def __init__(
        self,
        client: Optional[genai.Client] = None,
        *,
        model: str = generative_settings.model,
        guardrails_enabled: bool = generative_settings.guardrails_enabled,
        defaults: GuardrailConfig = GuardrailConfig(),
    ) -> None:
        self._client = client
        self.model = model
        self.guardrails_enabled = guardrails_enabled
        self.defaults = defaults

    def _get_client(self) -> genai.Client:
        if self._client is None:
            self._client = get_genai_client()
        return self._client

    def _final_prompt(self, prompt: str) -> str:
        preamble = SAFETY_INSTRUCTIONS if self.guardrails_enabled else ""
        return f"{preamble}\n\n{prompt}".strip()

    def generate(self, prompt: str, **overrides: Any) -> LLMResult:
        cfg = replace(self.defaults, **overrides)
        try:
            response = self._get_client().models.generate_content(
                model=self.model,
                contents=self._final_prompt(prompt),
                config=types.GenerateContentConfig(
                    max_output_tokens=cfg.max_tokens,
                    temperature=cfg.temperature,
                    top_p=cfg.top_p,
                    top_k=cfg.top_k,
                ),
            )
            text = (getattr(response, "text", "") or "").strip()
        except Exception as exc:  # generative call and client setup can raise
            logger.error("LLM onboarding response failed: %s", exc)
            return LLMResult(
                text=FALLBACK_RESPONSE,
                meta=LLMResponseMeta(model=self.model, safety_blocked=True),
            )

        if not text:
            logger.warning("LLM returned an empty onboarding response; using fallback text.")
            return LLMResult(
                text=FALLBACK_RESPONSE,
                meta=LLMResponseMeta(model=self.model, safety_blocked=True),
            )

        usage = getattr(response, "usage_metadata", None)
        return LLMResult(
            text=text,
            meta=LLMResponseMeta(
                model=self.model,
                input_tokens=getattr(usage, "prompt_token_count", None),
                output_tokens=getattr(usage, "candidates_token_count", None),
            ),
        )
