from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from ..schemas import Question, ResponseSource
from ..settings import generative_settings
from .llm import OnboardingLLM, build_answer_prompt
from .research_responses import get_research_response

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectedResponse:
    text: str
    source: ResponseSource
    generated_at: datetime


class ResponseSelector:
    """Chooses the acknowledgement attached to an answer.

    Questions without ``has_ai_response`` get nothing. Otherwise the canned
    research table answers, unless the paid tier routes the answer to the
    generative collaborator instead.
    """

    def __init__(
        self,
        llm: Optional[OnboardingLLM] = None,
        *,
        paid_tier_enabled: bool = generative_settings.paid_tier_enabled,
    ) -> None:
        self._llm = llm
        self.paid_tier_enabled = paid_tier_enabled

    @property
    def llm(self) -> OnboardingLLM:
        if self._llm is None:
            self._llm = OnboardingLLM()
        return self._llm

    def select(
        self,
        question: Question,
        answer: Any,
        answer_type: Optional[str] = None,
    ) -> Optional[SelectedResponse]:
        if not question.has_ai_response:
            return None

        if self.paid_tier_enabled:
            prompt = build_answer_prompt(question.id, answer_type or question.answer_type.value, answer)
            result = self.llm.generate(prompt)
            logger.debug(
                "Generated response for %s with %s (fallback=%s).",
                question.id,
                result.meta.model,
                result.meta.safety_blocked,
            )
            return SelectedResponse(
                text=result.text,
                source=ResponseSource.VERTEX_AI,
                generated_at=datetime.now(timezone.utc),
            )

        research = get_research_response(question.id, answer)
        return SelectedResponse(
            text=research.response,
            source=ResponseSource.RESEARCH,
            generated_at=datetime.now(timezone.utc),
        )
