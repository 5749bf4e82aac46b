from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from .. import schemas
from .llm import OnboardingLLM, build_answer_prompt

logger = logging.getLogger(__name__)

EARLY_QUESTION_IDS = frozenset({"q1", "q2", "q3", "q4", "q5"})
MIDDLE_QUESTION_IDS = frozenset({"q6", "q7", "q8", "q9"})
MIDDLE_MAX_TOKENS = 200


class AnswerProcessor:
    """Post-processes a stored answer after it has been written.

    Early questions get a full generated response, middle questions a short
    one, and late questions are only marked processed. Failures flip the
    answer to ``error`` instead of propagating.
    """

    def __init__(self, store, llm: Optional[OnboardingLLM] = None) -> None:
        self._store = store
        self._llm = llm

    @property
    def llm(self) -> OnboardingLLM:
        if self._llm is None:
            self._llm = OnboardingLLM()
        return self._llm

    def _attach_response(self, supplier_id: str, answer: schemas.OnboardingAnswer, **overrides) -> None:
        prompt = build_answer_prompt(answer.question_id, answer.answer_type.value, answer.answer)
        result = self.llm.generate(prompt, **overrides)
        self._store.update_answer(
            supplier_id,
            answer.question_id,
            {
                "aiResponse": result.text,
                "responseGeneratedAt": datetime.now(timezone.utc),
                "status": schemas.AnswerStatus.PROCESSED.value,
            },
        )

    def process(self, supplier_id: str, question_id: str) -> schemas.AnswerStatus:
        answer = self._store.get_answer(supplier_id, question_id)
        if answer is None:
            raise KeyError(f"Answer {question_id} for supplier {supplier_id} not found")

        logger.info("Onboarding answer received: supplier=%s question=%s", supplier_id, question_id)
        try:
            if question_id in EARLY_QUESTION_IDS:
                self._attach_response(supplier_id, answer)
            elif question_id in MIDDLE_QUESTION_IDS:
                self._attach_response(supplier_id, answer, max_tokens=MIDDLE_MAX_TOKENS)
            else:
                self._store.update_answer(
                    supplier_id, question_id, {"status": schemas.AnswerStatus.PROCESSED.value}
                )
        except Exception:
            logger.exception(
                "Error processing onboarding answer: supplier=%s question=%s", supplier_id, question_id
            )
            self._store.update_answer(supplier_id, question_id, {"status": schemas.AnswerStatus.ERROR.value})
            return schemas.AnswerStatus.ERROR
        return schemas.AnswerStatus.PROCESSED
