from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

from .. import schemas
from ..questions import QuestionCatalog, catalog as default_catalog
from .progress import calculate_progress
from .response_selector import ResponseSelector

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "Missing required fields: supplierId, questionId, answer"


class OnboardingValidationError(ValueError):
    """Raised when a submission is rejected before any state is touched."""


def _is_supported_answer(answer: Any) -> bool:
    if answer is None or isinstance(answer, str):
        return True
    if isinstance(answer, bool):
        return False
    if isinstance(answer, (int, float)):
        return True
    return isinstance(answer, list) and all(isinstance(item, str) for item in answer)


def next_onboarding_status(progress: schemas.Progress) -> Optional[schemas.OnboardingStatus]:
    """Status to record after a successful submission.

    ``started`` and ``paused`` are only ever set from outside this flow.
    """
    if progress.percentComplete == 100:
        return schemas.OnboardingStatus.COMPLETED
    if progress.answeredQuestions > 0:
        return schemas.OnboardingStatus.IN_PROGRESS
    return None


class OnboardingService:
    def __init__(
        self,
        store,
        selector: ResponseSelector,
        catalog: QuestionCatalog = default_catalog,
    ) -> None:
        self._store = store
        self._selector = selector
        self._catalog = catalog

    def _read_progress(
        self, supplier_id: str
    ) -> Tuple[
        Dict[str, schemas.OnboardingAnswer], Optional[schemas.SupplierRecord], schemas.Progress
    ]:
        answers = self._store.get_all_answers(supplier_id)
        supplier = self._store.get_supplier(supplier_id)
        return answers, supplier, calculate_progress(answers.keys(), supplier, self._catalog)

    @property
    def catalog(self) -> QuestionCatalog:
        return self._catalog

    def _validate(
        self,
        supplier_id: Optional[str],
        question_id: Optional[str],
        answer: Any,
        answer_provided: bool,
        answer_type: Optional[str],
    ) -> Tuple[schemas.Question, schemas.AnswerType]:
        if not supplier_id or not question_id or not answer_provided:
            raise OnboardingValidationError(REQUIRED_FIELDS_MESSAGE)

        question = self._catalog.get(question_id)
        if question is None:
            raise OnboardingValidationError(f"Question {question_id} not found")

        if not _is_supported_answer(answer):
            raise OnboardingValidationError(
                "answer must be text, a number, or a list of choice labels"
            )

        if not answer_type:
            return question, question.answer_type
        try:
            return question, schemas.AnswerType(answer_type)
        except ValueError as exc:
            raise OnboardingValidationError(f"Unknown answerType {answer_type}") from exc

    def submit_answer(
        self,
        supplier_id: Optional[str],
        question_id: Optional[str],
        answer: Any,
        answer_type: Optional[str] = None,
        *,
        answer_provided: bool = True,
    ) -> schemas.SubmitAnswerResponse:
        question, resolved_type = self._validate(
            supplier_id, question_id, answer, answer_provided, answer_type
        )

        selected = self._selector.select(question, answer, resolved_type.value)

        self._store.save_answer(
            supplier_id,
            question.id,
            answer,
            resolved_type.value,
            selected.text if selected else None,
        )

        answers, _, progress = self._read_progress(supplier_id)

        status = next_onboarding_status(progress)
        if status is not None:
            self._store.update_onboarding_status(supplier_id, status)
            progress = progress.model_copy(update={"status": status.value})

        next_question = self._catalog.next_unanswered(answers)
        logger.info(
            "Recorded answer %s for supplier %s (%s/%s answered).",
            question.id,
            supplier_id,
            progress.answeredQuestions,
            progress.totalQuestions,
        )

        return schemas.SubmitAnswerResponse(
            questionId=question.id,
            aiResponse=(
                schemas.AIResponsePayload(
                    response=selected.text,
                    generatedAt=selected.generated_at,
                    source=selected.source,
                )
                if selected
                else None
            ),
            progress=progress,
            nextQuestion=self._catalog.summarize(next_question) if next_question else None,
            onboardingComplete=progress.percentComplete == 100,
        )

    def get_progress(
        self, supplier_id: str
    ) -> Tuple[schemas.Progress, Optional[schemas.SupplierRecord]]:
        _, supplier, progress = self._read_progress(supplier_id)
        return progress, supplier

    def get_all_answers(
        self, supplier_id: str
    ) -> Tuple[Dict[str, schemas.OnboardingAnswer], schemas.Progress]:
        answers, _, progress = self._read_progress(supplier_id)
        return answers, progress
