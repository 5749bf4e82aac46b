from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from .. import schemas
from ..dependencies import get_onboarding_service
from ..services.onboarding import OnboardingService, OnboardingValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/onboarding", tags=["onboarding"])


@router.get("/questions", response_model=schemas.QuestionsResponse)
def list_questions(
    service: OnboardingService = Depends(get_onboarding_service),
) -> schemas.QuestionsResponse:
    questions = list(service.catalog)
    return schemas.QuestionsResponse(totalQuestions=len(questions), questions=questions)


@router.post("/submit-answer", response_model=schemas.SubmitAnswerResponse)
def submit_answer(
    request: schemas.SubmitAnswerRequest | None = None,
    service: OnboardingService = Depends(get_onboarding_service),
) -> schemas.SubmitAnswerResponse:
    payload = request or schemas.SubmitAnswerRequest()
    try:
        return service.submit_answer(
            payload.supplierId,
            payload.questionId,
            payload.answer,
            payload.answerType,
            answer_provided="answer" in payload.model_fields_set,
        )
    except OnboardingValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(
            "Error submitting answer %s for supplier %s.", payload.questionId, payload.supplierId
        )
        raise HTTPException(status_code=500, detail=f"Failed to submit answer: {exc}") from exc


@router.get("/progress/{supplier_id}", response_model=schemas.ProgressResponse)
def get_progress(
    supplier_id: str,
    service: OnboardingService = Depends(get_onboarding_service),
) -> schemas.ProgressResponse:
    try:
        progress, supplier = service.get_progress(supplier_id)
    except Exception as exc:
        logger.exception("Error fetching progress for supplier %s.", supplier_id)
        raise HTTPException(status_code=500, detail="Failed to fetch progress") from exc

    return schemas.ProgressResponse(
        supplierId=supplier_id,
        progress=progress,
        supplier=(
            schemas.SupplierSummary(email=supplier.email, displayName=supplier.display_name)
            if supplier
            else None
        ),
    )


@router.get("/all-answers/{supplier_id}", response_model=schemas.AllAnswersResponse)
def get_all_answers(
    supplier_id: str,
    service: OnboardingService = Depends(get_onboarding_service),
) -> schemas.AllAnswersResponse:
    try:
        answers, progress = service.get_all_answers(supplier_id)
    except Exception as exc:
        logger.exception("Error fetching answers for supplier %s.", supplier_id)
        raise HTTPException(status_code=500, detail="Failed to fetch answers") from exc

    return schemas.AllAnswersResponse(
        supplierId=supplier_id,
        answers={
            question_id: answer.model_dump(by_alias=True, mode="json", exclude_none=True)
            for question_id, answer in answers.items()
        },
        progress=progress,
        totalAnswered=len(answers),
    )
