from __future__ import annotations

import math
from typing import Iterable, Optional

from ..questions import QuestionCatalog
from ..schemas import NOT_STARTED, Progress, SupplierRecord


def percent_complete(answered: int, total: int) -> int:
    if total <= 0:
        return 0
    # Half-up rounding, not Python's banker's rounding.
    return int(math.floor(100 * answered / total + 0.5))


def calculate_progress(
    answered_question_ids: Iterable[str],
    supplier: Optional[SupplierRecord],
    catalog: QuestionCatalog,
) -> Progress:
    answered = len(set(answered_question_ids))
    total = len(catalog)
    status = NOT_STARTED
    if supplier is not None and supplier.onboarding_status is not None:
        status = supplier.onboarding_status.value
    return Progress(
        answeredQuestions=answered,
        totalQuestions=total,
        percentComplete=percent_complete(answered, total),
        status=status,
    )

