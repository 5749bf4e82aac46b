from __future__ import annotations

from typing import Iterable, Mapping, Optional

from .schemas import AnswerType, Question, QuestionSummary
from .settings import onboarding_settings

_QUESTION_DEFINITIONS: tuple[dict, ...] = (
    {
        "id": "q1",
        "title": "What is your primary product?",
        "description": "What type of secondary packaging do you manufacture?",
        "answer_type": AnswerType.CHOICE,
        "choices": ["boxes", "film", "laminates", "labels", "other"],
    },
    {
        "id": "q2",
        "title": "When was your business founded?",
        "description": "What year did your company start operations?",
        "answer_type": AnswerType.YEAR,
    },
    {
        "id": "q3",
        "title": "How many active customers do you have?",
        "description": "Approximately how many unique customers do you invoice monthly?",
        "answer_type": AnswerType.CHOICE,
        "choices": ["low_volume", "medium_volume", "high_volume"],
    },
    {
        "id": "q4",
        "title": "What percentage of revenue comes from your top 3 customers?",
        "description": "What is your customer concentration? (0-100%)",
        "answer_type": AnswerType.NUMBER,
    },
    {
        "id": "q5",
        "title": "What is your annual revenue?",
        "description": "Approximate annual revenue?",
        "answer_type": AnswerType.CHOICE,
        "choices": ["under_500k", "500k_1m", "1m_3m", "3m_5m", "5m_10m", "over_10m"],
    },
    {
        "id": "q6",
        "title": "What is your biggest pain point?",
        "description": "What is holding back your growth the most?",
        "answer_type": AnswerType.CHOICE,
        "choices": ["finding_buyers", "margins", "operational", "retention"],
    },
    {
        "id": "q7",
        "title": "What sales methods have you tried?",
        "description": "Select all that apply",
        "answer_type": AnswerType.ARRAY,
        "choices": ["cold_calling", "email", "linkedin", "events", "referrals", "other"],
    },
    {
        "id": "q8",
        "title": "How many outreach attempts per month?",
        "description": "How many conversations do you initiate with prospects monthly?",
        "answer_type": AnswerType.NUMBER,
    },
    {
        "id": "q9",
        "title": "How many customers do you close per month?",
        "description": "Average number of new customers per month",
        "answer_type": AnswerType.NUMBER,
    },
    {
        "id": "q10",
        "title": "What is your close rate?",
        "description": "Percentage of conversations that result in a sale (e.g., 0.15 for 15%)",
        "answer_type": AnswerType.NUMBER,
    },
    {
        "id": "q11",
        "title": "How are you addressing your main pain?",
        "description": "What approaches are you trying?",
        "answer_type": AnswerType.CHOICE,
        "choices": ["data_driven", "networking", "marketing", "operational", "other"],
    },
    {
        "id": "q12",
        "title": "What methods have NOT worked?",
        "description": "Select all that have failed",
        "answer_type": AnswerType.ARRAY,
        "choices": ["cold_calling", "email", "linkedin", "events", "referrals", "marketing"],
    },
    {
        "id": "q13",
        "title": "What is your operational maturity?",
        "description": "How established is your production and fulfillment?",
        "answer_type": AnswerType.CHOICE,
        "choices": ["high", "medium", "lower"],
    },
    {
        "id": "q14",
        "title": "What is your tech stack?",
        "description": "What systems do you use for operations?",
        "answer_type": AnswerType.TEXT,
    },
    {
        "id": "q15",
        "title": "What is your API capability?",
        "description": "Can you integrate with external systems via APIs?",
        "answer_type": AnswerType.CHOICE,
        "choices": ["yes_easy", "yes_with_dev", "limited", "no"],
    },
    {
        "id": "q16",
        "title": "What is your order frequency?",
        "description": "How often do existing customers order?",
        "answer_type": AnswerType.CHOICE,
        "choices": ["daily", "weekly", "monthly", "quarterly", "varied"],
    },
    {
        "id": "q17",
        "title": "What is your lead time flexibility?",
        "description": "How quickly can you fulfill custom orders?",
        "answer_type": AnswerType.CHOICE,
        "choices": ["1_week", "2_3_weeks", "1_month", "2_3_months", "varies"],
    },
)


class QuestionCatalog:
    """Ordered, immutable list of onboarding questions."""

    def __init__(self, questions: Iterable[Question]) -> None:
        self._questions: tuple[Question, ...] = tuple(sorted(questions, key=lambda q: q.number))
        self._by_id: dict[str, Question] = {question.id: question for question in self._questions}

    def __iter__(self):
        return iter(self._questions)

    def __len__(self) -> int:
        return len(self._questions)

    def __contains__(self, question_id: object) -> bool:
        return question_id in self._by_id

    @property
    def questions(self) -> tuple[Question, ...]:
        return self._questions

    def get(self, question_id: str) -> Optional[Question]:
        return self._by_id.get(question_id)

    def next_unanswered(self, answered: Mapping[str, object] | Iterable[str]) -> Optional[Question]:
        answered_ids = set(answered)
        for question in self._questions:
            if question.id not in answered_ids:
                return question
        return None

    @staticmethod
    def summarize(question: Question) -> QuestionSummary:
        return QuestionSummary(id=question.id, number=question.number, title=question.title)


def build_catalog(ai_response_question_ids: Iterable[str] | None = None) -> QuestionCatalog:
    response_ids = set(
        onboarding_settings.ai_response_question_ids
        if ai_response_question_ids is None
        else ai_response_question_ids
    )
    questions = [
        Question(
            id=definition["id"],
            number=number,
            title=definition["title"],
            description=definition["description"],
            answer_type=definition["answer_type"],
            choices=definition.get("choices"),
            has_ai_response=definition["id"] in response_ids,
        )
        for number, definition in enumerate(_QUESTION_DEFINITIONS, start=1)
    ]
    return QuestionCatalog(questions)


catalog = build_catalog()
