from __future__ import annotations

import os
from dataclasses import dataclass


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() == "true"


@dataclass(frozen=True)
class APISettings:
    allowed_origins: tuple[str, ...] = tuple(
        origin.strip()
        for origin in os.environ.get("API_ALLOWED_ORIGINS", "").split(",")
        if origin.strip()
    ) or ("*",)


@dataclass(frozen=True)
class StoreSettings:
    backend: str = os.environ.get("STORE_BACKEND", "memory").lower()
    project_id: str = os.environ.get("GCP_PROJECT_ID") or os.environ.get("GOOGLE_CLOUD_PROJECT", "")
    suppliers_collection: str = os.environ.get("SUPPLIERS_COLLECTION", "suppliers")
    answers_collection: str = os.environ.get("ANSWERS_COLLECTION", "onboarding_answers")
    interactions_collection: str = os.environ.get("INTERACTIONS_COLLECTION", "interaction_history")
    recommendations_collection: str = os.environ.get("RECOMMENDATIONS_COLLECTION", "ai_recommendations")
    recommendation_ttl_days: int = int(os.environ.get("RECOMMENDATION_TTL_DAYS", "30"))


@dataclass(frozen=True)
class GenerativeSettings:
    paid_tier_enabled: bool = _env_flag("PAID_TIER_ENABLED")
    project_id: str = (
        os.environ.get("VERTEX_AI_PROJECT_ID")
        or os.environ.get("GCP_PROJECT_ID")
        or os.environ.get("GCP_PROJECT")
        or os.environ.get("GOOGLE_CLOUD_PROJECT", "")
    )
    location: str = os.environ.get("VERTEX_AI_REGION") or os.environ.get("GCP_REGION", "us-central1")
    model: str = os.environ.get("VERTEX_AI_MODEL", "gemini-1.5-pro")
    max_output_tokens: int = int(os.environ.get("MAX_LLM_TOKENS", "2000"))
    guardrails_enabled: bool = _env_flag("ENABLE_LLM_GUARDRAILS")


@dataclass(frozen=True)
class OnboardingSettings:
    # Catalog questions that get a canned or generated acknowledgement.
    ai_response_question_ids: frozenset[str] = frozenset(
        question_id.strip()
        for question_id in os.environ.get(
            "AI_RESPONSE_QUESTION_IDS", "q1,q2,q3,q6,q7,q9,q10,q13"
        ).split(",")
        if question_id.strip()
    )


@dataclass(frozen=True)
class LoggingSettings:
    level: str = os.environ.get("LOG_LEVEL", "INFO").upper()


api_settings = APISettings()
store_settings = StoreSettings()
generative_settings = GenerativeSettings()
onboarding_settings = OnboardingSettings()
logging_settings = LoggingSettings()
