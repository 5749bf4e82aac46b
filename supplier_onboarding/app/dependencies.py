from __future__ import annotations

import logging
from typing import Union

from .questions import catalog
from .services.answer_processor import AnswerProcessor
from .services.clients import get_firestore_client
from .services.onboarding import OnboardingService
from .services.response_selector import ResponseSelector
from .settings import store_settings
from .store import OnboardingStore
from .store_firestore import FirestoreOnboardingStore

logger = logging.getLogger(__name__)

Store = Union[OnboardingStore, FirestoreOnboardingStore]

_store: Store | None = None
_onboarding_service: OnboardingService | None = None
_answer_processor: AnswerProcessor | None = None


def get_onboarding_store() -> Store:
    global _store
    if _store is None:
        if store_settings.backend == "firestore":
            _store = FirestoreOnboardingStore(get_firestore_client())
        else:
            if store_settings.backend != "memory":
                logger.warning("Unknown STORE_BACKEND %r; using in-memory store.", store_settings.backend)
            _store = OnboardingStore()
        logger.info("Using %s onboarding store.", type(_store).__name__)
    return _store


def get_onboarding_service() -> OnboardingService:
    global _onboarding_service
    if _onboarding_service is None:
        _onboarding_service = OnboardingService(get_onboarding_store(), ResponseSelector(), catalog)
    return _onboarding_service


def get_answer_processor() -> AnswerProcessor:
    global _answer_processor
    if _answer_processor is None:
        _answer_processor = AnswerProcessor(get_onboarding_store())
    return _answer_processor
