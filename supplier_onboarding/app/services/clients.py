from __future__ import annotations

import logging
from typing import Optional

from google import genai
from google.auth import exceptions as auth_exceptions
from google.cloud import firestore

from ..settings import generative_settings, store_settings

logger = logging.getLogger(__name__)

_firestore_client: Optional[firestore.Client] = None
_genai_client: Optional[genai.Client] = None


def get_firestore_client() -> firestore.Client:
    """Return a cached Firestore client, instantiating it lazily."""
    global _firestore_client
    if _firestore_client is not None:
        return _firestore_client

    try:
        _firestore_client = firestore.Client(project=store_settings.project_id or None)
    except auth_exceptions.DefaultCredentialsError as exc:
        raise RuntimeError(
            "Firestore credentials not configured. Set GOOGLE_APPLICATION_CREDENTIALS or "
            "point to the Firestore emulator via FIRESTORE_EMULATOR_HOST."
        ) from exc

    return _firestore_client


def get_genai_client() -> genai.Client:
    """Return a cached Gen AI client bound to Vertex AI."""
    global _genai_client
    if _genai_client is not None:
        return _genai_client

    project = generative_settings.project_id
    location = generative_settings.location
    if not project:
        logger.warning("Vertex AI project not configured. LLM features will be disabled.")
        raise RuntimeError("VERTEX_AI_PROJECT_ID or GCP_PROJECT_ID must be set")

    _genai_client = genai.Client(vertexai=True, project=project, location=location)
    logger.info("Vertex AI initialized for project=%s, location=%s", project, location)
    return _genai_client
