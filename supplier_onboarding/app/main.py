import logging
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routes import events, onboarding, suppliers
from .settings import api_settings, logging_settings

SERVICE_NAME = "supplier-onboarding"
SERVICE_VERSION = "0.1.0"


def create_app() -> FastAPI:
    logging.basicConfig(
        level=logging_settings.level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Supplier Onboarding Backend",
        version=SERVICE_VERSION,
        description=(
            "Serves the supplier onboarding questionnaire, stores answers, "
            "and returns research-backed or generated acknowledgements."
        ),
    )

    @app.get("/", tags=["meta"])
    def banner() -> dict:
        return {
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "endpoints": {
                "health": "GET /health",
                "questions": "GET /api/onboarding/questions",
                "submitAnswer": "POST /api/onboarding/submit-answer",
                "progress": "GET /api/onboarding/progress/{supplierId}",
                "allAnswers": "GET /api/onboarding/all-answers/{supplierId}",
                "supplier": "GET|PUT /api/suppliers/{supplierId}",
            },
        }

    @app.get("/health", tags=["meta"])
    def health_check() -> dict:
        return {
            "success": True,
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
        }

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(api_settings.allowed_origins),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(onboarding.router)
    app.include_router(suppliers.router)
    app.include_router(events.router)

    return app


app = create_app()
