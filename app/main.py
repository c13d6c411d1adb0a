import logging

from fastapi import FastAPI
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from app.api.agreement_templates import admin_router as admin_templates_router
from app.api.agreement_templates import router as templates_router
from app.api.signatures import router as signatures_router
from app.config import settings
from app.db import SessionLocal
from app.errors import register_error_handlers
from app.logging import configure_logging
from app.observability import ObservabilityMiddleware
from app.services.agreement_seed import seed_agreement_templates

app = FastAPI(title="Fractional Estate API")
logger = logging.getLogger(__name__)
configure_logging()
app.add_middleware(ObservabilityMiddleware)
register_error_handlers(app)


def _include_api_router(router, dependencies=None):
    app.include_router(router, prefix="/api", dependencies=dependencies)


_include_api_router(templates_router)
_include_api_router(admin_templates_router)
_include_api_router(signatures_router)


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.get("/metrics")
def metrics():
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)


@app.on_event("startup")
def _seed_templates():
    if not settings.seed_on_startup:
        return
    db = SessionLocal()
    try:
        seed_agreement_templates(db)
    except Exception:
        logger.exception("Failed to seed agreement templates during startup")
    finally:
        db.close()
