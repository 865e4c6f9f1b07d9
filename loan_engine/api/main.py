"""FastAPI application factory"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from loan_engine.api.dependencies import get_request_id
from loan_engine.api.middleware import RequestIDMiddleware, MetricsMiddleware
from loan_engine.api.v1 import loans, risk
from loan_engine.infrastructure.observability.logging import setup_logging
from loan_engine.config import settings
from loan_engine.domain.exceptions import InvalidTransitionError, ValidationError

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Loan Engine",
        description="Amortization schedules and applicant risk assessment",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.exception_handler(InvalidTransitionError)
    async def invalid_transition_handler(request: Request, exc: InvalidTransitionError):
        logging.warning(f"Rejected status change: {exc}", extra={"request_id": get_request_id(request)})
        return JSONResponse(status_code=409, content={"detail": {"reason": str(exc)}})

    @app.exception_handler(ValidationError)
    async def domain_validation_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=422, content={"detail": {"field": exc.field, "reason": exc.reason}})

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(loans.router, prefix="/v1", tags=["loans"])
    app.include_router(risk.router, prefix="/v1", tags=["risk"])

    return app


app = create_app()
