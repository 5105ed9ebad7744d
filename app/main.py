"""FastAPI application entry point."""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.logging_config import configure_logging
from app.routers import ai_analysis, habits, health, profile, sessions, stats
from app.services.errors import PracticeAnalysisError


configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Guitar Practice Coach API")


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


@app.exception_handler(PracticeAnalysisError)
async def practice_analysis_error_handler(request: Request, exc: PracticeAnalysisError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Analysis failed on %s: %s", request.url.path, exc.message)
    return _error_response(exc.status_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error_response(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return _error_response(400, "; ".join(messages) or "Invalid request")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path)
    return _error_response(500, "Internal server error")


@app.get("/health", tags=["system"])
async def health_check() -> dict[str, str]:
    """Simple health probe for liveness checks."""
    return {"status": "ok"}


# Include routers
app.include_router(health.router)
app.include_router(sessions.router)
app.include_router(profile.router)
app.include_router(habits.router)
app.include_router(stats.router)
app.include_router(ai_analysis.router)
