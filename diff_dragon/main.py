"""Diff Dragon - FastAPI entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from diff_dragon.config import settings
from diff_dragon.core.exceptions import ApiException
from diff_dragon.core.logging import get_logger
from diff_dragon.core.schemas.responses import ErrorResponse, HealthResponse
from diff_dragon.services.github.routes import router as github_router
from diff_dragon.services.ledger.service import ReviewLedger
from diff_dragon.services.reviewer.analyzer import ReviewAnalyzer
from diff_dragon.services.reviewer.service import ReviewPipeline

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the review ledger and build the pipeline for the app's lifetime."""
    ledger = ReviewLedger(settings.database_url)
    await ledger.initialize()
    app.state.pipeline = ReviewPipeline(ledger=ledger, analyzer=ReviewAnalyzer())
    logger.info("Review pipeline ready")
    try:
        yield
    finally:
        await ledger.close()


app = FastAPI(
    title="Diff Dragon",
    description="Automated GitHub pull request reviewer",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(ApiException)
async def api_exception_handler(request: Request, exc: ApiException) -> JSONResponse:
    """Handle custom API exceptions and return structured error response."""
    logger.warning(f"API error: {exc.message} (status={exc.status_code})")
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=exc.message,
            details=exc.details if exc.details else None,
        ).model_dump(),
    )

# Webhook routes are mounted at the root: POST /webhooks/pr-created
app.include_router(github_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": "diff-dragon",
        "version": "0.1.0",
        "status": "running",
    }


@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse()


if __name__ == "__main__":
    import uvicorn

    logger.info(f"Starting Diff Dragon on {settings.host}:{settings.port}")
    uvicorn.run(
        "diff_dragon.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
