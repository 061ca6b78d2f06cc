"""GitHub webhook routes."""

from fastapi import APIRouter, Depends, Header, Request

from diff_dragon.core.exceptions import ReviewFailedError
from diff_dragon.core.logging import get_logger
from diff_dragon.services.github.schemas import WebhookResponse
from diff_dragon.services.reviewer.service import ReviewPipeline

logger = get_logger("github.routes")

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


def get_pipeline(request: Request) -> ReviewPipeline:
    """Return the pipeline created at application startup."""
    return request.app.state.pipeline


@router.post("/pr-created", response_model=WebhookResponse)
async def handle_pr_webhook(
    request: Request,
    pipeline: ReviewPipeline = Depends(get_pipeline),
    x_hub_signature_256: str | None = Header(default=None),
    x_github_delivery: str | None = Header(default=None),
) -> WebhookResponse:
    """Review a pull request on a pull_request webhook delivery.

    The signature is checked against the raw body bytes, so the body is
    read before any JSON parsing.
    """
    body = await request.body()
    logger.info(f"Webhook received: delivery={x_github_delivery}")

    try:
        status = await pipeline.handle(body, x_hub_signature_256)
    except Exception as e:
        logger.opt(exception=e).error(f"Review failed: delivery={x_github_delivery}")
        raise ReviewFailedError() from e

    return WebhookResponse(status=status.value)
