"""Review model access through OpenRouter."""

from typing import NamedTuple, Type, TypeVar

from langchain_core.runnables import Runnable
from langchain_openai import ChatOpenAI

from diff_dragon.config import settings
from diff_dragon.core.exceptions import ExternalServiceError
from diff_dragon.core.logging import get_logger

logger = get_logger("llm")

T = TypeVar("T")

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


class ReviewModel(NamedTuple):
    model_id: str
    structured_method: str


DEFAULT_MODEL = "claude-sonnet-4"

# Short names accepted in REVIEW_MODEL.
SUPPORTED_MODELS: dict[str, ReviewModel] = {
    "claude-sonnet-4": ReviewModel("anthropic/claude-sonnet-4", "function_calling"),
    "claude-opus-4": ReviewModel("anthropic/claude-opus-4", "function_calling"),
    "gpt-4o": ReviewModel("openai/gpt-4o", "json_schema"),
    "gpt-4o-mini": ReviewModel("openai/gpt-4o-mini", "json_schema"),
}


def resolve_model(name: str) -> ReviewModel:
    """Look up a model by short name, falling back to the default."""
    if name not in SUPPORTED_MODELS:
        logger.warning(f"[LLM] Unknown model '{name}', falling back to {DEFAULT_MODEL}")
        return SUPPORTED_MODELS[DEFAULT_MODEL]
    return SUPPORTED_MODELS[name]


def get_chat_llm(model: str = DEFAULT_MODEL, temperature: float = 0.0) -> ChatOpenAI:
    """Get a chat LLM via OpenRouter.

    Raises:
        ExternalServiceError: If no OpenRouter API key is configured
    """
    if not settings.openrouter_api_key:
        raise ExternalServiceError("OpenRouter", "OPENROUTER_API_KEY not configured")

    selected = resolve_model(model)
    logger.info(f"[LLM] Using OpenRouter: {model} -> {selected.model_id}")

    # Same bound as the outer analysis timeout.
    return ChatOpenAI(
        model=selected.model_id,
        api_key=settings.openrouter_api_key,
        base_url=OPENROUTER_BASE_URL,
        temperature=temperature,
        timeout=settings.analysis_timeout,
        max_retries=2,
    )


def get_structured_llm(
    output_model: Type[T],
    model: str = DEFAULT_MODEL,
    temperature: float = 0.0,
) -> Runnable:
    """Get an LLM that returns instances of ``output_model``."""
    method = resolve_model(model).structured_method
    return get_chat_llm(model=model, temperature=temperature).with_structured_output(output_model, method=method)
