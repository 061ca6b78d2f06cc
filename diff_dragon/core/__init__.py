"""Shared library utilities."""

from diff_dragon.core.llm import get_chat_llm, get_structured_llm
from diff_dragon.core.logging import get_logger
from diff_dragon.core.security import sign_payload, verify_signature

__all__ = [
    "get_chat_llm",
    "get_structured_llm",
    "get_logger",
    "sign_payload",
    "verify_signature",
]
