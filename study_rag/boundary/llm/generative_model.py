"""
Generative model capability.

GenerativeModel is the interface every generation, review, re-ranking and
extraction call goes through: messages in, text out, with the sampling
parameters and the model identity taken from a ModelProfile. The LangChain
implementation builds chat models with init_chat_model, so switching
provider is a configuration change rather than a code path.

Dependencies: langchain, langchain_core
System role: Provider-agnostic completion calls
"""

import asyncio
import logging
from typing import Any, Protocol

from langchain.chat_models import init_chat_model
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage

from study_rag.core.exceptions import GenerationError
from study_rag.models.generation import ModelProfile

logger = logging.getLogger(__name__)


class GenerativeModel(Protocol):
    """Text completion capability."""

    async def complete(self, messages: list[BaseMessage], profile: ModelProfile) -> str:
        """Return the model's text reply (may be empty)."""
        ...


def classify_provider_error(error: Exception) -> str:
    """
    Map a provider exception onto a GenerationError kind.

    Args:
        error: Exception raised by the provider SDK

    Returns:
        str: quota, auth, bad_request or unavailable
    """
    text = f"{type(error).__name__} {error}".lower()
    status = getattr(error, "status_code", None) or getattr(error, "code", None)

    if status == 429 or "429" in text or "quota" in text or "rate limit" in text or "resource_exhausted" in text:
        return GenerationError.QUOTA
    if status in (401, 403) or "401" in text or "api key" in text or "unauthorized" in text or "permission" in text:
        return GenerationError.AUTH
    if status == 400 or "400" in text or "invalid_argument" in text:
        return GenerationError.BAD_REQUEST
    return GenerationError.UNAVAILABLE


def message_text(content: Any) -> str:
    """Flatten a chat message content (str or list of parts) into text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(str(part.get("text", "")))
        return "".join(parts)
    return "" if content is None else str(content)


class LangChainGenerativeModel:
    """GenerativeModel backed by LangChain chat models."""

    def __init__(self, timeout_seconds: float = 90.0) -> None:
        """
        Initialize model adapter.

        Args:
            timeout_seconds: Ceiling for a single completion call
        """
        self._timeout = timeout_seconds
        self._models: dict[tuple, BaseChatModel] = {}

    def _chat_model(self, profile: ModelProfile) -> BaseChatModel:
        key = (profile.provider, profile.model, profile.temperature, profile.max_tokens, profile.top_p)
        if key not in self._models:
            self._models[key] = init_chat_model(
                profile.model,
                model_provider=profile.provider,
                temperature=profile.temperature,
                max_tokens=profile.max_tokens,
                top_p=profile.top_p,
            )
        return self._models[key]

    async def complete(self, messages: list[BaseMessage], profile: ModelProfile) -> str:
        """
        Run one completion.

        Args:
            messages: Chat messages (system + human)
            profile: Model and sampling parameters

        Returns:
            str: Reply text, possibly empty

        Raises:
            GenerationError: On provider failure or timeout
        """
        model = self._chat_model(profile)
        try:
            response = await asyncio.wait_for(model.ainvoke(messages), timeout=self._timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"{__name__}:complete - Timeout after {self._timeout}s ({profile.model})")
            raise GenerationError(
                f"Model call timed out after {self._timeout}s",
                kind=GenerationError.UNAVAILABLE,
                model=profile.model,
            ) from e
        except Exception as e:
            kind = classify_provider_error(e)
            logger.error(f"{__name__}:complete - {profile.model} failed ({kind}): {type(e).__name__}: {e}")
            raise GenerationError(
                f"Model call failed: {e}",
                kind=kind,
                model=profile.model,
            ) from e

        return message_text(response.content).strip()
