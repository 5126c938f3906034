from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI, OpenAIError

from .config import Settings
from .prompts import Prompt


logger = logging.getLogger(__name__)

NO_RESPONSE = "No response."
API_STYLES = ("chat", "responses")


class ModelProviderError(RuntimeError):
    """The language-model call failed; the cause is kept for server-side logs."""


def _get(obj: Any, name: str, default: Any = None) -> Any:
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


def extract_chat_text(completion: Any) -> str:
    """Answer text from a chat-completion envelope (``choices[0].message.content``)."""
    choices = _get(completion, "choices") or []
    if not choices:
        return NO_RESPONSE
    message = _get(choices[0], "message")
    content = _get(message, "content") if message is not None else None
    if isinstance(content, str) and content.strip():
        return content.strip()
    return NO_RESPONSE


def extract_response_text(response: Any) -> str:
    """Answer text from a responses envelope.

    Scans ``output`` for the first item typed ``message`` and returns its first
    non-empty text block. Tool-call items (e.g. web search) are skipped.
    """
    for item in _get(response, "output") or []:
        if _get(item, "type") != "message":
            continue
        for block in _get(item, "content") or []:
            text = _get(block, "text")
            if isinstance(text, str) and text.strip():
                return text.strip()
        break
    return NO_RESPONSE


class LLMClient:
    def __init__(self, settings: Settings, client: Optional[AsyncOpenAI] = None):
        if settings.llm_api_style not in API_STYLES:
            raise ValueError(f"Unsupported LLM_API_STYLE: {settings.llm_api_style}")
        self.settings = settings
        if client is None and settings.openai_api_key:
            client = AsyncOpenAI(
                api_key=settings.openai_api_key,
                timeout=settings.llm_timeout,
                max_retries=0,
            )
        if client is None:
            logger.warning("OPENAI_API_KEY is not configured. Evaluations will fail until set.")
        self.openai = client

    async def complete(self, prompt: Prompt) -> str:
        if not self.openai:
            raise ModelProviderError("OPENAI_API_KEY not configured.")
        try:
            if self.settings.llm_api_style == "responses":
                return await self._complete_responses(prompt)
            return await self._complete_chat(prompt)
        except OpenAIError as exc:
            raise ModelProviderError(f"{exc.__class__.__name__}: {exc}") from exc

    async def _complete_chat(self, prompt: Prompt) -> str:
        completion = await self.openai.chat.completions.create(
            model=self.settings.openai_model,
            messages=[
                {"role": "system", "content": prompt.system},
                {"role": "user", "content": prompt.user},
            ],
            temperature=self.settings.llm_temperature,
        )
        return extract_chat_text(completion)

    async def _complete_responses(self, prompt: Prompt) -> str:
        kwargs: Dict[str, Any] = {}
        if self.settings.llm_web_search:
            tools: List[Dict[str, str]] = [{"type": "web_search_preview"}]
            kwargs["tools"] = tools
        response = await self.openai.responses.create(
            model=self.settings.openai_model,
            input=[
                {"role": "system", "content": [{"type": "input_text", "text": prompt.system}]},
                {"role": "user", "content": [{"type": "input_text", "text": prompt.user}]},
            ],
            temperature=self.settings.llm_temperature,
            **kwargs,
        )
        return extract_response_text(response)
