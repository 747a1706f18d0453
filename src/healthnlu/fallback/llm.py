"""OpenAI-backed slot extraction used when the rules leave a required slot empty."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from openai import AsyncOpenAI
from pydantic import BaseModel, Field, ValidationError

from healthnlu.config.settings import Settings
from healthnlu.exceptions import FallbackError
from healthnlu.fallback.cache import FallbackCache
from healthnlu.fallback.prompt_templates import SYSTEM_PROMPT, USER_PROMPT_TEMPLATE
from healthnlu.fallback.schemas import FALLBACK_JSON_SCHEMA
from healthnlu.models.intent import IntentType

logger = logging.getLogger(__name__)


class FallbackResult(BaseModel):
    intent: IntentType
    slots: dict[str, Any] = Field(default_factory=dict)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    cached: bool = False


class LLMFallback:
    def __init__(
        self,
        settings: Settings,
        client: AsyncOpenAI | None = None,
        cache: FallbackCache[FallbackResult] | None = None,
    ) -> None:
        self._settings = settings
        if client is None and settings.openai_api_key:
            client = AsyncOpenAI(api_key=settings.openai_api_key)
        self._client = client
        if cache is None:
            cache = FallbackCache(
                max_size=settings.fallback_cache_size,
                ttl_seconds=settings.fallback_cache_ttl_seconds,
            )
        self._cache = cache

    @property
    def enabled(self) -> bool:
        return self._client is not None

    async def extract(self, text: str) -> FallbackResult | None:
        """Never raises; a timeout or API failure returns None."""
        if not self.enabled or not text.strip():
            return None
        cached = self._cache.get(text)
        if cached is not None:
            logger.debug("fallback cache hit for %r", text)
            return cached.model_copy(update={"cached": True})
        timeout = self._settings.fallback_timeout_ms / 1000
        try:
            result = await asyncio.wait_for(self._call(text), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning("fallback timed out after %dms", self._settings.fallback_timeout_ms)
            return None
        except FallbackError as exc:
            logger.warning("fallback failed: %s", exc)
            return None
        self._cache.put(text, result)
        logger.info("fallback answered %s for %r", result.intent.value, text)
        return result

    async def _call(self, text: str) -> FallbackResult:
        try:
            response = await self._client.chat.completions.create(
                model=self._settings.openai_model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": USER_PROMPT_TEMPLATE.format(text=text)},
                ],
                response_format={
                    "type": "json_schema",
                    "json_schema": FALLBACK_JSON_SCHEMA,
                },
                temperature=0.0,
            )
        except Exception as exc:
            raise FallbackError(f"OpenAI API error: {exc}") from exc

        raw = response.choices[0].message.content
        if raw is None:
            raise FallbackError("OpenAI returned empty content")

        try:
            data: dict[str, Any] = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise FallbackError(f"Malformed JSON from OpenAI: {exc}") from exc

        slots = {k: v for k, v in (data.get("slots") or {}).items() if v not in (None, "")}
        try:
            if "severity" in slots:
                slots["severity"] = int(slots["severity"])
            if "bristol" in slots:
                slots["bristol"] = str(slots["bristol"])
            return FallbackResult(
                intent=data.get("intent", "other"),
                slots=slots,
                confidence=float(data.get("confidence", 0.0)),
            )
        except (ValidationError, ValueError, TypeError) as exc:
            raise FallbackError(f"Unusable fallback payload: {exc}") from exc
