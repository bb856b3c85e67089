"""LLMClient: one-shot chat completion with bounded retry.

Retry policy per attempt (attempt counts from 1):
- 429                      -> sleep rate_limit_backoff_s * attempt, try again
- other non-2xx            -> ServiceError(status), handled like a transport failure
- any other raised error   -> re-raise on the last attempt, else sleep error_backoff_s
- 2xx                      -> choices[0].message.content, or "" if the shape is missing

If every attempt is rate limited the loop falls through and "" is returned.
"""
from __future__ import annotations

import time
from typing import Any, Callable, Dict, Optional, Sequence

from .adapters.base import BaseChatAdapter
from .adapters.openai_style import OpenAIStyleAdapter
from .errors import ConfigError, ServiceError
from .logging_util import get_logger
from .types import CompletionRequest, Message, Settings

logger = get_logger(__name__)

class LLMClient:
    def __init__(
        self,
        settings: Settings,
        adapter: Optional[BaseChatAdapter] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.settings = settings
        self._adapter = adapter
        self._sleep = sleep

    def _get_adapter(self) -> BaseChatAdapter:
        if not self.settings.api_key:
            raise ConfigError("API key is not set (OPENROUTER_API_KEY)")
        if self._adapter is None:
            self._adapter = OpenAIStyleAdapter(
                api_key=self.settings.api_key,
                endpoint=self.settings.endpoint,
                referer=self.settings.referer,
                timeout=self.settings.timeout,
            )
        return self._adapter

    def complete(
        self,
        messages: Sequence[Message],
        temperature: float,
        max_retries: Optional[int] = None,
    ) -> str:
        adapter = self._get_adapter()

        if not messages:
            raise ValueError("messages must not be empty")
        retries = self.settings.retry.max_retries if max_retries is None else max_retries
        if retries < 1:
            raise ValueError(f"max_retries must be >= 1, got {retries}")

        request = CompletionRequest(
            model=self.settings.model,
            messages=tuple(messages),
            temperature=temperature,
        )
        policy = self.settings.retry

        for attempt in range(1, retries + 1):
            try:
                t0 = time.perf_counter()
                response = adapter.send(request)
                call_ms = int((time.perf_counter() - t0) * 1000)

                if response.status_code == 429:
                    wait = policy.rate_limit_backoff_s * attempt
                    logger.warning(
                        "rate limited (attempt %d/%d), backing off %.1fs", attempt, retries, wait
                    )
                    self._sleep(wait)
                    continue

                if not 200 <= response.status_code < 300:
                    raise ServiceError(response.status_code, (response.text or "")[:800])

                data = response.json()
                text = self._extract_text(data)
                logger.info(
                    "completion ok (attempt %d/%d, %dms, %d chars)", attempt, retries, call_ms, len(text)
                )
                return text

            except Exception as e:
                if attempt == retries:
                    logger.error("giving up after %d attempt(s): %s", attempt, e)
                    raise
                logger.warning("attempt %d/%d failed: %s", attempt, retries, e)
                self._sleep(policy.error_backoff_s)

        logger.warning("retry budget exhausted by rate limiting (%d attempts)", retries)
        return ""

    @staticmethod
    def _extract_text(raw: Any) -> str:
        if not isinstance(raw, dict):
            return ""
        choices = raw.get("choices") or []
        if not isinstance(choices, list) or not choices:
            return ""
        first = choices[0] if isinstance(choices[0], dict) else {}
        msg: Dict[str, Any] = first.get("message") or {}
        if not isinstance(msg, dict):
            return ""
        return str(msg.get("content") or "")
