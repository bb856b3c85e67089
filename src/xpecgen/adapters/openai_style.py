"""OpenAI-style chat.completions adapter (OpenRouter by default)."""
from __future__ import annotations

import requests
from typing import Dict

from ..errors import ConfigError, TransportError
from ..logging_util import get_logger, key_fingerprint
from ..types import CompletionRequest, DEFAULT_ENDPOINT, DEFAULT_REFERER
from .base import BaseChatAdapter

logger = get_logger(__name__)

class OpenAIStyleAdapter(BaseChatAdapter):
    def __init__(
        self,
        api_key: str,
        endpoint: str = DEFAULT_ENDPOINT,
        referer: str = DEFAULT_REFERER,
        timeout: float = 60,
    ):
        if not api_key:
            raise ConfigError("API key is not set (OPENROUTER_API_KEY)")
        self.api_key = api_key
        self.endpoint = endpoint
        self.referer = referer
        self.timeout = timeout
        logger.debug("[API_KEY] %s endpoint=%s", key_fingerprint(api_key), endpoint)

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": self.referer,
        }

    def send(self, request: CompletionRequest) -> requests.Response:
        try:
            return requests.post(
                self.endpoint,
                headers=self._headers(),
                json=request.to_payload(),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f"request failed: {e}") from e
