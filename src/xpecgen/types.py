"""Shared types and lightweight data containers.

Plain dataclasses only:
- requests are immutable once built
- the pipeline artifact is always a plain str, never wrapped
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Tuple

Role = Literal["user"]

DEFAULT_MODEL = "google/gemini-2.0-flash-exp:free"
DEFAULT_ENDPOINT = "https://openrouter.ai/api/v1/chat/completions"
DEFAULT_REFERER = "https://xpecgen.local"

@dataclass(frozen=True)
class Message:
    content: str
    role: Role = "user"

    def to_dict(self) -> Dict[str, Any]:
        return {"role": self.role, "content": self.content}

@dataclass(frozen=True)
class CompletionRequest:
    model: str
    messages: Tuple[Message, ...]
    temperature: float

    def to_payload(self) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [m.to_dict() for m in self.messages],
            "temperature": self.temperature,
        }

@dataclass
class RetryPolicy:
    max_retries: int = 5
    # 429: rate_limit_backoff_s * attempt (attempt counts from 1)
    rate_limit_backoff_s: float = 2.0
    # transport / non-2xx: fixed delay
    error_backoff_s: float = 1.0

@dataclass
class Temperatures:
    architect: float = 0.7
    auditor: float = 0.2
    reviewer: float = 0.2

@dataclass
class Settings:
    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    endpoint: str = DEFAULT_ENDPOINT
    referer: str = DEFAULT_REFERER
    timeout: float = 60
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    temperatures: Temperatures = field(default_factory=Temperatures)

class PipelineStage(str, Enum):
    START = "start"
    GENERATED = "generated"
    AUDITED = "audited"
    REVIEWED = "reviewed"
    DONE = "done"
    FAILED = "failed"

def user_conversation(content: str) -> List[Message]:
    """A one-shot conversation: exactly one user message, no history."""
    return [Message(content=content)]
