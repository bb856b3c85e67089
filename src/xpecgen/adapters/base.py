"""Adapter interface: one HTTP attempt, no retry, no response interpretation."""
from __future__ import annotations

from typing import Protocol

from ..types import CompletionRequest

class HttpResponse(Protocol):
    status_code: int
    text: str

    def json(self): ...

class BaseChatAdapter:
    def send(self, request: CompletionRequest) -> HttpResponse:
        raise NotImplementedError
