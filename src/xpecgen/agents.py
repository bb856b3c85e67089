"""Pipeline roles.

Every agent call is one independent request: a fresh single-message
conversation is built per call, and the only thing carried between stages is
the artifact text the caller passes in. Output is returned raw; fence
stripping happens in the pipeline.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from .client import LLMClient
from .logging_util import get_logger
from .prompts import render_architect, render_auditor, render_reviewer
from .types import user_conversation

logger = get_logger(__name__)

class Agent(ABC):
    name: str = ""
    default_temperature: float = 0.2

    def __init__(self, client: LLMClient, temperature: Optional[float] = None):
        self.client = client
        self.temperature = self.default_temperature if temperature is None else temperature

    @abstractmethod
    def render(self, primary_input: str, context_input: str) -> str:
        pass

    def run(self, primary_input: str, context_input: str) -> str:
        prompt = self.render(primary_input, context_input)
        logger.debug("[%s] prompt chars=%d temperature=%.2f", self.name, len(prompt), self.temperature)
        text = self.client.complete(user_conversation(prompt), temperature=self.temperature)
        if not text:
            logger.warning("[%s] model returned empty content", self.name)
        return text

class ArchitectAgent(Agent):
    """primary = user request, context = functional spec."""

    name = "architect"
    default_temperature = 0.7

    def render(self, primary_input: str, context_input: str) -> str:
        return render_architect(prompt=primary_input, spec=context_input)

class AuditorAgent(Agent):
    """primary = code, context = functional spec."""

    name = "auditor"
    default_temperature = 0.2

    def render(self, primary_input: str, context_input: str) -> str:
        return render_auditor(code=primary_input, spec=context_input)

class ReviewerAgent(Agent):
    """primary = code, context = review rules."""

    name = "reviewer"
    default_temperature = 0.2

    def render(self, primary_input: str, context_input: str) -> str:
        return render_reviewer(code=primary_input, rules=context_input)
