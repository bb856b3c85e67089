"""Pipeline orchestrator: Architect -> Auditor -> (Reviewer).

State machine, single forward pass:
  START -> GENERATED -> AUDITED -> [REVIEWED] -> DONE
  any state -> FAILED on the first exception

Whether the Reviewer stage exists is decided once, when the pipeline is built
(it exists only if review rules were supplied). The artifact is always a str
and each stage's sanitized output replaces it entirely.
"""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from .agents import Agent, ArchitectAgent, AuditorAgent, ReviewerAgent
from .client import LLMClient
from .errors import PipelineAbortError
from .logging_util import get_logger, log_step
from .sanitize import sanitize
from .types import PipelineStage, Settings

logger = get_logger(__name__)

@dataclass(frozen=True)
class Stage:
    agent: Agent
    reaches: PipelineStage
    # None -> the spec text given to run(); otherwise fixed context (review rules)
    context: Optional[str] = None

class Pipeline:
    def __init__(self, architect: Agent, auditor: Agent, reviewer: Optional[Agent] = None, review_rules: Optional[str] = None):
        stages: List[Stage] = [
            Stage(architect, PipelineStage.GENERATED),
            Stage(auditor, PipelineStage.AUDITED),
        ]
        if review_rules and review_rules.strip():
            if reviewer is None:
                raise ValueError("review rules given but no reviewer agent")
            stages.append(Stage(reviewer, PipelineStage.REVIEWED, context=review_rules))

        self._stages = stages
        self.state = PipelineStage.START
        self.timings_ms: Dict[str, int] = {}

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        review_rules: Optional[str] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> "Pipeline":
        client = LLMClient(settings, sleep=sleep)
        temps = settings.temperatures
        return cls(
            architect=ArchitectAgent(client, temps.architect),
            auditor=AuditorAgent(client, temps.auditor),
            reviewer=ReviewerAgent(client, temps.reviewer),
            review_rules=review_rules,
        )

    @property
    def stages(self) -> List[str]:
        return [s.agent.name for s in self._stages]

    def run(self, prompt: str, spec_text: str) -> str:
        if not spec_text or not spec_text.strip():
            raise ValueError("spec text is required")
        if self.state is not PipelineStage.START:
            raise RuntimeError(f"pipeline already ran (state={self.state.value})")

        t0 = time.perf_counter()
        artifact = prompt
        total = len(self._stages)

        for idx, stage in enumerate(self._stages, start=1):
            name = stage.agent.name
            log_step(logger, f"{idx}/{total}", f"{name} running")
            t_stage = time.perf_counter()
            context = spec_text if stage.context is None else stage.context
            try:
                artifact = sanitize(stage.agent.run(artifact, context))
            except Exception as e:
                self.state = PipelineStage.FAILED
                logger.error("[%s] failed: %s", name, e)
                raise PipelineAbortError(name, e) from e
            self.timings_ms[name] = int((time.perf_counter() - t_stage) * 1000)
            self.state = stage.reaches

        self.state = PipelineStage.DONE
        self.timings_ms["total"] = int((time.perf_counter() - t0) * 1000)
        log_step(logger, "done", f"stages={','.join(self.stages)} chars={len(artifact)}")
        return artifact
