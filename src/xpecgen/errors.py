from __future__ import annotations

from typing import Optional


class XpecGenError(Exception):
    pass

class ConfigError(XpecGenError):
    pass

class ServiceError(XpecGenError):
    def __init__(self, status_code: int, detail: str = ""):
        self.status_code = status_code
        self.detail = detail
        msg = f"API Error: {status_code}"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)

class PipelineAbortError(XpecGenError):
    def __init__(self, stage: str, cause: Optional[BaseException] = None):
        self.stage = stage
        reason = f"{type(cause).__name__}: {cause}" if cause is not None else "unknown error"
        super().__init__(f"pipeline aborted at stage '{stage}' ({reason})")

class TransportError(XpecGenError):
    pass
