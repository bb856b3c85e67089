from typing import Any, List, Optional

import pytest

from xpecgen.types import Settings


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str = "", bad_json: bool = False):
        self.status_code = status_code
        self._payload = payload
        self.text = text
        self._bad_json = bad_json

    def json(self):
        if self._bad_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


def ok(content: Optional[str]) -> FakeResponse:
    return FakeResponse(200, {"choices": [{"message": {"role": "assistant", "content": content}}]})


class FakeAdapter:
    """Replays scripted responses; an Exception item is raised instead of returned."""

    def __init__(self, script: List[Any]):
        self.script = list(script)
        self.requests = []

    def send(self, request):
        self.requests.append(request)
        item = self.script.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


class SleepRecorder:
    def __init__(self):
        self.calls: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture()
def settings():
    return Settings(api_key="sk-test")


@pytest.fixture()
def sleeps():
    return SleepRecorder()
