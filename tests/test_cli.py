import logging
import os
from unittest.mock import patch

import pytest

from xpecgen import cli
from xpecgen.errors import PipelineAbortError
from xpecgen.logging_util import set_level

@pytest.fixture()
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("OPENROUTER_API_KEY", "sk-test")
    for var in ("OPENROUTER_MODEL", "XPECGEN_CONFIG", "XPECGEN_MAX_RETRIES", "XPECGEN_TIMEOUT", "XPECGEN_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    (tmp_path / "spec.md").write_text("must be named greet", encoding="utf-8")
    (tmp_path / "review.md").write_text("use arrow functions", encoding="utf-8")
    return tmp_path

class FakePipeline:
    instances = []

    def __init__(self, review_rules, result="const greet = () => {};", error=None):
        self.review_rules = review_rules
        self.result = result
        self.error = error
        self.calls = []
        self.timings_ms = {}
        self.stages = ["architect", "auditor"] + (["reviewer"] if review_rules else [])

    def run(self, prompt, spec_text):
        self.calls.append((prompt, spec_text))
        if self.error:
            raise self.error
        return self.result

def _fake_from_settings(**kw):
    def factory(settings, review_rules=None):
        p = FakePipeline(review_rules, **kw)
        FakePipeline.instances.append(p)
        return p
    return factory

def test_usage_when_spec_missing(workdir, capsys):
    assert cli.main(["hello"]) == 0
    assert "Usage" in capsys.readouterr().out

def test_writes_output_with_review(workdir):
    with patch.object(cli.Pipeline, "from_settings", side_effect=_fake_from_settings()):
        rc = cli.main(["-s", "spec.md", "-r", "review.md", "-o", "greet.ts", "write", "a", "hello"])

    assert rc == 0
    p = FakePipeline.instances[-1]
    assert p.review_rules == "use arrow functions"
    assert p.calls == [("write a hello", "must be named greet")]
    assert (workdir / "greet.ts").read_text(encoding="utf-8") == "const greet = () => {};"

def test_default_output_path_and_no_review(workdir):
    with patch.object(cli.Pipeline, "from_settings", side_effect=_fake_from_settings(result="x")):
        assert cli.main(["--spec", "spec.md", "go"]) == 0

    assert FakePipeline.instances[-1].review_rules == ""
    assert (workdir / "output.ts").read_text(encoding="utf-8") == "x"

def test_pipeline_failure_writes_nothing(workdir):
    err = PipelineAbortError("auditor", RuntimeError("boom"))
    with patch.object(cli.Pipeline, "from_settings", side_effect=_fake_from_settings(error=err)):
        assert cli.main(["-s", "spec.md", "-o", "out.ts", "go"]) == 1

    assert not (workdir / "out.ts").exists()

def test_missing_spec_file(workdir):
    assert cli.main(["-s", "missing.md", "go"]) == 1

def test_missing_key_non_interactive(workdir, monkeypatch):
    monkeypatch.delenv("OPENROUTER_API_KEY")
    monkeypatch.setattr(cli, "load_dotenv", lambda *a, **kw: False)
    monkeypatch.setattr(cli, "_ask_api_key", lambda: "")
    assert cli.main(["-s", "spec.md", "go"]) == 1

def test_key_from_dotenv(workdir, monkeypatch):
    monkeypatch.delenv("OPENROUTER_API_KEY")
    (workdir / ".env").write_text("OPENROUTER_API_KEY=sk-from-dotenv\n", encoding="utf-8")
    seen = {}

    def factory(settings, review_rules=None):
        seen["key"] = settings.api_key
        return FakePipeline(review_rules)

    with patch.object(cli.Pipeline, "from_settings", side_effect=factory):
        assert cli.main(["-s", "spec.md", "go"]) == 0
    assert seen["key"] == "sk-from-dotenv"

def test_log_level_from_dotenv(workdir):
    (workdir / ".env").write_text("XPECGEN_LOG_LEVEL=DEBUG\n", encoding="utf-8")
    try:
        with patch.object(cli.Pipeline, "from_settings", side_effect=_fake_from_settings()):
            assert cli.main(["-s", "spec.md", "go"]) == 0
        assert logging.getLogger("xpecgen.client").level == logging.DEBUG
    finally:
        os.environ.pop("XPECGEN_LOG_LEVEL", None)
        set_level("INFO")
