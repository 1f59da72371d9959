from __future__ import annotations

import json

import httpx
import pytest

from openai_providers.base.factory import ProviderFactory
from openai_providers.service.cli import main, plan_run
from openai_providers.tests.helpers import sse_body


def test_cli_dry_run_plan_json(capsys):
    code = main(["--provider", "openai", "--prompt", "hello"])
    assert code == 0  # nosec B101
    data = json.loads(capsys.readouterr().out.strip())
    assert data["provider"] == "openai" and data["model"] == "gpt-3.5-turbo"  # nosec B101
    assert data["prompt_preview"] == "hello" and data["api_key_present"] is False  # nosec B101


def test_plan_run_azure_defaults(monkeypatch):
    monkeypatch.setenv("AZURE_OPENAI_API_KEY", "real-key")
    plan = plan_run(provider="azure", model=None, prompt="x" * 100, stream=True)
    assert plan["model"] == "gpt35" and plan["api_version"] == "2023-07-01"  # nosec B101
    assert plan["api_key_present"] is True and plan["stream_requested"] is True  # nosec B101
    assert plan["prompt_preview"].endswith("...") and len(plan["prompt_preview"]) == 63  # nosec B101
    assert plan["key_env_candidates"] == ["AZURE_OPENAI_API_KEY", "AZURE_OPENAI_KEY"]  # nosec B101


def test_plan_run_unknown_provider_does_not_raise():
    plan = plan_run(provider="nope", model=None, prompt=None, stream=False)
    assert plan["provider_known"] is False and plan["model"] is None  # nosec B101


def test_execute_requires_prompt_and_known_provider(capsys):
    assert main(["run", "--execute"]) == 2  # nosec B101
    assert main(["run", "--provider", "nope", "--prompt", "p", "--execute"]) == 2  # nosec B101


def test_execute_missing_key_exit_code(capsys):
    assert main(["--prompt", "hi", "--execute"]) == 2  # nosec B101
    err = capsys.readouterr().err
    assert "OPENAI_API_KEY" in err  # nosec B101


def test_models_requires_execute():
    assert main(["models"]) == 2  # nosec B101


@pytest.fixture()
def mocked_openai(monkeypatch):
    """Route CLI-created clients through a mock transport."""
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if request.url.path.endswith("/models"):
            return httpx.Response(200, text='{"data": []}')
        body = json.loads(request.read())
        if body.get("stream"):
            return httpx.Response(200, content=sse_body("Hi", "!"))
        if body["messages"][0]["content"] == "fail":
            return httpx.Response(500, json={"error": {"type": "server_error", "message": "down"}})
        return httpx.Response(200, text='{"choices": []}')

    original = ProviderFactory.create.__func__

    def create(cls, provider, *, params=None, **kwargs):
        kwargs.setdefault("api_key", "sk-cli")
        kwargs.setdefault("transport_options", {"transport": httpx.MockTransport(handler)})
        return original(cls, provider, params=params, **kwargs)

    monkeypatch.setattr(ProviderFactory, "create", classmethod(create))
    return calls


def test_execute_prints_raw_body(mocked_openai, capsys):
    assert main(["--prompt", "hi", "--execute"]) == 0  # nosec B101
    assert capsys.readouterr().out.strip() == '{"choices": []}'  # nosec B101
    assert json.loads(mocked_openai[-1].content)["model"] == "gpt-3.5-turbo"  # nosec B101


def test_execute_stream_relays_deltas(mocked_openai, capsys):
    assert main(["--prompt", "hi", "--stream", "--execute"]) == 0  # nosec B101
    assert capsys.readouterr().out == "Hi!\n\n"  # nosec B101


def test_execute_failure_exit_code(mocked_openai, capsys):
    assert main(["--prompt", "fail", "--execute"]) == 1  # nosec B101
    err_lines = [json.loads(line) for line in capsys.readouterr().err.splitlines() if line.startswith("{")]
    assert any(e.get("error") == "down" and e.get("http_status") == 500 for e in err_lines)  # nosec B101


def test_models_execute(mocked_openai, capsys):
    assert main(["models", "--execute"]) == 0  # nosec B101
    assert capsys.readouterr().out.strip() == '{"data": []}'  # nosec B101
