"""
Settings, LLM factory and reasoning client tests
"""
import asyncio
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from webtest_agent.config import Settings
from webtest_agent.llm import ReasoningConfigError, get_llm
from webtest_agent.llm.reasoning_client import ReasoningClient
from webtest_agent.utils.response_parser import Recovered, Unrecoverable, as_text_list, parse_json_object


def test_defaults():
    config = Settings(_env_file=None)

    assert config.max_self_heal_attempts == 2
    assert config.enable_self_healing is True
    assert config.timeouts.navigation == 30000
    assert config.capture_screenshots == "onFailure"


def test_nested_env_override(monkeypatch):
    monkeypatch.setenv("TIMEOUTS__ELEMENT", "7000")
    monkeypatch.setenv("ENVIRONMENT", "prod")

    config = Settings(_env_file=None)

    assert config.timeouts.element == 7000
    assert config.environment == "prod"


def test_from_json_file(tmp_path):
    path = tmp_path / "agent.config.json"
    path.write_text(json.dumps({
        "base_url": "https://example.com",
        "environment": "qa",
        "max_self_heal_attempts": 1,
        "timeouts": {"navigation": 1000},
    }), encoding="utf-8")

    config = Settings.from_json_file(path)

    assert config.base_url == "https://example.com"
    assert config.environment == "qa"
    assert config.max_self_heal_attempts == 1
    assert config.timeouts.navigation == 1000
    assert config.timeouts.element == 5000


def test_from_json_file_accepts_camel_case_keys(tmp_path):
    path = tmp_path / "agent.config.json"
    path.write_text(json.dumps({
        "baseUrl": "https://example.com",
        "environment": "qa",
        "timeouts": {"navigation": 1000, "element": 2000, "assertion": 3000},
        "maxSelfHealAttempts": 0,
        "enableSelfHealing": False,
        "enableManualLoginPause": True,
        "enableFailureAnalysis": False,
        "captureScreenshots": "none",
        "novaLite": {"modelId": "claude-sonnet", "maxTokens": 256, "region": "us-east-1"},
    }), encoding="utf-8")

    config = Settings.from_json_file(path)

    assert config.base_url == "https://example.com"
    assert config.max_self_heal_attempts == 0
    assert config.enable_self_healing is False
    assert config.enable_manual_login_pause is True
    assert config.enable_failure_analysis is False
    assert config.capture_screenshots == "none"
    assert config.timeouts.assertion == 3000
    assert config.llm_model == "claude-sonnet"
    assert config.max_output_tokens == 256


def test_from_json_file_rejects_unknown_keys(tmp_path):
    path = tmp_path / "agent.config.json"
    path.write_text(json.dumps({"enableSelfHeal": False}), encoding="utf-8")

    with pytest.raises(ValueError, match="enable_self_heal"):
        Settings.from_json_file(path)


def test_invalid_settings_are_rejected():
    with pytest.raises(ValueError):
        Settings(_env_file=None, max_self_heal_attempts=-1)


def test_get_llm_requires_api_key():
    config = Settings(_env_file=None, llm_provider="anthropic", anthropic_api_key=None)

    with pytest.raises(ReasoningConfigError, match="API key"):
        get_llm(config)


def test_get_llm_rejects_unknown_provider():
    with pytest.raises(ReasoningConfigError, match="Unsupported provider"):
        get_llm(Settings(_env_file=None), provider="nova")


def test_disabled_reasoning_never_calls_a_model():
    client = ReasoningClient.from_settings(Settings(_env_file=None, reasoning_enabled=False))

    reply = asyncio.run(client.ask("anything"))

    assert not client.available
    assert not reply.ok
    with pytest.raises(RuntimeError):
        asyncio.run(client.complete("anything"))


def test_complete_joins_content_blocks():
    llm = SimpleNamespace(ainvoke=AsyncMock(return_value=SimpleNamespace(
        content=[{"type": "text", "text": '{"actionType": '}, {"type": "text", "text": '"noop"}'}]
    )))

    text = asyncio.run(ReasoningClient(llm=llm).complete("prompt"))

    assert text == '{"actionType": "noop"}'
    messages = llm.ainvoke.await_args.args[0]
    assert messages[-1].content == "prompt"


def test_parse_json_object_variants():
    assert parse_json_object('{"a": 1}') == Recovered(fields={"a": 1})
    assert parse_json_object('text {"a": 1} text').salvaged is True
    assert isinstance(parse_json_object(""), Unrecoverable)
    assert parse_json_object("[1, 2]").reason == "no JSON object in response"
    assert parse_json_object("{not json}").reason == "embedded JSON object is malformed"


def test_as_text_list():
    assert as_text_list(["a", 1, None, "b"]) == ["a", "b"]
    assert as_text_list("a") == []
