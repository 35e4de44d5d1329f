"""
Thinker tests: reasoning replies, field repair and the heuristic fallback
"""
import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock

from webtest_agent.agent.thinker import Thinker, extract_url
from webtest_agent.llm.reasoning_client import ReasoningClient
from webtest_agent.views import ExecutionPlanStep, ObservedState


def make_step(description="Click the Submit button", expected_outcome=None):
    return ExecutionPlanStep(
        id="step-1",
        label="Step 1",
        description=description,
        expected_outcome=expected_outcome,
    )


def thinker_replying(text):
    llm = SimpleNamespace(ainvoke=AsyncMock(return_value=SimpleNamespace(content=text)))
    return Thinker(ReasoningClient(llm=llm)), llm


def decide(thinker, step, history=()):
    return asyncio.run(thinker.decide(step, ObservedState(), list(history)))


def test_fallback_click_without_reasoning():
    decision = decide(Thinker(), make_step())

    assert decision.source == "fallback"
    assert decision.action.action_type == "click"
    assert decision.action.candidate_locators == [
        "text:Click the Submit button",
        "role+text:Step 1",
        "data-testid:step-1",
        "text-contains:Click the Submit",
    ]
    assert decision.action.target_description == "Click the Submit button"


def test_fallback_navigate_extracts_url():
    decision = decide(Thinker(), make_step("Navigate to https://example.com/login."))

    assert decision.action.action_type == "navigate"
    assert decision.action.input_value == "https://example.com/login"
    assert decision.action.candidate_locators == []


def test_fallback_navigate_without_url_leaves_input_unset():
    decision = decide(Thinker(), make_step("navigate to the dashboard"))

    assert decision.action.action_type == "navigate"
    assert decision.action.input_value is None


def test_extract_url_strips_trailing_punctuation():
    assert extract_url("Open (https://example.com/a),") == "https://example.com/a"
    assert extract_url("no link here") is None


def test_non_json_reply_falls_back():
    thinker, _ = thinker_replying("I think you should click the button")

    decision = decide(thinker, make_step())

    assert decision.source == "fallback"
    assert decision.action.action_type == "click"
    assert decision.action.candidate_locators[0] == "text:Click the Submit button"


def test_reasoning_reply_is_used():
    thinker, llm = thinker_replying(
        '{"actionType": "type", "targetDescription": "email field", '
        '"candidateLocators": ["label:Email"], "inputValue": "user@example.com"}'
    )

    decision = decide(thinker, make_step("Type the email"), history=["navigate:login"])

    assert decision.source == "reasoning"
    assert decision.action.action_type == "type"
    assert decision.action.target_description == "email field"
    assert decision.action.candidate_locators == ["label:Email"]
    assert decision.action.input_value == "user@example.com"
    llm.ainvoke.assert_awaited_once()


def test_reply_is_salvaged_from_surrounding_text():
    thinker, _ = thinker_replying('Sure! {"actionType": "select", "inputValue": 42} Hope that helps.')

    decision = decide(thinker, make_step("Pick the quantity"))

    assert decision.source == "reasoning"
    assert decision.action.action_type == "select"
    assert decision.action.input_value == "42"


def test_invalid_fields_get_defaults():
    thinker, _ = thinker_replying(
        '{"actionType": "hover", "candidateLocators": ["text:Go", 5, null], "inputValue": {"x": 1}}'
    )

    decision = decide(thinker, make_step("Verify the banner", expected_outcome="Verify the banner"))

    assert decision.source == "reasoning"
    assert decision.action.action_type == "click"
    assert decision.action.target_description == "Verify the banner"
    assert decision.action.candidate_locators == ["text:Go"]
    assert decision.action.expected_outcome == "Verify the banner"
    assert decision.action.input_value is None


def test_reply_without_known_fields_falls_back():
    thinker, _ = thinker_replying('{"answer": 42}')

    decision = decide(thinker, make_step())

    assert decision.source == "fallback"
    assert decision.reason == "response has no recognizable action fields"


def test_backend_error_falls_back():
    llm = SimpleNamespace(ainvoke=AsyncMock(side_effect=ConnectionError("boom")))
    thinker = Thinker(ReasoningClient(llm=llm))

    decision = decide(thinker, make_step())

    assert decision.source == "fallback"
    assert "ConnectionError" in decision.reason


def test_plan_returns_the_action():
    action = asyncio.run(Thinker().plan(make_step(), ObservedState(), []))

    assert action.action_type == "click"


def test_prompt_embeds_context():
    thinker = Thinker()
    state = ObservedState(
        url="https://example.com/login",
        title="Login",
        visible_text=[f"line {i}" for i in range(30)],
    )

    prompt = thinker.build_prompt(make_step(), state, ["navigate:login", "click:text=Next"])

    assert "Step ID: step-1" in prompt
    assert "Current URL: https://example.com/login" in prompt
    assert "Page Title: Login" in prompt
    assert "line 19" in prompt
    assert "line 20" not in prompt
    assert "Previous Actions: navigate:login -> click:text=Next" in prompt


def test_prompt_without_history_says_none():
    prompt = Thinker().build_prompt(make_step(), ObservedState(), [])

    assert "Previous Actions: none" in prompt
