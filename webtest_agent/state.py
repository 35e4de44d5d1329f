"""
Run State Definition - LangGraph TypedDict state for one suite run

Only data lives here. Runtime components (backend, executor, reporters) are
looked up through the run registry by run_id.
"""
from typing import TypedDict, List, Optional
from typing_extensions import Annotated
import operator

from webtest_agent.views import ExecutionPlan, ParsedTest, RunSummary, StepResult


class RunState(TypedDict):
    """
    Run State Schema

    Fields with Annotated use reducers for accumulation.
    Fields without Annotated are replaced each step.
    """

    # ========== Run ==========
    run_id: str  # Registry key for the runner executing this run
    tests: List[ParsedTest]  # Parsed tests, in execution order

    # ========== Current Test ==========
    test_index: int  # Index into tests of the test being executed
    plan: Optional[ExecutionPlan]  # Plan of the current test
    step_index: int  # Index of the next plan step to execute
    step_results: List[StepResult]  # Results of the current test so far

    # ========== Accumulated ==========
    summaries: Annotated[List[RunSummary], operator.add]  # One per finished test

    # ========== Completion ==========
    completed: bool


def create_initial_state(run_id: str, tests: List[ParsedTest]) -> RunState:
    """
    Create initial run state

    Args:
        run_id: Registry key of the runner
        tests: Parsed tests to execute

    Returns:
        Initial RunState dictionary
    """
    return {
        "run_id": run_id,
        "tests": list(tests),
        "test_index": 0,
        "plan": None,
        "step_index": 0,
        "step_results": [],
        "summaries": [],
        "completed": False,
    }


def recursion_limit_for(tests: List[ParsedTest]) -> int:
    """Graph recursion limit covering plan/act/analyze/finalize for every step"""
    node_visits = sum(2 * len(test.steps) + 2 for test in tests)
    return node_visits + 10
