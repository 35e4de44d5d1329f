"""
LangGraph Workflow Definition

Creates the test run workflow with nodes and conditional edges.
"""
import logging
from typing import Literal, Any
from langgraph.graph import StateGraph, START, END
from webtest_agent.state import RunState
from webtest_agent.nodes import plan_node, act_node, analyze_node, finalize_node, report_node
from webtest_agent.utils.run_registry import get_run

logger = logging.getLogger(__name__)


def has_tests(state: RunState) -> Literal["plan", "report"]:
    """Router at START: nothing to plan for an empty suite"""
    if state.get("test_index", 0) < len(state.get("tests", [])):
        return "plan"
    logger.warning("No tests to execute")
    return "report"


def has_steps(state: RunState) -> Literal["act", "finalize"]:
    """Router after plan (and after analyze): next step or close the test"""
    plan = state.get("plan")
    if plan is not None and state.get("step_index", 0) < len(plan.steps):
        return "act"
    return "finalize"


def after_act(state: RunState) -> Literal["analyze", "act", "finalize"]:
    """
    Router after act

    Returns:
        "analyze" when the step failed and failure analysis is enabled,
        otherwise "act" while steps remain, else "finalize"
    """
    results = state.get("step_results", [])
    if results and results[-1].status == "FAILED":
        runner = get_run(state["run_id"])
        if runner is not None and runner.settings.enable_failure_analysis:
            return "analyze"
    return has_steps(state)


def more_tests(state: RunState) -> Literal["plan", "report"]:
    """Router after finalize: next test or the reporters"""
    if state.get("test_index", 0) < len(state.get("tests", [])):
        return "plan"
    return "report"


def create_run_workflow() -> Any:
    """
    Create the test run workflow

    Architecture:
    - START → PLAN → ACT ⟷ ANALYZE → FINALIZE → PLAN (next test) | REPORT → END
    - Strictly sequential: one step at a time, one test at a time

    Returns:
        Compiled LangGraph workflow
    """
    logger.info("Creating test run workflow")

    workflow = StateGraph(RunState)

    workflow.add_node("plan", plan_node)
    workflow.add_node("act", act_node)
    workflow.add_node("analyze", analyze_node)
    workflow.add_node("finalize", finalize_node)
    workflow.add_node("report", report_node)

    workflow.add_conditional_edges(
        START,
        has_tests,
        {
            "plan": "plan",
            "report": "report",
        }
    )

    workflow.add_conditional_edges(
        "plan",
        has_steps,
        {
            "act": "act",
            "finalize": "finalize",
        }
    )

    workflow.add_conditional_edges(
        "act",
        after_act,
        {
            "analyze": "analyze",
            "act": "act",
            "finalize": "finalize",
        }
    )

    workflow.add_conditional_edges(
        "analyze",
        has_steps,
        {
            "act": "act",
            "finalize": "finalize",
        }
    )

    workflow.add_conditional_edges(
        "finalize",
        more_tests,
        {
            "plan": "plan",
            "report": "report",
        }
    )

    workflow.add_edge("report", END)

    compiled_workflow = workflow.compile()
    logger.info("Workflow created successfully")
    return compiled_workflow


def visualize_workflow(workflow=None, output_file: str = "workflow_graph.png"):
    """
    Visualize the run workflow graph.

    Args:
        workflow: Compiled workflow (if None, creates new one)
        output_file: Path to save PNG image

    Returns:
        PNG bytes, the Mermaid source when PNG rendering is unavailable, or None
    """
    if workflow is None:
        workflow = create_run_workflow()

    try:
        graph = workflow.get_graph()

        mermaid_diagram = graph.draw_mermaid()
        logger.info(f"Generated Mermaid diagram ({len(mermaid_diagram)} chars)")

        # PNG rendering goes through mermaid.ink
        try:
            png_bytes = graph.draw_mermaid_png()
            if output_file:
                with open(output_file, "wb") as f:
                    f.write(png_bytes)
                logger.info(f"✅ Workflow graph saved to: {output_file}")
            return png_bytes
        except Exception as e:
            logger.warning(f"Could not generate PNG: {e}")
            logger.info("Mermaid diagram:")
            print(mermaid_diagram)
            return mermaid_diagram

    except Exception as e:
        logger.error(f"Could not visualize workflow: {e}")
        return None
