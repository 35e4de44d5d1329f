"""
LangGraph Nodes for the Test Run Workflow

- plan: build the ExecutionPlan for the next test
- act: execute one plan step (observe, think, act, retry)
- analyze: classify the root cause of a failed step
- finalize: close the current test with a RunSummary
- report: fan the summaries out to every reporter

Nodes carry no components in the state; each looks up its runner in the
run registry by run_id.
"""
from .plan import plan_node
from .act import act_node
from .analyze import analyze_node
from .report import finalize_node, report_node

__all__ = [
	"plan_node",
	"act_node",
	"analyze_node",
	"finalize_node",
	"report_node",
]
