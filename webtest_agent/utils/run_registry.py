"""
Run Registry

Keeps the graph state serializable for LangGraph: the state stores run_id
(string) and this registry maps run ids to the runner that owns the planner,
executor, analyzer and reporters for that run.
"""
import logging
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

# Global run registry - maps run_id -> runner
_RUN_REGISTRY: Dict[str, Any] = {}


def register_run(run_id: str, runner: Any) -> None:
	"""
	Register the runner executing a run

	Args:
		run_id: Unique run identifier
		runner: AgentRunner instance
	"""
	_RUN_REGISTRY[run_id] = runner
	logger.debug(f"Registered run: {run_id}")


def get_run(run_id: str) -> Optional[Any]:
	"""
	Retrieve a runner by run ID

	Args:
		run_id: Run identifier

	Returns:
		AgentRunner instance or None if not found
	"""
	runner = _RUN_REGISTRY.get(run_id)
	if runner is None:
		logger.warning(f"Run not found in registry: {run_id}")
	return runner


def unregister_run(run_id: str) -> None:
	"""Remove a run from the registry"""
	if _RUN_REGISTRY.pop(run_id, None) is not None:
		logger.debug(f"Unregistered run: {run_id}")
	else:
		logger.warning(f"Attempted to unregister non-existent run: {run_id}")


def list_runs() -> List[str]:
	"""Get list of all registered run IDs"""
	return list(_RUN_REGISTRY.keys())


def run_count() -> int:
	"""Get count of active runs"""
	return len(_RUN_REGISTRY)
