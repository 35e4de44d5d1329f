"""
In-Memory Run History Storage

Tracks suite runs submitted through the API.
"""
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

# Global storage - maps run_id -> run_dict
_RUNS: Dict[str, dict] = {}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def create_run(status: str = "running") -> dict:
    """Create a new run record"""
    run_id = str(uuid.uuid4())
    run = {
        "id": run_id,
        "status": status,  # running, completed, failed
        "started_at": _now(),
        "ended_at": None,
        "summaries": [],
        "parse_errors": [],
        "error": None,
    }

    _RUNS[run_id] = run
    logger.info(f"Created run: {run_id}")
    return run


def get_run_record(run_id: str) -> Optional[dict]:
    """Get run by ID"""
    return _RUNS.get(run_id)


def list_run_records() -> List[dict]:
    """All runs, oldest first"""
    return list(_RUNS.values())


def update_run(run_id: str, **updates) -> Optional[dict]:
    """Update run fields"""
    if run_id not in _RUNS:
        return None

    run = _RUNS[run_id]
    run.update(updates)

    # Auto-update ended_at if status changed to completed/failed
    if "status" in updates and updates["status"] in ["completed", "failed"]:
        if run["ended_at"] is None:
            run["ended_at"] = _now()

    return run


def clear_runs() -> None:
    """Drop every stored run"""
    _RUNS.clear()
