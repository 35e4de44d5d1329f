"""
Run Routes

Endpoints for executing test suites and reading past runs.
"""
import logging
from typing import AsyncIterator, List, Optional
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from webtest_agent.agent.runner import AgentRunner
from webtest_agent.llm import ReasoningConfigError
from webtest_agent.views import RunSummary
from api.storage.run_storage import create_run, get_run_record, list_run_records, update_run

logger = logging.getLogger(__name__)
router = APIRouter()


async def get_runner() -> AsyncIterator[AgentRunner]:
    """
    Runner for one request, built from the module settings and closed
    once the request is done

    Raises:
        HTTPException: 500 when the runner cannot be configured
    """
    try:
        runner = AgentRunner()
    except (ReasoningConfigError, ValueError) as e:
        logger.error(f"Run configuration error: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    try:
        yield runner
    finally:
        await runner.aclose()


class RunRequest(BaseModel):
    """Request model for running a suite"""
    definitions: List[str] = Field(default_factory=list, description="Test definition texts")
    tests_dir: Optional[str] = Field(default=None, description="Directory of *.txt definitions, used when no definitions are given")


class RunResponse(BaseModel):
    """Response model for a run record"""
    id: str
    status: str
    started_at: str
    ended_at: Optional[str] = None
    summaries: List[RunSummary] = Field(default_factory=list)
    parse_errors: List[str] = Field(default_factory=list)
    error: Optional[str] = None


@router.post("/runs", response_model=RunResponse)
async def create_suite_run(request: RunRequest, runner: AgentRunner = Depends(get_runner)):
    """
    Execute a test suite

    Definitions are parsed first; a request whose definitions all fail to
    parse is rejected with 400. Otherwise the parseable tests run
    sequentially and the stored run record is returned.
    """
    run = create_run()
    run_id = run["id"]

    try:
        if request.definitions:
            tests = runner.parse_definitions(request.definitions)
            if not tests:
                update_run(run_id, status="failed", parse_errors=list(runner.parse_errors), error="No valid test definitions")
                raise HTTPException(
                    status_code=400,
                    detail={"message": "No valid test definitions", "parse_errors": runner.parse_errors},
                )
            summaries = await runner.run(tests, run_id=run_id)
        else:
            summaries = await runner.run_from_directory(request.tests_dir, run_id=run_id)

        run = update_run(
            run_id,
            status="completed",
            summaries=summaries,
            parse_errors=list(runner.parse_errors),
        )
        return RunResponse(**run)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error running suite: {e}")
        update_run(run_id, status="failed", error=str(e))
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/runs", response_model=List[RunResponse])
async def list_suite_runs():
    """All stored runs"""
    return [RunResponse(**run) for run in list_run_records()]


@router.get("/runs/{run_id}", response_model=RunResponse)
async def get_suite_run(run_id: str):
    """One stored run"""
    run = get_run_record(run_id)
    if run is None:
        raise HTTPException(status_code=404, detail=f"Run {run_id} not found")
    return RunResponse(**run)
