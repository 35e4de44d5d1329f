"""
Agent Runner - wires the components of one run and drives the workflow

One runner owns one planner, one locator cache, one thinker, one step
executor, one failure analyzer, one login detector and the reporters. The
LangGraph workflow reaches them through the run registry.
"""
import logging
import uuid
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from webtest_agent.agent.executor import StepExecutor
from webtest_agent.agent.login_detector import LoginDetector
from webtest_agent.agent.planner import TestPlanner
from webtest_agent.agent.thinker import Thinker
from webtest_agent.analysis.failure_analyzer import FailureAnalyzer
from webtest_agent.browser import AutomationBackend, create_backend
from webtest_agent.config import Settings, settings as default_settings
from webtest_agent.llm.reasoning_client import ReasoningClient
from webtest_agent.locators import LocatorStrategy, SelfHealingLocator
from webtest_agent.reporting import Reporter, default_reporters
from webtest_agent.state import create_initial_state, recursion_limit_for
from webtest_agent.utils.run_registry import register_run, unregister_run
from webtest_agent.utils.definition_parser import TestDefinitionError, TestParser
from webtest_agent.views import ParsedTest, RunSummary
from webtest_agent.workflow import create_run_workflow

logger = logging.getLogger(__name__)


class AgentRunner:
    """Runs parsed test definitions end to end"""

    def __init__(
        self,
        config: Optional[Settings] = None,
        backend: Optional[AutomationBackend] = None,
        reasoning: Optional[ReasoningClient] = None,
        reporters: Optional[Sequence[Reporter]] = None,
    ):
        """
        Initialize the runner

        Args:
            config: Run settings (module settings when omitted)
            backend: Automation backend (selected from settings when omitted)
            reasoning: Reasoning client (built from settings when omitted)
            reporters: Reporters to fan out to (the four file reporters when omitted)

        Raises:
            ReasoningConfigError: If reasoning is enabled but not configured
        """
        self.settings = config or default_settings
        self.reasoning = reasoning or ReasoningClient.from_settings(self.settings)
        self._owns_backend = backend is None
        self.backend = backend or create_backend(self.settings)
        self.reporters: List[Reporter] = list(reporters) if reporters is not None else default_reporters()

        locator_strategy = LocatorStrategy()
        self.parser = TestParser()
        self.planner = TestPlanner()
        self.self_healing_locator = SelfHealingLocator(locator_strategy)
        self.thinker = Thinker(self.reasoning, locator_strategy)
        self.executor = StepExecutor(self.backend, self.thinker, self.self_healing_locator, self.settings)
        self.failure_analyzer = FailureAnalyzer(self.reasoning)
        self.login_detector = LoginDetector()

        self.parse_errors: List[str] = []
        self._workflow = None

    @classmethod
    def from_config(cls, path: Union[str, Path], **kwargs) -> "AgentRunner":
        """Runner configured from a JSON run configuration file"""
        return cls(Settings.from_json_file(path), **kwargs)

    async def aclose(self) -> None:
        """Release the automation backend when this runner created it"""
        if self._owns_backend:
            await self.backend.aclose()

    async def __aenter__(self) -> "AgentRunner":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    @property
    def workflow(self):
        if self._workflow is None:
            self._workflow = create_run_workflow()
        return self._workflow

    async def run_from_directory(
        self,
        tests_dir: Optional[Union[str, Path]] = None,
        run_id: Optional[str] = None,
    ) -> List[RunSummary]:
        """
        Parse every *.txt definition in a directory (name order) and run them

        Files that fail to parse are skipped and recorded in parse_errors.
        """
        directory = Path(tests_dir or self.settings.tests_dir)
        tests: List[ParsedTest] = []
        for path in sorted(directory.glob("*.txt")):
            try:
                tests.append(self.parser.parse_file(path))
            except (TestDefinitionError, OSError, UnicodeDecodeError) as e:
                self._record_parse_error(str(path), e)

        logger.info(f"Loaded {len(tests)} test(s) from {directory}")
        return await self.run(tests, run_id=run_id)

    def parse_definitions(self, definitions: Iterable[str]) -> List[ParsedTest]:
        """Parse in-memory definitions; failures are skipped and recorded in parse_errors"""
        tests: List[ParsedTest] = []
        for position, text in enumerate(definitions, start=1):
            try:
                tests.append(self.parser.parse(text))
            except TestDefinitionError as e:
                self._record_parse_error(f"definition #{position}", e)
        return tests

    async def run_definitions(self, definitions: Iterable[str], run_id: Optional[str] = None) -> List[RunSummary]:
        """Parse in-memory definitions and run the ones that parse"""
        return await self.run(self.parse_definitions(definitions), run_id=run_id)

    async def run(self, tests: Sequence[ParsedTest], run_id: Optional[str] = None) -> List[RunSummary]:
        """
        Execute parsed tests sequentially and write the reports

        Args:
            tests: Parsed tests, executed in order
            run_id: Registry key for this run (generated when omitted)

        Returns:
            One RunSummary per test
        """
        run_id = run_id or str(uuid.uuid4())
        tests = list(tests)
        register_run(run_id, self)
        try:
            final_state = await self.workflow.ainvoke(
                create_initial_state(run_id, tests),
                config={"recursion_limit": recursion_limit_for(tests)},
            )
        finally:
            unregister_run(run_id)

        return list(final_state.get("summaries", []))

    def _record_parse_error(self, source: str, error: Exception) -> None:
        message = f"{source}: {error}"
        logger.error(f"Skipping test definition {message}")
        self.parse_errors.append(message)
