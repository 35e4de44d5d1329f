"""
Pydantic models for the web test agent

Parsed tests, execution plans, observations, planned actions and results.
Value types are frozen; a new observation supersedes an old one, it never
mutates it.
"""
from typing import List, Literal, Optional

from pydantic import AliasGenerator, BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

StepStatus = Literal["PASSED", "FAILED", "SOFT_FAILED", "SKIPPED"]
ActionType = Literal["navigate", "click", "type", "select", "assert", "noop"]
RootCauseClass = Literal[
	"Locator/UI change",
	"Timing/Flakiness",
	"Data/Test setup",
	"Business rule",
	"Environment/Backend",
	"Permissions/Auth",
	"Blocking UI",
]

ACTION_TYPES = ("navigate", "click", "type", "select", "assert", "noop")
ROOT_CAUSE_CLASSES = (
	"Locator/UI change",
	"Timing/Flakiness",
	"Data/Test setup",
	"Business rule",
	"Environment/Backend",
	"Permissions/Auth",
	"Blocking UI",
)

# Observation payloads may arrive camelCase (domSnapshot, consoleLogs); output stays snake_case
SNAPSHOT_CONFIG = ConfigDict(
	frozen=True,
	alias_generator=AliasGenerator(validation_alias=to_camel),
	populate_by_name=True,
)


class ParsedTestStep(BaseModel):
	"""One numbered step as authored in a test definition"""
	model_config = ConfigDict(frozen=True)

	index: int
	description: str


class ParsedTest(BaseModel):
	"""A test definition after parsing"""
	model_config = ConfigDict(frozen=True)

	id: str
	title: str
	url: Optional[str] = None
	preconditions: List[str] = Field(default_factory=list)
	steps: List[ParsedTestStep] = Field(default_factory=list)
	assertions: List[str] = Field(default_factory=list)
	tags: List[str] = Field(default_factory=list)


class ExecutionPlanStep(BaseModel):
	"""A step ready for execution, with derived metadata"""
	model_config = ConfigDict(frozen=True)

	id: str
	label: str
	description: str
	expected_outcome: Optional[str] = None
	possible_locators: List[str] = Field(default_factory=list)
	assertion_hooks: List[str] = Field(default_factory=list)


class ExecutionPlan(BaseModel):
	"""Ordered steps for one test; step order is execution order"""
	model_config = ConfigDict(frozen=True)

	test: ParsedTest
	steps: List[ExecutionPlanStep] = Field(default_factory=list)


class LocatorCandidate(BaseModel):
	"""A (strategy, value) pair able to resolve a UI element"""
	model_config = ConfigDict(frozen=True)

	strategy: str
	value: str

	@property
	def key(self) -> tuple:
		return (self.strategy, self.value)

	def as_locator(self) -> str:
		"""Locator string handed to the automation backend"""
		return f"{self.strategy}={self.value}"

	def as_token(self) -> str:
		"""Token form used inside planned actions"""
		return f"{self.strategy}:{self.value}"


class ConsoleLogEntry(BaseModel):
	model_config = SNAPSHOT_CONFIG

	type: Literal["log", "warn", "error"] = "log"
	message: str = ""
	timestamp: float = 0


class NetworkEvent(BaseModel):
	model_config = SNAPSHOT_CONFIG

	url: str
	method: str = "GET"
	status: int = 0
	timestamp: float = 0
	error_text: Optional[str] = None


class ObservedState(BaseModel):
	"""Snapshot of page state at one instant"""
	model_config = SNAPSHOT_CONFIG

	url: str = "about:blank"
	title: str = ""
	dom_snapshot: str = ""
	aria_snapshot: str = ""
	visible_text: List[str] = Field(default_factory=list)
	console_logs: List[ConsoleLogEntry] = Field(default_factory=list)
	network_events: List[NetworkEvent] = Field(default_factory=list)
	timestamp: float = 0


class PlannedAction(BaseModel):
	"""The decided next operation for a step"""
	model_config = ConfigDict(frozen=True)

	action_type: ActionType
	target_description: str
	candidate_locators: List[str] = Field(default_factory=list)
	expected_outcome: Optional[str] = None
	input_value: Optional[str] = None


class ActionOutcome(BaseModel):
	"""Result of one action attempt against the automation backend"""
	success: bool
	error_message: Optional[str] = None


class FailureAnalysis(BaseModel):
	"""Root-cause classification attached to a failed step"""
	model_config = ConfigDict(frozen=True)

	root_cause_class: RootCauseClass
	confidence: float = Field(ge=0.0, le=1.0)
	short_reason: str
	detailed_analysis: List[str] = Field(default_factory=list)
	suggested_next_actions: List[str] = Field(default_factory=list)


class StepResult(BaseModel):
	"""Outcome of executing one plan step"""
	model_config = ConfigDict(frozen=True)

	step: ExecutionPlanStep
	status: StepStatus
	action_logs: List[str] = Field(default_factory=list)
	observed_state: ObservedState
	self_healing_attempts: int = 0
	error_message: Optional[str] = None
	failure_analysis: Optional[FailureAnalysis] = None


class RunSummary(BaseModel):
	"""Per-test aggregate consumed by reporters"""
	model_config = ConfigDict(frozen=True)

	test_id: str
	title: str
	steps: List[StepResult] = Field(default_factory=list)
	tags: List[str] = Field(default_factory=list)

	@computed_field
	@property
	def status(self) -> StepStatus:
		"""PASSED iff every step passed"""
		if all(result.status == "PASSED" for result in self.steps):
			return "PASSED"
		return "FAILED"
