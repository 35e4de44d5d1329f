"""Agent module - planning, step execution and run orchestration"""
from .executor import StepExecutor
from .login_detector import LoginDetector
from .planner import TestPlanner
from .runner import AgentRunner
from .thinker import PlanDecision, Thinker

__all__ = [
	'AgentRunner',
	'LoginDetector',
	'PlanDecision',
	'StepExecutor',
	'TestPlanner',
	'Thinker',
]
