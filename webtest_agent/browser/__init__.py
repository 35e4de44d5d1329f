"""Browser module - automation backends"""
from typing import Optional

from webtest_agent.config import Settings, settings as default_settings

from .backend import AutomationBackend, ScaffoldBackend
from .http_backend import AutomationBackendError, HttpAutomationBackend


def create_backend(config: Optional[Settings] = None) -> AutomationBackend:
	"""Backend selected by settings.automation_backend"""
	config = config or default_settings
	if config.automation_backend == "http":
		return HttpAutomationBackend(
			endpoint=config.automation_endpoint,
			api_key=config.automation_api_key,
			timeouts=config.timeouts,
		)
	return ScaffoldBackend()


__all__ = [
	'AutomationBackend',
	'AutomationBackendError',
	'HttpAutomationBackend',
	'ScaffoldBackend',
	'create_backend',
]
