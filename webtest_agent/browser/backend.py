"""
Automation Backend capability

The agent only needs two operations from a browser-automation backend:
observe the page and perform one action on a locator. Both may suspend and
always terminate; timeouts are the backend's responsibility. aclose()
releases whatever the backend holds (connections, sessions).
"""
import logging
import time
from typing import Any, Dict, List, Optional

from typing_extensions import Protocol, runtime_checkable

from webtest_agent.views import ActionOutcome, ObservedState

logger = logging.getLogger(__name__)


@runtime_checkable
class AutomationBackend(Protocol):
    """Capability interface consumed by the step executor"""

    async def observe(self) -> ObservedState:
        ...

    async def perform_action(self, locator: str, action: str, value: Optional[str] = None) -> ActionOutcome:
        ...

    async def aclose(self) -> None:
        ...


class ScaffoldBackend:
    """
    In-process backend that records intents instead of driving a browser

    Every action succeeds except a navigation without destination, which is
    rejected with a descriptive error. Useful for dry runs and CI.
    """

    def __init__(self, start_url: str = "about:blank"):
        self.current_url = start_url
        self.actions: List[Dict[str, Any]] = []

    async def observe(self) -> ObservedState:
        return ObservedState(
            url=self.current_url,
            title="Placeholder Page",
            dom_snapshot="<html></html>",
            aria_snapshot="{}",
            visible_text=[],
            console_logs=[],
            network_events=[],
            timestamp=time.time() * 1000,
        )

    async def perform_action(self, locator: str, action: str, value: Optional[str] = None) -> ActionOutcome:
        self.actions.append({"locator": locator, "action": action, "value": value})

        if action == "navigate":
            if not value:
                return ActionOutcome(success=False, error_message="Navigation missing destination URL")
            self.current_url = value

        logger.debug(f"Scaffold backend recorded {action} on {locator or '(no locator)'}")
        return ActionOutcome(success=True)

    async def aclose(self) -> None:
        """Nothing to release"""
        return None
