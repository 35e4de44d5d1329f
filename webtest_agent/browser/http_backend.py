"""
HTTP Automation Backend

Client for a remote browser-automation service. The service owns the real
browser; this client only forwards observe and action requests:

    POST {endpoint}/observe  -> ObservedState JSON
    POST {endpoint}/actions  -> {"success": bool, "error": str | null}

Timeout values from the run configuration travel with every action as hints.
"""
import logging
from typing import Any, Dict, Optional
from urllib.parse import urljoin

import httpx
from pydantic import ValidationError

from webtest_agent.config import Timeouts
from webtest_agent.views import ActionOutcome, ObservedState

logger = logging.getLogger(__name__)


class AutomationBackendError(Exception):
    """Exception raised when the automation service cannot be reached or replies garbage."""
    pass


class HttpAutomationBackend:
    """
    Automation backend talking to a remote service over HTTP.

    Action failures of any kind come back as a failed ActionOutcome so the
    executor's self-healing loop can try the next candidate. Observation
    failures raise AutomationBackendError; the run cannot continue blind.
    """

    def __init__(
        self,
        endpoint: str,
        api_key: Optional[str] = None,
        timeouts: Optional[Timeouts] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the backend

        Args:
            endpoint: Base URL of the automation service
            api_key: Optional key sent as X-API-Key
            timeouts: Timeout hints forwarded to the service (ms)
            client: Pre-built httpx client (tests inject a MockTransport here)
        """
        if not endpoint or not endpoint.strip():
            raise ValueError("Automation endpoint is required")

        self.endpoint = endpoint.strip().rstrip("/")
        self.timeouts = timeouts or Timeouts()
        self._headers = {"Content-Type": "application/json"}
        if api_key and api_key.strip():
            self._headers["X-API-Key"] = api_key.strip()

        # Client-side ceiling: the slowest hint plus some slack for the round trip
        ceiling = max(self.timeouts.navigation, self.timeouts.element, self.timeouts.assertion) / 1000 + 5
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=ceiling, headers=self._headers)
        logger.info(f"HttpAutomationBackend initialized with endpoint: {self.endpoint}")

    def _url(self, path: str) -> str:
        return urljoin(self.endpoint + "/", path.lstrip("/"))

    async def observe(self) -> ObservedState:
        """
        Fetch the current page observation

        Raises:
            AutomationBackendError: On transport errors, non-2xx replies or invalid payloads
        """
        try:
            response = await self._client.post(self._url("/observe"), json={})
        except httpx.TimeoutException:
            raise AutomationBackendError("Observation request to automation service timed out")
        except httpx.RequestError as e:
            raise AutomationBackendError(f"Failed to connect to automation service: {str(e)}")

        if response.status_code >= 400:
            error_text = response.text[:500] if response.text else "Unknown error"
            raise AutomationBackendError(f"Observation failed: {response.status_code}. Error: {error_text}")

        try:
            return ObservedState.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise AutomationBackendError(f"Invalid observation payload: {str(e)[:500]}")

    async def perform_action(self, locator: str, action: str, value: Optional[str] = None) -> ActionOutcome:
        """Send one action; every failure is reported in the outcome, never raised"""
        if action == "navigate" and not value:
            return ActionOutcome(success=False, error_message="Navigation missing destination URL")

        payload: Dict[str, Any] = {
            "locator": locator,
            "action": action,
            "value": value,
            "timeouts": self.timeouts.model_dump(),
        }

        try:
            response = await self._client.post(self._url("/actions"), json=payload)
        except httpx.TimeoutException:
            logger.warning(f"Timeout performing {action} on {locator}")
            return ActionOutcome(success=False, error_message=f"Timed out performing {action} on {locator}")
        except httpx.RequestError as e:
            logger.warning(f"Request error performing {action}: {str(e)}")
            return ActionOutcome(success=False, error_message=f"Failed to connect to automation service: {str(e)}")

        if response.status_code >= 400:
            error_text = response.text[:500] if response.text else "Unknown error"
            return ActionOutcome(success=False, error_message=f"Automation service error {response.status_code}: {error_text}")

        try:
            data = response.json()
        except ValueError:
            return ActionOutcome(success=False, error_message="Invalid JSON response from automation service")

        if not isinstance(data, dict):
            return ActionOutcome(success=False, error_message="Unexpected response from automation service")

        success = bool(data.get("success"))
        error = data.get("error") or data.get("error_message") or data.get("errorMessage")
        if not success and not error:
            error = f"{action} failed on {locator}"
        return ActionOutcome(success=success, error_message=None if success else str(error))

    async def aclose(self) -> None:
        """Close the HTTP client this backend created; an injected client belongs to the caller"""
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()
            logger.debug("HttpAutomationBackend client closed")
