"""
Reasoning Client

Thin wrapper around a LangChain chat model: one text prompt in, free-form text
out. No schema is enforced here; callers validate the reply themselves.
"""
import logging
from typing import Any, Optional

from langchain_core.messages import HumanMessage, SystemMessage
from pydantic import BaseModel

from webtest_agent.config import Settings, settings as default_settings
from webtest_agent.llm import get_llm

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are the reasoning engine of an autonomous web UI testing agent. Reply with JSON only."


class ReasoningReply(BaseModel):
    """Reply variant: text on success, error on any failure"""
    text: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ReasoningClient:
    """
    Reasoning backend client

    Built without a model when reasoning is disabled; every reply is then an
    error and callers fall back to their heuristics.
    """

    def __init__(self, llm: Optional[Any] = None, system_prompt: str = SYSTEM_PROMPT):
        self.llm = llm
        self.system_prompt = system_prompt

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "ReasoningClient":
        """
        Create a client from settings

        Raises:
            ReasoningConfigError: If reasoning is enabled but credentials are missing
        """
        config = config or default_settings
        if not config.reasoning_enabled:
            logger.info("Reasoning backend disabled - heuristic planning only")
            return cls(llm=None)
        return cls(llm=get_llm(config))

    @property
    def available(self) -> bool:
        return self.llm is not None

    async def complete(self, prompt: str) -> str:
        """
        Send a prompt and return the reply text

        Raises:
            RuntimeError: If no model is configured
            Exception: Whatever the provider's transport raises
        """
        if self.llm is None:
            raise RuntimeError("Reasoning backend is not configured")

        messages = [
            SystemMessage(content=self.system_prompt),
            HumanMessage(content=prompt),
        ]
        logger.debug(f"Sending reasoning prompt ({len(prompt)} chars)")
        response = await self.llm.ainvoke(messages)
        content = response.content if hasattr(response, "content") else response

        # Some providers return a list of content blocks
        if isinstance(content, list):
            content = "".join(
                block.get("text", "") if isinstance(block, dict) else str(block)
                for block in content
            )
        text = str(content).strip()
        logger.debug(f"Reasoning reply received ({len(text)} chars)")
        return text

    async def ask(self, prompt: str) -> ReasoningReply:
        """Like complete(), but failures come back as a ReasoningReply with an error"""
        if self.llm is None:
            return ReasoningReply(error="reasoning backend disabled")
        try:
            return ReasoningReply(text=await self.complete(prompt))
        except Exception as e:
            return ReasoningReply(error=f"{type(e).__name__}: {e}")
