"""
LLM Integration for the reasoning backend

Supports multiple LLM providers: OpenAI, Anthropic, and Gemini.
Uses LangChain's chat model classes for each provider.
"""
import logging
from typing import Any, Optional

from webtest_agent.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)

SUPPORTED_PROVIDERS = ("openai", "anthropic", "gemini")


class ReasoningConfigError(ValueError):
    """Raised when the reasoning backend is missing credentials or is misconfigured."""
    pass


def get_api_key(config: Settings, provider: str) -> Optional[str]:
    """API key for a provider from settings"""
    return {
        "openai": config.openai_api_key,
        "anthropic": config.anthropic_api_key,
        "gemini": config.gemini_api_key,
    }.get(provider)


def get_llm(
    config: Optional[Settings] = None,
    model: Optional[str] = None,
    temperature: Optional[float] = None,
    api_key: Optional[str] = None,
    provider: Optional[str] = None,
) -> Any:  # ChatOpenAI | ChatAnthropic | ChatGoogleGenerativeAI
    """
    Get an initialized LLM instance based on provider

    Args:
        config: Settings to read defaults from (defaults to module settings)
        model: Model name override
        temperature: Temperature override
        api_key: API key override
        provider: LLM provider override (openai, anthropic, gemini)

    Returns:
        Initialized LangChain chat model

    Raises:
        ReasoningConfigError: If the provider is unknown or no API key is configured
    """
    config = config or default_settings

    provider_name = (provider or config.llm_provider or "").lower()
    model_name = model or config.llm_model
    temp = temperature if temperature is not None else config.llm_temperature

    if provider_name not in SUPPORTED_PROVIDERS:
        raise ReasoningConfigError(
            f"Unsupported provider: {provider_name or '(empty)'}. "
            f"Supported providers: {', '.join(SUPPORTED_PROVIDERS)}"
        )

    key = api_key or get_api_key(config, provider_name)
    if not key:
        raise ReasoningConfigError(
            f"{provider_name.capitalize()} API key not found. "
            f"Set {provider_name.upper()}_API_KEY environment variable or disable reasoning "
            "with REASONING_ENABLED=false."
        )

    if provider_name == "openai":
        from langchain_openai import ChatOpenAI
        logger.info(f"Initializing ChatOpenAI with model: {model_name}, temperature: {temp}")
        return ChatOpenAI(
            model=model_name,
            temperature=temp,
            max_tokens=config.max_output_tokens,
            api_key=key,
        )

    if provider_name == "anthropic":
        from langchain_anthropic import ChatAnthropic
        logger.info(f"Initializing ChatAnthropic with model: {model_name}, temperature: {temp}")
        return ChatAnthropic(
            model=model_name,
            temperature=temp,
            max_tokens=config.max_output_tokens,
            api_key=key,
        )

    from langchain_google_genai import ChatGoogleGenerativeAI
    logger.info(f"Initializing ChatGoogleGenerativeAI with model: {model_name}, temperature: {temp}")
    return ChatGoogleGenerativeAI(
        model=model_name,
        temperature=temp,
        max_output_tokens=config.max_output_tokens,
        google_api_key=key,
    )
