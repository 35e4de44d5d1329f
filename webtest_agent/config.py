"""
Configuration settings for the web test agent

Values come from environment variables (or a .env file). A JSON run
configuration can be loaded with Settings.from_json_file().
"""
import json
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_snake
from pydantic_settings import BaseSettings, SettingsConfigDict


class Timeouts(BaseModel):
    """Per-phase timeout hints in milliseconds (honored by the automation backend)"""
    navigation: int = 30000
    element: int = 5000
    assertion: int = 5000


class Settings(BaseSettings):
    """Application settings"""

    # API Settings
    api_title: str = "Web Test Agent API"
    api_version: str = "1.0.0"
    api_prefix: str = "/api/v1"

    # Run Settings
    base_url: str = ""
    environment: Literal["dev", "qa", "prod"] = "dev"
    timeouts: Timeouts = Field(default_factory=Timeouts)
    tests_dir: str = "tests"
    artifacts_dir: str = "artifacts"

    # Self-healing
    max_self_heal_attempts: int = Field(default=2, ge=0)
    enable_self_healing: bool = True

    # Login detection
    enable_manual_login_pause: bool = False
    manual_login_pause_seconds: float = 30.0

    # Failure analysis / artifacts
    enable_failure_analysis: bool = True
    capture_screenshots: Literal["onFailure", "onStep", "none"] = "onFailure"

    # Automation backend
    automation_backend: Literal["scaffold", "http"] = "scaffold"
    automation_endpoint: str = "http://localhost:3000"
    automation_api_key: Optional[str] = None

    # LLM Settings (reasoning backend)
    reasoning_enabled: bool = True
    llm_provider: str = "openai"  # openai, anthropic, gemini
    llm_model: str = "gpt-4.1-mini"
    llm_temperature: float = 0.2
    max_output_tokens: int = 512

    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore"
    )

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "Settings":
        """
        Load a run configuration from a JSON file

        Keys present in the file override environment values. Keys may be
        snake_case or camelCase (baseUrl, maxSelfHealAttempts); a "novaLite"
        block maps onto the reasoning settings. Unknown keys are rejected.

        Args:
            path: Path to the JSON configuration

        Returns:
            Settings instance

        Raises:
            ValueError: If the file holds unknown keys or invalid values
        """
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Run configuration {path} must be a JSON object")
        return cls(**normalize_config_keys(data))


# Reasoning block of a run configuration -> Settings field
_REASONING_KEYS = {
    "model_id": "llm_model",
    "max_tokens": "max_output_tokens",
    "temperature": "llm_temperature",
}


def normalize_config_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    """Snake-case the keys of a JSON run configuration and check them against the Settings fields"""
    normalized: Dict[str, Any] = {}
    for key, value in data.items():
        name = to_snake(key)
        if name == "nova_lite" and isinstance(value, dict):
            for sub_key, sub_value in value.items():
                field = _REASONING_KEYS.get(to_snake(sub_key))
                if field is not None:
                    normalized[field] = sub_value
            continue
        if name == "timeouts" and isinstance(value, dict):
            value = {to_snake(sub_key): sub_value for sub_key, sub_value in value.items()}
        normalized[name] = value

    unknown = sorted(set(normalized) - set(Settings.model_fields))
    if unknown:
        raise ValueError(f"Unknown run configuration key(s): {', '.join(unknown)}")
    return normalized


settings = Settings()
