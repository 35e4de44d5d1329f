"""
Utility functions for parsing LLM responses

Reasoning replies are free-form text expected to contain one JSON object.
parse_json_object() tries a strict parse, then the first '{' .. last '}'
substring, and otherwise gives up. Callers get a tagged variant and must still
validate every field they use.
"""
import json
import logging
from typing import Any, Dict, Iterable, List, Literal, Optional, Union

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class Recovered(BaseModel):
    """A JSON object was recovered from the reply"""
    kind: Literal["recovered"] = "recovered"
    fields: Dict[str, Any] = Field(default_factory=dict)
    salvaged: bool = False


class Unrecoverable(BaseModel):
    """No JSON object could be recovered"""
    kind: Literal["unrecoverable"] = "unrecoverable"
    reason: str


ParsedResponse = Union[Recovered, Unrecoverable]


def _loads_object(text: str) -> Optional[Dict[str, Any]]:
    try:
        value = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return None
    return value if isinstance(value, dict) else None


def parse_json_object(raw: Optional[str]) -> ParsedResponse:
    """
    Recover a JSON object from a reasoning reply

    Args:
        raw: Reply text (may be None or empty)

    Returns:
        Recovered(fields) or Unrecoverable(reason)
    """
    if not raw or not raw.strip():
        return Unrecoverable(reason="empty response")

    parsed = _loads_object(raw)
    if parsed is not None:
        return Recovered(fields=parsed)

    start = raw.find("{")
    end = raw.rfind("}")
    if start >= 0 and end > start:
        parsed = _loads_object(raw[start:end + 1])
        if parsed is not None:
            logger.debug(f"Salvaged JSON object from {len(raw)} chars of reply text")
            return Recovered(fields=parsed, salvaged=True)
        return Unrecoverable(reason="embedded JSON object is malformed")

    return Unrecoverable(reason="no JSON object in response")


def pick(fields: Dict[str, Any], *names: str) -> Any:
    """First present value among alternative key spellings (camelCase, snake_case)"""
    for name in names:
        if name in fields and fields[name] is not None:
            return fields[name]
    return None


def as_optional_text(value: Any) -> Optional[str]:
    """Scalars become text; anything else (objects, lists, blanks) is dropped"""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (str, int, float)):
        text = str(value)
        return text if text.strip() else None
    return None


def as_text_list(value: Any) -> List[str]:
    """Keep only the string entries of a list"""
    if not isinstance(value, Iterable) or isinstance(value, (str, bytes, dict)):
        return []
    return [item for item in value if isinstance(item, str)]
