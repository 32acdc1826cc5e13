"""
JSON extraction from model output.

Models wrap JSON in Markdown fences, prepend reasoning blocks or add a
sentence of prose. These helpers strip that down to the JSON text and
validate it against a typed contract.
"""

import json
import logging
import re
from typing import Any, Type, TypeVar

from pydantic import TypeAdapter, ValidationError

from .errors import ParseError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_FENCE_OPEN = re.compile(r"^\s*```(?:json|JSON)?\s*")
_FENCE_CLOSE = re.compile(r"\s*```\s*$")
_THINK_BLOCK = re.compile(r"<think>[\s\S]*?</think>", re.IGNORECASE)


def clean_json_response(text: str) -> str:
    """
    Strip code fences (```json / ```) and reasoning blocks around JSON.

    Args:
        text: Raw model output

    Returns:
        Text that should start with { or [
    """
    if not text:
        return ""

    cleaned = _THINK_BLOCK.sub("", text).strip()

    fenced = re.search(r"```(?:json|JSON)?\s*([\s\S]*?)\s*```", cleaned)
    if fenced:
        cleaned = fenced.group(1).strip()
    else:
        cleaned = _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", cleaned)).strip()

    # Leading/trailing prose around a bare object or array
    if cleaned and cleaned[0] not in "{[":
        starts = [i for i in (cleaned.find("{"), cleaned.find("[")) if i >= 0]
        if starts:
            cleaned = cleaned[min(starts):]
    if cleaned and cleaned[-1] not in "}]":
        end = max(cleaned.rfind("}"), cleaned.rfind("]"))
        if end >= 0:
            cleaned = cleaned[: end + 1]

    return cleaned


def parse_json_response(text: str) -> Any:
    """
    Parse model output as JSON.

    Raises:
        ParseError: if the cleaned text is not valid JSON
    """
    cleaned = clean_json_response(text)
    if not cleaned:
        raise ParseError("Empty model response", raw=text or "")
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON in model response: {e}", raw=text) from e


def parse_model_response(text: str, schema: Type[T]) -> T:
    """
    Parse model output and validate it against a pydantic model or type.

    Args:
        text: Raw model output
        schema: A BaseModel subclass or any type pydantic can validate (e.g. List[str])

    Returns:
        Validated instance

    Raises:
        ParseError: invalid JSON or schema mismatch
    """
    data = parse_json_response(text)
    try:
        return TypeAdapter(schema).validate_python(data)
    except ValidationError as e:
        logger.debug(f"Schema validation failed: {e}")
        raise ParseError(f"Model response did not match expected shape: {e.error_count()} errors", raw=text) from e
