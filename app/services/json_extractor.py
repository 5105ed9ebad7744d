"""Recover JSON payloads from free-form model replies."""
from __future__ import annotations

import json
import logging
import re
from typing import Any

from app.services.errors import JSONExtractionError


logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```json\s*([\s\S]*?)\s*```", re.IGNORECASE)


def extract_json(text: str) -> Any:
    """
    Parse a model reply into a JSON value.

    Tries, in order:
    1. the whole string,
    2. the body of the first ```json fenced block,
    3. the span from the first ``{`` to the last ``}``.

    Raises:
        JSONExtractionError: if none of the candidates parses. The last
        decoder error is included in the message.
    """
    if not isinstance(text, str) or not text.strip():
        raise JSONExtractionError("No valid JSON found: response is empty")

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        last_error: json.JSONDecodeError = exc

    match = _FENCED_JSON.search(text)
    if match:
        try:
            logger.debug("Parsing JSON from fenced code block")
            return json.loads(match.group(1))
        except json.JSONDecodeError as exc:
            last_error = exc

    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        try:
            logger.debug("Parsing JSON from brace span [%d:%d]", start, end + 1)
            return json.loads(text[start:end + 1])
        except json.JSONDecodeError as exc:
            last_error = exc

    raise JSONExtractionError(f"No valid JSON found in model response ({last_error.msg})")
