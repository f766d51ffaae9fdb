"""
AI Response Parsing Module
==========================
Recovers the analysis JSON object from a language model's text reply.

Recovery order:
1. The whole (trimmed) reply is a JSON object.
2. The first ``` or ```json fenced block in the reply.
3. As a last resort, a ```json block quoted after "Raw response:" inside the
   error message the model client raised, when the caller passes one in.

The parsed object must carry a top-level "analysis" object; anything else
is an AIResponseParseError, which callers treat as recoverable (retry or
fall back to manual-only scoring).
"""

import json
import logging
import re
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)```")
_RAW_RESPONSE_BLOCK = re.compile(r"Raw response: ```json\s*([\s\S]*?)\s*```")


class AIResponseParseError(ValueError):
    """The model reply could not be turned into an analysis object."""

    def __init__(self, message: str, raw_response: Optional[str] = None):
        super().__init__(message)
        self.raw_response = raw_response


def extract_json_text(response_text: str) -> str:
    """
    The JSON portion of a reply.

    Raises:
        AIResponseParseError: if the reply is empty or has no JSON object
    """
    if not response_text or not response_text.strip():
        raise AIResponseParseError('Empty response from language model', response_text)

    trimmed = response_text.strip()
    if trimmed.startswith('{'):
        return trimmed

    match = _FENCED_BLOCK.search(trimmed)
    if match and match.group(1).strip():
        logger.debug("Extracted JSON from code block")
        return match.group(1).strip()

    raise AIResponseParseError('Response is not in JSON format', response_text)


def salvage_from_error(error_text: str) -> Optional[Dict[str, Any]]:
    """JSON object quoted as 'Raw response: ```json ...```' in an error message, if any."""
    match = _RAW_RESPONSE_BLOCK.search(error_text or '')
    if not match:
        return None
    try:
        data = json.loads(match.group(1).strip())
    except json.JSONDecodeError as e:
        logger.error(f"Failed second attempt to parse JSON: {e}")
        return None
    return data if isinstance(data, dict) else None


def validate_analysis(data: Any, raw_response: Optional[str] = None) -> Dict[str, Any]:
    """
    Check the parsed object has a top-level "analysis" object.

    Raises:
        AIResponseParseError: otherwise
    """
    if not isinstance(data, dict) or not isinstance(data.get('analysis'), dict):
        raise AIResponseParseError('Invalid response format: missing "analysis" object', raw_response)
    return data


def parse_ai_response(response_text: str, error_text: Optional[str] = None) -> Dict[str, Any]:
    """
    Parse and validate a model reply.

    Args:
        response_text: Raw reply text (may be empty when the call failed)
        error_text: Message of the error raised by the model client, if
            any; some clients quote the reply they rejected in it

    Returns:
        The parsed payload, untouched

    Raises:
        AIResponseParseError: if no valid analysis object can be recovered
    """
    try:
        data = json.loads(extract_json_text(response_text))
    except (AIResponseParseError, json.JSONDecodeError) as e:
        logger.error(f"Error parsing model response as JSON: {e}")
        data = salvage_from_error(error_text) if error_text else None
        if data is None:
            raise AIResponseParseError('Failed to parse AI response as JSON', response_text) from e
        logger.info("Recovered analysis JSON from error context")

    return validate_analysis(data, response_text)
