"""
Validation Utilities
====================
Helpers for parsing model text and sanitizing identifiers used as file names.

Author: Gia Tenica*
*Gia Tenica is an anagram for Agentic AI. Gia is a fully autonomous AI researcher,
for more information see: https://giatenica.com
"""

import json
import os
import re
from typing import Any, Optional, Union

from loguru import logger


def sanitize_filename(filename: str, max_length: int = 255) -> str:
    """
    Sanitize a filename for safe file system operations.

    Args:
        filename: Original filename (thread ids, run ids)
        max_length: Maximum allowed length

    Returns:
        Sanitized filename
    """
    if not filename:
        return "unnamed"

    filename = os.path.basename(filename)
    filename = re.sub(r'[<>:"/\\|?*\x00-\x1f]', '', filename)
    filename = re.sub(r'\s+', '_', filename)
    filename = filename.strip('. ')

    if len(filename) > max_length:
        filename = filename[:max_length]

    if not filename:
        return "unnamed"

    return filename


def safe_json_loads(
    data: Union[str, bytes],
    default: Any = None,
    log_errors: bool = True,
) -> Any:
    """
    Safely parse JSON with error handling.

    Args:
        data: JSON string or bytes to parse
        default: Default value if parsing fails
        log_errors: Whether to log parsing errors

    Returns:
        Parsed JSON or default value
    """
    if not data:
        return default

    try:
        if isinstance(data, bytes):
            data = data.decode('utf-8')
        return json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        if log_errors:
            logger.warning(f"JSON parsing error: {e}")
        return default


def extract_json_object(text: str) -> Optional[dict]:
    """
    Pull the first JSON object out of free model text.

    Handles bare JSON, fenced ```json blocks, and JSON surrounded by prose.

    Returns:
        The parsed object, or None when no object can be parsed
    """
    if not text or not text.strip():
        return None

    fenced = re.search(r"```(?:json)?\s*(\{[\s\S]*?\})\s*```", text)
    candidates = [fenced.group(1)] if fenced else []

    json_match = re.search(r'\{[\s\S]*\}', text)
    if json_match:
        candidates.append(json_match.group())

    for candidate in candidates:
        parsed = safe_json_loads(candidate, log_errors=False)
        if isinstance(parsed, dict):
            return parsed
    return None
