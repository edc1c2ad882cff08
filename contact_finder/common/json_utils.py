"""
JSON utilities for provider response parsing.

Provider answers are free text that usually, but not always, embed a JSON
object: wrapped in markdown fences, preceded by prose, or slightly malformed
(single quotes, trailing commas, unquoted keys).

Uses the json-repair library as a fallback when json.loads() fails.
"""

import json
from typing import Any, Optional

from json_repair import repair_json


def strip_markdown_blocks(text: str) -> str:
    """
    Remove markdown code block wrappers from text.

    Handles ```json ... ```, bare ``` ... ``` and surrounding whitespace.
    """
    result = text.strip()

    if result.startswith("```json"):
        result = result[7:]
    elif result.startswith("```"):
        result = result[3:]

    if result.endswith("```"):
        result = result[:-3]

    return result.strip()


def find_first_object_block(text: str) -> Optional[str]:
    """
    Return the first balanced ``{...}`` block in text, or None.

    Braces inside JSON string literals (and escaped quotes within them) do not
    count towards the balance. An opening brace that is never closed yields
    the remainder of the text so that repair can still be attempted.

    Example:
        >>> find_first_object_block('Sure! {"a": {"b": "}"}} trailing {"c": 1}')
        '{"a": {"b": "}"}}'
    """
    start = text.find("{")
    if start < 0:
        return None

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start:index + 1]

    return text[start:]


def decode_json_object(block: str) -> Any:
    """
    Decode a JSON object string, repairing it when strict decoding fails.

    Returns whatever the decoder produced (normally a dict).

    Raises:
        ValueError: If the block cannot be decoded or repaired
    """
    try:
        return json.loads(block)
    except json.JSONDecodeError:
        pass  # Fall through to repair

    repaired = repair_json(block, return_objects=True)
    if isinstance(repaired, str):
        # Older json-repair releases hand back a string
        if not repaired.strip():
            raise ValueError(f"Unrepairable JSON block: {block[:200]}")
        return json.loads(repaired)
    if repaired in ("", None):
        raise ValueError(f"Unrepairable JSON block: {block[:200]}")
    return repaired


def parse_llm_json(text: str) -> Any:
    """
    Parse the first JSON object found in a provider response.

    Args:
        text: Raw provider response text that may contain JSON

    Returns:
        The decoded object

    Raises:
        ValueError: If the text is empty, contains no object, or the object
            cannot be decoded or repaired

    Example:
        >>> parse_llm_json('```json\\n{"leaders": []}\\n```')
        {'leaders': []}
        >>> parse_llm_json("Here you go: {'leaders': [],}")
        {'leaders': []}
    """
    if not text or not text.strip():
        raise ValueError("Empty input: no JSON content to parse")

    block = find_first_object_block(strip_markdown_blocks(text))
    if block is None:
        raise ValueError(f"No JSON object found in text: {text[:200]}")

    return decode_json_object(block)
