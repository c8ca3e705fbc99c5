"""
Recovery of JSON arrays from model replies.

Models asked for "JSON only" still wrap it in prose, fence it in markdown
or get cut off by the token limit. Each function here is one recovery stage
returning a Parsed list of raw items for the expected field; the extractor
chains them in order and stops at the first success.

Dependencies: json, re
System role: Model-output parsing for structured extraction
"""

import json
import re
from typing import Any

from study_rag.core.parsed import Parsed

FENCED_BLOCK = re.compile(r"```(?:json|JSON)?\s*(.*?)```", re.DOTALL)

_decoder = json.JSONDecoder()


def _items_for_keys(data: Any, keys: tuple[str, ...]) -> Parsed[list[Any]]:
    if isinstance(data, list):
        return Parsed.ok(data)
    if not isinstance(data, dict):
        return Parsed.fail(f"expected an object, got {type(data).__name__}")
    for key in keys:
        value = data.get(key)
        if isinstance(value, list):
            return Parsed.ok(value)
    return Parsed.fail(f"no array under {'/'.join(keys)}")


def largest_object(reply: str, keys: tuple[str, ...]) -> Parsed[list[Any]]:
    """
    Parse the span from the first "{" to the last "}" of the reply.

    Args:
        reply: Raw model reply
        keys: Accepted names of the expected field, preferred first

    Returns:
        Parsed[list]: Raw items under the first matching key
    """
    start = reply.find("{")
    end = reply.rfind("}")
    if start < 0 or end <= start:
        return Parsed.fail("no JSON object", stage="largest_object")
    try:
        data = json.loads(reply[start:end + 1])
    except json.JSONDecodeError as e:
        return Parsed.fail(f"invalid JSON: {e.msg}", stage="largest_object")
    result = _items_for_keys(data, keys)
    return Parsed(is_ok=result.is_ok, value=result.value, reason=result.reason, stage="largest_object")


def fenced_block(reply: str, keys: tuple[str, ...]) -> Parsed[list[Any]]:
    """Parse the first fenced code block holding the expected field."""
    blocks = FENCED_BLOCK.findall(reply)
    if not blocks:
        return Parsed.fail("no fenced block", stage="fenced_block")
    reasons = []
    for block in blocks:
        try:
            data = json.loads(block.strip())
        except json.JSONDecodeError as e:
            reasons.append(f"invalid JSON: {e.msg}")
            continue
        result = _items_for_keys(data, keys)
        if result.is_ok:
            return Parsed.ok(result.value, stage="fenced_block")
        reasons.append(result.reason)
    return Parsed.fail("; ".join(reasons), stage="fenced_block")


def field_array(reply: str, keys: tuple[str, ...]) -> Parsed[list[Any]]:
    """
    Salvage the complete elements of a named array.

    Locates '"<key>": [' and decodes elements one by one, so a reply cut off
    in the middle of the array still yields every element that was closed.

    Args:
        reply: Raw model reply
        keys: Accepted names of the expected field

    Returns:
        Parsed[list]: Elements decoded before the first broken one
    """
    for key in keys:
        match = re.search(rf'"{re.escape(key)}"\s*:\s*\[', reply)
        if not match:
            continue

        items: list[Any] = []
        position = match.end()
        while position < len(reply):
            while position < len(reply) and reply[position] in " \t\r\n,":
                position += 1
            if position >= len(reply) or reply[position] == "]":
                break
            try:
                item, position = _decoder.raw_decode(reply, position)
            except json.JSONDecodeError:
                break
            items.append(item)

        if items:
            return Parsed.ok(items, stage="field_array")
    return Parsed.fail("no decodable array elements", stage="field_array")
