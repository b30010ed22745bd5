import json
import logging
import re

from pydantic import TypeAdapter, ValidationError

logger = logging.getLogger(__name__)

# Greedy: first opening delimiter through the last closing one
OBJECT_PATTERN = re.compile(r"\{.*\}", re.DOTALL)
ARRAY_PATTERN = re.compile(r"\[.*\]", re.DOTALL)

LIST_MARKER_PATTERN = re.compile(r"^(?:[-•*]|\d+[.)])\s*")


def extract_json(text, kind='object'):
    """
    Extract the JSON object ('object') or array ('array') embedded in an LLM reply.
    Returns None if there is no such span or it does not parse. NEVER throws.
    """
    if not text or not isinstance(text, str):
        return None

    pattern = ARRAY_PATTERN if kind == 'array' else OBJECT_PATTERN
    match = pattern.search(text)
    if not match:
        return None

    try:
        return json.loads(match.group(0))
    except ValueError:
        return None


def parse_lines(text, min_length=0, limit=None):
    """Split a plain-text reply into cleaned lines (titles, hooks)."""
    lines = []
    for line in (text or '').split('\n'):
        line = LIST_MARKER_PATTERN.sub('', line.strip())
        line = line.strip('"\'').strip()
        if len(line) > min_length:
            lines.append(line)
    return lines[:limit] if limit is not None else lines


def validate_shape(data, schema):
    """Validate parsed JSON against a pydantic type; None on mismatch."""
    if data is None:
        return None
    try:
        return TypeAdapter(schema).validate_python(data)
    except ValidationError as e:
        logger.warning(f"Model output did not match {schema}: {e.error_count()} error(s)")
        return None


def structured_completion(llm, messages, schema, fallback, kind='object', unwrap=None, **params):
    """Ask the LLM for JSON and recover a validated value from its reply.

    Args:
        llm: Gateway with a ``chat(messages, **params)`` method.
        messages: System/user message pair from the prompt builder.
        schema: Type the parsed JSON must satisfy (e.g. ``List[Niche]``).
        fallback: Value returned when extraction or validation fails. A
            callable is invoked with the raw reply text.
        kind: 'object' or 'array', selecting which delimiters to look for.
        unwrap: Optional key to pull out of an object wrapper, for models that
            answer ``{"niches": [...]}`` when an array was requested.

    Returns:
        Tuple of (value, used_fallback).
    """
    content = llm.chat(messages, **params)

    data = extract_json(content, kind)
    if data is None and unwrap:
        wrapper = extract_json(content, 'object')
        if isinstance(wrapper, dict):
            data = wrapper.get(unwrap)

    value = validate_shape(data, schema)
    if value is not None:
        return value, False

    logger.warning("Could not recover structured data from model reply; serving fallback")
    if callable(fallback):
        return fallback(content), True
    return fallback, True
