"""Best-effort JSON extraction from free-form model replies.

Models are asked for JSON but may wrap it in markdown fences, surround it
with prose, or return nothing usable. Each strategy below either returns a
decoded value or None; the first success wins.
"""

import json
import logging
import re

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json|JSON)?\s*\n?(.*?)```", re.DOTALL)

# Keys a model sometimes wraps its list in: {"leads": [...]}
_LIST_KEYS = ("leads", "results", "businesses", "items", "data")

_DECODER = json.JSONDecoder()


def _loads(text: str):
    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        return None


def _from_fence(text: str):
    for match in _FENCE_RE.finditer(text):
        value = _loads(match.group(1).strip())
        if value is not None:
            return value
    return None


def _from_whole_text(text: str):
    return _loads(text.strip())


def _scan(text: str, open_ch: str, accept):
    """Decode from each ``open_ch`` in turn; the first accepted value wins.

    ``raw_decode`` stops at the end of the value, so prose or citation
    markers after it do not matter.
    """
    idx = text.find(open_ch)
    while idx != -1:
        try:
            value, _ = _DECODER.raw_decode(text, idx)
        except ValueError:
            pass
        except RecursionError:
            logger.warning("Reply nests too deep to decode, giving up at offset %d", idx)
            return None
        else:
            if accept(value):
                return value
        idx = text.find(open_ch, idx + 1)
    return None


def _is_record_list(value) -> bool:
    # Skips citation markers like [1] that precede the real payload
    return isinstance(value, list) and (not value or any(isinstance(v, dict) for v in value))


def _from_array_bounds(text: str):
    return _scan(text, "[", _is_record_list)


def _from_object_bounds(text: str):
    return _scan(text, "{", lambda value: isinstance(value, dict))


_STRATEGIES = (_from_fence, _from_whole_text, _from_array_bounds, _from_object_bounds)


def extract_json(text: object):
    """Return the first JSON value found in ``text``, or None."""
    if not isinstance(text, str) or not text.strip():
        return None
    for strategy in _STRATEGIES:
        value = strategy(text)
        if value is not None:
            return value
    return None


def extract_json_array(text: object) -> list:
    """Extract a list of records. Garbage yields []."""
    value = extract_json(text)
    if isinstance(value, list):
        return value
    if isinstance(value, dict):
        for key in _LIST_KEYS:
            if isinstance(value.get(key), list):
                return value[key]
        return [value]
    if value is not None:
        logger.debug("Ignoring non-collection JSON value: %r", value)
    return []


def extract_json_object(text: object) -> dict | None:
    """Extract a single JSON object. Garbage yields None."""
    value = extract_json(text)
    if isinstance(value, dict):
        return value
    if isinstance(value, list) and value and isinstance(value[0], dict):
        return value[0]
    return None
