"""
Shared utility functions for the deck engine.

JSON helpers used by deck import/export and the label truncation shared by
the distribution reporter.  Nothing here touches the filesystem; persisting
the exported text is the caller's job.
"""

import json


# ---------------------------------------------------------------------------
# JSON text helpers
# ---------------------------------------------------------------------------

def safe_parse_json(text, default=None):
    """Parse *text* as JSON, returning *default* if it is not valid JSON.

    Parameters
    ----------
    text : str or bytes
        The JSON document.
    default
        Value returned when *text* cannot be parsed (default ``None``).

    Returns
    -------
    object
        Parsed JSON content, or *default* on failure.
    """
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError, ValueError):
        return default


def dump_json(data, *, indent=4):
    """Serialise *data* as JSON text, keeping non-ASCII deck text readable."""
    return json.dumps(data, indent=indent, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Display helpers
# ---------------------------------------------------------------------------

def truncate(text: str, length: int, suffix: str = "...") -> str:
    """Cut *text* to *length* characters, appending *suffix* when cut."""
    if len(text) <= length:
        return text
    return text[:length] + suffix
