"""
JSON helpers backed by orjson
=============================

Thin wrapper used for every persisted blob (option lists, the JSON-file
key-value store). Keeps a ``json``-like interface so callers can
``import json_utils as json``.
"""

import orjson
from typing import Any, Optional


def dumps(obj: Any, indent: Optional[int] = None, sort_keys: bool = False) -> str:
    """
    Serialize obj to a JSON string.

    Args:
        obj: Object to serialize
        indent: Any non-None value enables two-space pretty printing
        sort_keys: Emit dictionary keys in sorted order

    Returns:
        JSON string (orjson produces bytes, decoded here as UTF-8)
    """
    option = 0
    if indent is not None:
        option |= orjson.OPT_INDENT_2
    if sort_keys:
        option |= orjson.OPT_SORT_KEYS

    return orjson.dumps(obj, option=option).decode("utf-8")


def loads(s: Any) -> Any:
    """Deserialize a JSON document from str or bytes."""
    return orjson.loads(s)


JSONDecodeError = orjson.JSONDecodeError
