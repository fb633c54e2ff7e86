"""Decoding helpers shared by the client's resource methods.

Bodies are decoded leniently: an empty body, invalid JSON, a document
that is not an object, or a missing top-level key all mean "no data"
and yield ``None`` rather than an error.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from dolphin.models import Envelope


def decode_body(envelope: Envelope) -> Optional[dict[str, Any]]:
    """JSON-decode an envelope's body into a mapping.

    Args:
        envelope: The response to decode.

    Returns:
        The decoded object, or ``None`` if the body is empty, is not valid
        JSON, or does not decode to an object.
    """
    if not envelope.body:
        return None
    try:
        data = json.loads(envelope.body)
    except (json.JSONDecodeError, TypeError):
        return None
    return data if isinstance(data, dict) else None


def extract_key(envelope: Envelope, key: str) -> Any:
    """Return the top-level *key* of the decoded body, or ``None`` if absent."""
    data = decode_body(envelope)
    if data is None:
        return None
    return data.get(key)
