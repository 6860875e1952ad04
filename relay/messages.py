"""Inbound frame parsing."""
from __future__ import annotations

import json
from typing import Any, Dict

from .constants import LEGACY_ALIASES


class MalformedMessage(ValueError):
    """Raised when a frame is not a JSON object with a string ``type``."""


def parse_message(raw: str) -> Dict[str, Any]:
    """Decode *raw* into a message dict with a normalised ``type``.

    Legacy sender/client kinds are rewritten to their controller/target
    equivalents so the dispatcher only deals with one vocabulary.
    """
    try:
        data = json.loads(raw)
    except (TypeError, json.JSONDecodeError) as exc:
        raise MalformedMessage("message is not valid JSON") from exc

    if not isinstance(data, dict):
        raise MalformedMessage("message must be a JSON object")

    kind = data.get("type")
    if not isinstance(kind, str) or not kind:
        raise MalformedMessage("message is missing a string 'type'")

    data["type"] = LEGACY_ALIASES.get(kind, kind)
    return data


__all__ = ["MalformedMessage", "parse_message"]
