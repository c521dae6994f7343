"""JSON helpers"""
import json


def safe_json_parse(text, fallback=None):
    """Decode JSON text, returning `fallback` unchanged when it cannot be decoded."""
    if text is None or text == "" or text == b"":
        return fallback
    try:
        return json.loads(text)
    except (ValueError, TypeError, RecursionError):
        return fallback
