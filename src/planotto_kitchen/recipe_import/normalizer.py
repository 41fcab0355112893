"""Coercion utilities for provider JSON of unknown shape."""

import math
import re
from typing import Any


def safe_string(value: Any) -> str:
    """Trimmed string, or "" for anything that is not a string."""
    return value.strip() if isinstance(value, str) else ""


def safe_string_list(value: Any) -> list[str]:
    """Non-empty trimmed strings from a list; [] for anything else."""
    if not isinstance(value, list):
        return []
    return [text for text in (safe_string(item) for item in value) if text]


def positive_int(value: Any) -> int | None:
    """Positive integer from a number, or None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    number = int(round(value))
    return number if number > 0 else None


def parse_servings(value: Any) -> int | None:
    """
    Parse recipe yield/servings to a positive integer.

    Examples:
        4 -> 4
        "4 servings" -> 4
        "Serves 6" -> 6
        0 -> None
    """
    if isinstance(value, str):
        match = re.search(r"(\d+)", value)
        return positive_int(int(match.group(1))) if match else None
    return positive_int(value)


_ISO_DURATION = re.compile(r"P(?:\d+D)?T(?:(\d+)H)?(?:(\d+)M)?", re.IGNORECASE)
_HOURS = re.compile(r"(\d+(?:[.,]\d+)?)\s*(?:h|hrs?|hours?|ч|час\w*)\b", re.IGNORECASE)
_MINUTES = re.compile(r"(\d+)\s*(?:m|mins?|minutes?|мин\w*)\b", re.IGNORECASE)


def parse_duration(value: Any) -> int | None:
    """
    Parse a cooking time to minutes.

    Examples:
        45 -> 45
        "PT1H30M" -> 90
        "1 h 15 min" -> 75
        "40 minutes" -> 40
        "30" -> 30
    """
    if not isinstance(value, str):
        return positive_int(value)

    text = value.strip()
    if not text:
        return None

    iso = _ISO_DURATION.fullmatch(text)
    if iso:
        hours = int(iso.group(1) or 0)
        minutes = int(iso.group(2) or 0)
        return positive_int(hours * 60 + minutes)

    hours = _HOURS.search(text)
    minutes = _MINUTES.search(text)
    if hours or minutes:
        total = float(hours.group(1).replace(",", ".")) * 60 if hours else 0
        total += int(minutes.group(1)) if minutes else 0
        return positive_int(total)

    match = re.search(r"(\d+)", text)
    return positive_int(int(match.group(1))) if match else None


def instructions_text(instructions: Any) -> str:
    """
    Instructions as one text block.

    Handles:
        - Plain strings (kept as-is, trimmed)
        - List of strings (one step per line)
        - List of HowToStep dicts with a 'text' field
    """
    if isinstance(instructions, str):
        return instructions.strip()
    if not isinstance(instructions, list):
        return ""

    steps = []
    for item in instructions:
        if isinstance(item, str):
            text = item.strip()
        elif isinstance(item, dict):
            text = safe_string(item.get("text"))
        else:
            text = ""
        if text:
            steps.append(text)
    return "\n".join(steps)


def extract_image(image: Any) -> str:
    """
    Image reference from various formats.

    Handles:
        - Plain string (URL or data URL)
        - Dict with 'url' or 'contentUrl'
        - List of images (take first)
    """
    if isinstance(image, str):
        return image.strip()
    if isinstance(image, dict):
        return safe_string(image.get("url") or image.get("contentUrl"))
    if isinstance(image, list) and image:
        return extract_image(image[0])
    return ""


def request_photos(payload: dict[str, Any]) -> list[str]:
    """
    Photos of an import request, in the order given.

    `imageDataUrls` (data:image/... entries only) wins over the single
    `imageDataUrl` field.
    """
    photos = [url for url in safe_string_list(payload.get("imageDataUrls")) if url.startswith("data:image/")]
    if photos:
        return photos
    single = safe_string(payload.get("imageDataUrl"))
    return [single] if single else []
