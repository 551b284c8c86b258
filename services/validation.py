"""Validation of raw scene payloads returned by the text model."""

from __future__ import annotations

import json
import logging
import re

from pydantic import ValidationError

from models import SceneRecord

logger = logging.getLogger(__name__)

EXPECTED_CHOICES = 3

_LEADING_FENCE = re.compile(r"^```(?:json)?", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"```$")


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences wrapping *text*.

    Repeated or nested fences at either end are all removed, so the result is
    stable under a second application.
    """

    stripped = text.strip()
    while True:
        cleaned = _TRAILING_FENCE.sub("", _LEADING_FENCE.sub("", stripped)).strip()
        if cleaned == stripped:
            return cleaned
        stripped = cleaned


def parse_scene(raw: str | None) -> SceneRecord | None:
    """Parse *raw* model output into a :class:`SceneRecord`.

    ``None`` is returned when the payload is missing, is not valid JSON or does
    not have the scene shape.  The failure is logged; nothing is raised.
    """

    if raw is None:
        logger.error("Model returned no text for the scene")
        return None

    json_text = strip_code_fences(raw)
    try:
        data = json.loads(json_text)
    except json.JSONDecodeError as exc:
        logger.error("Failed to parse JSON response: %s", exc)
        logger.error("Raw text from API: %s", raw)
        return None

    try:
        scene = SceneRecord.model_validate(data)
    except ValidationError as exc:
        logger.error("Parsed JSON does not match the scene structure: %r (%s)", data, exc)
        return None

    if len(scene.choices) != EXPECTED_CHOICES:
        logger.warning(
            "Expected %d choices, model returned %d", EXPECTED_CHOICES, len(scene.choices)
        )
    return scene
