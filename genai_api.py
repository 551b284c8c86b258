"""Utilities for working with the Google GenAI client.

API key resolution and client creation live here so the scene and image
services only ever receive a ready client.  There is no cached module-level
client: the host creates one with :func:`create_client` at start-up and passes
it to every call.
"""
from __future__ import annotations

import os
import logging
from google import genai

from errors import ConfigurationError
from utils import get_user_env_var

logger = logging.getLogger(__name__)

API_KEY_VARS = ("GEMINI_API_KEY", "API_KEY")


def resolve_api_key() -> str:
    """Return the best available Gemini API key.

    ``GEMINI_API_KEY`` is preferred over the generic ``API_KEY``.  For each
    name the process environment is checked before the user-level variable
    returned by :func:`utils.get_user_env_var`.  An empty string means no key
    was found.
    """
    for name in API_KEY_VARS:
        key = (os.environ.get(name) or get_user_env_var(name) or "").strip()
        if key:
            return key
    return ""


def create_client(api_key: str | None = None) -> genai.Client:
    """Create a Gemini client for ``api_key`` or the resolved environment key.

    Raises :class:`errors.ConfigurationError` when no key is available or the
    SDK refuses to build a client.
    """
    key = (api_key or resolve_api_key()).strip()
    if not key:
        raise ConfigurationError(
            "No API key found; set GEMINI_API_KEY or API_KEY."
        )
    try:
        return genai.Client(api_key=key)
    except Exception as exc:
        logger.error("Failed to create GenAI client: %s", exc)
        raise ConfigurationError(f"Failed to create GenAI client: {exc}") from exc


__all__ = [
    "API_KEY_VARS",
    "create_client",
    "resolve_api_key",
    "genai",
]
