"""Utility helpers for the Gemini Quest application."""

import os
import sys

if sys.platform.startswith("win"):
    import winreg
else:  # pragma: no cover - platform specific
    winreg = None


def get_user_env_var(name: str) -> str | None:
    r"""Retrieve a user-level environment variable on Windows.

    This helper reads the ``HKCU\Environment`` registry key so that values
    configured globally are discovered even when the current process environment
    does not include them (for example when running inside a virtual
    environment).  On non-Windows platforms it simply falls back to
    ``os.environ``.
    """
    if not sys.platform.startswith("win") or winreg is None:
        return os.environ.get(name)
    try:
        reg_key = winreg.OpenKey(winreg.HKEY_CURRENT_USER, "Environment")
        try:
            value, _ = winreg.QueryValueEx(reg_key, name)
            return value
        finally:
            winreg.CloseKey(reg_key)
    except FileNotFoundError:
        return os.environ.get(name)


def get_response_tokens(usage) -> int:
    """Return generated token count from a usage metadata object.

    Text calls report ``candidates_token_count`` while newer surfaces use
    ``response_token_count``; both are checked.  ``0`` is returned when
    ``usage`` is ``None`` or neither attribute is set.
    """

    if usage is None:
        return 0

    for attr in ("response_token_count", "candidates_token_count"):
        value = getattr(usage, attr, None)
        if value is not None:
            return value

    return 0
