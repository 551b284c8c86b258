"""Application configuration handling."""

from __future__ import annotations

from dataclasses import dataclass, asdict
import json
from pathlib import Path

STYLE_PREAMBLE = "masterpiece, high quality, fantasy art, cinematic lighting."


@dataclass
class AppConfig:
    """User adjustable settings for the application."""

    text_model: str = "gemini-2.5-flash"
    image_model: str = "imagen-3.0-generate-002"
    image_mime_type: str = "image/jpeg"
    aspect_ratio: str = "16:9"
    style_preamble: str = STYLE_PREAMBLE
    enable_images: bool = True


def load_config(path: str | Path) -> AppConfig:
    """Load configuration from *path*.

    Returns a default :class:`AppConfig` if the file is missing.
    """

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return AppConfig(**data)
    except FileNotFoundError:
        return AppConfig()


def save_config(cfg: AppConfig, path: str | Path) -> None:
    """Persist *cfg* to *path* as JSON."""

    with open(path, "w", encoding="utf-8") as f:
        json.dump(asdict(cfg), f, indent=2)
