"""Scene illustration via the image generation model."""

from __future__ import annotations

import base64
import binascii
import logging

from google.genai import types

from config import AppConfig
from errors import ImageGenerationError

logger = logging.getLogger(__name__)


def build_image_prompt(prompt: str, preamble: str | None = None) -> str:
    """Prefix *prompt* with the stylistic preamble."""

    if preamble is None:
        preamble = AppConfig().style_preamble
    return f"{preamble} {prompt}"


def to_data_uri(data: bytes, mime_type: str) -> str:
    """Encode *data* as a self-contained ``data:`` URI."""

    payload = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{payload}"


def decode_data_uri(uri: str) -> tuple[str, bytes]:
    """Split a base64 ``data:`` URI into its MIME type and raw bytes.

    Raises :class:`ValueError` for anything that is not a base64 data URI.
    """

    header, sep, payload = uri.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise ValueError("not a base64 data URI")
    mime_type = header[len("data:"):-len(";base64")]
    try:
        return mime_type, base64.b64decode(payload, validate=True)
    except binascii.Error as exc:
        raise ValueError(f"invalid base64 payload: {exc}") from exc


async def generate_image(client, prompt: str, config: AppConfig | None = None) -> str:
    """Generate one image for *prompt* and return it as a data URI."""

    config = config or AppConfig()
    response = await client.aio.models.generate_images(
        model=config.image_model,
        prompt=build_image_prompt(prompt, config.style_preamble),
        config=types.GenerateImagesConfig(
            number_of_images=1,
            output_mime_type=config.image_mime_type,
            aspect_ratio=config.aspect_ratio,
        ),
    )

    generated = getattr(response, "generated_images", None) or []
    image = generated[0].image if generated else None
    if image is None or not image.image_bytes:
        logger.error("Image model returned no image for prompt: %s", prompt)
        raise ImageGenerationError("Failed to generate image.")
    mime_type = getattr(image, "mime_type", None) or config.image_mime_type
    return to_data_uri(image.image_bytes, mime_type)
