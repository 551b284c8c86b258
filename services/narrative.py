"""Prompt construction and scene generation."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from google.genai import types

from config import AppConfig
from errors import SceneGenerationError
from models import SceneRecord
from utils import get_response_tokens
from .validation import parse_scene

logger = logging.getLogger(__name__)


SCENE_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "sceneDescription": types.Schema(
            type=types.Type.STRING,
            description=(
                "A vivid, 2-3 paragraph description of the current scene in the"
                " text adventure game."
            ),
        ),
        "imagePrompt": types.Schema(
            type=types.Type.STRING,
            description=(
                "A detailed, artistic prompt for an image generation model that"
                " captures the scene's essence. Focus on visual details like"
                " lighting, atmosphere, character appearance, and environment."
            ),
        ),
        "choices": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(
                type=types.Type.STRING,
                description="A concise action the player can take, starting with a verb.",
            ),
            min_items=3,
            max_items=3,
            description="An array of exactly 3 possible actions the player can take next.",
        ),
    },
    required=["sceneDescription", "imagePrompt", "choices"],
)

INITIAL_PROMPT = """\
You are a master storyteller creating a dynamic text adventure game.
Generate the very first scene of a fantasy adventure.
Describe the scene vividly in about 2-3 paragraphs.
Based on the scene, create a detailed, artistic prompt for an image generation model that captures the essence of the scene. This prompt should focus on visual details like lighting, atmosphere, character appearance, and environment.
Finally, provide exactly 3 possible actions the player can take next. The actions should be concise, starting with a verb.
Your response MUST conform to the provided JSON schema.
"""

NEXT_PROMPT_TEMPLATE = """\
You are a master storyteller continuing a dynamic text adventure game.
Here is the story so far, with each entry being a new scene:
{history}

The player just chose to: "{choice}"

Now, do the following:
1. Write the next part of the story, describing the outcome of the player's action and the new situation they are in. Describe the scene vividly in 2-3 paragraphs.
2. Based on this new scene, create a detailed, artistic prompt for an image generation model. This prompt should focus on visual details like lighting, atmosphere, character appearance, and environment.
3. Provide exactly 3 new, concise actions the player can take. The actions must be different from previous choices and relevant to the new scene. Each action should start with a verb.
Your response MUST conform to the provided JSON schema.
"""


def format_history(history: Sequence[str]) -> str:
    """Number each past scene and join them with separators."""

    return "\n---\n".join(
        f"Scene {i}:\n{scene}" for i, scene in enumerate(history, start=1)
    )


def build_initial_prompt() -> str:
    return INITIAL_PROMPT


def build_next_prompt(history: Sequence[str], choice: str) -> str:
    """Create the continuation prompt for *choice* after *history*."""

    return NEXT_PROMPT_TEMPLATE.format(history=format_history(history), choice=choice)


async def _request_scene(client, prompt: str, config: AppConfig) -> SceneRecord | None:
    response = await client.aio.models.generate_content(
        model=config.text_model,
        contents=prompt,
        config=types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=SCENE_SCHEMA,
        ),
    )
    usage = getattr(response, "usage_metadata", None)
    logger.debug(
        "Scene request used %s prompt tokens, %d response tokens",
        getattr(usage, "prompt_token_count", None),
        get_response_tokens(usage),
    )
    return parse_scene(response.text)


async def generate_initial_scene(client, config: AppConfig | None = None) -> SceneRecord:
    """Ask the model for the opening scene of a new adventure."""

    scene = await _request_scene(client, build_initial_prompt(), config or AppConfig())
    if scene is None:
        raise SceneGenerationError("Failed to generate a valid initial scene from the API.")
    return scene


async def generate_next_scene(
    client,
    history: Sequence[str],
    choice: str,
    config: AppConfig | None = None,
) -> SceneRecord:
    """Continue the story told by *history* after the player picked *choice*.

    The whole history is sent on every call.
    """

    prompt = build_next_prompt(history, choice)
    scene = await _request_scene(client, prompt, config or AppConfig())
    if scene is None:
        raise SceneGenerationError("Failed to generate a valid next scene from the API.")
    return scene
