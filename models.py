"""Data models used by the Gemini Quest application."""

from pydantic import BaseModel, ConfigDict, Field


class SceneRecord(BaseModel):
    """One scene of the adventure as returned by the text model.

    Only the camelCase wire keys populate the fields; any other keys the model
    sends are kept as extras and reproduced by ``model_dump(by_alias=True)``.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    scene_description: str = Field(alias="sceneDescription", min_length=1)
    image_prompt: str = Field(alias="imagePrompt", min_length=1)
    choices: list[str] = Field(min_length=1)
