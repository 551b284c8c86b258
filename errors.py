"""Exceptions raised by the Gemini Quest services."""


class GeminiQuestError(Exception):
    """Base exception for Gemini Quest errors."""


class ConfigurationError(GeminiQuestError):
    """Raised when the GenAI client cannot be configured."""


class SceneGenerationError(GeminiQuestError):
    """Raised when the model does not return a usable scene."""


class ImageGenerationError(GeminiQuestError):
    """Raised when the image model returns no image."""
