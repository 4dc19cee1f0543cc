"""Genre inference collaborators."""

from .base import GenreInference
from .openai_inference import OpenAIGenreInference

__all__ = ["GenreInference", "OpenAIGenreInference"]
