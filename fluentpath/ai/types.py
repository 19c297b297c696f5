"""
Shared AI types.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class Provider(str, Enum):
    """Generative-text providers."""
    GEMINI = "gemini"
    OPENROUTER = "openrouter"


class KeySlot(str, Enum):
    """Learner-owned API key slots, one per practice purpose."""
    GEMINI_QUIZ = "geminiQuiz"
    GEMINI_SENTENCES = "geminiSentences"
    GEMINI_GYM = "geminiGym"
    OPENROUTER_WRITING = "openrouterWriting"
    OPENROUTER_CREATIVE = "openrouterCreative"

    @property
    def provider(self) -> Provider:
        return Provider.GEMINI if self.value.startswith("gemini") else Provider.OPENROUTER


class GenerationResult(BaseModel):
    """Outcome of one generation call. Failures are data, not exceptions."""

    success: bool
    text: Optional[str] = None
    error_message: Optional[str] = None
    provider: Optional[Provider] = None
    model: Optional[str] = None

    @classmethod
    def failed(cls, message: str, provider: Optional[Provider] = None, model: Optional[str] = None) -> "GenerationResult":
        return cls(success=False, error_message=message, provider=provider, model=model)
