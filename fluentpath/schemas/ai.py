"""
Pydantic schemas for AI practice API.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from fluentpath.ai import KeySlot, Provider


class PromptsResponse(BaseModel):
    prompts: Dict[str, str]


class GenerateRequest(BaseModel):
    """Raw prompt relay to one provider."""

    provider: Provider
    prompt: str = Field(min_length=1, max_length=20000)
    model: Optional[str] = None
    key_slot: Optional[KeySlot] = None


class GenerateResponse(BaseModel):
    success: bool
    response: Optional[str] = None
    error: Optional[str] = None
    provider: Optional[Provider] = None
    model: Optional[str] = None


class ToolRequest(BaseModel):
    """Inputs for a practice tool (sentence, question or topic, as the tool needs)."""

    inputs: Dict[str, str] = {}
    count: Optional[int] = Field(default=None, ge=1, le=50)
    model: Optional[str] = None


class ToolResponse(BaseModel):
    tool: str
    success: bool
    text: Optional[str] = None
    items: Optional[List[Any]] = None
    error: Optional[str] = None
    provider: Optional[Provider] = None
    model: Optional[str] = None


class PronunciationCheckRequest(BaseModel):
    expected: str = Field(min_length=1)
    spoken: str = ""


class PronunciationCheckResponse(BaseModel):
    level: str
    message: str
    accuracy: float
