"""
AI Practice Zone - generative-text helpers for learners.

Every call goes out with a learner-owned key when one is saved (falling back
to the server key), and every failure comes back as a result, not an
exception, so the learner sees a message instead of a 500.
"""

from fluentpath.ai.types import GenerationResult, KeySlot, Provider
from fluentpath.ai.providers import (
    GeminiGenerator,
    OpenRouterGenerator,
    TextGenerator,
    build_generators,
)
from fluentpath.ai.output_parsing import OutputParseError, parse_json_output, strip_code_fences
from fluentpath.ai.prompts import (
    DEFAULT_PROMPTS,
    PROMPTS_COLLECTION,
    PROMPTS_DOCUMENT,
    PromptLibrary,
    UnknownPromptError,
    render_prompt,
)
from fluentpath.ai.key_vault import SECURE_DATA_COLLECTION, ApiKeyVault, mask_key
from fluentpath.ai.tools import (
    PRACTICE_TOOLS,
    GymQuestion,
    PracticeTool,
    PracticeToolRunner,
    PronunciationFeedback,
    ToolResult,
    UnknownToolError,
    VocabularyWord,
    check_pronunciation,
)

__all__ = [
    "GenerationResult",
    "KeySlot",
    "Provider",
    "GeminiGenerator",
    "OpenRouterGenerator",
    "TextGenerator",
    "build_generators",
    "OutputParseError",
    "parse_json_output",
    "strip_code_fences",
    "DEFAULT_PROMPTS",
    "PROMPTS_COLLECTION",
    "PROMPTS_DOCUMENT",
    "PromptLibrary",
    "UnknownPromptError",
    "render_prompt",
    "SECURE_DATA_COLLECTION",
    "ApiKeyVault",
    "mask_key",
    "PRACTICE_TOOLS",
    "GymQuestion",
    "PracticeTool",
    "PracticeToolRunner",
    "PronunciationFeedback",
    "ToolResult",
    "UnknownToolError",
    "VocabularyWord",
    "check_pronunciation",
]
