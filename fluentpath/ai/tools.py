"""
Practice tools - prompt + provider + output shape for each AI learning aid.

Text tools return the model's reply as-is. List tools ask for a JSON array,
strip Markdown fences, and keep only items of the expected shape; a reply
with no usable item is a failed result.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from fluentpath.ai.key_vault import ApiKeyVault
from fluentpath.ai.output_parsing import OutputParseError, parse_json_output
from fluentpath.ai.prompts import PromptLibrary
from fluentpath.ai.providers import TextGenerator
from fluentpath.ai.types import GenerationResult, KeySlot, Provider
from fluentpath.config import Settings, get_settings
from fluentpath.engines.progress import MalformedInputError
from fluentpath.logging_config import get_logger

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Output item shapes
# ---------------------------------------------------------------------------

class VocabularyWord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    word: str = Field(min_length=1)
    pronunciation: str = ""
    hindi_meaning: str = Field(default="", alias="hindiMeaning")


class GymQuestion(BaseModel):
    """Multiple-choice grammar question; the answer must be one of the options."""

    model_config = ConfigDict(populate_by_name=True)

    question_text: str = Field(min_length=1, alias="questionText")
    options: List[str] = Field(min_length=2)
    correct_answer: str = Field(alias="correctAnswer")

    @model_validator(mode="after")
    def _answer_is_an_option(self) -> "GymQuestion":
        if self.correct_answer not in self.options:
            raise ValueError("correctAnswer must match one of the options")
        return self


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PracticeTool:
    name: str
    prompt_name: str
    slot: KeySlot
    required_inputs: Tuple[str, ...] = ()
    # None -> free text; str -> list of strings; model -> list of that model
    item_type: Optional[Type[Any]] = None
    default_count: Optional[int] = None

    @property
    def provider(self) -> Provider:
        return self.slot.provider

    @property
    def returns_list(self) -> bool:
        return self.item_type is not None


PRACTICE_TOOLS: Dict[str, PracticeTool] = {
    tool.name: tool
    for tool in (
        PracticeTool("sentence-improver", "sentenceImprover", KeySlot.OPENROUTER_WRITING, ("sentence",)),
        PracticeTool("daily-practice", "dailyPractice", KeySlot.OPENROUTER_WRITING, item_type=str, default_count=20),
        PracticeTool("grammar-assistant", "grammarAssistant", KeySlot.OPENROUTER_CREATIVE, ("question",)),
        PracticeTool("story-generator", "storyGenerator", KeySlot.GEMINI_GYM, ("topic",)),
        PracticeTool("vocabulary", "aiVocabulary", KeySlot.GEMINI_QUIZ, item_type=VocabularyWord, default_count=20),
        PracticeTool("grammar-gym", "grammarGym", KeySlot.GEMINI_GYM, ("topic",), item_type=GymQuestion, default_count=20),
        PracticeTool("pronunciation-lab", "pronunciationLab", KeySlot.GEMINI_SENTENCES, item_type=str, default_count=10),
    )
}

MAX_ITEM_COUNT = 50


class UnknownToolError(KeyError):
    """No practice tool is registered under the requested name."""


class ToolResult(BaseModel):
    tool: str
    success: bool
    text: Optional[str] = None
    items: Optional[List[Any]] = None
    error_message: Optional[str] = None
    provider: Optional[Provider] = None
    model: Optional[str] = None


def _coerce_items(raw: Any, item_type: Type[Any], tool_name: str) -> List[Any]:
    if not isinstance(raw, list):
        raise OutputParseError("Model response is not a JSON array")
    items: List[Any] = []
    for entry in raw:
        if item_type is str:
            if isinstance(entry, str) and entry.strip():
                items.append(entry.strip())
            continue
        try:
            items.append(item_type.model_validate(entry).model_dump(by_alias=True))
        except ValidationError:
            logger.debug("Dropping malformed tool item", extra={"tool": tool_name})
    return items


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------

@dataclass
class PracticeToolRunner:
    prompts: PromptLibrary
    vault: ApiKeyVault
    generators: Mapping[Provider, TextGenerator]
    settings: Settings = field(default_factory=get_settings)

    def default_model(self, provider: Provider) -> str:
        if provider == Provider.GEMINI:
            return self.settings.gemini_default_model
        return self.settings.openrouter_default_model

    async def generate(
        self,
        learner_id: str,
        provider: Provider,
        prompt: str,
        *,
        model: Optional[str] = None,
        slot: Optional[KeySlot] = None,
    ) -> GenerationResult:
        """Raw relay: one prompt to one provider with the learner's (or server) key."""
        if not prompt or not prompt.strip():
            raise MalformedInputError("prompt")
        if slot is not None and slot.provider != provider:
            raise ValueError(f"Key slot {slot.value} does not belong to provider {provider.value}")

        api_key = await self.vault.resolve(learner_id, slot) if slot else self.vault.server_key(provider)
        model = model or self.default_model(provider)
        return await self.generators[provider].generate(api_key, model, prompt)

    async def run(
        self,
        learner_id: str,
        tool_name: str,
        inputs: Optional[Mapping[str, str]] = None,
        *,
        count: Optional[int] = None,
        model: Optional[str] = None,
    ) -> ToolResult:
        tool = PRACTICE_TOOLS.get(tool_name)
        if tool is None:
            raise UnknownToolError(tool_name)

        inputs = dict(inputs or {})
        for name in tool.required_inputs:
            if not str(inputs.get(name) or "").strip():
                raise MalformedInputError(name)

        values: Dict[str, Any] = {name: str(inputs[name]).strip() for name in tool.required_inputs}
        if tool.default_count is not None:
            values["count"] = min(max(count or tool.default_count, 1), MAX_ITEM_COUNT)

        prompt = await self.prompts.render(tool.prompt_name, **values)
        result = await self.generate(
            learner_id, tool.provider, prompt, model=model, slot=tool.slot
        )
        base = {"tool": tool.name, "provider": result.provider, "model": result.model}
        if not result.success:
            return ToolResult(success=False, error_message=result.error_message, **base)

        if not tool.returns_list:
            return ToolResult(success=True, text=result.text, **base)

        try:
            items = _coerce_items(parse_json_output(result.text or ""), tool.item_type, tool.name)
        except OutputParseError as exc:
            logger.warning("Unparseable tool output", extra={"tool": tool.name, "error": str(exc)})
            return ToolResult(success=False, error_message=f"Could not read the AI response: {exc}", **base)
        if not items:
            return ToolResult(success=False, error_message="The AI response contained no usable items.", **base)

        logger.info("Practice tool completed", extra={"tool": tool.name, "items": len(items)})
        return ToolResult(success=True, items=items, **base)


# ---------------------------------------------------------------------------
# Pronunciation feedback (no model call)
# ---------------------------------------------------------------------------

_NON_WORD = re.compile(r"[^\w\s]")


class PronunciationFeedback(BaseModel):
    level: str
    message: str
    accuracy: float


def _normalise_utterance(text: str) -> str:
    return _NON_WORD.sub("", text.lower()).strip()


def check_pronunciation(expected: str, spoken: str) -> PronunciationFeedback:
    """Compare a recognised utterance with the sentence the learner was asked to say."""
    original = _normalise_utterance(expected or "")
    if not original:
        raise MalformedInputError("expected")
    heard = _normalise_utterance(spoken or "")

    if original == heard:
        return PronunciationFeedback(level="good", message="Excellent! That's a perfect match.", accuracy=1.0)

    original_words = original.split()
    spoken_words = set(heard.split())
    accuracy = sum(1 for word in original_words if word in spoken_words) / len(original_words)
    if accuracy > 0.7:
        return PronunciationFeedback(level="average", message="Almost there! Good attempt.", accuracy=accuracy)
    return PronunciationFeedback(
        level="poor", message="Let's try that again. Focus on each word.", accuracy=accuracy
    )
