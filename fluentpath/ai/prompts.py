"""
Prompt library - built-in prompt templates, overridable from `system_config/prompts`.

Templates use `{placeholder}` tokens. Substitution is literal so that stored
templates may contain JSON braces.
"""

from typing import Dict

from fluentpath.kernel.store import DocumentStore
from fluentpath.logging_config import get_logger

logger = get_logger(__name__)

PROMPTS_COLLECTION = "system_config"
PROMPTS_DOCUMENT = "prompts"

DEFAULT_PROMPTS: Dict[str, str] = {
    "sentenceImprover": (
        "You are an English language expert. Your task is to correct any grammatical errors "
        "and improve the user's sentence to make it sound more natural. Provide a brief "
        "explanation of the changes you made.\n\nUser's sentence: \"{sentence}\""
    ),
    "dailyPractice": (
        "You are a creative writing coach. Generate {count} engaging writing prompts for an "
        "English learner. Return the result as a valid JSON array of strings. Do not include "
        "any text outside of the JSON array."
    ),
    "grammarAssistant": (
        "You are a friendly and helpful English grammar expert. Provide a clear, simple, and "
        "accurate explanation for the user's question with examples. "
        "User's question: \"{question}\""
    ),
    "storyGenerator": (
        "You are a creative storyteller. Write a short, simple story (about 150 words) for an "
        "English learner based on the following topic: \"{topic}\""
    ),
    "aiVocabulary": (
        "You are an English vocabulary expert for Hindi speakers. Generate {count} vocabulary "
        "words for an English learner. Return the result as a valid JSON array of objects. "
        "Do not include any text outside of the JSON array. Each object in the array must have "
        "these exact keys: \"word\" (string), \"pronunciation\" (string, e.g., 'he-lo'), and "
        "\"hindiMeaning\" (a string with a short, simple meaning in Hindi)."
    ),
    "grammarGym": (
        "You are a language education expert. Generate {count} multiple-choice quiz questions "
        "about English grammar on the topic \"{topic}\".\n"
        "Return the result as a valid JSON array of objects. Do not include any text outside "
        "of the JSON array.\n"
        "Each object in the array must have these exact keys: \"questionText\" (string), "
        "\"options\" (an array of 4 strings), and \"correctAnswer\" (a string that is an exact "
        "match of one of the options)."
    ),
    "pronunciationLab": (
        "You are a language education expert. Generate {count} simple English sentences "
        "suitable for pronunciation practice.\n"
        "Return the result as a valid JSON array of strings. Do not include any text outside "
        "of the JSON array."
    ),
}


class UnknownPromptError(KeyError):
    """No template is registered under the requested name."""


def render_prompt(template: str, **values: object) -> str:
    """Replace each `{name}` token with its value; unknown tokens are left as-is."""
    rendered = template
    for name, value in values.items():
        rendered = rendered.replace("{" + name + "}", str(value))
    return rendered


class PromptLibrary:
    """Merged view of default and stored prompt templates."""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def all(self) -> Dict[str, str]:
        """Defaults overlaid with any stored templates."""
        snapshot = await self.store.get(PROMPTS_COLLECTION, PROMPTS_DOCUMENT)
        if not snapshot.exists:
            logger.debug("No stored prompts, using defaults")
            return dict(DEFAULT_PROMPTS)
        stored = {
            name: text
            for name, text in snapshot.to_dict().items()
            if isinstance(text, str) and text.strip()
        }
        return {**DEFAULT_PROMPTS, **stored}

    async def get(self, name: str) -> str:
        prompts = await self.all()
        if name not in prompts:
            raise UnknownPromptError(name)
        return prompts[name]

    async def render(self, name: str, **values: object) -> str:
        return render_prompt(await self.get(name), **values)

    async def save(self, name: str, text: str) -> None:
        """Store one template, keeping the others (used by the seed script)."""
        await self.store.set(PROMPTS_COLLECTION, PROMPTS_DOCUMENT, {name: text}, merge=True)
        logger.info("Prompt template saved", extra={"prompt": name})
