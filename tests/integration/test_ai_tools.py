"""Integration tests for practice tools, the key vault and prompt overrides."""

import json

import pytest

from conftest import FakeGenerator
from fluentpath.ai import (
    PROMPTS_COLLECTION,
    PROMPTS_DOCUMENT,
    SECURE_DATA_COLLECTION,
    ApiKeyVault,
    KeySlot,
    PracticeToolRunner,
    PromptLibrary,
    Provider,
    UnknownPromptError,
    UnknownToolError,
)
from fluentpath.config import Settings
from fluentpath.engines.progress import MalformedInputError


@pytest.fixture
def settings() -> Settings:
    return Settings(gemini_api_key="server-gemini", openrouter_api_key="")


@pytest.fixture
def vault(store, settings) -> ApiKeyVault:
    return ApiKeyVault(store, settings)


@pytest.fixture
def runner(store, vault, settings, fake_generators) -> PracticeToolRunner:
    return PracticeToolRunner(
        prompts=PromptLibrary(store),
        vault=vault,
        generators=fake_generators,
        settings=settings,
    )


class TestKeyVault:
    @pytest.mark.asyncio
    async def test_saved_keys_are_only_shown_masked(self, vault, store):
        masked = await vault.save("learner-1", {"geminiQuiz": " AIzaSyABCDEF1234 "})
        assert masked["geminiQuiz"] == "************1234"
        assert masked["openrouterWriting"] == ""
        assert (await store.get(SECURE_DATA_COLLECTION, "learner-1")).data == {"geminiQuiz": "AIzaSyABCDEF1234"}

    @pytest.mark.asyncio
    async def test_saving_one_slot_keeps_the_others(self, vault):
        await vault.save("learner-1", {"geminiQuiz": "quiz-key-0001"})
        await vault.save("learner-1", {"openrouterWriting": "write-key-0002"})
        assert await vault.resolve("learner-1", KeySlot.GEMINI_QUIZ) == "quiz-key-0001"
        assert await vault.resolve("learner-1", KeySlot.OPENROUTER_WRITING) == "write-key-0002"

    @pytest.mark.asyncio
    async def test_unknown_slot_rejected(self, vault, store):
        with pytest.raises(ValueError, match="openaiKey"):
            await vault.save("learner-1", {"openaiKey": "x"})
        assert (await store.get(SECURE_DATA_COLLECTION, "learner-1")).exists is False

    @pytest.mark.asyncio
    async def test_resolution_falls_back_to_server_key(self, vault):
        assert await vault.resolve("learner-1", KeySlot.GEMINI_GYM) == "server-gemini"
        assert await vault.resolve("learner-1", KeySlot.OPENROUTER_CREATIVE) == ""

    @pytest.mark.asyncio
    async def test_cleared_key_falls_back(self, vault):
        await vault.save("learner-1", {"geminiGym": "mine-9999"})
        await vault.save("learner-1", {"geminiGym": ""})
        assert await vault.resolve("learner-1", KeySlot.GEMINI_GYM) == "server-gemini"


class TestPromptLibrary:
    @pytest.mark.asyncio
    async def test_stored_template_overrides_default(self, store):
        await store.set(PROMPTS_COLLECTION, PROMPTS_DOCUMENT, {"storyGenerator": "Tell me about {topic}.", "blank": " "})
        library = PromptLibrary(store)
        assert await library.render("storyGenerator", topic="cats") == "Tell me about cats."
        prompts = await library.all()
        assert "blank" not in prompts
        assert "grammarGym" in prompts

    @pytest.mark.asyncio
    async def test_save_keeps_other_overrides(self, store):
        library = PromptLibrary(store)
        await library.save("storyGenerator", "A: {topic}")
        await library.save("grammarAssistant", "B: {question}")
        assert await library.get("storyGenerator") == "A: {topic}"

    @pytest.mark.asyncio
    async def test_unknown_prompt(self, store):
        with pytest.raises(UnknownPromptError):
            await PromptLibrary(store).get("nope")


class TestRawGeneration:
    @pytest.mark.asyncio
    async def test_uses_server_key_and_default_model(self, runner, fake_generators):
        result = await runner.generate("learner-1", Provider.GEMINI, "Hello?")
        assert result.success is True
        assert fake_generators[Provider.GEMINI].calls == [
            {"api_key": "server-gemini", "model": "gemini-2.5-flash", "prompt": "Hello?"}
        ]

    @pytest.mark.asyncio
    async def test_slot_uses_learner_key(self, runner, vault, fake_generators):
        await vault.save("learner-1", {"openrouterCreative": "own-key-7777"})
        await runner.generate(
            "learner-1", Provider.OPENROUTER, "Hi", model="meta/llama", slot=KeySlot.OPENROUTER_CREATIVE
        )
        call = fake_generators[Provider.OPENROUTER].calls[0]
        assert (call["api_key"], call["model"]) == ("own-key-7777", "meta/llama")

    @pytest.mark.asyncio
    async def test_blank_prompt_rejected(self, runner):
        with pytest.raises(MalformedInputError):
            await runner.generate("learner-1", Provider.GEMINI, "   ")

    @pytest.mark.asyncio
    async def test_slot_must_match_provider(self, runner):
        with pytest.raises(ValueError):
            await runner.generate("learner-1", Provider.GEMINI, "Hi", slot=KeySlot.OPENROUTER_WRITING)


class TestTools:
    @pytest.mark.asyncio
    async def test_text_tool(self, runner, fake_generators):
        fake_generators[Provider.OPENROUTER].reply = "I went to the market."
        result = await runner.run("learner-1", "sentence-improver", {"sentence": " i goed to market "})
        assert result.success is True
        assert result.text == "I went to the market."
        assert result.items is None
        assert '"i goed to market"' in fake_generators[Provider.OPENROUTER].calls[0]["prompt"]

    @pytest.mark.asyncio
    async def test_missing_input(self, runner, fake_generators):
        with pytest.raises(MalformedInputError) as excinfo:
            await runner.run("learner-1", "story-generator", {})
        assert excinfo.value.field == "topic"
        assert fake_generators[Provider.GEMINI].calls == []

    @pytest.mark.asyncio
    async def test_unknown_tool(self, runner):
        with pytest.raises(UnknownToolError):
            await runner.run("learner-1", "essay-writer")

    @pytest.mark.asyncio
    async def test_vocabulary_items_are_validated(self, runner, fake_generators):
        words = [
            {"word": "apple", "pronunciation": "ap-pul", "hindiMeaning": "seb"},
            {"pronunciation": "no word"},
            "junk",
        ]
        fake_generators[Provider.GEMINI].reply = "```json\n" + json.dumps(words) + "\n```"
        result = await runner.run("learner-1", "vocabulary", count=5)
        assert result.success is True
        assert result.items == [{"word": "apple", "pronunciation": "ap-pul", "hindiMeaning": "seb"}]
        assert "Generate 5 vocabulary words" in fake_generators[Provider.GEMINI].calls[0]["prompt"]

    @pytest.mark.asyncio
    async def test_grammar_gym_drops_questions_with_wrong_answer(self, runner, fake_generators):
        questions = [
            {"questionText": "She ___ home.", "options": ["go", "goes"], "correctAnswer": "goes"},
            {"questionText": "I ___ tired.", "options": ["is", "are"], "correctAnswer": "am"},
        ]
        fake_generators[Provider.GEMINI].reply = json.dumps(questions)
        result = await runner.run("learner-1", "grammar-gym", {"topic": "present simple"})
        assert [q["questionText"] for q in result.items] == ["She ___ home."]
        assert "Generate 20 multiple-choice" in fake_generators[Provider.GEMINI].calls[0]["prompt"]

    @pytest.mark.asyncio
    async def test_count_is_clamped(self, runner, fake_generators):
        fake_generators[Provider.GEMINI].reply = '["One.", "Two."]'
        result = await runner.run("learner-1", "pronunciation-lab", count=500)
        assert result.items == ["One.", "Two."]
        assert "Generate 50 simple English sentences" in fake_generators[Provider.GEMINI].calls[0]["prompt"]

    @pytest.mark.asyncio
    async def test_unparseable_list_reply(self, runner, fake_generators):
        fake_generators[Provider.OPENROUTER].reply = "Here are some prompts: write about your day"
        result = await runner.run("learner-1", "daily-practice")
        assert result.success is False
        assert result.error_message.startswith("Could not read the AI response:")

    @pytest.mark.asyncio
    async def test_list_without_usable_items(self, runner, fake_generators):
        fake_generators[Provider.OPENROUTER].reply = '["", 3, null]'
        result = await runner.run("learner-1", "daily-practice")
        assert result.error_message == "The AI response contained no usable items."

    @pytest.mark.asyncio
    async def test_provider_failure_is_passed_through(self, runner, fake_generators):
        fake_generators[Provider.GEMINI].error = "API key is missing."
        result = await runner.run("learner-1", "story-generator", {"topic": "rain"})
        assert result.success is False
        assert result.error_message == "API key is missing."
        assert result.provider == Provider.GEMINI

    @pytest.mark.asyncio
    async def test_stored_prompt_is_used(self, runner, store, fake_generators):
        await store.set(PROMPTS_COLLECTION, PROMPTS_DOCUMENT, {"grammarAssistant": "Q: {question}"})
        await runner.run("learner-1", "grammar-assistant", {"question": "What is a gerund?"})
        assert fake_generators[Provider.OPENROUTER].calls[0]["prompt"] == "Q: What is a gerund?"
