"""Unit tests for prompt rendering, tool registry and pronunciation feedback."""

import pytest
from pydantic import ValidationError

from fluentpath.ai import (
    DEFAULT_PROMPTS,
    PRACTICE_TOOLS,
    GymQuestion,
    KeySlot,
    Provider,
    VocabularyWord,
    check_pronunciation,
    mask_key,
    render_prompt,
)
from fluentpath.engines.progress import MalformedInputError


class TestRenderPrompt:
    def test_replaces_every_placeholder(self):
        assert render_prompt("{topic} and {topic} x{count}", topic="tenses", count=5) == (
            "tenses and tenses x5"
        )

    def test_unknown_placeholders_and_json_braces_survive(self):
        template = 'Return {"word": "..."} for {topic}; keep {other}'
        assert render_prompt(template, topic="food") == 'Return {"word": "..."} for food; keep {other}'

    def test_defaults_cover_every_tool(self):
        for tool in PRACTICE_TOOLS.values():
            assert tool.prompt_name in DEFAULT_PROMPTS
            for name in tool.required_inputs:
                assert "{" + name + "}" in DEFAULT_PROMPTS[tool.prompt_name]
            if tool.default_count is not None:
                assert "{count}" in DEFAULT_PROMPTS[tool.prompt_name]


class TestRegistry:
    def test_slots_determine_provider(self):
        assert PRACTICE_TOOLS["sentence-improver"].provider == Provider.OPENROUTER
        assert PRACTICE_TOOLS["grammar-assistant"].slot == KeySlot.OPENROUTER_CREATIVE
        assert PRACTICE_TOOLS["vocabulary"].slot == KeySlot.GEMINI_QUIZ
        assert PRACTICE_TOOLS["pronunciation-lab"].provider == Provider.GEMINI

    def test_list_tools(self):
        assert PRACTICE_TOOLS["grammar-gym"].returns_list
        assert not PRACTICE_TOOLS["story-generator"].returns_list


class TestItemShapes:
    def test_vocabulary_word_aliases(self):
        word = VocabularyWord.model_validate({"word": "apple", "pronunciation": "a-pul", "hindiMeaning": "seb"})
        assert word.hindi_meaning == "seb"
        assert word.model_dump(by_alias=True)["hindiMeaning"] == "seb"

    def test_gym_answer_must_be_an_option(self):
        with pytest.raises(ValidationError):
            GymQuestion.model_validate(
                {"questionText": "Pick", "options": ["a", "b"], "correctAnswer": "c"}
            )


class TestPronunciation:
    def test_exact_match_ignores_case_and_punctuation(self):
        feedback = check_pronunciation("Hello, world!", "hello world")
        assert feedback.level == "good"
        assert feedback.accuracy == 1.0

    def test_mostly_right_is_average(self):
        feedback = check_pronunciation("the cat sat on the mat", "the cat sat on a mat")
        assert feedback.level == "average"
        assert feedback.accuracy > 0.7

    def test_mostly_wrong_is_poor(self):
        feedback = check_pronunciation("she sells sea shells", "he tells me")
        assert feedback.level == "poor"

    def test_expected_sentence_required(self):
        with pytest.raises(MalformedInputError):
            check_pronunciation("  ?! ", "anything")


class TestMaskKey:
    @pytest.mark.parametrize(
        "value,masked",
        [("", ""), ("abc", "***"), ("sk-1234567890", "*********7890")],
    )
    def test_masking(self, value, masked):
        assert mask_key(value) == masked
