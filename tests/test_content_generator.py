"""
Tests for LessonGenerator.
"""
import json
from unittest.mock import Mock

import pytest
from openai import OpenAIError

from conftest import SAMPLE_LESSON as LESSON
from services.content_generator import ContentGenerationError, LessonGenerator, build_lesson_prompt


def _client_returning(content):
    client = Mock()
    message = Mock(content=content)
    client.chat.completions.create.return_value = Mock(choices=[Mock(message=message)])
    return client


class TestLessonGenerator:
    """LessonGenerator behaviour"""

    def test_generate_parses_lesson(self):
        client = _client_returning(json.dumps(LESSON, ensure_ascii=False))
        lesson = LessonGenerator(client=client).generate(["公園", "猫"], ["〜に行く"], "N5")

        assert lesson.story.title.english == "The Park"
        assert len(lesson.shadowing_segments) == 2
        assert lesson.speaking_prompts[0].model_answer.japanese == "公園に行きます。"
        assert lesson.model_dump(by_alias=True) == LESSON

        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["response_format"] == {"type": "json_object"}
        assert "公園, 猫" in kwargs["messages"][1]["content"]

    def test_invalid_json_raises(self):
        client = _client_returning("not json")
        with pytest.raises(ContentGenerationError):
            LessonGenerator(client=client).generate(["猫"], ["です"], "N5")

    def test_missing_sections_raise(self):
        broken = {"story": LESSON["story"], "shadowingSegments": []}
        client = _client_returning(json.dumps(broken))
        with pytest.raises(ContentGenerationError):
            LessonGenerator(client=client).generate(["猫"], ["です"], "N5")

    def test_empty_reply_raises(self):
        client = _client_returning(None)
        with pytest.raises(ContentGenerationError):
            LessonGenerator(client=client).generate(["猫"], ["です"], "N5")

    def test_api_error_is_wrapped(self):
        client = Mock()
        client.chat.completions.create.side_effect = OpenAIError("rate limited")
        with pytest.raises(ContentGenerationError, match="rate limited"):
            LessonGenerator(client=client).generate(["猫"], ["です"], "N5")

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with pytest.raises(ValueError):
            LessonGenerator()


def test_prompt_mentions_inputs():
    prompt = build_lesson_prompt(["猫", "犬"], ["〜たい"], "Level 3")
    assert "猫, 犬" in prompt
    assert "〜たい" in prompt
    assert "Level 3" in prompt
    assert '"shadowingSegments"' in prompt
