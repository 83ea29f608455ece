"""Daily lesson generation (story, shadowing segments, speaking prompts) via OpenAI."""

from __future__ import annotations

import logging
import os
from typing import Optional, Sequence

from openai import OpenAI, OpenAIError
from pydantic import ValidationError

from schemas import GeneratedLesson

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a Japanese language teaching assistant. Generate engaging, natural Japanese "
    "content for language learners. Your response must be in valid JSON format with the "
    "exact structure specified in the user prompt."
)

LESSON_SHAPE = """{
  "story": {
    "title": {"japanese": "Japanese title here", "english": "English title here"},
    "japanese": "Full Japanese story text here",
    "english": "Full English translation here"
  },
  "shadowingSegments": [
    {"japanese": "First Japanese segment", "english": "First English translation"}
  ],
  "speakingPrompts": [
    {
      "question": {"japanese": "Question in Japanese", "english": "Question in English"},
      "modelAnswer": {"japanese": "Model answer in Japanese", "english": "Model answer in English"}
    }
  ]
}"""


class ContentGenerationError(RuntimeError):
    """Raised when the model call fails or returns an unusable lesson."""


def build_lesson_prompt(vocab: Sequence[str], grammar: Sequence[str], level: str) -> str:
    return (
        "Generate a titled story (50-100 characters) in Japanese with English translation "
        f"using the following vocabulary: {', '.join(vocab)} and grammar points: "
        f"{', '.join(grammar)}. The content should be appropriate for {level} level. "
        "Then, break the story into 3-5 shadowing segments with translations. Finally, "
        "create 2-3 speaking prompts (questions) related to the story with model answers.\n\n"
        f"IMPORTANT: Return your response in this exact JSON structure:\n{LESSON_SHAPE}\n\n"
        "Ensure all properties shown above are present and correctly formatted."
    )


class LessonGenerator:
    MODEL = "gpt-4o"

    def __init__(self, api_key: str | None = None, client: Optional[OpenAI] = None) -> None:
        if client is not None:
            self.client = client
            return

        api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise ValueError("OPENAI_API_KEY is not configured")
        self.client = OpenAI(api_key=api_key)

    def generate(self, vocab: Sequence[str], grammar: Sequence[str], level: str) -> GeneratedLesson:
        try:
            completion = self.client.chat.completions.create(
                model=self.MODEL,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": build_lesson_prompt(vocab, grammar, level)},
                ],
                temperature=0.7,
                response_format={"type": "json_object"},
            )
        except OpenAIError as exc:
            raise ContentGenerationError(f"OpenAI error: {exc}") from exc

        content = completion.choices[0].message.content
        if not content:
            raise ContentGenerationError("OpenAI returned an empty lesson")

        try:
            lesson = GeneratedLesson.model_validate_json(content)
        except ValidationError as exc:
            logger.error("Invalid lesson structure from OpenAI: %s", content)
            raise ContentGenerationError("Invalid content structure from OpenAI") from exc

        logger.info(
            "Generated lesson with %d segments and %d prompts",
            len(lesson.shadowing_segments),
            len(lesson.speaking_prompts),
        )
        return lesson
