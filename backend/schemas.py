from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

MAX_SENTENCE_LENGTH = 500


class ScoreRequest(BaseModel):
    reference: str = Field(min_length=1, max_length=MAX_SENTENCE_LENGTH)
    candidate: str = Field(max_length=MAX_SENTENCE_LENGTH)


class TokenDifferencesResponse(BaseModel):
    matched: List[str]
    missing: List[str]
    added: List[str]


class ComparisonResponse(BaseModel):
    similarity: int = Field(ge=0, le=100)
    differences: TokenDifferencesResponse
    feedback: List[str]


class AttemptResponse(BaseModel):
    attemptId: str
    transcript: str
    result: ComparisonResponse


class AttemptSummary(BaseModel):
    attempt_id: str
    created_at: Optional[datetime]
    reference_text: str
    transcript: Optional[str]
    similarity: int

    model_config = ConfigDict(from_attributes=True)


class AttemptDetail(AttemptSummary):
    differences: TokenDifferencesResponse
    feedback: List[str]


# --- Lesson content (camelCase on the wire, as the mobile and web clients expect) ---


class BilingualText(BaseModel):
    japanese: str = Field(min_length=1)
    english: str = Field(min_length=1)


class Story(BaseModel):
    title: BilingualText
    japanese: str = Field(min_length=1)
    english: str = Field(min_length=1)


class SpeakingPrompt(BaseModel):
    question: BilingualText
    model_answer: BilingualText = Field(alias="modelAnswer")

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())


class GeneratedLesson(BaseModel):
    story: Story
    shadowing_segments: List[BilingualText] = Field(alias="shadowingSegments", min_length=1)
    speaking_prompts: List[SpeakingPrompt] = Field(alias="speakingPrompts", min_length=1)

    model_config = ConfigDict(populate_by_name=True)


class LessonRequest(BaseModel):
    vocab: List[str]
    grammar: List[str]
    level: str


class LessonSummary(BaseModel):
    storyId: str
    created_at: Optional[datetime]
    story: dict
    shadowingSegments: List[dict]
    speakingPrompts: List[dict]
