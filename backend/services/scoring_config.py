"""Tunable parameters for the shadowing scorer.

The rescaling curve, the confusable particle table and the feedback bands are
product-tuning decisions, so they live here instead of being baked into the
scorer. Defaults can be overridden with a JSON file named by
``SCORING_CONFIG_PATH``.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import List, Tuple

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

load_dotenv()

logger = logging.getLogger(__name__)

# (raw similarity, reported score) anchors of the piecewise-linear curve.
DEFAULT_BREAKPOINTS: List[Tuple[float, float]] = [
    (0.0, 0.0),
    (0.5, 50.0),
    (0.7, 75.0),
    (0.9, 93.0),
    (1.0, 100.0),
]

# Particles learners (and speech recognisers) commonly swap.
DEFAULT_CONFUSABLE_PAIRS: List[Tuple[str, str]] = [
    ("は", "が"),
    ("に", "へ"),
    ("を", "お"),
    ("は", "わ"),
    ("へ", "え"),
]


class FeedbackBand(BaseModel):
    name: str
    min_score: int = Field(ge=0, le=100)
    message: str


DEFAULT_FEEDBACK_BANDS: List[FeedbackBand] = [
    FeedbackBand(name="excellent", min_score=90, message="素晴らしい！ほぼ完璧です！"),
    FeedbackBand(name="good", min_score=70, message="とてもよくできました！"),
    FeedbackBand(name="fair", min_score=50, message="よく頑張りました！もう少し練習しましょう。"),
    FeedbackBand(name="keep_practicing", min_score=0, message="練習を続けましょう！"),
]


class ScoringConfig(BaseModel):
    breakpoints: List[Tuple[float, float]] = Field(default_factory=lambda: list(DEFAULT_BREAKPOINTS))
    confusable_pairs: List[Tuple[str, str]] = Field(
        default_factory=lambda: list(DEFAULT_CONFUSABLE_PAIRS)
    )
    confusable_cost: float = Field(default=0.5, gt=0.0, le=1.0)
    feedback_bands: List[FeedbackBand] = Field(
        default_factory=lambda: [band.model_copy() for band in DEFAULT_FEEDBACK_BANDS]
    )
    missing_prefix: str = "以下の言葉を含めてみましょう: "
    added_prefix: str = "余分な言葉がありました: "
    token_separator: str = "、"

    model_config = ConfigDict(frozen=True)

    @field_validator("breakpoints")
    @classmethod
    def _check_breakpoints(cls, value: List[Tuple[float, float]]) -> List[Tuple[float, float]]:
        if len(value) < 2:
            raise ValueError("at least two breakpoints are required")
        if value[0] != (0.0, 0.0) or value[-1] != (1.0, 100.0):
            raise ValueError("breakpoints must start at (0, 0) and end at (1, 100)")
        for (raw_a, score_a), (raw_b, score_b) in zip(value, value[1:]):
            if raw_b <= raw_a:
                raise ValueError("breakpoint raw values must be strictly increasing")
            if score_b < score_a:
                raise ValueError("breakpoint scores must not decrease")
        return value

    @field_validator("confusable_pairs")
    @classmethod
    def _check_pairs(cls, value: List[Tuple[str, str]]) -> List[Tuple[str, str]]:
        for left, right in value:
            if len(left) != 1 or len(right) != 1:
                raise ValueError(f"confusable pair ({left!r}, {right!r}) must be single characters")
        return value

    @model_validator(mode="after")
    def _check_bands(self) -> "ScoringConfig":
        bands = self.feedback_bands
        if not bands:
            raise ValueError("at least one feedback band is required")
        thresholds = [band.min_score for band in bands]
        if any(b >= a for a, b in zip(thresholds, thresholds[1:])):
            raise ValueError("feedback band thresholds must be strictly decreasing")
        if thresholds[-1] != 0:
            raise ValueError("the last feedback band must start at 0")
        return self

    def confusable_set(self) -> frozenset[frozenset[str]]:
        return frozenset(frozenset(pair) for pair in self.confusable_pairs)


@lru_cache(maxsize=1)
def load_scoring_config() -> ScoringConfig:
    """Return the process-wide scoring config, reading ``SCORING_CONFIG_PATH`` once."""

    path = os.getenv("SCORING_CONFIG_PATH")
    if not path:
        return ScoringConfig()

    config = ScoringConfig.model_validate_json(Path(path).read_text(encoding="utf-8"))
    logger.info("Loaded scoring config from %s", path)
    return config
