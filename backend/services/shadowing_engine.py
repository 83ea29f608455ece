"""Grade a shadowing attempt: normalise -> score -> token differences -> feedback."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from services.feedback import build_feedback
from services.scoring_config import ScoringConfig, load_scoring_config
from services.similarity import TokenDifferences, similarity_score, token_differences
from services.text_normalizer import normalize_text, tokenize


@dataclass(frozen=True)
class ComparisonResult:
    similarity: int
    differences: TokenDifferences
    feedback: Tuple[str, ...]

    def to_response(self) -> dict:
        return {
            "similarity": self.similarity,
            "differences": self.differences.to_response(),
            "feedback": list(self.feedback),
        }


def score(
    reference: str,
    candidate: str,
    config: Optional[ScoringConfig] = None,
) -> ComparisonResult:
    """Compare a transcription against the sentence the learner tried to say.

    Total over all strings. Two empty inputs count as identical and score 100.
    """

    if config is None:
        config = load_scoring_config()

    normalised_reference = normalize_text(reference)
    normalised_candidate = normalize_text(candidate)
    similarity = similarity_score(normalised_reference, normalised_candidate, config)

    differences = token_differences(tokenize(reference), tokenize(candidate))
    feedback = build_feedback(similarity, differences.missing, differences.added, config)

    return ComparisonResult(
        similarity=similarity,
        differences=differences,
        feedback=tuple(feedback),
    )
