"""Edit-distance similarity between a reference sentence and a transcription."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import AbstractSet, List, Sequence, Tuple

from services.scoring_config import ScoringConfig


@dataclass(frozen=True)
class TokenDifferences:
    matched: Tuple[str, ...]
    missing: Tuple[str, ...]
    added: Tuple[str, ...]

    def to_response(self) -> dict:
        return {
            "matched": list(self.matched),
            "missing": list(self.missing),
            "added": list(self.added),
        }


def weighted_edit_distance(
    reference: str,
    candidate: str,
    confusable_pairs: AbstractSet[AbstractSet[str]] = frozenset(),
    confusable_cost: float = 0.5,
) -> float:
    """Levenshtein distance over code points with cheaper confusable substitutions."""

    if not reference:
        return float(len(candidate))
    if not candidate:
        return float(len(reference))

    previous: List[float] = [float(j) for j in range(len(candidate) + 1)]
    for i, ref_char in enumerate(reference, start=1):
        current: List[float] = [float(i)]
        for j, cand_char in enumerate(candidate, start=1):
            if ref_char == cand_char:
                substitution = previous[j - 1]
            elif frozenset((ref_char, cand_char)) in confusable_pairs:
                substitution = previous[j - 1] + confusable_cost
            else:
                substitution = previous[j - 1] + 1
            current.append(min(substitution, current[j - 1] + 1, previous[j] + 1))
        previous = current
    return previous[-1]


def raw_similarity(reference: str, candidate: str, config: ScoringConfig) -> float:
    longest = max(len(reference), len(candidate))
    if longest == 0:
        return 1.0
    distance = weighted_edit_distance(
        reference,
        candidate,
        config.confusable_set(),
        config.confusable_cost,
    )
    return max(0.0, 1.0 - distance / longest)


def rescale(raw: float, breakpoints: Sequence[Tuple[float, float]]) -> float:
    """Map a [0, 1] ratio onto 0-100 through the configured anchor points."""

    raw = min(1.0, max(0.0, raw))
    for (raw_lo, score_lo), (raw_hi, score_hi) in zip(breakpoints, breakpoints[1:]):
        if raw == raw_hi:
            return score_hi
        if raw < raw_hi:
            return score_lo + (raw - raw_lo) / (raw_hi - raw_lo) * (score_hi - score_lo)
    return breakpoints[-1][1]


def similarity_score(reference: str, candidate: str, config: ScoringConfig) -> int:
    """Return the 0-100 score for two already-normalised strings.

    100 is reserved for an exact match; any other pair is capped at 99.
    """

    if reference == candidate:
        return 100

    scaled = rescale(raw_similarity(reference, candidate, config), config.breakpoints)
    # Round half up; round() would send 88.5 to 88.
    score = math.floor(scaled + 0.5)
    return min(99, max(0, score))


def token_differences(reference_tokens: Sequence[str], candidate_tokens: Sequence[str]) -> TokenDifferences:
    """Set-membership comparison of tokens; word order is ignored."""

    candidate_set = set(candidate_tokens)
    reference_set = set(reference_tokens)

    matched = tuple(token for token in reference_tokens if token in candidate_set)
    missing = tuple(token for token in reference_tokens if token not in candidate_set)
    added = tuple(token for token in candidate_tokens if token not in reference_set)
    return TokenDifferences(matched=matched, missing=missing, added=added)
