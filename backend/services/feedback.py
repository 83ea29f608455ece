from __future__ import annotations

from typing import List, Sequence

from services.scoring_config import FeedbackBand, ScoringConfig


def pick_band(score: int, bands: Sequence[FeedbackBand]) -> FeedbackBand:
    """Return the first band whose threshold the score reaches.

    Bands are ordered from most to least encouraging, so a higher score can
    never land in a lower band.
    """

    for band in bands:
        if score >= band.min_score:
            return band
    return bands[-1]


def build_feedback(
    score: int,
    missing: Sequence[str],
    added: Sequence[str],
    config: ScoringConfig,
) -> List[str]:
    messages = [pick_band(score, config.feedback_bands).message]

    if missing:
        messages.append(f"{config.missing_prefix}{config.token_separator.join(missing)}")

    if added:
        messages.append(f"{config.added_prefix}{config.token_separator.join(added)}")

    return messages
