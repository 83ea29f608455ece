"""Canonical form of Japanese sentences before they are compared.

The rules are a heuristic: they deliberately unify a few register and spelling
variants so that learners are not penalised for them.
"""

from __future__ import annotations

import re
import unicodedata
from typing import List


WHITESPACE_RE = re.compile(r"[\s　]+")
PUNCT_RE = re.compile(r"[\s。、！？.,!?()（）]+")
BOUNDARY_RE = re.compile(r"[\s　。、！？.,!?｡､．，()（）]+")

# Applied in order; every replacement is a fixed point of the rules before it.
VARIANT_RULES: List[tuple[re.Pattern[str], str]] = [
    (re.compile(r"ます(?:って|か|よ|ね)+"), "ます"),
    (re.compile(r"です(?:って|か|よ|ね)+"), "です"),
    (re.compile(r"([てで])(?:います|いる)"), r"\1る"),
    (re.compile(r"ン"), "ん"),
]


def normalize_text(text: str) -> str:
    """Return the canonical spelling of ``text``; never fails, may return ``""``."""

    normalised = text.strip().lower()
    normalised = WHITESPACE_RE.sub("", normalised)
    # Deleting characters can bring a combining mark next to a new base
    # character, which NFKC then composes; repeat until stable.
    while True:
        previous = normalised
        # NFKC can surface Latin capitals from compatibility letters.
        normalised = unicodedata.normalize("NFKC", normalised).lower()
        normalised = PUNCT_RE.sub("", normalised)
        for pattern, replacement in VARIANT_RULES:
            normalised = pattern.sub(replacement, normalised)
        if normalised == previous:
            return normalised


def tokenize(text: str) -> List[str]:
    """Split on whitespace and sentence punctuation, then normalise each chunk.

    Japanese is not whitespace-delimited, so an unspaced sentence yields a
    single token.
    """

    chunks = BOUNDARY_RE.split(unicodedata.normalize("NFKC", text))
    tokens = (normalize_text(chunk) for chunk in chunks)
    return [token for token in tokens if token]
