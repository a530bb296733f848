"""
Selection of the best recognition attempt.

Engine confidence alone is a poor judge on travel documents: a clean
read of the wrong region can score higher than a noisy read of the data
page. Each attempt's engine confidence is adjusted with document
evidence (keywords, document-number and date shapes, a plausible name)
and penalised for implausible lengths. The highest total wins; ties go
to the earlier attempt.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from passportscan.extractors.dates import DATE_PATTERN
from passportscan.extractors.fields import FULL_NAME_PATTERN
from passportscan.models import RecognitionAttempt, ScoredAttempt
from passportscan.reference import ReferenceData, default_reference_data

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

DOCUMENT_KEYWORD_PATTERN = re.compile(r"\b(?:PASSPORT|PASSEPORT|PASAPORTE)\b")
DIGIT_RUN_PATTERN = re.compile(r"(?<!\d)\d{6,12}(?!\d)")

KEYWORD_BONUS = 20
AUTHORITY_BONUS = 15
DOCUMENT_NUMBER_BONUS = 10
DATE_BONUS = 15
NAME_BONUS = 10
SHORT_TEXT_PENALTY = 20
LONG_TEXT_PENALTY = 10

DEFAULT_MIN_TEXT_LENGTH = 50
DEFAULT_MAX_TEXT_LENGTH = 2000


@dataclass
class ResultSelector:
    """
    Scores recognition attempts and picks the winner.

    Attributes:
        reference: Supplies the issuing-authority/country keywords.
        min_text_length: Shorter raw text is penalised.
        max_text_length: Longer raw text is penalised.
    """

    reference: ReferenceData | None = None
    min_text_length: int = DEFAULT_MIN_TEXT_LENGTH
    max_text_length: int = DEFAULT_MAX_TEXT_LENGTH

    def __post_init__(self) -> None:
        if self.reference is None:
            self.reference = default_reference_data()
        keywords = self.reference.nationality_keywords
        self._authority_pattern = (
            re.compile(r"\b(?:" + "|".join(re.escape(kw) for kw in keywords) + r")\b")
            if keywords
            else None
        )

    def score(self, attempt: RecognitionAttempt) -> float:
        """Engine confidence plus document evidence minus length penalties."""
        raw = attempt.raw_text
        normalized = " ".join(raw.upper().split())
        score = attempt.engine_confidence

        if DOCUMENT_KEYWORD_PATTERN.search(normalized):
            score += KEYWORD_BONUS
        if self._authority_pattern is not None and self._authority_pattern.search(normalized):
            score += AUTHORITY_BONUS
        if DIGIT_RUN_PATTERN.search(raw):
            score += DOCUMENT_NUMBER_BONUS
        if DATE_PATTERN.search(raw):
            score += DATE_BONUS
        if FULL_NAME_PATTERN.search(raw):
            score += NAME_BONUS

        if len(raw) < self.min_text_length:
            score -= SHORT_TEXT_PENALTY
        elif len(raw) > self.max_text_length:
            score -= LONG_TEXT_PENALTY

        return score

    def select(self, attempts: list[RecognitionAttempt]) -> ScoredAttempt:
        """
        Pick the highest-scoring attempt.

        Returns:
            The winner, or ScoredAttempt.empty() for an empty list.
        """
        best: ScoredAttempt | None = None
        for attempt in attempts:
            scored = ScoredAttempt(attempt=attempt, score=self.score(attempt))
            logger.debug("Score %.1f for %s", scored.score, scored.method)
            # Strict comparison keeps the first of equal scores
            if best is None or scored.score > best.score:
                best = scored

        if best is None:
            logger.debug("No recognition attempts to select from")
            return ScoredAttempt.empty()
        return best
