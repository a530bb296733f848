"""
Name correction for OCR-garbled holder names.

Three tiers, first success wins:
1. Exact table of systematic misreadings (JNFI -> JOHN)
2. Nearest reference name by Levenshtein distance, within thresholds
3. Letter-confusion substitution in trigger contexts, accepted only if
   the result is itself a reference name

A token no tier can validate is returned unchanged.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from passportscan.reference import ReferenceData, default_reference_data

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

DEFAULT_MAX_DISTANCE = 3
DEFAULT_MIN_SIMILARITY = 0.6

# (misread letter, intended letter, context in which the swap is tried)
CONFUSION_RULES: tuple[tuple[str, str, re.Pattern[str]], ...] = (
    ("F", "H", re.compile(r"(?<=[AEIOUJSTCGPW])F")),
    ("H", "F", re.compile(r"(?<=[AEIOU])H(?=[AEIOULR])")),
    ("I", "O", re.compile(r"(?<=[^AEIOU])I(?=[^AEIOU])")),
    ("O", "I", re.compile(r"(?<=[^AEIOU])O(?=[^AEIOU])")),
    ("A", "N", re.compile(r"(?<=[AEIOU])A")),
    ("N", "A", re.compile(r"(?<=[^AEIOU])N(?=[^AEIOU])")),
)


def levenshtein_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein edit distance between two strings."""
    if len(s1) < len(s2):
        return levenshtein_distance(s2, s1)

    if len(s2) == 0:
        return len(s1)

    previous_row = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        current_row = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = previous_row[j + 1] + 1
            deletions = current_row[j] + 1
            substitutions = previous_row[j] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row

    return previous_row[-1]


def similarity(s1: str, s2: str) -> float:
    """1 - distance / longer length; 1.0 for two empty strings."""
    longest = max(len(s1), len(s2))
    if longest == 0:
        return 1.0
    return 1.0 - levenshtein_distance(s1, s2) / longest


# =============================================================================
# CORRECTOR
# =============================================================================


@dataclass(frozen=True)
class NameCorrection:
    """Outcome of correcting one token."""

    original: str
    corrected: str
    method: str  # "exact", "fuzzy", "context", "none"
    distance: int = 0

    @property
    def changed(self) -> bool:
        return self.corrected != self.original


class NameCorrector:
    """
    Repairs garbled name tokens against a reference name list.

    Example:
        >>> corrector = NameCorrector()
        >>> corrector.correct("JNFI")
        'JOHN'
        >>> corrector.correct("SMLTH")
        'SMITH'
        >>> corrector.correct("XQZWVY")
        'XQZWVY'
    """

    def __init__(
        self,
        reference: ReferenceData | None = None,
        max_distance: int = DEFAULT_MAX_DISTANCE,
        min_similarity: float = DEFAULT_MIN_SIMILARITY,
    ) -> None:
        self.reference = reference or default_reference_data()
        self.max_distance = max_distance
        self.min_similarity = min_similarity

    def correct(self, token: str) -> str:
        """Return the corrected token, or the token unchanged."""
        return self.analyze(token).corrected

    def analyze(self, token: str) -> NameCorrection:
        """
        Correct a token and report which tier did it.

        Args:
            token: A single name token from OCR output.

        Returns:
            NameCorrection with method "none" if nothing applied.
        """
        if not token:
            return NameCorrection(token, token, "none")

        upper = token.upper()

        exact = self.reference.exact_corrections.get(upper)
        if exact:
            logger.debug("Corrected name (exact): %s -> %s", token, exact)
            return NameCorrection(token, exact, "exact", levenshtein_distance(upper, exact))

        fuzzy = self._nearest_reference_name(upper)
        if fuzzy is not None:
            candidate, distance = fuzzy
            if distance > 0:
                logger.debug("Corrected name (fuzzy): %s -> %s", token, candidate)
            return NameCorrection(token, candidate, "fuzzy", distance)

        substituted = self._confusion_substitution(upper)
        if substituted is not None:
            logger.debug("Corrected name (context): %s -> %s", token, substituted)
            return NameCorrection(
                token, substituted, "context", levenshtein_distance(upper, substituted)
            )

        return NameCorrection(token, token, "none")

    def _nearest_reference_name(self, upper: str) -> tuple[str, int] | None:
        """Closest reference name if within both thresholds, else None."""
        best_name = None
        best_distance = None

        for candidate in self.reference.reference_names:
            distance = levenshtein_distance(upper, candidate)
            if best_distance is None or distance < best_distance:
                best_name, best_distance = candidate, distance
                if distance == 0:
                    break

        if best_name is None or best_distance > self.max_distance:
            return None

        score = 1.0 - best_distance / max(len(upper), len(best_name))
        if score <= self.min_similarity:
            return None
        return best_name, best_distance

    def _confusion_substitution(self, upper: str) -> str | None:
        """
        Try letter-confusion swaps, one rule at a time and then all together.

        Contexts are matched against the uncorrected token, so one swap
        never creates the trigger for another.
        """
        known = self.reference.reference_name_set
        combined = list(upper)
        touched: set[int] = set()

        for wrong, right, context in CONFUSION_RULES:
            if wrong not in upper:
                continue
            chars = list(upper)
            for match in context.finditer(upper):
                chars[match.start()] = right
                if match.start() not in touched:
                    combined[match.start()] = right
                    touched.add(match.start())
            candidate = "".join(chars)
            if candidate != upper and candidate in known:
                return candidate

        candidate = "".join(combined)
        if candidate != upper and candidate in known:
            return candidate
        return None
