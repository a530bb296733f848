"""
Reference data for name correction and field extraction.

The correction table, name lists and keyword lists are static data, not
code. They live in data/reference.yaml, are loaded once, and are passed
by reference into NameCorrector and FieldExtractor. Tests build their own
ReferenceData with synthetic lists.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from functools import cached_property, lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from passportscan.exceptions import ReferenceDataError

logger = logging.getLogger(__name__)

DEFAULT_REFERENCE_PATH = Path(__file__).parent / "data" / "reference.yaml"

_LIST_KEYS = ("given_names", "surnames", "nationality_keywords", "document_labels")


def _unique_upper(values: Iterable[str]) -> tuple[str, ...]:
    """Uppercase, strip and deduplicate, keeping first-seen order."""
    seen: dict[str, None] = {}
    for value in values:
        item = str(value).strip().upper()
        if item:
            seen.setdefault(item, None)
    return tuple(seen)


@dataclass(frozen=True)
class ReferenceData:
    """
    Immutable lookup tables used during extraction.

    Attributes:
        exact_corrections: Known garbled token -> correct token.
        given_names: Common given names.
        surnames: Common surnames.
        nationality_keywords: Country/state keywords in match priority order.
        document_labels: Printed labels that are never a holder's name.
    """

    exact_corrections: Mapping[str, str] = field(default_factory=dict)
    given_names: tuple[str, ...] = ()
    surnames: tuple[str, ...] = ()
    nationality_keywords: tuple[str, ...] = ()
    document_labels: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        corrections = {
            str(k).strip().upper(): str(v).strip().upper()
            for k, v in dict(self.exact_corrections).items()
        }
        # Identity entries carry no information
        corrections = {k: v for k, v in corrections.items() if k != v}
        object.__setattr__(self, "exact_corrections", MappingProxyType(corrections))
        object.__setattr__(self, "given_names", _unique_upper(self.given_names))
        object.__setattr__(self, "surnames", _unique_upper(self.surnames))
        object.__setattr__(
            self, "nationality_keywords", _unique_upper(self.nationality_keywords)
        )
        object.__setattr__(
            self, "document_labels", frozenset(_unique_upper(self.document_labels))
        )

    @cached_property
    def reference_names(self) -> tuple[str, ...]:
        """Given names then surnames, deduplicated."""
        return _unique_upper(self.given_names + self.surnames)

    @cached_property
    def reference_name_set(self) -> frozenset[str]:
        return frozenset(self.reference_names)

    @cached_property
    def non_name_words(self) -> frozenset[str]:
        """Single words that must not be taken as a name or surname.

        Country words that are also reference names (GEORGIA, INDIA) stay
        usable as names; printed labels never are.
        """
        words = set(self.document_labels)
        for keyword in self.nationality_keywords:
            words.update(word for word in keyword.split() if word not in self.reference_name_set)
        return frozenset(words)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ReferenceData:
        """
        Build from a parsed YAML mapping.

        Raises:
            ReferenceDataError: If a section has the wrong shape.
        """
        if not isinstance(data, Mapping):
            raise ReferenceDataError(
                f"reference data must be a mapping, got {type(data).__name__}"
            )

        corrections = data.get("exact_corrections") or {}
        if not isinstance(corrections, Mapping):
            raise ReferenceDataError("exact_corrections must be a mapping")

        lists: dict[str, list[str]] = {}
        for key in _LIST_KEYS:
            value = data.get(key) or []
            if not isinstance(value, list):
                raise ReferenceDataError(f"{key} must be a list, got {type(value).__name__}")
            lists[key] = [str(item) for item in value]

        return cls(
            exact_corrections=corrections,
            given_names=tuple(lists["given_names"]),
            surnames=tuple(lists["surnames"]),
            nationality_keywords=tuple(lists["nationality_keywords"]),
            document_labels=frozenset(lists["document_labels"]),
        )


def load_reference_data(path: Path | None = None) -> ReferenceData:
    """
    Load reference data from a YAML file.

    Args:
        path: YAML file (defaults to the packaged data/reference.yaml).

    Returns:
        ReferenceData instance.

    Raises:
        ReferenceDataError: If the file is missing or malformed.
    """
    path = Path(path) if path is not None else DEFAULT_REFERENCE_PATH

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ReferenceDataError(f"Cannot read reference data {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ReferenceDataError(f"Malformed reference data {path}: {e}") from e

    reference = ReferenceData.from_mapping(data)
    logger.debug(
        "Loaded reference data from %s: %d names, %d corrections",
        path,
        len(reference.reference_names),
        len(reference.exact_corrections),
    )
    return reference


@lru_cache(maxsize=1)
def default_reference_data() -> ReferenceData:
    """Packaged reference data, loaded once per process."""
    return load_reference_data()
