"""Experience mention tokenizer for resume text.

Grammar, matched case-insensitively anywhere in the text::

    MENTION := INTEGER WS* UNIT
    INTEGER := [0-9]+
    UNIT    := "year" ["s"] | "yr" ["s"] | "month" ["s"] | "mo" ["s"]

A unit is recognised by its prefix only, so "5 yearly" and "3 more" both
produce mentions. Mentions are never deduplicated: a resume stating
"2 years (24 months)" accumulates 48 months. Year-like units (those containing
"year" or "yr") count twelve months per unit; every other unit counts one.
"""

import re
from dataclasses import dataclass
from typing import Iterator, List

MENTION_PATTERN = re.compile(r"([0-9]+)\s*(years?|yrs?|months?|mos?)", re.IGNORECASE)

MONTHS_PER_YEAR = 12
YEAR_UNIT_MARKERS = ("year", "yr")


@dataclass(frozen=True)
class ExperienceMention:
    """A single INTEGER + UNIT occurrence in the text."""
    value: int
    unit: str
    start: int

    @property
    def is_years(self) -> bool:
        unit = self.unit.lower()
        return any(marker in unit for marker in YEAR_UNIT_MARKERS)

    @property
    def months(self) -> int:
        return self.value * MONTHS_PER_YEAR if self.is_years else self.value


def tokenize(text: str) -> Iterator[ExperienceMention]:
    """Yield every experience mention in document order."""
    for match in MENTION_PATTERN.finditer(text or ""):
        yield ExperienceMention(
            value=int(match.group(1)),
            unit=match.group(2).lower(),
            start=match.start(),
        )


def find_mentions(text: str) -> List[ExperienceMention]:
    return list(tokenize(text))


def total_months(text: str) -> int:
    """Sum of all mentions, in months."""
    return sum(mention.months for mention in tokenize(text))


def extract_experience_years(text: str) -> int:
    """Accumulated experience, floored to whole years."""
    return total_months(text) // MONTHS_PER_YEAR
