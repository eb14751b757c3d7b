"""Keyword frequency table and CSV export."""

from __future__ import annotations

import csv
import io
import logging
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Literal

from tools.segmenter import iter_words

logger = logging.getLogger(__name__)

EXPORT_FILENAME = "results.csv"
EXPORT_HEADER = ("Word", "Count")

DensityBasis = Literal["distinct_keys", "total_words"]


@dataclass(frozen=True)
class KeywordRow:
    """One rendered row of the keyword table."""

    word: str
    count: int
    density: float


def build_dictionary(text: str, match_case: bool) -> Dict[str, int]:
    """
    Count word occurrences.

    With match_case on, keys keep the original casing; otherwise they are
    lower-cased so differently-cased tokens fold together. Always rebuilt
    from scratch.
    """
    occurrences = Counter(
        span.text if match_case else span.text.lower() for span in iter_words(text)
    )
    return dict(occurrences)


def density_divisor(dictionary: Dict[str, int], basis: DensityBasis = "distinct_keys") -> int:
    """
    Divisor shared by every row of one keyword table.

    The default basis is the number of distinct keys, which is how the
    keyword panel has always reported it. ``total_words`` uses the summed
    occurrence count instead.
    """
    if basis == "total_words":
        return sum(dictionary.values())
    if basis == "distinct_keys":
        return len(dictionary)
    raise ValueError(f"Unknown density basis: {basis!r}")


def _density(count: int, divisor: int) -> float:
    if divisor == 0:
        return 0.0
    return count / divisor * 100


def keyword_density(count: int, dictionary: Dict[str, int], basis: DensityBasis = "distinct_keys") -> float:
    """Density percentage for one keyword."""
    return _density(count, density_divisor(dictionary, basis))


def ranked_keywords(dictionary: Dict[str, int], basis: DensityBasis = "distinct_keys") -> List[KeywordRow]:
    """Rows sorted ascending by count and then reversed, so highest counts come first."""
    divisor = density_divisor(dictionary, basis)
    ordered = sorted(dictionary.items(), key=lambda item: item[1])
    return [
        KeywordRow(word=word, count=count, density=_density(count, divisor))
        for word, count in reversed(ordered)
    ]


def export_csv(dictionary: Dict[str, int]) -> bytes:
    """Two-column ``Word,Count`` table as UTF-8 bytes, rows in dictionary order."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(EXPORT_HEADER)
    for word, count in dictionary.items():
        writer.writerow((word, count))

    data = buffer.getvalue().encode("utf-8")
    logger.debug("Exported %d keywords (%d bytes)", len(dictionary), len(data))
    return data
