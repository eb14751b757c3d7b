"""
Text segmentation: words, sentences, paragraphs and lines.

All helpers are pure functions of the input text. ``segment`` bundles the
four results for one pass and is memoized so that every statistic computed
from the same text shares a single scan.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator, List, NamedTuple, Tuple

WORD_PATTERN = re.compile(r"\w+")
SENTENCE_PATTERN = re.compile(r"[^.!?]+[.!?]", re.IGNORECASE)
PARAGRAPH_SEPARATOR = re.compile(r"\n\s*\n")


class TextSpan(NamedTuple):
    """A matched slice of the source text."""

    text: str
    start: int
    end: int


def iter_words(text: str) -> Iterator[TextSpan]:
    """Lazily yield word spans left to right. Calling again restarts the scan."""
    for match in WORD_PATTERN.finditer(text or ""):
        yield TextSpan(match.group(0), match.start(), match.end())


def iter_sentences(text: str) -> Iterator[TextSpan]:
    """
    Lazily yield sentence spans.

    A sentence is a run of non-terminator characters closed by one of
    ``. ! ?``. A trailing fragment with no terminator is not a sentence.
    """
    for match in SENTENCE_PATTERN.finditer(text or ""):
        yield TextSpan(match.group(0), match.start(), match.end())


def words(text: str) -> List[str]:
    return [span.text for span in iter_words(text)]


def sentences(text: str) -> List[str]:
    return [span.text for span in iter_sentences(text)]


def paragraphs(text: str) -> List[str]:
    """Split on blank-line separators. Empty text has no paragraphs."""
    if not text:
        return []
    return PARAGRAPH_SEPARATOR.split(text)


def lines(text: str) -> List[str]:
    """
    Split on ``\\n``. A trailing newline does not add an empty last line and
    a carriage return right before the newline is dropped.
    """
    if not text:
        return []

    parts = text.split("\n")
    if parts[-1] == "":
        parts.pop()
    return [part[:-1] if part.endswith("\r") else part for part in parts]


@dataclass(frozen=True)
class Segmentation:
    """All segmentation results for one text snapshot."""

    text: str
    words: Tuple[str, ...]
    sentences: Tuple[str, ...]
    paragraphs: Tuple[str, ...]
    lines: Tuple[str, ...]


@lru_cache(maxsize=64)
def segment(text: str) -> Segmentation:
    text = text or ""
    return Segmentation(
        text=text,
        words=tuple(words(text)),
        sentences=tuple(sentences(text)),
        paragraphs=tuple(paragraphs(text)),
        lines=tuple(lines(text)),
    )
