"""Metric helpers computed from a text segmentation."""

from __future__ import annotations

from typing import List, Tuple, Union

from tools.segmenter import Segmentation, segment, words as split_words

# Returned by every average whose divisor is zero.
NEUTRAL_AVERAGE = 0.0

SECONDS_PER_MINUTE = 60
MINUTES_PER_HOUR = 60

TextLike = Union[str, Segmentation]


def _ensure_segmentation(source: TextLike) -> Segmentation:
    if isinstance(source, Segmentation):
        return source
    return segment(source or "")


def word_count(source: TextLike) -> int:
    return len(_ensure_segmentation(source).words)


def character_count(source: TextLike) -> int:
    """Number of code points (not bytes)."""
    return len(_ensure_segmentation(source).text)


def character_count_no_spaces(source: TextLike) -> int:
    """Character count minus ASCII spaces only; tabs and newlines still count."""
    text = _ensure_segmentation(source).text
    return len(text) - text.count(" ")


def line_count(source: TextLike) -> int:
    return len(_ensure_segmentation(source).lines)


def paragraph_count(source: TextLike) -> int:
    return len(_ensure_segmentation(source).paragraphs)


def sentence_count(source: TextLike) -> int:
    return len(_ensure_segmentation(source).sentences)


def sentence_word_counts(source: TextLike) -> List[int]:
    """Word count of every sentence, sorted ascending (stable)."""
    seg = _ensure_segmentation(source)
    return sorted(len(split_words(sentence)) for sentence in seg.sentences)


def longest_sentence_words(source: TextLike) -> int:
    counts = sentence_word_counts(source)
    return counts[-1] if counts else 0


def shortest_sentence_words(source: TextLike) -> int:
    counts = sentence_word_counts(source)
    return counts[0] if counts else 0


def average_sentence_words(source: TextLike) -> float:
    seg = _ensure_segmentation(source)
    if not seg.sentences:
        return NEUTRAL_AVERAGE
    return len(seg.words) / len(seg.sentences)


def average_sentence_characters(source: TextLike) -> float:
    seg = _ensure_segmentation(source)
    if not seg.sentences:
        return NEUTRAL_AVERAGE
    return len(seg.text) / len(seg.sentences)


def average_word_length(source: TextLike) -> float:
    """
    Mean length over every word occurrence.

    Repeated words weigh once per occurrence; this is not an average over
    distinct words.
    """
    seg = _ensure_segmentation(source)
    if not seg.words:
        return NEUTRAL_AVERAGE
    return sum(len(word) for word in seg.words) / len(seg.words)


def unique_word_count(source: TextLike) -> int:
    """Distinct words after lower-casing. Ignores the keyword match-case toggle."""
    return len({word.lower() for word in _ensure_segmentation(source).words})


def calculate_duration_seconds(count: int, rate_per_minute: Union[int, float]) -> int:
    """
    Whole seconds needed to get through ``count`` units at ``rate_per_minute``.

    Fractional seconds are truncated. A non-positive rate yields 0.
    """
    if not rate_per_minute or rate_per_minute <= 0:
        return 0
    return int(count / rate_per_minute * SECONDS_PER_MINUTE)


def _plural(value: int, singular: str, plural: str) -> str:
    return singular if value == 1 else plural


def duration_breakdown(total_seconds: int) -> List[Tuple[int, str]]:
    """
    Split a duration into its largest applicable units.

    Hours only appear once the minute count exceeds 60; minutes only when
    non-zero. Labels are singular for exactly 1 and plural otherwise.
    """
    total_seconds = max(0, int(total_seconds))
    minutes, seconds = divmod(total_seconds, SECONDS_PER_MINUTE)

    if minutes > MINUTES_PER_HOUR:
        hours, remaining_minutes = divmod(minutes, MINUTES_PER_HOUR)
        return [
            (hours, _plural(hours, "hr", "hrs")),
            (remaining_minutes, _plural(remaining_minutes, "min", "mins")),
            (seconds, _plural(seconds, "sec", "secs")),
        ]
    if minutes > 0:
        return [
            (minutes, _plural(minutes, "min", "mins")),
            (seconds, _plural(seconds, "sec", "secs")),
        ]
    return [(seconds, _plural(seconds, "sec", "secs"))]


def format_duration(total_seconds: int, compact: bool = True) -> str:
    """
    Render a duration.

    compact=True gives the clock form ``"0 min 27 sec"`` (hours added past
    the hour threshold); compact=False joins the labeled breakdown, e.g.
    ``"27 secs"`` or ``"1 min 5 secs"``.
    """
    if not compact:
        return " ".join(f"{value} {label}" for value, label in duration_breakdown(total_seconds))

    total_seconds = max(0, int(total_seconds))
    minutes, seconds = divmod(total_seconds, SECONDS_PER_MINUTE)
    if minutes > MINUTES_PER_HOUR:
        hours, minutes = divmod(minutes, MINUTES_PER_HOUR)
        return f"{hours} hr {minutes} min {seconds} sec"
    return f"{minutes} min {seconds} sec"


def estimate_duration(source: TextLike, rate_per_minute: Union[int, float], compact: bool = True) -> str:
    """Formatted time estimate for the words in ``source`` at the given rate."""
    return format_duration(
        calculate_duration_seconds(word_count(source), rate_per_minute),
        compact=compact,
    )
