"""
Statistics report: evaluates enabled options against a segmentation.

Each option maps to one metric helper in ``tools.text_metrics``; the report
keeps the option order and attaches a display string for the panel.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from statistics_options import StatisticKind, StatisticOption
from tools import text_metrics
from tools.segmenter import Segmentation, segment

STATISTIC_LABELS: Dict[StatisticKind, str] = {
    StatisticKind.WORDS: "Words",
    StatisticKind.UNIQUE_WORDS: "Unique Words",
    StatisticKind.CHARACTERS: "Characters",
    StatisticKind.CHARACTER_COUNT_NO_SPACES: "Character Count (No Spaces)",
    StatisticKind.SENTENCES: "Sentences",
    StatisticKind.LONGEST_SENTENCE_WORDS: "Longest Sentence (Words)",
    StatisticKind.SHORTEST_SENTENCE_WORDS: "Shortest Sentence (Words)",
    StatisticKind.AVG_SENTENCE_WORDS: "Avg. Sentence (Words)",
    StatisticKind.AVG_SENTENCE_CHARS: "Avg. Sentence (Characters)",
    StatisticKind.AVG_WORD_LENGTH: "Avg. Word Length",
    StatisticKind.PARAGRAPHS: "Paragraphs",
    StatisticKind.LINE_COUNT: "Line Count",
    StatisticKind.READING_TIME: "Reading Time",
    StatisticKind.SPEAKING_TIME: "Speaking Time",
    StatisticKind.HAND_WRITING_TIME: "Hand Writing Time",
}

_COUNT_METRICS: Dict[StatisticKind, Callable[[Segmentation], int]] = {
    StatisticKind.WORDS: text_metrics.word_count,
    StatisticKind.UNIQUE_WORDS: text_metrics.unique_word_count,
    StatisticKind.CHARACTERS: text_metrics.character_count,
    StatisticKind.CHARACTER_COUNT_NO_SPACES: text_metrics.character_count_no_spaces,
    StatisticKind.SENTENCES: text_metrics.sentence_count,
    StatisticKind.LONGEST_SENTENCE_WORDS: text_metrics.longest_sentence_words,
    StatisticKind.SHORTEST_SENTENCE_WORDS: text_metrics.shortest_sentence_words,
    StatisticKind.PARAGRAPHS: text_metrics.paragraph_count,
    StatisticKind.LINE_COUNT: text_metrics.line_count,
}

_AVERAGE_METRICS: Dict[StatisticKind, Callable[[Segmentation], float]] = {
    StatisticKind.AVG_SENTENCE_WORDS: text_metrics.average_sentence_words,
    StatisticKind.AVG_SENTENCE_CHARS: text_metrics.average_sentence_characters,
    StatisticKind.AVG_WORD_LENGTH: text_metrics.average_word_length,
}


@dataclass(frozen=True)
class StatisticValue:
    """Computed value of one statistic, ready for display."""

    kind: StatisticKind
    label: str
    value: Union[int, float]
    display: str
    rate: Optional[int] = None
    breakdown: Tuple[Tuple[int, str], ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "kind": self.kind.value,
            "label": self.label,
            "value": self.value,
            "display": self.display,
        }
        if self.rate is not None:
            data["rate"] = self.rate
            data["breakdown"] = [{"value": value, "unit": unit} for value, unit in self.breakdown]
        return data


def compute_statistic(option: StatisticOption, source: Union[str, Segmentation]) -> StatisticValue:
    seg = source if isinstance(source, Segmentation) else segment(source or "")
    kind = option.kind
    label = STATISTIC_LABELS[kind]

    if kind in _COUNT_METRICS:
        value = _COUNT_METRICS[kind](seg)
        return StatisticValue(kind, label, value, str(value))

    if kind in _AVERAGE_METRICS:
        value = _AVERAGE_METRICS[kind](seg)
        return StatisticValue(kind, label, value, f"{value:.1f}")

    # Time estimates: whole seconds plus the labeled unit breakdown
    rate = option.rate or 0
    seconds = text_metrics.calculate_duration_seconds(text_metrics.word_count(seg), rate)
    return StatisticValue(
        kind,
        label,
        seconds,
        text_metrics.format_duration(seconds, compact=False),
        rate=rate,
        breakdown=tuple(text_metrics.duration_breakdown(seconds)),
    )


def build_statistics_report(
    options: Iterable[StatisticOption],
    source: Union[str, Segmentation],
) -> List[StatisticValue]:
    """Evaluate every option in order against one segmentation."""
    seg = source if isinstance(source, Segmentation) else segment(source or "")
    return [compute_statistic(option, seg) for option in options]
