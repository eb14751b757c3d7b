"""
Statistics Option Set
=====================

Which statistics are shown, in which order, and the rates used by the three
time estimates. The enabled list is rebuilt from per-kind booleans in a fixed
canonical order on every change and can be persisted as a flat JSON list.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Union

import json_utils as json

logger = logging.getLogger(__name__)


class StatisticKind(str, Enum):
    """Displayable statistic. Values are the persisted tag names."""
    WORDS = "Words"
    UNIQUE_WORDS = "UniqueWords"
    CHARACTERS = "Characters"
    CHARACTER_COUNT_NO_SPACES = "CharacterCountNoSpaces"
    SENTENCES = "Sentences"
    LONGEST_SENTENCE_WORDS = "LongestSentenceWords"
    SHORTEST_SENTENCE_WORDS = "ShortestSentenceWords"
    AVG_SENTENCE_WORDS = "AvgSentenceWords"
    AVG_SENTENCE_CHARS = "AvgSentenceChars"
    AVG_WORD_LENGTH = "AvgWordLength"
    PARAGRAPHS = "Paragraphs"
    LINE_COUNT = "LineCount"
    READING_TIME = "ReadingTime"
    SPEAKING_TIME = "SpeakingTime"
    HAND_WRITING_TIME = "HandWritingTime"


# Display order used whenever the enabled list is rebuilt
CANONICAL_ORDER = tuple(StatisticKind)

PARAMETERIZED_KINDS = frozenset({
    StatisticKind.READING_TIME,
    StatisticKind.SPEAKING_TIME,
    StatisticKind.HAND_WRITING_TIME,
})

DEFAULT_RATES: Dict[StatisticKind, int] = {
    StatisticKind.READING_TIME: 275,
    StatisticKind.SPEAKING_TIME: 180,
    StatisticKind.HAND_WRITING_TIME: 68,
}

DEFAULT_ENABLED = (
    StatisticKind.WORDS,
    StatisticKind.CHARACTERS,
    StatisticKind.SENTENCES,
    StatisticKind.PARAGRAPHS,
    StatisticKind.READING_TIME,
    StatisticKind.SPEAKING_TIME,
)

_RATE_PATTERN = re.compile(r"[0-9]+")
_KIND_ALIASES = {
    re.sub(r"[^a-z]", "", kind.value.lower()): kind for kind in StatisticKind
}


def resolve_kind(name: Union[str, StatisticKind]) -> StatisticKind:
    """
    Look up a kind by tag ("ReadingTime"), enum name ("READING_TIME") or a
    loose spelling ("reading-time"). Raises ValueError when unknown.
    """
    if isinstance(name, StatisticKind):
        return name
    key = re.sub(r"[^a-z]", "", str(name).lower())
    try:
        return _KIND_ALIASES[key]
    except KeyError:
        raise ValueError(f"Unknown statistic kind: {name!r}") from None


def parse_rate(value: Any) -> int:
    """
    Parse a units-per-minute rate.

    Integers >= 0 pass through; strings must be plain ASCII digits. Anything
    else (negative, fractional, empty, non-numeric) falls back to 0.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value if value >= 0 else 0
    if isinstance(value, str) and _RATE_PATTERN.fullmatch(value):
        return int(value)
    return 0


@dataclass(frozen=True, eq=False)
class StatisticOption:
    """
    One enabled statistic. Parameterized kinds carry a rate.

    Equality and hashing use the kind only, so ReadingTime(275) and
    ReadingTime(300) are the same option.
    """

    kind: StatisticKind
    rate: Optional[int] = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StatisticOption):
            return NotImplemented
        return self.kind == other.kind

    def __hash__(self) -> int:
        return hash(self.kind)

    @property
    def is_parameterized(self) -> bool:
        return self.kind in PARAMETERIZED_KINDS

    def to_json(self) -> Union[str, Dict[str, int]]:
        if self.is_parameterized:
            return {self.kind.value: self.rate or 0}
        return self.kind.value

    @classmethod
    def from_json(cls, raw: Any) -> "StatisticOption":
        """Parse ``"Words"`` or ``{"ReadingTime": 275}``. Raises ValueError."""
        if isinstance(raw, str):
            kind = StatisticKind(raw)
            if kind in PARAMETERIZED_KINDS:
                raise ValueError(f"{kind.value} requires a rate")
            return cls(kind)

        if isinstance(raw, dict) and len(raw) == 1:
            (tag, rate), = raw.items()
            kind = StatisticKind(tag)
            if kind not in PARAMETERIZED_KINDS:
                raise ValueError(f"{kind.value} does not take a rate")
            if isinstance(rate, bool) or not isinstance(rate, int) or rate < 0:
                raise ValueError(f"Invalid rate for {kind.value}: {rate!r}")
            return cls(kind, rate)

        raise ValueError(f"Unrecognized statistic option: {raw!r}")

    def __repr__(self) -> str:
        if self.is_parameterized:
            return f"{self.kind.value}({self.rate})"
        return self.kind.value


class StatisticOptionSet:
    """Per-kind toggles plus rates; exposes the derived, ordered option list."""

    def __init__(
        self,
        enabled: Iterable[Union[StatisticKind, str]] = (),
        rates: Optional[Mapping[Union[StatisticKind, str], Any]] = None,
    ):
        self._enabled: Dict[StatisticKind, bool] = {kind: False for kind in CANONICAL_ORDER}
        self._rates: Dict[StatisticKind, int] = dict(DEFAULT_RATES)
        self._options: List[StatisticOption] = []

        for kind, rate in (rates or {}).items():
            self._rates[self._require_parameterized(kind)] = parse_rate(rate)
        for kind in enabled:
            self._enabled[resolve_kind(kind)] = True
        self._rebuild()

    @classmethod
    def defaults(cls, rates: Optional[Mapping[Union[StatisticKind, str], Any]] = None) -> "StatisticOptionSet":
        return cls(DEFAULT_ENABLED, rates)

    @staticmethod
    def _require_parameterized(kind: Union[StatisticKind, str]) -> StatisticKind:
        resolved = resolve_kind(kind)
        if resolved not in PARAMETERIZED_KINDS:
            raise ValueError(f"{resolved.value} does not take a rate")
        return resolved

    def _rebuild(self) -> None:
        # Cleared and rebuilt from the booleans every time, never patched.
        self._options = [
            StatisticOption(kind, self._rates[kind] if kind in PARAMETERIZED_KINDS else None)
            for kind in CANONICAL_ORDER
            if self._enabled[kind]
        ]

    def toggle(self, kind: Union[StatisticKind, str], enabled: bool) -> bool:
        """Enable or disable a kind. Returns True when the list changed."""
        resolved = resolve_kind(kind)
        enabled = bool(enabled)
        if self._enabled[resolved] == enabled:
            return False
        self._enabled[resolved] = enabled
        self._rebuild()
        return True

    def set_rate(self, kind: Union[StatisticKind, str], rate: Any) -> int:
        """Update a rate (unparseable input becomes 0). Returns the stored rate."""
        resolved = self._require_parameterized(kind)
        self._rates[resolved] = parse_rate(rate)
        self._rebuild()
        return self._rates[resolved]

    def rate(self, kind: Union[StatisticKind, str]) -> int:
        return self._rates[self._require_parameterized(kind)]

    @property
    def rates(self) -> Dict[StatisticKind, int]:
        return dict(self._rates)

    def is_enabled(self, kind: Union[StatisticKind, str]) -> bool:
        return self._enabled[resolve_kind(kind)]

    @property
    def options(self) -> List[StatisticOption]:
        return list(self._options)

    def __iter__(self) -> Iterator[StatisticOption]:
        return iter(list(self._options))

    def __len__(self) -> int:
        return len(self._options)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, StatisticOption):
            return self._enabled[item.kind]
        if isinstance(item, (StatisticKind, str)):
            try:
                return self._enabled[resolve_kind(item)]
            except ValueError:
                return False
        return False

    def copy(self) -> "StatisticOptionSet":
        enabled = [kind for kind, on in self._enabled.items() if on]
        return StatisticOptionSet(enabled, self._rates)

    def serialize(self) -> str:
        return json.dumps([option.to_json() for option in self._options])

    @classmethod
    def restore(
        cls,
        blob: Optional[Union[str, bytes]],
        rates: Optional[Mapping[Union[StatisticKind, str], Any]] = None,
        default_rates: Optional[Mapping[Union[StatisticKind, str], Any]] = None,
    ) -> "StatisticOptionSet":
        """
        Rebuild an option set from a serialized list.

        Rates are layered: ``default_rates``, then the rates carried by the
        list, then explicit ``rates``. Missing or corrupt input yields the
        default set.
        """
        seeded_rates: Dict[StatisticKind, int] = {
            cls._require_parameterized(kind): parse_rate(rate)
            for kind, rate in (default_rates or {}).items()
        }

        def _apply_overrides() -> None:
            for kind, rate in (rates or {}).items():
                seeded_rates[cls._require_parameterized(kind)] = parse_rate(rate)

        if not blob:
            _apply_overrides()
            return cls.defaults(seeded_rates)

        try:
            raw_items = json.loads(blob)
            if not isinstance(raw_items, list):
                raise ValueError(f"Expected a list, got {type(raw_items).__name__}")
            parsed = [StatisticOption.from_json(item) for item in raw_items]
        except (json.JSONDecodeError, ValueError, TypeError) as exc:
            logger.warning(f"Discarding malformed statistics options ({exc}); using defaults")
            _apply_overrides()
            return cls.defaults(seeded_rates)

        seeded_rates.update(
            {option.kind: option.rate for option in parsed if option.is_parameterized}
        )
        _apply_overrides()
        return cls([option.kind for option in parsed], seeded_rates)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StatisticOptionSet):
            return NotImplemented
        return self._enabled == other._enabled and self._rates == other._rates

    def __repr__(self) -> str:
        return f"StatisticOptionSet({self._options!r})"
