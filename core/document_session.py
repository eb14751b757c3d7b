"""
Document session and recompute controller.

A ``DocumentSession`` owns the text and the configuration state (enabled
statistics, rates, match-case flag). Every mutation bumps the revision,
persists the changed keys and enqueues one recompute pass. A pass works on
an immutable ``SessionSnapshot`` so the statistics and the keyword table it
publishes always describe the same text and the same configuration.
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple, Union

from kv_store import (
    HAND_WRITING_TIME_KEY,
    MATCH_CASE_KEY,
    READING_TIME_KEY,
    SPEAKING_TIME_KEY,
    STATISTICS_OPTIONS_KEY,
    TEXT_KEY,
    InMemoryKeyValueStore,
    KeyValueStore,
    StorageUnavailableError,
)
from logging_utils import Phase, create_pipeline_logger
from statistics_options import (
    StatisticKind,
    StatisticOption,
    StatisticOptionSet,
    resolve_kind,
)
from statistics_report import StatisticValue, build_statistics_report
from tools.keyword_density import DensityBasis, KeywordRow, build_dictionary, export_csv, ranked_keywords
from tools.segmenter import segment

logger = logging.getLogger(__name__)

RATE_KEYS: Dict[StatisticKind, str] = {
    StatisticKind.READING_TIME: READING_TIME_KEY,
    StatisticKind.SPEAKING_TIME: SPEAKING_TIME_KEY,
    StatisticKind.HAND_WRITING_TIME: HAND_WRITING_TIME_KEY,
}


def parse_match_case(value: Optional[str]) -> bool:
    """Missing means off; "true"/"false" parse as expected; anything else means on."""
    if value is None:
        return False
    normalized = value.strip().lower()
    if normalized == "false":
        return False
    return True


@dataclass(frozen=True)
class ConfigurationState:
    """Everything besides the text that affects a recompute pass."""

    options: Tuple[StatisticOption, ...]
    reading_rate: int
    speaking_rate: int
    hand_writing_rate: int
    match_case: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "statistics_options": [option.to_json() for option in self.options],
            "reading_rate": self.reading_rate,
            "speaking_rate": self.speaking_rate,
            "hand_writing_rate": self.hand_writing_rate,
            "match_case": self.match_case,
        }


@dataclass(frozen=True)
class SessionSnapshot:
    text: str
    configuration: ConfigurationState
    revision: int


@dataclass(frozen=True)
class RecomputeResult:
    """Output of one recompute pass."""

    revision: int
    snapshot: SessionSnapshot
    statistics: Tuple[StatisticValue, ...]
    keywords: Dict[str, int]
    keyword_rows: Tuple[KeywordRow, ...]
    elapsed_ms: float = field(default=0.0, compare=False)

    def statistic(self, kind: Union[StatisticKind, str]) -> Optional[StatisticValue]:
        resolved = resolve_kind(kind)
        for value in self.statistics:
            if value.kind == resolved:
                return value
        return None


def compute_pass(
    snapshot: SessionSnapshot,
    density_basis: DensityBasis = "distinct_keys",
    verbose: bool = False,
) -> RecomputeResult:
    """Derive statistics and keywords from one snapshot. Reads nothing else."""
    pipeline_logger = create_pipeline_logger(snapshot.revision, verbose=verbose)
    configuration = snapshot.configuration

    with pipeline_logger.phase(Phase.SEGMENTATION):
        segmentation = segment(snapshot.text)
        pipeline_logger.debug(
            f"{len(segmentation.words)} words, {len(segmentation.sentences)} sentences"
        )

    with pipeline_logger.phase(Phase.METRICS):
        statistics = build_statistics_report(configuration.options, segmentation)

    with pipeline_logger.phase(Phase.KEYWORDS):
        keywords = build_dictionary(snapshot.text, configuration.match_case)
        keyword_rows = ranked_keywords(keywords, density_basis)

    pipeline_logger.log_timing_summary()

    return RecomputeResult(
        revision=snapshot.revision,
        snapshot=snapshot,
        statistics=tuple(statistics),
        keywords=keywords,
        keyword_rows=tuple(keyword_rows),
        elapsed_ms=pipeline_logger.total_elapsed() * 1000,
    )


class DocumentSession:
    """
    Owned document context: text + configuration + the latest result.

    Without a running event loop, persistence and recompute happen inline.
    Inside a loop, writes become fire-and-forget tasks that hand the store
    call to a single worker thread, and recompute requests
    are coalesced into a single ``call_soon`` callback; ``current_result``
    always flushes a pending pass first.
    """

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        density_basis: DensityBasis = "distinct_keys",
        default_rates: Optional[Mapping[Union[StatisticKind, str], Any]] = None,
        verbose: bool = False,
    ):
        self._store: KeyValueStore = store if store is not None else InMemoryKeyValueStore()
        self.density_basis = density_basis
        self.verbose = verbose
        self.degraded = False

        self._text = ""
        self._match_case = False
        self._options = StatisticOptionSet.defaults(default_rates)
        self._default_rates = dict(default_rates or {})

        self._revision = 0
        self._result: Optional[RecomputeResult] = None
        self._recompute_scheduled = False
        self._pending_writes: Set[asyncio.Task] = set()
        self._write_executor: Optional[ThreadPoolExecutor] = None

    # ------------------------------------------------------------------
    # State accessors
    # ------------------------------------------------------------------

    @property
    def store(self) -> KeyValueStore:
        return self._store

    @property
    def text(self) -> str:
        return self._text

    @property
    def match_case(self) -> bool:
        return self._match_case

    @property
    def options(self) -> StatisticOptionSet:
        """A copy; mutate through the session so recompute is triggered."""
        return self._options.copy()

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def persistent(self) -> bool:
        return bool(getattr(self._store, "persistent", False)) and not self.degraded

    def configuration(self) -> ConfigurationState:
        rates = self._options.rates
        return ConfigurationState(
            options=tuple(self._options.options),
            reading_rate=rates[StatisticKind.READING_TIME],
            speaking_rate=rates[StatisticKind.SPEAKING_TIME],
            hand_writing_rate=rates[StatisticKind.HAND_WRITING_TIME],
            match_case=self._match_case,
        )

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(text=self._text, configuration=self.configuration(), revision=self._revision)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self) -> "DocumentSession":
        """Restore text and configuration from the store."""
        try:
            text = self._store.get(TEXT_KEY)
            match_case = self._store.get(MATCH_CASE_KEY)
            options_blob = self._store.get(STATISTICS_OPTIONS_KEY)
            stored_rates = {
                kind: self._store.get(key) for kind, key in RATE_KEYS.items()
            }
        except (StorageUnavailableError, OSError) as exc:
            self._degrade(f"store read failed: {exc}")
            self._mark_changed()
            return self

        rates = {kind: value for kind, value in stored_rates.items() if value is not None}

        self._text = text or ""
        self._match_case = parse_match_case(match_case)
        self._options = StatisticOptionSet.restore(
            options_blob,
            rates or None,
            default_rates=self._default_rates,
        )

        logger.info(
            "Session loaded: %d chars, match_case=%s, %d statistics enabled",
            len(self._text),
            self._match_case,
            len(self._options),
        )
        self._mark_changed()
        return self

    # ------------------------------------------------------------------
    # Mutations (each one triggers exactly one recompute request)
    # ------------------------------------------------------------------

    def set_text(self, text: Optional[str]) -> int:
        self._text = text or ""
        self._persist({TEXT_KEY: self._text})
        return self._mark_changed()

    def clear_text(self) -> int:
        return self.set_text("")

    def set_match_case(self, enabled: bool) -> int:
        self._match_case = bool(enabled)
        self._persist({MATCH_CASE_KEY: "true" if self._match_case else "false"})
        return self._mark_changed()

    def toggle_match_case(self) -> int:
        return self.set_match_case(not self._match_case)

    def toggle_statistic(self, kind: Union[StatisticKind, str], enabled: bool) -> int:
        if not self._options.toggle(kind, enabled):
            return self._revision
        self._persist({STATISTICS_OPTIONS_KEY: self._options.serialize()})
        return self._mark_changed()

    def set_rate(self, kind: Union[StatisticKind, str], rate: Any) -> int:
        """Update a time-estimate rate. Raises ValueError for non-rate kinds."""
        resolved = resolve_kind(kind)
        stored = self._options.set_rate(resolved, rate)
        self._persist({
            RATE_KEYS[resolved]: str(stored),
            STATISTICS_OPTIONS_KEY: self._options.serialize(),
        })
        return self._mark_changed()

    def _mark_changed(self) -> int:
        self._revision += 1
        self._schedule_recompute()
        return self._revision

    # ------------------------------------------------------------------
    # Recompute
    # ------------------------------------------------------------------

    def _schedule_recompute(self) -> None:
        if self._recompute_scheduled:
            return
        self._recompute_scheduled = True

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is None:
            self._run_scheduled_recompute()
        else:
            loop.call_soon(self._run_scheduled_recompute)

    def _run_scheduled_recompute(self) -> None:
        if not self._recompute_scheduled:
            return
        self._recompute_scheduled = False
        self.recompute()

    def recompute(self) -> RecomputeResult:
        """Run one pass on a fresh snapshot and publish it."""
        result = compute_pass(self.snapshot(), self.density_basis, self.verbose)
        self._publish(result)
        return self._result

    def _publish(self, result: RecomputeResult) -> bool:
        # Last write wins: an older pass never replaces a newer one.
        if self._result is not None and result.revision < self._result.revision:
            logger.debug(
                "Discarding superseded pass rev=%d (published rev=%d)",
                result.revision,
                self._result.revision,
            )
            return False
        self._result = result
        return True

    @property
    def recompute_pending(self) -> bool:
        return self._recompute_scheduled

    def current_result(self) -> RecomputeResult:
        if self._recompute_scheduled or self._result is None or self._result.revision != self._revision:
            self._recompute_scheduled = False
            self.recompute()
        return self._result

    def statistics(self) -> List[StatisticValue]:
        return list(self.current_result().statistics)

    def keywords(self) -> Dict[str, int]:
        return dict(self.current_result().keywords)

    def keyword_rows(self) -> List[KeywordRow]:
        return list(self.current_result().keyword_rows)

    def export_csv(self) -> bytes:
        return export_csv(self.current_result().keywords)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _persist(self, values: Dict[str, str]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is None:
            self._write(values)
            return

        task = loop.create_task(self._write_async(values))
        self._pending_writes.add(task)
        task.add_done_callback(self._pending_writes.discard)

    async def _write_async(self, values: Dict[str, str]) -> None:
        # One worker thread keeps writes in submission order.
        if self._write_executor is None:
            self._write_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="session-store")
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(self._write_executor, self._write, values)

    def _write(self, values: Dict[str, str]) -> None:
        pipeline_logger = create_pipeline_logger(self._revision, verbose=self.verbose)
        with pipeline_logger.phase(Phase.PERSISTENCE):
            for key, value in values.items():
                try:
                    written = self._store.set(key, value)
                except (StorageUnavailableError, OSError) as exc:
                    pipeline_logger.error(f"Store write for '{key}' raised: {exc}")
                    written = False

                if not written:
                    self._degrade(f"write of '{key}' failed")
                    self._store.set(key, value)

    def _degrade(self, reason: str) -> None:
        """Swap the store for an in-memory copy of the current state."""
        if self.degraded:
            return
        self.degraded = True
        logger.warning(f"Persistence unavailable ({reason}); continuing with an in-memory session")

        fallback = InMemoryKeyValueStore({
            TEXT_KEY: self._text,
            MATCH_CASE_KEY: "true" if self._match_case else "false",
            STATISTICS_OPTIONS_KEY: self._options.serialize(),
        })
        for kind, key in RATE_KEYS.items():
            fallback.set(key, str(self._options.rate(kind)))
        self._store = fallback

    async def flush_persistence(self) -> None:
        """Wait for outstanding fire-and-forget writes."""
        if self._pending_writes:
            await asyncio.gather(*list(self._pending_writes), return_exceptions=True)

    async def close(self) -> None:
        """Flush pending writes and stop the write worker."""
        await self.flush_persistence()
        if self._write_executor is not None:
            self._write_executor.shutdown(wait=True)
            self._write_executor = None

    def describe(self) -> Dict[str, Any]:
        return {
            "revision": self._revision,
            "text_length": len(self._text),
            "persistent": self.persistent,
            "degraded": self.degraded,
            "configuration": self.configuration().to_dict(),
        }
