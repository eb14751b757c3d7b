"""
Pipeline Logging for the Text Statistics Engine
===============================================

Colored, phase-aware logging for recompute passes.
IMPORTANT: No emojis in console output (Windows encoding issues).
"""

import logging
import time
from typing import Optional, Dict
from contextlib import contextmanager
from colorama import Fore, Style, init

# Initialize colorama for Windows
init(autoreset=True)


class Phase:
    """Phase constants for one recompute pass"""
    SEGMENTATION = "SEGMENTATION"
    METRICS = "METRICS"
    KEYWORDS = "KEYWORDS"
    PERSISTENCE = "PERSISTENCE"


PHASE_COLORS = {
    Phase.SEGMENTATION: Fore.CYAN,
    Phase.METRICS: Fore.GREEN,
    Phase.KEYWORDS: Fore.BLUE,
    Phase.PERSISTENCE: Fore.MAGENTA,
}

# Text-based icons, no emojis
PHASE_ICONS = {
    Phase.SEGMENTATION: "[SEG]",
    Phase.METRICS: "[MET]",
    Phase.KEYWORDS: "[KEY]",
    Phase.PERSISTENCE: "[STO]",
}


class TimingTracker:
    """Track timing for phases"""

    def __init__(self):
        self._timings: Dict[str, float] = {}
        self._start_times: Dict[str, float] = {}

    def start(self, key: str):
        self._start_times[key] = time.perf_counter()

    def end(self, key: str) -> float:
        """End timing and return elapsed seconds"""
        if key not in self._start_times:
            return 0.0
        elapsed = time.perf_counter() - self._start_times.pop(key)
        self._timings[key] = elapsed
        return elapsed

    def get(self, key: str) -> Optional[float]:
        return self._timings.get(key)

    def clear(self):
        self._timings.clear()
        self._start_times.clear()

    def get_all(self) -> Dict[str, float]:
        return self._timings.copy()


class PipelineLogger:
    """
    Phase-aware logger for recompute passes

    Usage:
        pipeline_logger = PipelineLogger(revision=3, verbose=True)

        with pipeline_logger.phase(Phase.METRICS):
            pipeline_logger.debug("computing 6 statistics")
        pipeline_logger.log_timing_summary()

    Phase headers and timing summaries are only emitted when verbose is on;
    warnings and errors are always emitted.
    """

    def __init__(
        self,
        revision: int = 0,
        verbose: bool = False,
        logger: Optional[logging.Logger] = None
    ):
        self.revision = revision
        self.verbose = verbose
        self.logger = logger or logging.getLogger(__name__)
        self.timing_tracker = TimingTracker()
        self._current_phase: Optional[str] = None

    @contextmanager
    def phase(self, phase_name: str):
        """Context manager that times a phase of the pass."""
        previous = self._current_phase
        self._current_phase = phase_name
        self.timing_tracker.start(phase_name)
        try:
            yield self
        finally:
            elapsed = self.timing_tracker.end(phase_name)
            if self.verbose:
                color = PHASE_COLORS.get(phase_name, Fore.WHITE)
                icon = PHASE_ICONS.get(phase_name, "[???]")
                self.logger.info(
                    f"{color}{icon} {phase_name} rev={self.revision} "
                    f"({elapsed * 1000:.2f} ms){Style.RESET_ALL}"
                )
            self._current_phase = previous

    def debug(self, message: str):
        """Log debug message (only if verbose)"""
        if not self.verbose:
            return
        icon = PHASE_ICONS.get(self._current_phase, "")
        self.logger.debug(f"{Fore.WHITE}{Style.DIM}{icon} {message}{Style.RESET_ALL}")

    def warning(self, message: str):
        self.logger.warning(f"{Fore.YELLOW}[WARN] {message}{Style.RESET_ALL}")

    def error(self, message: str):
        self.logger.error(f"{Fore.RED}{Style.BRIGHT}[ERROR] {message}{Style.RESET_ALL}")

    def total_elapsed(self) -> float:
        """Sum of all recorded phase timings, in seconds."""
        return sum(self.timing_tracker.get_all().values())

    def log_timing_summary(self):
        """Log timing summary for all phases (only if verbose)"""
        if not self.verbose:
            return

        timings = self.timing_tracker.get_all()
        if not timings:
            return

        separator = "-" * 40
        self.logger.info(f"{Fore.WHITE}{Style.BRIGHT}{separator}{Style.RESET_ALL}")
        for phase_name, elapsed in timings.items():
            color = PHASE_COLORS.get(phase_name, Fore.WHITE)
            self.logger.info(f"{color}{phase_name:20s} {elapsed * 1000:8.2f} ms{Style.RESET_ALL}")
        self.logger.info(
            f"{Fore.WHITE}{Style.BRIGHT}PASS rev={self.revision} TOTAL: "
            f"{self.total_elapsed() * 1000:.2f} ms{Style.RESET_ALL}"
        )
        self.logger.info(f"{Fore.WHITE}{Style.BRIGHT}{separator}{Style.RESET_ALL}")


def create_pipeline_logger(revision: int, verbose: bool = False) -> PipelineLogger:
    """Create a new PipelineLogger instance"""
    return PipelineLogger(revision=revision, verbose=verbose)
