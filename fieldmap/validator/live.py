"""
Live validation of an editable mapping set.

Every change to the mapping set schedules a re-validation after a quiet
period. Changes arriving inside the quiet period restart it, so only the
most recent state is validated. Computations are serialized and a
snapshot is never delivered after a newer one.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Iterable, Optional, Tuple

from config import ValidationConfig
from fieldmap.validator.aggregator import evaluate_all, summarize_results
from fieldmap.validator.results import ValidationResult, ValidationStatus, ValidationSummary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LiveSnapshot:
    """Results delivered by one validation run."""

    results: Tuple[ValidationResult, ...]
    summary: ValidationSummary
    validated_at: datetime
    generation: int

    def to_dict(self):
        """Convert to dictionary."""
        return {
            "validated_at": self.validated_at.isoformat(),
            "generation": self.generation,
            "summary": self.summary.to_dict(),
            "results": [r.to_dict() for r in self.results],
        }


SnapshotListener = Callable[[LiveSnapshot], None]


class LiveValidator:
    """
    Debounced validator.

    request() schedules validation of a mapping list; validate_now() runs
    it immediately. Each delivered snapshot is passed to on_change.
    """

    def __init__(
        self,
        on_change: Optional[SnapshotListener] = None,
        config: Optional[ValidationConfig] = None,
        debounce_seconds: Optional[float] = None,
        timer_factory: Callable[..., Any] = threading.Timer,
    ):
        """
        Initialize the validator.

        Args:
            on_change: Called with every delivered LiveSnapshot
            config: Validation configuration
            debounce_seconds: Quiet period; defaults to config.debounce_seconds
            timer_factory: threading.Timer compatible factory
        """
        self.config = config or ValidationConfig()
        self.debounce_seconds = (
            self.config.debounce_seconds if debounce_seconds is None else debounce_seconds
        )
        self._on_change = on_change
        self._timer_factory = timer_factory

        self._state_lock = threading.Lock()
        self._compute_lock = threading.RLock()
        self._generation = 0
        self._delivered_generation = 0
        self._pending: Tuple[Any, ...] = ()
        self._timer = None
        self._latest: Optional[LiveSnapshot] = None
        self._validating = False

    @property
    def latest(self) -> Optional[LiveSnapshot]:
        return self._latest

    @property
    def is_validating(self) -> bool:
        return self._validating

    @property
    def last_validated(self) -> Optional[datetime]:
        return self._latest.validated_at if self._latest else None

    @property
    def has_errors(self) -> bool:
        return bool(self._latest) and self._latest.summary.status == ValidationStatus.ERROR

    @property
    def has_warnings(self) -> bool:
        return bool(self._latest) and self._latest.summary.warning_mappings > 0

    @property
    def has_pending(self) -> bool:
        with self._state_lock:
            return self._timer is not None

    def get_mapping_validation(self, mapping_id: str) -> Optional[ValidationResult]:
        """Return the latest result of a mapping, or None."""
        if not self._latest:
            return None
        for result in self._latest.results:
            if result.mapping_id == mapping_id:
                return result
        return None

    def request(self, mappings: Optional[Iterable[Any]]) -> None:
        """Schedule validation of *mappings*, restarting the quiet period."""
        with self._state_lock:
            self._generation += 1
            generation = self._generation
            self._pending = tuple(mappings or ())

            if self._timer is not None:
                self._timer.cancel()

            timer = self._timer_factory(self.debounce_seconds, self._fire, args=(generation,))
            timer.daemon = True
            self._timer = timer

        logger.debug(f"Validation {generation} scheduled in {self.debounce_seconds}s")
        timer.start()

    def validate_now(self, mappings: Optional[Iterable[Any]] = None) -> LiveSnapshot:
        """
        Validate immediately, cancelling any pending scheduled run.

        Without *mappings* the most recently requested mappings are used.
        """
        with self._state_lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._generation += 1
            generation = self._generation
            if mappings is not None:
                self._pending = tuple(mappings)
            pending = self._pending

        return self._run(generation, pending)

    def cancel(self) -> None:
        """Drop any pending scheduled run."""
        with self._state_lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            # In-flight runs become stale
            self._generation += 1

    def _fire(self, generation: int) -> None:
        with self._state_lock:
            if generation != self._generation:
                logger.debug(f"Validation {generation} superseded")
                return
            self._timer = None
            pending = self._pending

        self._run(generation, pending, latest_only=True)

    def _run(self, generation: int, mappings: Tuple[Any, ...], latest_only: bool = False) -> Optional[LiveSnapshot]:
        with self._compute_lock:
            if generation < self._delivered_generation:
                return self._latest
            if latest_only and generation != self._generation:
                return self._latest

            self._validating = True
            try:
                results = tuple(evaluate_all(mappings, self.config))
                summary = summarize_results(results)
            finally:
                self._validating = False

            snapshot = LiveSnapshot(
                results=results,
                summary=summary,
                validated_at=datetime.now(),
                generation=generation,
            )
            self._latest = snapshot
            self._delivered_generation = generation

            if self._on_change is not None:
                try:
                    self._on_change(snapshot)
                except Exception as e:
                    logger.error(f"Validation listener failed: {e}")

            return snapshot


def observe(
    store,
    on_change: SnapshotListener,
    config: Optional[ValidationConfig] = None,
    debounce_seconds: Optional[float] = None,
    timer_factory: Callable[..., Any] = threading.Timer,
) -> Callable[[], None]:
    """
    Re-validate *store* whenever it changes.

    Args:
        store: Object with snapshot() and subscribe(listener) -> unsubscribe,
            such as MappingSet
        on_change: Called with every delivered LiveSnapshot
        config: Validation configuration
        debounce_seconds: Quiet period override
        timer_factory: threading.Timer compatible factory

    Returns:
        Function that stops observing and cancels pending work
    """
    validator = LiveValidator(on_change, config, debounce_seconds, timer_factory)
    unsubscribe_store = store.subscribe(validator.request)
    validator.request(store.snapshot())

    def unsubscribe() -> None:
        unsubscribe_store()
        validator.cancel()

    return unsubscribe
