"""Timing helpers to log the duration of report queries."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from time import perf_counter
from typing import Iterator, Optional

from sqlalchemy.orm import Session


class DatabaseCallTracker:
    """Counts statements executed through a session while a timer is open."""

    _METHODS = ("execute", "scalar", "scalars")

    def __init__(self) -> None:
        self.call_count = 0
        self._originals: dict[str, object] = {}
        self._session: Session | None = None

    def attach(self, session: Session) -> None:
        """Wrap the session's execution methods to count calls."""

        if getattr(session, "_call_tracker", None) is not None:
            return
        self._session = session
        for name in self._METHODS:
            original = getattr(session, name)
            self._originals[name] = original
            setattr(session, name, self._wrap(original))
        session._call_tracker = self  # type: ignore[attr-defined]

    def _wrap(self, original):
        def tracked(*args, **kwargs):
            self.call_count += 1
            return original(*args, **kwargs)

        return tracked

    def detach(self) -> None:
        """Restore the original session methods."""

        if self._session is None:
            return
        for name in self._originals:
            # Instance attributes shadow the class methods; dropping them restores the originals.
            self._session.__dict__.pop(name, None)
        self._session.__dict__.pop("_call_tracker", None)
        self._originals.clear()
        self._session = None


@dataclass
class _Timer:
    label: str
    logger: logging.Logger
    level: int
    unit: str
    expected_total: Optional[int]
    count: int = 0
    start: float = field(default_factory=perf_counter)
    db_call_tracker: Optional[DatabaseCallTracker] = None

    def add(self, amount: int = 1) -> None:
        self.count += amount

    def set_total(self, total: int) -> None:
        self.expected_total = total

    def _resolved_total(self) -> Optional[int]:
        return self.expected_total if self.expected_total is not None else self.count

    @property
    def db_calls(self) -> int:
        return self.db_call_tracker.call_count if self.db_call_tracker else 0

    def finish(self, success: bool = True) -> None:
        elapsed = perf_counter() - self.start
        total = self._resolved_total()

        if success:
            message = f"{self.label} completed in {elapsed:.3f}s"
            if total:
                message += f" ({total:,} {self.unit})"
            if self.db_calls:
                message += f" ({self.db_calls:,} DB calls)"
            self.logger.log(self.level, message)
        else:
            fail_message = f"{self.label} failed after {elapsed:.3f}s"
            if self.db_calls:
                fail_message += f" ({self.db_calls:,} DB calls)"
            self.logger.error(fail_message)


@contextmanager
def timeit(
    label: str,
    *,
    logger: Optional[logging.Logger] = None,
    level: int = logging.INFO,
    unit: str = "items",
    total: Optional[int] = None,
    track_db_calls: bool = False,
    session: Optional[Session] = None,
) -> Iterator[_Timer]:
    """Context manager for timing operations with optional database call tracking.

    Args:
        label: Description of the operation being timed
        logger: Logger instance to use (defaults to "bizbooks.timer")
        level: Logging level for the timing message
        unit: Unit for the optional item count
        total: Expected total count
        track_db_calls: Whether to count statements executed through ``session``
        session: SQLAlchemy session to track (required if track_db_calls=True)
    """
    log = logger or logging.getLogger("bizbooks.timer")
    tracker = None

    if track_db_calls:
        if session is None:
            raise ValueError("session parameter is required when track_db_calls=True")
        tracker = DatabaseCallTracker()
        tracker.attach(session)

    timer = _Timer(
        label=label,
        logger=log,
        level=level,
        unit=unit,
        expected_total=total,
        db_call_tracker=tracker,
    )

    try:
        yield timer
    except Exception:
        timer.finish(success=False)
        raise
    else:
        timer.finish(success=True)
    finally:
        if tracker is not None:
            tracker.detach()
