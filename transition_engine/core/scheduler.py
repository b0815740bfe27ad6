"""
Frame-driven sequencing.
This module provides the timed sequences that drive transitions and the scheduler that
advances them from the host's per-frame update loop.
"""

import logging
import time
from enum import Enum
from typing import Callable, List, Optional

from ..utils.config import Config
from ..utils.logging import log_exception

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]
FinishedCallback = Callable[[], None]


class SequenceState(Enum):
    """Lifecycle of a sequence."""
    DELAYED = 'delayed'
    ACTIVE = 'active'
    FINISHED = 'finished'
    CANCELLED = 'cancelled'


class Sequence:
    """
    A timed interpolation sequence: an idle delay phase followed by an active phase.

    During the active phase every advance reports linear progress in 0-1. The advance
    that reaches 1 also fires the finished callback. A cancelled sequence fires nothing.
    """

    def __init__(self, duration: float, delay: float = 0.0,
                 on_progress: Optional[ProgressCallback] = None,
                 on_finished: Optional[FinishedCallback] = None):
        """
        Initialize a sequence.

        Args:
            duration: Length of the active phase in seconds
            delay: Length of the delay phase in seconds
            on_progress: Called with linear progress on every active advance
            on_finished: Called once after the final progress update
        """
        self.duration = max(0.0, duration)
        self.delay = max(0.0, delay)
        self.on_progress = on_progress
        self.on_finished = on_finished
        self.elapsed = 0.0
        self.state = SequenceState.DELAYED

    @property
    def is_live(self) -> bool:
        return self.state in (SequenceState.DELAYED, SequenceState.ACTIVE)

    def advance(self, dt: float) -> bool:
        """
        Advance the sequence by ``dt`` seconds.

        Args:
            dt: Frame time in seconds

        Returns:
            True while the sequence still needs frames
        """
        if not self.is_live:
            return False

        self.elapsed += max(0.0, dt)
        if self.elapsed < self.delay:
            return True

        self.state = SequenceState.ACTIVE
        if self.duration > 0:
            progress = min((self.elapsed - self.delay) / self.duration, 1.0)
        else:
            progress = 1.0

        if self.on_progress:
            self.on_progress(progress)

        # The progress callback may have cancelled us
        if self.state is SequenceState.CANCELLED:
            return False

        if progress >= 1.0:
            self.state = SequenceState.FINISHED
            if self.on_finished:
                self.on_finished()
            return False
        return True

    def cancel(self) -> None:
        """Stop the sequence immediately; no further callbacks fire."""
        if self.is_live:
            self.state = SequenceState.CANCELLED

    def __repr__(self):
        return f"Sequence({self.state.value}, {self.elapsed:.3f}/{self.delay}+{self.duration}s)"


class FrameScheduler:
    """Advances every live sequence once per host frame."""

    def __init__(self):
        """Initialize the scheduler."""
        self._sequences: List[Sequence] = []

    def __len__(self) -> int:
        return len(self._sequences)

    def add(self, sequence: Sequence) -> Sequence:
        """
        Schedule a sequence; it receives its first advance on the next tick.

        Args:
            sequence: The sequence to schedule

        Returns:
            The scheduled sequence
        """
        self._sequences.append(sequence)
        return sequence

    def cancel(self, sequence: Sequence) -> None:
        """Cancel a sequence and drop it from the schedule."""
        sequence.cancel()
        if sequence in self._sequences:
            self._sequences.remove(sequence)

    def tick(self, dt: float) -> None:
        """
        Advance all live sequences.

        Sequences scheduled from inside a callback start on the following tick.
        Callback errors are logged and cancel the failing sequence.

        Args:
            dt: Seconds since the previous tick
        """
        for sequence in list(self._sequences):
            try:
                live = sequence.advance(dt)
            except Exception as e:
                log_exception(logger, e, f"Error advancing {sequence!r}")
                sequence.cancel()
                live = False

            if not live and sequence in self._sequences:
                self._sequences.remove(sequence)


class TkFrameDriver:
    """
    Pumps a FrameScheduler from a Tk event loop.

    Any object with Tk's ``after`` / ``after_cancel`` methods works as the widget.
    """

    def __init__(self, widget, scheduler: FrameScheduler, config: Optional[Config] = None,
                 clock: Callable[[], float] = time.monotonic):
        """
        Initialize the driver.

        Args:
            widget: Tk widget used for ``after`` callbacks
            scheduler: The scheduler to tick
            config: Configuration (``scheduler.frame_interval_ms``)
            clock: Monotonic clock in seconds
        """
        config = config or Config()
        self.widget = widget
        self.scheduler = scheduler
        self.interval_ms = max(1, int(config.get('scheduler.frame_interval_ms', 16)))
        self.clock = clock
        self._after_id = None
        self._last_time = None

    @property
    def running(self) -> bool:
        return self._after_id is not None

    def start(self) -> None:
        """Start ticking the scheduler."""
        if self.running:
            return
        self._last_time = self.clock()
        self._after_id = self.widget.after(self.interval_ms, self._on_frame)
        logger.debug(f"Frame driver started ({self.interval_ms}ms interval)")

    def stop(self) -> None:
        """Stop ticking the scheduler."""
        if self._after_id is not None:
            self.widget.after_cancel(self._after_id)
            self._after_id = None
            logger.debug("Frame driver stopped")

    def _on_frame(self) -> None:
        now = self.clock()
        dt = now - self._last_time
        self._last_time = now
        self.scheduler.tick(dt)
        self._after_id = self.widget.after(self.interval_ms, self._on_frame)
