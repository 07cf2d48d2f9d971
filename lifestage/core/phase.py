"""
Phase Clock - Elapsed time to phase / progress

A clock is advanced with absolute times by the host. Progress is derived
from the last time and the duration on every read and never stored
separately. Completion is a latch: once time reaches the duration the clock
stays complete, even if a later call passes an earlier time.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple


logger = logging.getLogger(__name__)

PROGRESS_PHASE = "progress"


@dataclass(frozen=True)
class PhaseSpec:
    """Named half-open interval [start, end) in milliseconds"""
    name: str
    start: float
    end: float

    @property
    def length(self) -> float:
        return self.end - self.start


class PhaseClock:
    """
    Converts elapsed time into progress and a named phase.

    Example:
        clock = PhaseClock(7000, [
            PhaseSpec('prebirth', 0, 2000),
            PhaseSpec('birth', 2000, 5000),
            PhaseSpec('appear', 5000, 7000),
        ])
        clock.advance(6000)
        clock.current_phase   # 'appear'
        clock.phase_progress  # 0.5
    """

    def __init__(self, duration: float, phases: Optional[Sequence[PhaseSpec]] = None):
        self.duration = float(duration)
        self.phases: Tuple[PhaseSpec, ...] = tuple(phases or ())
        self._validate()

        self.current_time = 0.0
        self._complete = False
        self._last_phase: Optional[str] = None

    @classmethod
    def from_lengths(cls, segments: Sequence[Tuple[str, float]]) -> 'PhaseClock':
        """Build contiguous phases from (name, length) pairs starting at 0"""
        phases: List[PhaseSpec] = []
        start = 0.0
        for name, length in segments:
            phases.append(PhaseSpec(name, start, start + length))
            start += length
        return cls(start, phases)

    def _validate(self):
        if not self.phases:
            return
        if self.phases[0].start != 0:
            raise ValueError(f"First phase must start at 0, got {self.phases[0].start}")
        for prev, nxt in zip(self.phases, self.phases[1:]):
            if nxt.start != prev.end:
                raise ValueError(
                    f"Phases must be contiguous: '{prev.name}' ends at {prev.end}, "
                    f"'{nxt.name}' starts at {nxt.start}"
                )
        for phase in self.phases:
            if phase.end < phase.start:
                raise ValueError(f"Phase '{phase.name}' ends before it starts")
        if self.duration > 0 and self.phases[-1].end != self.duration:
            raise ValueError(
                f"Phases end at {self.phases[-1].end} but duration is {self.duration}"
            )

    # -------------------------------------------------------------------------

    def advance(self, current_time: float):
        """Set the clock to an absolute time in milliseconds"""
        self.current_time = float(current_time)
        if self.current_time >= self.duration:
            self._complete = True

        phase = self.current_phase
        if phase != self._last_phase:
            logger.debug("Phase %s -> %s at %.0fms", self._last_phase, phase, self.current_time)
            self._last_phase = phase

    @property
    def progress(self) -> float:
        """clamp(current_time / duration, 0, 1); 1 for non-positive durations"""
        if self.duration <= 0:
            return 1.0
        return max(0.0, min(1.0, self.current_time / self.duration))

    @property
    def is_complete(self) -> bool:
        return self._complete

    @property
    def current_spec(self) -> Optional[PhaseSpec]:
        """Last phase whose start <= current_time (first phase before 0)"""
        if not self.phases:
            return None
        current = self.phases[0]
        for phase in self.phases:
            if phase.start <= self.current_time:
                current = phase
            else:
                break
        return current

    @property
    def current_phase(self) -> str:
        spec = self.current_spec
        return spec.name if spec is not None else PROGRESS_PHASE

    @property
    def phase_elapsed(self) -> float:
        spec = self.current_spec
        if spec is None:
            return self.current_time
        return self.current_time - spec.start

    @property
    def phase_progress(self) -> float:
        """Progress through the current phase, clamped to [0, 1]"""
        spec = self.current_spec
        if spec is None:
            return self.progress
        if spec.length <= 0:
            return 1.0
        return max(0.0, min(1.0, (self.current_time - spec.start) / spec.length))
