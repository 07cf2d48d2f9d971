"""
Performance Monitor - frame timing and memory to a quality recommendation

Hosts feed frame times (or fps samples) and, optionally, memory use in and
read a quality level out, then pass it to the animation's set_quality. The
monitor never touches an animation itself.
"""

import logging
import tracemalloc
from collections import deque
from typing import Optional

from .quality import QualityLevel


logger = logging.getLogger(__name__)

_LOWER = {
    QualityLevel.HIGH: QualityLevel.MEDIUM,
    QualityLevel.MEDIUM: QualityLevel.LOW,
    QualityLevel.LOW: QualityLevel.LOW,
}


class PerformanceMonitor:
    """
    Rolling fps average with a hysteresis band, lowered under memory pressure.

    Below low_fps the recommendation is LOW, below medium_fps MEDIUM, above
    high_fps HIGH; between medium_fps and high_fps the previous
    recommendation stands. While the last memory sample is above
    memory_threshold_mb the recommendation drops one more tier.
    """

    def __init__(
        self,
        history: int = 10,
        low_fps: float = 25.0,
        medium_fps: float = 45.0,
        high_fps: float = 55.0,
        memory_threshold_mb: float = 100.0
    ):
        if history < 1:
            raise ValueError(f"History length must be at least 1, got {history}")
        self.low_fps = low_fps
        self.medium_fps = medium_fps
        self.high_fps = high_fps
        self.memory_threshold_mb = memory_threshold_mb

        self._samples = deque(maxlen=history)
        self._recommendation = QualityLevel.HIGH
        self.frame_drops = 0
        self.memory_mb: Optional[float] = None

    def record_frame(self, frame_ms: float):
        """Record one frame's duration in milliseconds"""
        if frame_ms <= 0:
            return
        self.record_fps(1000.0 / frame_ms)

    def record_fps(self, fps: float):
        self._samples.append(float(fps))
        if fps < self.low_fps:
            self.frame_drops += 1

    def record_memory(self, used_mb: float):
        """Record current memory use in megabytes"""
        was_high = self.memory_pressure
        self.memory_mb = float(used_mb)
        if self.memory_pressure and not was_high:
            logger.warning(
                "High memory usage: %.1f MB (threshold %.1f MB)",
                self.memory_mb, self.memory_threshold_mb
            )

    def sample_memory(self) -> Optional[float]:
        """
        Record Python heap use as traced by tracemalloc.

        Returns:
            The recorded megabytes, or None when tracemalloc is not tracing
        """
        if not tracemalloc.is_tracing():
            return None
        current, _ = tracemalloc.get_traced_memory()
        used_mb = current / (1024 * 1024)
        self.record_memory(used_mb)
        return used_mb

    @property
    def memory_pressure(self) -> bool:
        return self.memory_mb is not None and self.memory_mb > self.memory_threshold_mb

    @property
    def sample_count(self) -> int:
        return len(self._samples)

    @property
    def average_fps(self) -> Optional[float]:
        if not self._samples:
            return None
        return sum(self._samples) / len(self._samples)

    def recommended_quality(self) -> QualityLevel:
        average = self.average_fps
        if average is not None:
            previous = self._recommendation
            if average < self.low_fps:
                self._recommendation = QualityLevel.LOW
            elif average < self.medium_fps:
                self._recommendation = QualityLevel.MEDIUM
            elif average > self.high_fps:
                self._recommendation = QualityLevel.HIGH

            if self._recommendation is not previous:
                logger.info(
                    "Average %.1f fps, quality %s -> %s",
                    average, previous.value, self._recommendation.value
                )

        if self.memory_pressure:
            return _LOWER[self._recommendation]
        return self._recommendation

    def reset(self):
        self._samples.clear()
        self._recommendation = QualityLevel.HIGH
        self.frame_drops = 0
        self.memory_mb = None
