"""
Quality Controller - Particle caps per quality tier

Each field defines its own low / medium caps; the high tier keeps whatever
the field currently holds. Truncation is lossy: lowering the quality drops
particles for the rest of the animation, and raising it again does not
bring them back.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Mapping, Optional, Union

from .particles import ParticleField


logger = logging.getLogger(__name__)


class QualityLevel(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, value: Union[str, 'QualityLevel']) -> 'QualityLevel':
        """Accept a level or its name (case-insensitive)"""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ', '.join(level.value for level in cls)
            raise ValueError(f"Unknown quality level '{value}'. Valid: {valid}") from None


@dataclass(frozen=True)
class QualityCaps:
    """Maximum particle counts for one field; high=None means uncapped"""
    low: int
    medium: int
    high: Optional[int] = None

    def cap_for(self, level: QualityLevel) -> Optional[int]:
        if level is QualityLevel.LOW:
            return self.low
        if level is QualityLevel.MEDIUM:
            return self.medium
        return self.high

    @classmethod
    def from_dict(cls, data: Mapping[str, int]) -> 'QualityCaps':
        return cls(
            low=int(data['low']),
            medium=int(data['medium']),
            high=int(data['high']) if data.get('high') is not None else None,
        )


class QualityController:
    """
    Applies per-field caps for a quality level.

    Example:
        controller = QualityController({'hearts': QualityCaps(10, 15)})
        controller.apply('low', fields)   # hearts -> at most 10
    """

    def __init__(self, caps: Optional[Mapping[str, QualityCaps]] = None):
        self.caps: Dict[str, QualityCaps] = dict(caps or {})
        self.level = QualityLevel.HIGH

    def override(self, caps: Mapping[str, Union[QualityCaps, Mapping[str, int]]]):
        """Replace caps for the named fields"""
        for name, value in caps.items():
            self.caps[name] = value if isinstance(value, QualityCaps) else QualityCaps.from_dict(value)

    def apply(
        self,
        level: Union[str, QualityLevel],
        fields: Mapping[str, ParticleField]
    ) -> Dict[str, int]:
        """
        Truncate every capped field to the level's cap.

        Fields without caps are left alone. Calling twice with the same
        level is a no-op the second time.

        Returns:
            Field name -> particle count after truncation
        """
        level = QualityLevel.parse(level)
        self.level = level

        counts = {}
        for name, particle_field in fields.items():
            caps = self.caps.get(name)
            cap = caps.cap_for(level) if caps is not None else None
            if cap is not None:
                removed = particle_field.truncate(cap)
                if removed:
                    logger.debug("Quality %s dropped %d particles from %s", level.value, removed, name)
            counts[name] = len(particle_field)
        return counts
