"""
Derived effect records

Small value objects computed by event handlers each frame and read by the
overlay layer. Every record lives in a named slot that is empty until a
handler fills it; an empty slot draws nothing.
"""

import math
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, Optional, Tuple, Union


@dataclass
class Glow:
    """Radial glow centered at (x, y)"""
    x: float
    y: float
    radius: float
    intensity: float
    color: str = '#FFFFFF'


@dataclass
class Rings:
    """Concentric outline rings, e.g. sound waves"""
    x: float
    y: float
    radius: float
    opacity: float
    count: int = 3
    spacing: float = 15.0
    color: str = '#FFFFFF'


@dataclass
class Rays:
    """Lines fanning out from a point; one length per ray"""
    x: float
    y: float
    lengths: Tuple[float, ...]
    opacity: float
    color: str = '#FFD700'
    width: float = 3.0
    spread: float = math.pi


@dataclass
class Drops:
    """Small droplets around a point (sweat, tears)"""
    x: float
    y: float
    count: int
    opacity: float
    offset: float = 0.0
    color: str = '#87CEEB'


@dataclass
class Pages:
    """Stack of pages with the top page turning"""
    x: float
    y: float
    count: int
    turn: float
    opacity: float = 1.0
    color: str = '#FFF8DC'


@dataclass
class Wash:
    """Full-canvas color tint"""
    color: str
    opacity: float


EffectRecord = Union[Glow, Rings, Rays, Drops, Pages, Wash]


class EffectSlots:
    """
    Fixed set of named optional effect records.

    Slot names are declared up front; writing to an undeclared name raises
    KeyError so typos fail loudly instead of silently drawing nothing.
    """

    def __init__(self, names: Iterable[str] = ()):
        self._slots: Dict[str, Optional[EffectRecord]] = {name: None for name in names}

    def set(self, name: str, record: Optional[EffectRecord]):
        if name not in self._slots:
            raise KeyError(f"Undeclared effect slot '{name}'")
        self._slots[name] = record

    def get(self, name: str) -> Optional[EffectRecord]:
        if name not in self._slots:
            raise KeyError(f"Undeclared effect slot '{name}'")
        return self._slots[name]

    def __getitem__(self, name: str) -> Optional[EffectRecord]:
        return self.get(name)

    def __contains__(self, name: str) -> bool:
        return self._slots.get(name) is not None

    def active(self) -> Iterator[Tuple[str, EffectRecord]]:
        """(name, record) for every filled slot, in declaration order"""
        for name, record in self._slots.items():
            if record is not None:
                yield name, record

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(self._slots)

    def clear(self):
        for name in self._slots:
            self._slots[name] = None

    def __len__(self) -> int:
        return sum(1 for record in self._slots.values() if record is not None)
