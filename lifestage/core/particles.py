"""
Particle Fields

Bounded collections of decorative particles with a shared update rule.

Each field owns its particles exclusively. A tick applies, per particle:
- position += velocity * dt * velocity_scale
- vy += gravity (a per-tick constant, not scaled by dt)
- rotation += rotation_speed * dt
- life countdown, then the field's expiry policy
- optional opacity function, clamped to [0, max_opacity]

Expiry policies:
- KEEP: particles never expire (ambient decoration)
- REMOVE: one-shot particles are dropped (splashes, bursts)
- RESPAWN: the seed factory builds a fresh particle in place
- WRAP: the particle re-enters above the canvas at a random x (money rain)
"""

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

import numpy as np


logger = logging.getLogger(__name__)


# =============================================================================
# Particle
# =============================================================================

class ParticleShape(Enum):
    """What the render layer draws for a particle"""
    CIRCLE = auto()
    HEART = auto()
    STAR = auto()
    CUSTOM = auto()


@dataclass
class Particle:
    """
    One transient visual element.

    life and max_life are in milliseconds; max_life == 0 means the particle
    is immortal. Opacity is always kept within [0, max_opacity] and
    max_opacity within [0, 1].
    """
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    size: float = 2.0
    color: str = '#FFFFFF'
    max_opacity: float = 1.0
    max_life: float = 0.0
    life: float = 0.0
    rotation: float = 0.0
    rotation_speed: float = 0.0
    shape: ParticleShape = ParticleShape.CIRCLE

    # Stage-specific extras (twinkle phase, flutter phase, label...)
    extra: Dict[str, Any] = field(default_factory=dict)

    _opacity: float = field(default=0.0, init=False, repr=False)

    def __post_init__(self):
        self.max_opacity = _clamp_unit(self.max_opacity)
        if self.max_life > 0 and self.life <= 0:
            self.life = self.max_life

    @property
    def opacity(self) -> float:
        return self._opacity

    @opacity.setter
    def opacity(self, value: float):
        if value != value:  # NaN
            value = 0.0
        self._opacity = max(0.0, min(self.max_opacity, float(value)))

    @property
    def mortal(self) -> bool:
        return self.max_life > 0

    @property
    def expired(self) -> bool:
        return self.mortal and self.life <= 0

    @property
    def life_ratio(self) -> float:
        """Fraction of life remaining (1 for immortal particles)"""
        if not self.mortal:
            return 1.0
        return max(0.0, min(1.0, self.life / self.max_life))


def _clamp_unit(value: float) -> float:
    if value != value:
        return 0.0
    return max(0.0, min(1.0, float(value)))


# =============================================================================
# Spawn Factories
# =============================================================================

# A factory receives the owning field's generator and the particle's index
ParticleFactory = Callable[[np.random.Generator, int], Particle]


def scatter_position(
    rng: np.random.Generator,
    center: Tuple[float, float],
    spread_x: float,
    spread_y: Optional[float] = None
) -> Tuple[float, float]:
    """Uniform point in a box of +/- spread around center"""
    if spread_y is None:
        spread_y = spread_x
    return (
        center[0] + (rng.random() - 0.5) * 2 * spread_x,
        center[1] + (rng.random() - 0.5) * 2 * spread_y,
    )


# =============================================================================
# Particle Field
# =============================================================================

class FieldPolicy(Enum):
    """What happens to a particle once its life runs out"""
    KEEP = auto()
    REMOVE = auto()
    RESPAWN = auto()
    WRAP = auto()


OpacityFunction = Callable[[Particle], float]


@dataclass
class ParticleField:
    """
    Named, bounded particle collection.

    Example:
        confetti = ParticleField('confetti', gravity=0.02, policy=FieldPolicy.WRAP)
        confetti.spawn(30, make_confetti)

        for frame in range(frames):
            confetti.tick(dt, opacity=lambda p: p.max_opacity * fade)
    """
    name: str

    # Physics
    velocity_scale: float = 0.1
    gravity: float = 0.0

    # Lifetime
    policy: FieldPolicy = FieldPolicy.KEEP
    bounds: Tuple[float, float, float, float] = (0.0, 0.0, 800.0, 600.0)
    wrap_margin: float = 50.0     # WRAP: fall this far past the bottom, re-enter this far above the top
    bounce: bool = False          # Reflect velocity at the bounds

    particles: List[Particle] = field(default_factory=list, repr=False)
    rng: np.random.Generator = field(default_factory=np.random.default_rng, repr=False)

    _factory: Optional[ParticleFactory] = field(default=None, init=False, repr=False)

    def spawn(self, count: int, factory: Optional[ParticleFactory] = None) -> int:
        """
        Fill the field up to `count` particles.

        Returns:
            Number of particles created
        """
        if count < 0:
            raise ValueError(f"Particle count must be non-negative, got {count}")
        if factory is not None:
            self._factory = factory
        if self._factory is None:
            raise ValueError(f"Field '{self.name}' has no particle factory")

        created = 0
        while len(self.particles) < count:
            self.particles.append(self._factory(self.rng, len(self.particles)))
            created += 1
        return created

    def emit(self, particle: Particle) -> Particle:
        """Add one ready-made particle, e.g. a burst emitted mid-animation"""
        self.particles.append(particle)
        return particle

    def tick(
        self,
        dt: float,
        opacity: Optional[OpacityFunction] = None,
        move: bool = True
    ):
        """Advance every particle by dt milliseconds"""
        survivors = []
        for index, p in enumerate(self.particles):
            if move:
                p.x += p.vx * dt * self.velocity_scale
                p.y += p.vy * dt * self.velocity_scale
                p.vy += self.gravity
                if self.bounce:
                    self._reflect(p)
            p.rotation += p.rotation_speed * dt

            if p.mortal:
                p.life -= dt

            if p.expired or self._fell_out(p):
                p = self._expire(p, index)
                if p is None:
                    continue

            if opacity is not None:
                p.opacity = opacity(p)
            survivors.append(p)

        self.particles = survivors

    def _fell_out(self, p: Particle) -> bool:
        if self.policy is not FieldPolicy.WRAP:
            return False
        _, top, _, height = self.bounds
        return p.y > top + height + self.wrap_margin

    def _expire(self, p: Particle, index: int) -> Optional[Particle]:
        if self.policy is FieldPolicy.REMOVE:
            return None
        if self.policy is FieldPolicy.RESPAWN and self._factory is not None:
            return self._factory(self.rng, index)
        if self.policy is FieldPolicy.WRAP:
            left, top, width, _ = self.bounds
            p.y = top - self.wrap_margin
            p.x = left + self.rng.random() * width
            if p.mortal:
                p.life = p.max_life
            return p
        # KEEP: restart the countdown
        if p.mortal:
            p.life = p.max_life
        return p

    def _reflect(self, p: Particle):
        left, top, width, height = self.bounds
        if p.x < left or p.x > left + width:
            p.vx = -p.vx
            p.x = min(max(p.x, left), left + width)
        if p.y < top or p.y > top + height:
            p.vy = -p.vy
            p.y = min(max(p.y, top), top + height)

    def apply_opacity(self, opacity: OpacityFunction):
        """Set every particle's opacity without moving anything"""
        for p in self.particles:
            p.opacity = opacity(p)

    def truncate(self, max_count: int) -> int:
        """
        Drop particles beyond max_count from the end of the field.

        Returns:
            Number of particles removed
        """
        max_count = max(0, int(max_count))
        removed = max(0, len(self.particles) - max_count)
        if removed:
            del self.particles[max_count:]
            logger.debug("Truncated field %s to %d particles", self.name, max_count)
        return removed

    def clear(self):
        self.particles = []

    def __len__(self) -> int:
        return len(self.particles)

    def __iter__(self) -> Iterator[Particle]:
        return iter(self.particles)

    def __getitem__(self, index: int) -> Particle:
        return self.particles[index]


class FieldSet:
    """Named collection of particle fields owned by one animation"""

    def __init__(self, rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng()
        self._fields: Dict[str, ParticleField] = {}

    def add(self, name: str, **options) -> ParticleField:
        """Create and register a field sharing this set's generator"""
        if name in self._fields:
            raise ValueError(f"Particle field '{name}' already exists")
        particle_field = ParticleField(name, rng=self.rng, **options)
        self._fields[name] = particle_field
        return particle_field

    def __getitem__(self, name: str) -> ParticleField:
        return self._fields[name]

    def __contains__(self, name: str) -> bool:
        return name in self._fields

    def __iter__(self) -> Iterator[ParticleField]:
        return iter(self._fields.values())

    def names(self) -> List[str]:
        return list(self._fields)

    def as_dict(self) -> Dict[str, ParticleField]:
        return dict(self._fields)

    def clear(self):
        for particle_field in self._fields.values():
            particle_field.clear()

    @property
    def total_particles(self) -> int:
        return sum(len(f) for f in self._fields.values())
