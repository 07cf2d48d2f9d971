"""
Stage Animation Base - shared engine for every life-stage animation

An animation instance owns a phase clock, a set of particle fields, a slot
table of derived effect records and the character placement. Subclasses
supply data: their event table, field seeds, quality caps and environment
drawing. The host drives an instance with:

    anim = BabyStageAnimation(config=AnimationConfig(event_type='first_crawl'))
    while not anim.is_animation_complete():
        anim.update(time, delta_time)
        anim.render(ctx)
    anim.cleanup()
"""

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from ..core.character import CharacterShape, draw_character, get_shape
from ..core.effects import EffectSlots
from ..core.particles import FieldSet, ParticleField
from ..core.phase import PhaseClock, PhaseSpec
from ..core.quality import QualityCaps, QualityController, QualityLevel
from ..core.render import RenderPipeline, draw_background, draw_field, draw_overlays


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class AnimationConfig:
    """
    Immutable-by-convention construction input.

    duration None means the stage's own default. position, when given,
    anchors the character and the effects centered on it; otherwise the
    character stands at the canvas center.
    """
    event_type: Optional[str] = None
    duration: Optional[float] = None
    width: int = 800
    height: int = 600
    position: Optional[Tuple[float, float]] = None
    seed: Optional[int] = None
    shape: Optional[CharacterShape] = None
    overrides: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'AnimationConfig':
        """Create from a plain mapping, ignoring unknown keys"""
        valid_fields = {f for f in cls.__dataclass_fields__}
        filtered = {k: v for k, v in data.items() if k in valid_fields}
        if filtered.get('position') is not None:
            filtered['position'] = tuple(filtered['position'])
        return cls(**filtered)


# =============================================================================
# Event Behaviors
# =============================================================================

UpdateHandler = Callable[['AnimationInstance', float], None]
RenderHandler = Callable[['AnimationInstance', Any], None]


@dataclass(frozen=True)
class EventBehavior:
    """What one event type does: its emotion, set pieces and handlers"""
    key: str
    emotion: str
    environment: FrozenSet[str] = frozenset()
    update: Optional[UpdateHandler] = None
    render: Optional[RenderHandler] = None


class EventBehaviorTable:
    """
    Event type -> behavior lookup with a single fallback path.

    The first behavior is the default. Unknown event types resolve to the
    default behavior; when fallback_emotion is set, the fallback carries
    that emotion instead of the default's.
    """

    def __init__(self, behaviors: Sequence[EventBehavior], fallback_emotion: Optional[str] = None):
        if not behaviors:
            raise ValueError("An event table needs at least one behavior")
        self._behaviors: Dict[str, EventBehavior] = {}
        for behavior in behaviors:
            if behavior.key in self._behaviors:
                raise ValueError(f"Duplicate event type '{behavior.key}'")
            self._behaviors[behavior.key] = behavior
        self.default = behaviors[0]
        self.fallback_emotion = fallback_emotion

    def resolve(self, event_type: Optional[str]) -> EventBehavior:
        if event_type is None:
            return self.default
        behavior = self._behaviors.get(event_type)
        if behavior is not None:
            return behavior

        logger.warning(
            "Unknown event type '%s', falling back to '%s'", event_type, self.default.key
        )
        if self.fallback_emotion is None:
            return self.default
        return EventBehavior(
            key=self.default.key,
            emotion=self.fallback_emotion,
            environment=self.default.environment,
            update=self.default.update,
            render=self.default.render,
        )

    def keys(self) -> List[str]:
        return list(self._behaviors)

    def __contains__(self, event_type: str) -> bool:
        return event_type in self._behaviors

    def __len__(self) -> int:
        return len(self._behaviors)


# =============================================================================
# Character placement
# =============================================================================

@dataclass
class CharacterState:
    x: float
    y: float
    scale: float = 1.0
    opacity: float = 1.0
    rotation: float = 0.0
    sway: float = 0.0
    visible: bool = True

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)


# =============================================================================
# Animation Instance
# =============================================================================

class AnimationInstance(ABC):
    """Abstract base class for life-stage animations"""

    # Stage metadata
    name: str = "base"
    description: str = "Base animation"

    DEFAULT_DURATION = 4000.0
    BACKGROUND: Tuple[str, str] = ('#FFFFFF', '#FFFFFF')

    # Per-field low / medium caps
    QUALITY_CAPS: Dict[str, QualityCaps] = {}

    # Names of the derived effect records this stage can produce
    EFFECT_SLOTS: Tuple[str, ...] = ()

    def __init__(self, ctx=None, config: Optional[AnimationConfig] = None):
        self.ctx = ctx
        self.config = config or AnimationConfig()
        self.rng = np.random.default_rng(self.config.seed)
        self.width = self.config.width
        self.height = self.config.height

        duration = self.DEFAULT_DURATION if self.config.duration is None else self.config.duration
        self.clock = self.build_clock(float(duration))

        self.fields = FieldSet(self.rng)
        self.effects = EffectSlots(self.EFFECT_SLOTS)
        self.quality = QualityController(self.QUALITY_CAPS)
        if 'caps' in self.config.overrides:
            self.quality.override(self.config.overrides['caps'])
        self.pipeline = RenderPipeline()

        self.table = self.build_table()
        self.behavior = self.table.resolve(self.config.event_type)
        self.emotion = self.behavior.emotion
        self.environment: FrozenSet[str] = self.behavior.environment

        # Canvas center unless the event source anchors the character
        home = self.config.position
        if home is None:
            home = (self.width / 2, self.height / 2)
        self.home = (float(home[0]), float(home[1]))
        self.character = CharacterState(*self.home)
        self.shape = self.config.shape if self.config.shape is not None else get_shape(self.name)

        self.init_fields()
        self.init_environment()
        logger.debug(
            "%s animation initialized: event=%s emotion=%s particles=%d",
            self.name, self.behavior.key, self.emotion, self.fields.total_particles
        )

    # -------------------------------------------------------------------------
    # Construction hooks
    # -------------------------------------------------------------------------

    def build_clock(self, duration: float) -> PhaseClock:
        """Single-progress clock; multi-phase stages override"""
        return PhaseClock(duration)

    @classmethod
    @abstractmethod
    def build_table(cls) -> EventBehaviorTable:
        """Event table for this stage"""
        pass

    @abstractmethod
    def init_fields(self):
        """Create and seed this stage's particle fields"""
        pass

    def init_environment(self):
        pass

    @classmethod
    def event_types(cls) -> List[str]:
        return cls.build_table().keys()

    # -------------------------------------------------------------------------
    # Host contract
    # -------------------------------------------------------------------------

    def update(self, time: float, delta_time: float):
        """Advance to an absolute time; delta_time drives particle motion"""
        self.clock.advance(time)
        if self.behavior.update is not None:
            self.behavior.update(self, delta_time)
        self.update_particles(delta_time)
        self.update_environment(delta_time)

    def render(self, ctx=None):
        ctx = ctx if ctx is not None else self.ctx
        if ctx is None:
            raise ValueError(f"{self.name} animation has no drawing context")
        self.pipeline.render(ctx, self)

    def is_animation_complete(self) -> bool:
        return self.clock.is_complete

    def set_quality(self, level) -> Dict[str, int]:
        """
        Truncate particle fields to the level's caps.

        Unknown levels are logged and ignored.

        Returns:
            Field name -> particle count after the call
        """
        try:
            level = QualityLevel.parse(level)
        except ValueError as e:
            logger.warning("%s", e)
            return {f.name: len(f) for f in self.fields}
        return self.quality.apply(level, self.fields.as_dict())

    def cleanup(self):
        """Empty every particle field and effect slot"""
        self.fields.clear()
        self.effects.clear()
        self.clear_environment()
        logger.debug("%s animation cleaned up: %s", self.name, self.event_key)

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def duration(self) -> float:
        return self.clock.duration

    @property
    def current_time(self) -> float:
        return self.clock.current_time

    @property
    def progress(self) -> float:
        return self.clock.progress

    @property
    def current_phase(self) -> str:
        return self.clock.current_phase

    @property
    def event_key(self) -> str:
        """Event type the table actually resolved to"""
        return self.behavior.key

    @property
    def character_position(self) -> Tuple[float, float]:
        return self.character.position

    def get_field(self, name: str) -> ParticleField:
        return self.fields[name]

    # -------------------------------------------------------------------------
    # Per-frame hooks
    # -------------------------------------------------------------------------

    def update_particles(self, delta_time: float):
        pass

    def update_environment(self, delta_time: float):
        pass

    def clear_environment(self):
        pass

    # -------------------------------------------------------------------------
    # Layers
    # -------------------------------------------------------------------------

    def render_environment(self, ctx):
        draw_background(ctx, self.width, self.height, *self.BACKGROUND)
        self.draw_environment(ctx)

    def draw_environment(self, ctx):
        pass

    def render_particles(self, ctx):
        for particle_field in self.fields:
            draw_field(ctx, particle_field, self.particle_drawer(particle_field.name))

    def particle_drawer(self, field_name: str):
        """Custom drawer for a field, or None for the default shapes"""
        return None

    def render_character(self, ctx):
        c = self.character
        if not c.visible or c.opacity <= 0 or c.scale <= 0:
            return
        ctx.global_alpha = min(1.0, c.opacity)
        ctx.translate(c.x, c.y)
        if c.rotation:
            ctx.rotate(c.rotation)
        if c.sway:
            ctx.translate(c.sway, 0)
        ctx.scale(c.scale, c.scale)
        draw_character(ctx, self.shape, self.emotion)

    def render_overlays(self, ctx):
        draw_overlays(ctx, self.effects, self.width, self.height)
        if self.behavior.render is not None:
            self.behavior.render(self, ctx)


# =============================================================================
# Helpers shared by stage modules
# =============================================================================

def scaled_phases(duration: float, segments: Iterable[Tuple[str, float]]) -> List[PhaseSpec]:
    """
    Contiguous phases covering duration, sized by relative weights.

    The last phase always ends exactly at duration; non-positive durations
    give zero-length phases.
    """
    segments = list(segments)
    span = max(0.0, duration)
    total = sum(weight for _, weight in segments)
    phases = []
    start = 0.0
    for i, (name, weight) in enumerate(segments):
        end = span if i == len(segments) - 1 else start + span * weight / total
        phases.append(PhaseSpec(name, start, end))
        start = end
    return phases


def orbit(center: Tuple[float, float], radius: float, angle: float) -> Tuple[float, float]:
    return center[0] + math.cos(angle) * radius, center[1] + math.sin(angle) * radius
