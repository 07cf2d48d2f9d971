"""
Stage Animations - one animation class per life stage
"""

from .base import (
    AnimationConfig,
    AnimationInstance,
    CharacterState,
    EventBehavior,
    EventBehaviorTable,
)
from .birth import BirthAnimation
from .baby import BabyStageAnimation
from .child import ChildStageAnimation
from .teen import TeenStageAnimation
from .adult import AdultStageAnimation
from .elder import ElderStageAnimation

# Stage registry for easy access
STAGES = {
    'birth': BirthAnimation,
    'newborn': BirthAnimation,  # Alias
    'baby': BabyStageAnimation,
    'infant': BabyStageAnimation,  # Alias
    'child': ChildStageAnimation,
    'kid': ChildStageAnimation,  # Alias
    'teen': TeenStageAnimation,
    'teenager': TeenStageAnimation,  # Alias
    'adult': AdultStageAnimation,
    'elder': ElderStageAnimation,
    'senior': ElderStageAnimation,  # Alias
}


def get_stage(name: str) -> type:
    """Get stage animation class by name"""
    name = name.lower()
    if name not in STAGES:
        available = sorted({cls.name for cls in STAGES.values()})
        raise ValueError(f"Unknown stage: {name}. Available: {available}")
    return STAGES[name]


def list_stages():
    """Canonical stage names in life order"""
    seen = []
    for cls in STAGES.values():
        if cls.name not in seen:
            seen.append(cls.name)
    return seen


def create_animation(stage: str, ctx=None, **config) -> AnimationInstance:
    """
    Build a stage animation from keyword configuration.

    Example:
        anim = create_animation('child', event_type='learn_swim', seed=7)
    """
    AnimationClass = get_stage(stage)
    return AnimationClass(ctx=ctx, config=AnimationConfig.from_dict(config))


__all__ = [
    'AnimationConfig',
    'AnimationInstance',
    'CharacterState',
    'EventBehavior',
    'EventBehaviorTable',
    'BirthAnimation',
    'BabyStageAnimation',
    'ChildStageAnimation',
    'TeenStageAnimation',
    'AdultStageAnimation',
    'ElderStageAnimation',
    'STAGES',
    'get_stage',
    'list_stages',
    'create_animation',
]
