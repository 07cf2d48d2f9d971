"""
Life Stage Engine - Core Utilities
"""

from .canvas import Canvas
from .character import CharacterShape, draw_character, get_shape, interpolate_shapes
from .effects import Drops, EffectSlots, Glow, Pages, Rays, Rings, Wash
from .exporter import FrameExporter
from .particles import FieldPolicy, FieldSet, Particle, ParticleField, ParticleShape
from .performance import PerformanceMonitor
from .phase import PhaseClock, PhaseSpec
from .presets import AnimationPreset, PresetManager, get_preset, get_preset_manager, load_config
from .quality import QualityCaps, QualityController, QualityLevel
from .render import Layer, RenderPipeline
from .utils import ColorUtils, MathUtils

__all__ = [
    # Drawing
    'Canvas',
    'Layer',
    'RenderPipeline',
    # Character
    'CharacterShape',
    'draw_character',
    'get_shape',
    'interpolate_shapes',
    # Effects
    'EffectSlots',
    'Glow',
    'Rings',
    'Rays',
    'Drops',
    'Pages',
    'Wash',
    # Particles
    'Particle',
    'ParticleShape',
    'ParticleField',
    'FieldPolicy',
    'FieldSet',
    # Timing and quality
    'PhaseSpec',
    'PhaseClock',
    'QualityLevel',
    'QualityCaps',
    'QualityController',
    'PerformanceMonitor',
    # Presets and export
    'AnimationPreset',
    'PresetManager',
    'get_preset',
    'get_preset_manager',
    'load_config',
    'FrameExporter',
    # Utilities
    'ColorUtils',
    'MathUtils',
]
