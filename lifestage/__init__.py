"""
Life Stage Animator - stage animations and particle effects for a life-simulation game
"""

import logging
from typing import Any, Dict, List, Optional

from PIL import Image

from .core import Canvas, FrameExporter, PerformanceMonitor, get_preset
from .stages import STAGES, create_animation, get_stage, list_stages

__version__ = "0.1.0"
__all__ = [
    'Canvas',
    'FrameExporter',
    'PerformanceMonitor',
    'STAGES',
    'get_stage',
    'list_stages',
    'create_animation',
    'get_preset',
    'render_animation',
]

logger = logging.getLogger(__name__)


def render_animation(
    stage: str,
    event_type: Optional[str] = None,
    fps: int = 30,
    quality: str = 'high',
    duration: Optional[float] = None,
    seed: Optional[int] = None,
    width: int = 800,
    height: int = 600,
    overrides: Optional[Dict[str, Any]] = None,
) -> List[Image.Image]:
    """
    Render a stage animation offline, one image per frame.

    Time advances by 1000 / fps per frame starting at 0; the frame on which
    the animation completes is included.

    Args:
        stage: Stage name ('birth', 'baby', 'child', 'teen', 'adult', 'elder')
        event_type: Event to play (stage default if None or unknown)
        fps: Frames per second of the timeline
        quality: Particle cap level ('low', 'medium', 'high')
        duration: Override the stage's duration in milliseconds
        seed: Random seed for reproducible particle fields
        width: Frame width in pixels
        height: Frame height in pixels
        overrides: Stage-specific overrides (e.g. {'caps': {...}})

    Returns:
        List of RGBA Pillow images
    """
    if fps <= 0:
        raise ValueError(f"fps must be positive, got {fps}")

    anim = create_animation(
        stage,
        event_type=event_type,
        duration=duration,
        seed=seed,
        width=width,
        height=height,
        overrides=overrides or {},
    )
    frames = []
    try:
        anim.set_quality(quality)
        frame_ms = 1000.0 / fps
        frame_index = 0
        while True:
            time = frame_index * frame_ms
            anim.update(time, frame_ms if frame_index else 0.0)
            canvas = Canvas(width, height)
            anim.render(canvas)
            frames.append(canvas.to_image())
            if anim.is_animation_complete():
                break
            frame_index += 1
        logger.info(
            "Rendered %s/%s: %d frames at %d fps", anim.name, anim.event_key, len(frames), fps
        )
    finally:
        anim.cleanup()
    return frames
