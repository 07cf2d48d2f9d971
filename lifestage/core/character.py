"""
Character shapes - body parameters per life stage

Provides the body proportions and palette for each stage, blends between
stages for morphing, and draws the character with an emotion-selected face.
The drawing is centered on the origin; callers position, scale and fade it
with the context transform and alpha.
"""

import math
from dataclasses import dataclass, replace
from typing import Dict, Tuple

from .utils import ColorUtils, MathUtils


@dataclass(frozen=True)
class CharacterShape:
    """Body proportions (pixels at scale 1) and palette for one stage"""
    stage: str
    head_radius: float
    body_width: float       # ellipse half-width
    body_height: float      # ellipse half-height
    limb_thickness: float
    leg_length: float
    skin: str
    hair: str
    eyes: str
    clothes: str
    accessories: Tuple[str, ...] = ()

    @property
    def height(self) -> float:
        """Top of head to feet"""
        return self.head_radius * 2 + self.body_height * 2 + self.leg_length


STAGE_SHAPES: Dict[str, CharacterShape] = {
    'baby': CharacterShape(
        stage='baby', head_radius=18, body_width=15, body_height=20,
        limb_thickness=6, leg_length=10,
        skin='#FFE4C4', hair='#D2B48C', eyes='#4169E1', clothes='#FFB6C1',
    ),
    'child': CharacterShape(
        stage='child', head_radius=16, body_width=14, body_height=22,
        limb_thickness=5, leg_length=18,
        skin='#FFE4C4', hair='#8B4513', eyes='#32CD32', clothes='#87CEEB',
    ),
    'teen': CharacterShape(
        stage='teen', head_radius=15, body_width=15, body_height=28,
        limb_thickness=5, leg_length=26,
        skin='#FFE4C4', hair='#654321', eyes='#8B4513', clothes='#DDA0DD',
    ),
    'adult': CharacterShape(
        stage='adult', head_radius=15, body_width=17, body_height=30,
        limb_thickness=6, leg_length=30,
        skin='#FFE4C4', hair='#8B4513', eyes='#4169E1', clothes='#2F4F4F',
        accessories=('tie',),
    ),
    'elder': CharacterShape(
        stage='elder', head_radius=15, body_width=16, body_height=27,
        limb_thickness=5, leg_length=26,
        skin='#F5DEB3', hair='#C0C0C0', eyes='#4682B4', clothes='#8FBC8F',
        accessories=('glasses',),
    ),
}

# The newborn shares the baby's body
STAGE_SHAPES['birth'] = replace(STAGE_SHAPES['baby'], stage='birth')


def get_shape(stage: str) -> CharacterShape:
    if stage not in STAGE_SHAPES:
        available = ', '.join(sorted(STAGE_SHAPES))
        raise ValueError(f"Unknown stage '{stage}'. Available: {available}")
    return STAGE_SHAPES[stage]


def interpolate_shapes(a: CharacterShape, b: CharacterShape, t: float) -> CharacterShape:
    """Blend two shapes; numbers and colors interpolate, the rest switches at t = 0.5"""
    t = MathUtils.clamp(t, 0.0, 1.0)
    lerp = MathUtils.lerp
    dominant = b if t >= 0.5 else a
    return CharacterShape(
        stage=dominant.stage,
        head_radius=lerp(a.head_radius, b.head_radius, t),
        body_width=lerp(a.body_width, b.body_width, t),
        body_height=lerp(a.body_height, b.body_height, t),
        limb_thickness=lerp(a.limb_thickness, b.limb_thickness, t),
        leg_length=lerp(a.leg_length, b.leg_length, t),
        skin=ColorUtils.lerp_color(a.skin, b.skin, t),
        hair=ColorUtils.lerp_color(a.hair, b.hair, t),
        eyes=ColorUtils.lerp_color(a.eyes, b.eyes, t),
        clothes=ColorUtils.lerp_color(a.clothes, b.clothes, t),
        accessories=dominant.accessories,
    )


# =============================================================================
# Faces
# =============================================================================

# emotion -> (mouth, eyes)
EMOTION_FACES: Dict[str, Tuple[str, str]] = {
    'neutral': ('line', 'open'),
    'happy': ('smile', 'open'),
    'joyful': ('smile', 'open'),
    'loving': ('smile', 'closed'),
    'tender': ('smile', 'closed'),
    'caring': ('smile', 'open'),
    'proud': ('smile', 'open'),
    'proud_parent': ('smile', 'closed'),
    'successful': ('smile', 'open'),
    'satisfied': ('smile', 'closed'),
    'wealthy': ('grin', 'open'),
    'excited': ('grin', 'wide'),
    'triumphant': ('grin', 'open'),
    'celebratory': ('grin', 'open'),
    'creative': ('smile', 'wide'),
    'brave': ('smile', 'open'),
    'curious': ('small', 'wide'),
    'nervous': ('small', 'open'),
    'shy': ('small', 'closed'),
    'focused': ('flat', 'open'),
    'concentrated': ('flat', 'open'),
    'determined': ('flat', 'open'),
    'hardworking': ('flat', 'open'),
    'intense': ('flat', 'wide'),
    'professional': ('flat', 'open'),
    'thoughtful': ('flat', 'closed'),
    'peaceful': ('gentle', 'closed'),
    'serene': ('gentle', 'closed'),
    'wise': ('gentle', 'open'),
    'nostalgic': ('gentle', 'closed'),
    'reflective': ('gentle', 'open'),
}

BLUSHING = frozenset({'shy', 'loving', 'tender'})


def face_for(emotion: str) -> Tuple[str, str]:
    return EMOTION_FACES.get(emotion, EMOTION_FACES['neutral'])


def draw_character(ctx, shape: CharacterShape, emotion: str = 'neutral'):
    head_y = -shape.head_radius
    body_y = shape.body_height * 0.9
    hip_y = body_y + shape.body_height * 0.8

    # Legs and arms first so the body covers the joints
    ctx.stroke_style = shape.skin
    ctx.line_width = shape.limb_thickness
    ctx.line_cap = 'round'
    for side in (-1, 1):
        ctx.begin_path()
        ctx.move_to(side * shape.body_width * 0.5, hip_y)
        ctx.line_to(side * shape.body_width * 0.5, hip_y + shape.leg_length)
        ctx.stroke()
        ctx.begin_path()
        ctx.move_to(side * shape.body_width * 0.8, body_y - shape.body_height * 0.5)
        ctx.line_to(side * (shape.body_width + 8), body_y + shape.body_height * 0.3)
        ctx.stroke()

    ctx.fill_style = shape.clothes
    ctx.begin_path()
    ctx.ellipse(0, body_y, shape.body_width, shape.body_height, 0, 0, 2 * math.pi)
    ctx.fill()

    if 'tie' in shape.accessories:
        ctx.fill_style = '#8B0000'
        ctx.begin_path()
        ctx.move_to(0, body_y - shape.body_height * 0.9)
        ctx.line_to(4, body_y - shape.body_height * 0.2)
        ctx.line_to(0, body_y + shape.body_height * 0.3)
        ctx.line_to(-4, body_y - shape.body_height * 0.2)
        ctx.close_path()
        ctx.fill()

    # Head
    ctx.fill_style = shape.skin
    ctx.begin_path()
    ctx.arc(0, head_y, shape.head_radius, 0, 2 * math.pi)
    ctx.fill()

    ctx.fill_style = shape.hair
    ctx.begin_path()
    ctx.arc(0, head_y - shape.head_radius * 0.35, shape.head_radius * 0.85, math.pi, 2 * math.pi)
    ctx.fill()

    _draw_face(ctx, shape, head_y, emotion)


def _draw_face(ctx, shape: CharacterShape, head_y: float, emotion: str):
    mouth, eyes = face_for(emotion)
    r = shape.head_radius
    eye_dx = r * 0.35
    eye_y = head_y - r * 0.1

    for side in (-1, 1):
        ex = side * eye_dx
        if eyes == 'closed':
            ctx.stroke_style = '#333333'
            ctx.line_width = 1.5
            ctx.begin_path()
            ctx.arc(ex, eye_y, r * 0.15, math.pi, 2 * math.pi)
            ctx.stroke()
        else:
            size = r * (0.24 if eyes == 'wide' else 0.18)
            ctx.fill_style = '#FFFFFF'
            ctx.begin_path()
            ctx.arc(ex, eye_y, size, 0, 2 * math.pi)
            ctx.fill()
            ctx.fill_style = shape.eyes
            ctx.begin_path()
            ctx.arc(ex, eye_y, size * 0.55, 0, 2 * math.pi)
            ctx.fill()

    if 'glasses' in shape.accessories:
        ctx.stroke_style = '#555555'
        ctx.line_width = 1.5
        for side in (-1, 1):
            ctx.begin_path()
            ctx.arc(side * eye_dx, eye_y, r * 0.28, 0, 2 * math.pi)
            ctx.stroke()
        ctx.begin_path()
        ctx.move_to(-eye_dx + r * 0.28, eye_y)
        ctx.line_to(eye_dx - r * 0.28, eye_y)
        ctx.stroke()

    if emotion in BLUSHING:
        ctx.fill_style = 'rgba(255, 105, 180, 0.4)'
        for side in (-1, 1):
            ctx.begin_path()
            ctx.arc(side * r * 0.6, head_y + r * 0.25, r * 0.18, 0, 2 * math.pi)
            ctx.fill()

    mouth_y = head_y + r * 0.45
    ctx.stroke_style = '#8B4513'
    ctx.line_width = 2
    ctx.begin_path()
    if mouth == 'smile':
        ctx.arc(0, mouth_y - r * 0.2, r * 0.4, 0.15 * math.pi, 0.85 * math.pi)
        ctx.stroke()
    elif mouth == 'grin':
        ctx.fill_style = '#8B4513'
        ctx.arc(0, mouth_y - r * 0.1, r * 0.35, 0, math.pi)
        ctx.close_path()
        ctx.fill()
    elif mouth == 'small':
        ctx.arc(0, mouth_y, r * 0.12, 0, 2 * math.pi)
        ctx.stroke()
    elif mouth == 'gentle':
        ctx.arc(0, mouth_y - r * 0.45, r * 0.5, 0.3 * math.pi, 0.7 * math.pi)
        ctx.stroke()
    else:
        # line / flat
        width = r * (0.35 if mouth == 'flat' else 0.25)
        ctx.move_to(-width, mouth_y)
        ctx.line_to(width, mouth_y)
        ctx.stroke()
