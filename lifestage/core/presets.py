"""
Animation Presets Library - named stage/event showcases
Lets users render a stage animation with a known look from a single flag
"""

import copy
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml


logger = logging.getLogger(__name__)


# ============================================================================
# Preset Data Structures
# ============================================================================

@dataclass
class AnimationPreset:
    """A single render configuration"""

    name: str
    stage: str = "baby"
    event_type: Optional[str] = None
    description: str = ""

    # Timeline
    duration: Optional[float] = None
    fps: int = 30

    # Output
    quality: str = "high"
    width: int = 800
    height: int = 600
    seed: Optional[int] = None

    # Stage-specific overrides, e.g. {'caps': {'sparkles': {'low': 5, 'medium': 10}}}
    overrides: Dict[str, Any] = field(default_factory=dict)

    # Tags for organization
    tags: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for YAML serialization"""
        return {k: v for k, v in asdict(self).items() if v is not None and v != {} and v != []}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AnimationPreset':
        """Create from dictionary"""
        # 'event' is accepted as shorthand for event_type
        if 'event' in data and 'event_type' not in data:
            data = dict(data)
            data['event_type'] = data.pop('event')

        # Filter to valid fields
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in data.items() if k in valid_fields}

        return cls(**filtered)

    def render_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for render_animation"""
        return {
            'stage': self.stage,
            'event_type': self.event_type,
            'fps': self.fps,
            'quality': self.quality,
            'duration': self.duration,
            'seed': self.seed,
            'width': self.width,
            'height': self.height,
            'overrides': copy.deepcopy(self.overrides),
        }


# ============================================================================
# Built-in Presets
# ============================================================================

BUILTIN_PRESETS: Dict[str, Dict[str, Any]] = {
    # ==================== BIRTH ====================
    "newborn": {
        "name": "newborn",
        "description": "The full seven-second arrival",
        "stage": "birth",
        "fps": 24,
        "tags": ["birth", "magic"],
    },

    # ==================== BABY ====================
    "first_smile": {
        "name": "first_smile",
        "description": "Hearts drift up around the crib",
        "stage": "baby",
        "event_type": "first_smile",
        "tags": ["baby", "hearts"],
    },

    "first_word": {
        "name": "first_word",
        "description": "Sound waves ripple out from the first 'mama'",
        "stage": "baby",
        "event_type": "first_mama",
        "tags": ["baby", "sound"],
    },

    # ==================== CHILD ====================
    "swimming_lesson": {
        "name": "swimming_lesson",
        "description": "Splashes in the pool",
        "stage": "child",
        "event_type": "learn_swim",
        "tags": ["child", "water"],
    },

    "school_award": {
        "name": "school_award",
        "description": "Trophy glow under falling confetti",
        "stage": "child",
        "event_type": "first_award",
        "tags": ["child", "celebration"],
    },

    # ==================== TEEN ====================
    "first_love": {
        "name": "first_love",
        "description": "Petals fluttering across the campus",
        "stage": "teen",
        "event_type": "first_love",
        "tags": ["teen", "romance"],
    },

    "graduation_day": {
        "name": "graduation_day",
        "description": "Caps thrown in the air",
        "stage": "teen",
        "event_type": "graduation",
        "tags": ["teen", "celebration"],
    },

    # ==================== ADULT ====================
    "wedding_day": {
        "name": "wedding_day",
        "description": "Confetti outside the church",
        "stage": "adult",
        "event_type": "wedding",
        "tags": ["adult", "romance", "celebration"],
    },

    "jackpot": {
        "name": "jackpot",
        "description": "Money rain for a successful investment",
        "stage": "adult",
        "event_type": "investment_success",
        "tags": ["adult", "money"],
    },

    # ==================== ELDER ====================
    "retirement_party": {
        "name": "retirement_party",
        "description": "Balloons rise for the last day at work",
        "stage": "elder",
        "event_type": "retirement",
        "tags": ["elder", "celebration"],
    },

    "memories": {
        "name": "memories",
        "description": "Keepsakes drift by in a sepia garden",
        "stage": "elder",
        "event_type": "reminisce",
        "tags": ["elder", "nostalgia"],
    },

    # ==================== PERFORMANCE ====================
    "lightweight": {
        "name": "lightweight",
        "description": "Low-quality caps for slow machines",
        "stage": "child",
        "event_type": "make_friend",
        "quality": "low",
        "fps": 15,
        "tags": ["performance"],
    },
}


# ============================================================================
# Preset Manager
# ============================================================================

class PresetManager:
    """
    Manages loading and saving animation presets.
    """

    def __init__(self, user_presets_dir: Optional[Path] = None):
        """
        Initialize preset manager.

        Args:
            user_presets_dir: Directory for user presets (default: ~/.lifestage/presets)
        """
        self.user_presets_dir = Path(user_presets_dir) if user_presets_dir else Path.home() / '.lifestage' / 'presets'

        self._builtin: Dict[str, AnimationPreset] = {}
        self._user: Dict[str, AnimationPreset] = {}

        self._load_builtin_presets()
        self._load_user_presets()

    def _load_builtin_presets(self) -> None:
        for name, data in BUILTIN_PRESETS.items():
            self._builtin[name] = AnimationPreset.from_dict(data)

    def _load_user_presets(self) -> None:
        """Load user-defined presets from YAML files"""
        if not self.user_presets_dir.is_dir():
            return
        for yaml_file in sorted(self.user_presets_dir.glob('*.yaml')):
            try:
                with open(yaml_file, 'r') as f:
                    data = yaml.safe_load(f)

                if not isinstance(data, dict):
                    raise ValueError("expected a mapping")
                if 'presets' in data:
                    # Multiple presets in one file
                    for name, preset_data in data['presets'].items():
                        preset_data['name'] = name
                        self._user[name] = AnimationPreset.from_dict(preset_data)
                else:
                    name = yaml_file.stem
                    data['name'] = name
                    self._user[name] = AnimationPreset.from_dict(data)
            except (OSError, yaml.YAMLError, ValueError, TypeError, AttributeError) as e:
                logger.warning("Could not load preset file %s: %s", yaml_file, e)

    def get(self, name: str) -> Optional[AnimationPreset]:
        """
        Get a preset by name.
        User presets override built-in presets with same name.
        """
        return self._user.get(name) or self._builtin.get(name)

    def exists(self, name: str) -> bool:
        return name in self._user or name in self._builtin

    def list_all(self) -> List[str]:
        return sorted(set(self._builtin) | set(self._user))

    def list_by_stage(self, stage: str) -> List[str]:
        return sorted(
            name for name, preset in {**self._builtin, **self._user}.items()
            if preset.stage == stage
        )

    def list_by_tag(self, tag: str) -> List[str]:
        matches = []
        for name, preset in {**self._builtin, **self._user}.items():
            if tag.lower() in [t.lower() for t in preset.tags]:
                matches.append(name)
        return sorted(matches)

    def save_preset(self, preset: AnimationPreset, filename: Optional[str] = None) -> Path:
        """
        Save a user preset to YAML file.

        Args:
            preset: The preset to save
            filename: Optional filename (default: preset.name.yaml)

        Returns:
            Path to saved file
        """
        filename = filename or f"{preset.name}.yaml"
        if not filename.endswith('.yaml'):
            filename += '.yaml'

        self.user_presets_dir.mkdir(parents=True, exist_ok=True)
        filepath = self.user_presets_dir / filename

        with open(filepath, 'w') as f:
            yaml.safe_dump(preset.to_dict(), f, default_flow_style=False, sort_keys=False)

        self._user[preset.name] = preset
        return filepath

    def search(self, query: str) -> List[str]:
        """Search presets by name, description, stage or tags"""
        query = query.lower()
        matches = []

        for name, preset in {**self._builtin, **self._user}.items():
            if (query in name.lower() or
                    query in preset.description.lower() or
                    query == preset.stage or
                    any(query in tag.lower() for tag in preset.tags)):
                matches.append(name)

        return sorted(matches)


def load_config(path) -> AnimationPreset:
    """
    Read one YAML file into a preset.

    Raises:
        FileNotFoundError: path does not exist
        ValueError: the document is not a mapping
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, 'r') as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping, got {type(data).__name__}")

    data.setdefault('name', path.stem)
    return AnimationPreset.from_dict(data)


# ============================================================================
# Preset Application
# ============================================================================

def apply_preset_to_args(preset: AnimationPreset, args: Any) -> Any:
    """
    Fill CLI arguments the user left unset from a preset.

    Args:
        preset: The preset to apply
        args: argparse namespace

    Returns:
        Modified args namespace
    """
    if getattr(args, 'stage', None) is None:
        args.stage = preset.stage
    if getattr(args, 'event', None) is None:
        args.event = preset.event_type
    if getattr(args, 'fps', None) is None:
        args.fps = preset.fps
    if getattr(args, 'quality', None) is None:
        args.quality = preset.quality
    if getattr(args, 'duration', None) is None:
        args.duration = preset.duration
    if getattr(args, 'seed', None) is None:
        args.seed = preset.seed
    if getattr(args, 'width', None) is None:
        args.width = preset.width
    if getattr(args, 'height', None) is None:
        args.height = preset.height

    args._preset = preset
    return args


# ============================================================================
# Global Instance & Convenience Functions
# ============================================================================

_manager: Optional[PresetManager] = None


def get_preset_manager() -> PresetManager:
    """Get or create global preset manager"""
    global _manager
    if _manager is None:
        _manager = PresetManager()
    return _manager


def get_preset(name: str) -> Optional[AnimationPreset]:
    return get_preset_manager().get(name)


def list_presets(tag: Optional[str] = None, stage: Optional[str] = None) -> List[str]:
    """List available presets, optionally filtered"""
    manager = get_preset_manager()

    if tag:
        return manager.list_by_tag(tag)
    elif stage:
        return manager.list_by_stage(stage)
    else:
        return manager.list_all()
