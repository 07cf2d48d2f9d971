"""
Frame Exporter - writes rendered animation frames to disk
"""

import json
from pathlib import Path
from typing import List, Optional, Tuple, Union

from PIL import Image


PathLike = Union[str, Path]


class FrameExporter:
    """Exports rendered frames (Pillow images) to various formats"""

    @classmethod
    def to_png(cls, frame: Image.Image, path: PathLike) -> Path:
        """Export a single frame to PNG"""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        frame.convert('RGBA').save(path, 'PNG')
        return path

    @classmethod
    def to_gif(
        cls,
        frames: List[Image.Image],
        path: PathLike,
        duration: int = 33,
        loop: int = 0
    ) -> Path:
        """Export animation frames to GIF; duration is milliseconds per frame"""
        if not frames:
            raise ValueError("No frames to export")

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        # Frames are fully painted, so no transparency index is needed
        images = [
            frame.convert('RGB').convert('P', palette=Image.ADAPTIVE, colors=256)
            for frame in frames
        ]
        images[0].save(
            path,
            save_all=True,
            append_images=images[1:],
            duration=max(1, int(duration)),
            loop=loop,
        )
        return path

    @classmethod
    def to_spritesheet(
        cls,
        frames: List[Image.Image],
        path: PathLike,
        columns: Optional[int] = None,
        padding: int = 0
    ) -> Tuple[Path, dict]:
        """Export animation frames to a spritesheet PNG with JSON metadata alongside"""
        if not frames:
            raise ValueError("No frames to export")

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        frame_count = len(frames)
        frame_width, frame_height = frames[0].size

        if columns is None:
            columns = min(frame_count, 8)
        columns = max(1, columns)
        rows = (frame_count + columns - 1) // columns

        sheet_width = columns * (frame_width + padding) - padding
        sheet_height = rows * (frame_height + padding) - padding
        sheet = Image.new('RGBA', (sheet_width, sheet_height), (0, 0, 0, 0))

        for i, frame in enumerate(frames):
            row, col = divmod(i, columns)
            sheet.paste(frame.convert('RGBA'), (col * (frame_width + padding), row * (frame_height + padding)))

        sheet.save(path, 'PNG')

        metadata = {
            'frames': frame_count,
            'frame_width': frame_width,
            'frame_height': frame_height,
            'columns': columns,
            'rows': rows,
            'padding': padding,
            'sheet_width': sheet_width,
            'sheet_height': sheet_height,
        }
        with open(path.with_suffix('.json'), 'w') as f:
            json.dump(metadata, f, indent=2)

        return path, metadata

    @classmethod
    def to_frames(
        cls,
        frames: List[Image.Image],
        directory: PathLike,
        prefix: str = "frame"
    ) -> List[Path]:
        """Export animation frames as individual PNGs"""
        if not frames:
            raise ValueError("No frames to export")

        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        return [
            cls.to_png(frame, directory / f"{prefix}_{i:04d}.png")
            for i, frame in enumerate(frames)
        ]
