#!/usr/bin/env python
"""
Life Stage Animator CLI - render life-stage animations to GIFs or frames

Usage:
    lifestage <stage> [options]

Examples:
    lifestage birth                              # Newborn arrival as a GIF
    lifestage child --event learn_swim           # Specific event
    lifestage teen --event graduation --format spritesheet
    lifestage --preset wedding_day               # Use a preset
"""

import argparse
import logging
import sys
from pathlib import Path

from . import render_animation
from .core.exporter import FrameExporter
from .core.presets import apply_preset_to_args, get_preset_manager, load_config
from .stages import get_stage, list_stages


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='lifestage',
        description="Render life-stage animations with particle effects",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Stages:
  birth     - Newborn arrival (prebirth, birth, appear)
  baby      - Nursery milestones: smiles, crawling, first word
  child     - Walking, school, swimming, first award
  teen      - Exams, first love, clubs, graduation
  adult     - Jobs, wedding, house, children, investments
  elder     - Retirement, grandchildren, memories, memoir

Examples:
  %(prog)s baby --event first_crawl
  %(prog)s elder --event reminisce --quality low --fps 15
  %(prog)s --list-events teen                # Show a stage's events
  %(prog)s --list-presets                    # Show all presets
  %(prog)s --config my_render.yaml           # Settings from a YAML file
        """
    )

    parser.add_argument(
        'stage',
        type=str,
        nargs='?',
        default=None,
        help='Life stage to render'
    )

    parser.add_argument(
        '-e', '--event',
        type=str,
        default=None,
        help='Event type (stage default if not specified)'
    )

    parser.add_argument(
        '-o', '--output',
        type=str,
        default=None,
        help='Output path (auto-generated if not specified)'
    )

    parser.add_argument(
        '--format',
        type=str,
        default='gif',
        choices=['gif', 'frames', 'spritesheet'],
        help='Output format (default: gif)'
    )

    parser.add_argument(
        '--fps',
        type=int,
        default=None,
        help='Frames per second (default: 30)'
    )

    parser.add_argument(
        '-q', '--quality',
        type=str,
        default=None,
        choices=['low', 'medium', 'high'],
        help='Particle cap level (default: high)'
    )

    parser.add_argument(
        '-d', '--duration',
        type=float,
        default=None,
        help='Animation length in milliseconds (stage default if not specified)'
    )

    parser.add_argument(
        '--width',
        type=int,
        default=None,
        help='Canvas width in pixels (default: 800)'
    )

    parser.add_argument(
        '--height',
        type=int,
        default=None,
        help='Canvas height in pixels (default: 600)'
    )

    parser.add_argument(
        '--seed',
        type=int,
        default=None,
        help='Random seed for reproducible particles'
    )

    parser.add_argument(
        '--list-stages',
        action='store_true',
        help='List all stages and exit'
    )

    parser.add_argument(
        '--list-events',
        type=str,
        default=None,
        metavar='STAGE',
        help="List a stage's event types and exit"
    )

    parser.add_argument(
        '--preset',
        type=str,
        default=None,
        metavar='NAME',
        help='Use a preset configuration (e.g., wedding_day, memories)'
    )

    parser.add_argument(
        '--list-presets',
        action='store_true',
        help='List all available presets and exit'
    )

    parser.add_argument(
        '--config',
        type=str,
        default=None,
        metavar='FILE',
        help='Read render settings from a YAML file'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Show progress logging'
    )

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s'
    )

    # === LISTINGS ===
    if args.list_stages:
        print("Available Stages:\n")
        for name in list_stages():
            cls = get_stage(name)
            print(f"  {name:<8} - {cls.description}")
        sys.exit(0)

    if args.list_events:
        try:
            cls = get_stage(args.list_events)
        except ValueError as e:
            print(f"Error: {e}")
            sys.exit(1)
        print(f"Events for {cls.name}:\n")
        for i, event in enumerate(cls.event_types()):
            marker = ' (default)' if i == 0 else ''
            print(f"  {event}{marker}")
        sys.exit(0)

    if args.list_presets:
        manager = get_preset_manager()
        print("Available Presets:\n")
        for stage in list_stages():
            names = manager.list_by_stage(stage)
            if not names:
                continue
            print(f"  [{stage.upper()}]")
            for name in names:
                print(f"    {name:<20} - {manager.get(name).description}")
            print()
        print(f"Total: {len(manager.list_all())} presets")
        print("\nUsage: --preset <name>")
        sys.exit(0)

    # === PRESETS / CONFIG FILES ===
    if args.preset:
        preset = get_preset_manager().get(args.preset)
        if preset is None:
            print(f"Error: Preset '{args.preset}' not found")
            print("Use --list-presets to see available presets")
            sys.exit(1)
        apply_preset_to_args(preset, args)
        print(f"Using preset: {args.preset} ({preset.description})")

    if args.config:
        try:
            preset = load_config(args.config)
        except (FileNotFoundError, ValueError) as e:
            print(f"Error: {e}")
            sys.exit(1)
        apply_preset_to_args(preset, args)

    if args.stage is None:
        print("Error: A stage is required")
        print("Usage: lifestage <stage> [options]")
        print("       lifestage --list-stages")
        sys.exit(1)

    try:
        stage_cls = get_stage(args.stage)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    fps = args.fps if args.fps is not None else 30
    quality = args.quality or 'high'
    width = args.width if args.width is not None else 800
    height = args.height if args.height is not None else 600
    overrides = dict(args._preset.overrides) if hasattr(args, '_preset') else {}

    try:
        frames = render_animation(
            stage_cls.name,
            event_type=args.event,
            fps=fps,
            quality=quality,
            duration=args.duration,
            seed=args.seed,
            width=width,
            height=height,
            overrides=overrides,
        )

        output = args.output
        if output is None:
            suffix = f"_{args.event}" if args.event else ''
            output = f"{stage_cls.name}{suffix}"
            if args.format == 'gif':
                output += '.gif'
            elif args.format == 'spritesheet':
                output += '.png'

        if args.format == 'gif':
            result = FrameExporter.to_gif(frames, output, duration=round(1000 / fps))
        elif args.format == 'spritesheet':
            result, _ = FrameExporter.to_spritesheet(frames, output)
        else:
            paths = FrameExporter.to_frames(frames, output, prefix=stage_cls.name)
            result = Path(output)
            print(f"Wrote {len(paths)} frames")

        print(f"Output: {result}")
        print("Done!")

    except (OSError, ValueError) as e:
        print(f"Error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == '__main__':
    main()
