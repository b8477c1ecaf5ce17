#!/usr/bin/env python3
"""
Temporal filter command line.

Usage:
    temporal-aa generate moving-box -o sequence.safetensors
    temporal-aa run sequence.safetensors -o out/ --strength 0.7 --pattern halton
    temporal-aa jitter --pattern poisson --frames 8
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np

from . import blend
from .config import DepthConfig, FilterConfig
from .depth import DEFAULT_FAR_PLANE
from .frame_io import load_sequence, save_png, save_sequence
from .jitter import JitterPattern, jitter
from .pipeline import run_sequence
from .synthetic import SEQUENCES

PATTERN_NAMES = [p.name.lower() for p in JitterPattern]


def add_filter_arguments(parser: argparse.ArgumentParser):
    """Filter and depth settings, read back by FilterConfig/DepthConfig.from_args."""
    parser.add_argument('--strength', type=float, default=0.5,
                        help='Temporal filter strength 0-1 (default: 0.5)')
    parser.add_argument('--sharpening', type=float, default=0.5,
                        help='Sharpening strength 0-1 (default: 0.5)')
    parser.add_argument('--jitter-strength', type=float, default=1.0,
                        help='Jitter strength 0-1 (default: 1.0)')
    parser.add_argument('--pattern', type=str, default='sobol', choices=PATTERN_NAMES,
                        help='Jitter pattern (default: sobol)')
    parser.add_argument('--fps-compensation', action='store_true',
                        help='Scale history decay with frame time (48 FPS baseline)')
    parser.add_argument('--centered-jitter', action='store_true',
                        help='Centre jitter offsets on the pixel (within half a pixel)')
    parser.add_argument('--far-plane', type=float, default=DEFAULT_FAR_PLANE,
                        help=f'Depth linearization far plane (default: {DEFAULT_FAR_PLANE:g})')
    parser.add_argument('--reversed-depth', action='store_true',
                        help='Depth buffer is reversed (1 = near)')


def cmd_run(args) -> int:
    if not args.input.exists():
        print(f"Error: Input file not found: {args.input}")
        return 1

    try:
        sequence = load_sequence(args.input)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    if len(sequence) == 0:
        print(f"Error: {args.input} holds no frames")
        return 1

    config = FilterConfig.from_args(args)
    depth_config = DepthConfig.from_args(args)
    args.output_dir.mkdir(parents=True, exist_ok=True)
    verbose = not args.quiet

    if verbose:
        print("=" * 60)
        print("Temporal Filter")
        print("=" * 60)
        print(f"\nInput:  {args.input} ({len(sequence)} frames, {sequence.width}x{sequence.height})")
        print(f"Output: {args.output_dir}")
        print(f"Strength: {config.temporal_strength:.2f}  Sharpening: {config.sharpening:.2f}")
        centring = ", centred" if config.jitter_centered else ""
        print(f"Jitter: {config.jitter_pattern.name.lower()} x {config.jitter_strength:.2f}{centring}")
        print(f"Static history weight: {blend.weight_ceiling(config.temporal_strength):.3f}")
        print()

    results = run_sequence(sequence.frames, sequence.motions, sequence.frametimes,
                           config=config, depth_config=depth_config)
    stem = args.input.stem
    for result in results:
        out_path = args.output_dir / f"{stem}_taa_{result.frame_index:04d}.png"
        save_png(result.output, out_path)
        if verbose:
            d = result.diagnostics
            print(f"  Frame {result.frame_index:4d}: weight {d.weight.mean():.3f}  "
                  f"rejected {np.mean(d.depth_mask < 0.5) * 100:5.1f}%  -> {out_path.name}")

    if verbose:
        print()
        print("Done!")
    return 0


def cmd_generate(args) -> int:
    for name in ('width', 'height', 'frames'):
        if getattr(args, name) <= 0:
            print(f"Error: --{name} must be positive, got {getattr(args, name)}")
            return 1

    generator = SEQUENCES[args.kind]
    arrays = generator(width=args.width, height=args.height, count=args.frames)
    args.output.parent.mkdir(parents=True, exist_ok=True)
    save_sequence(args.output, metadata={'generator': args.kind}, **arrays)
    if not args.quiet:
        print(f"Generated {args.kind}: {args.frames} frames, {args.width}x{args.height} -> {args.output}")
    return 0


def cmd_jitter(args) -> int:
    pattern = JitterPattern.parse(args.pattern)
    print(f"{pattern.name.lower()} jitter at pixel ({args.x}, {args.y}), strength {args.strength:g}")
    for frame in range(args.start, args.start + args.frames):
        dx, dy = jitter(args.x, args.y, frame, pattern, args.strength, centered=args.centered)
        print(f"  frame {frame:5d}: ({dx:+.4f}, {dy:+.4f}) px")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='temporal-aa',
        description='Temporal accumulation filter with jitter, history clipping and sharpening'
    )
    sub = parser.add_subparsers(dest='command', required=True)

    run = sub.add_parser('run', help='Filter a frame sequence and write PNG frames')
    run.add_argument('input', type=Path, help='Sequence file (.safetensors)')
    run.add_argument('--output-dir', '-o', type=Path, default=Path('taa_output'),
                     help='Output directory (default: taa_output)')
    run.add_argument('--quiet', '-q', action='store_true', help='Quiet mode')
    add_filter_arguments(run)
    run.set_defaults(func=cmd_run)

    gen = sub.add_parser('generate', help='Write a synthetic frame sequence')
    gen.add_argument('kind', choices=sorted(SEQUENCES), help='Sequence kind')
    gen.add_argument('--output', '-o', type=Path, default=Path('sequence.safetensors'),
                     help='Output file (default: sequence.safetensors)')
    gen.add_argument('--width', type=int, default=64)
    gen.add_argument('--height', type=int, default=48)
    gen.add_argument('--frames', '-n', type=int, default=16)
    gen.add_argument('--quiet', '-q', action='store_true', help='Quiet mode')
    gen.set_defaults(func=cmd_generate)

    jit = sub.add_parser('jitter', help='Print jitter offsets for one pixel')
    jit.add_argument('--pattern', type=str, default='sobol', choices=PATTERN_NAMES)
    jit.add_argument('--strength', type=float, default=1.0)
    jit.add_argument('--x', type=int, default=0)
    jit.add_argument('--y', type=int, default=0)
    jit.add_argument('--start', type=int, default=0, help='First frame index')
    jit.add_argument('--frames', '-n', type=int, default=16)
    jit.add_argument('--centered', action='store_true',
                     help='Centre offsets on the pixel')
    jit.set_defaults(func=cmd_jitter)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
