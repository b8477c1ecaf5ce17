#!/usr/bin/env python3
"""
Analyze jitter patterns over time and space.

For each pattern, generates a 3-panel figure:
- Temporal scatter: offsets of one pixel over N frames (sub-pixel coverage)
- Spatial map: horizontal offset over a tile of pixels in one frame
- Radially averaged power spectrum of that map (clustering shows up as
  low-frequency energy)

Also prints coverage statistics: mean offset (bias) and the fraction of a
4x4 sub-pixel grid reached within N frames. Offsets are taken centred on the
pixel, so the bias is measured from the pixel centre.

Usage:
    python tools/analyze_jitter.py
    python tools/analyze_jitter.py --frames 64 --size 128
    python tools/analyze_jitter.py --pattern halton --pattern poisson
"""

import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
from numpy.fft import fft2, fftshift
from pathlib import Path
import argparse

from temporal_aa.jitter import JitterPattern, jitter, jitter_field


def temporal_offsets(pattern: JitterPattern, frames: int, x: int = 0, y: int = 0) -> np.ndarray:
    """Centred pixel-unit offsets of one pixel over frames 0..frames-1, shape (frames, 2)."""
    return np.array([jitter(x, y, f, pattern, centered=True) for f in range(frames)])


def spatial_offsets(pattern: JitterPattern, size: int, frame: int = 0) -> np.ndarray:
    """Horizontal pixel-unit offset of every pixel in a size x size tile."""
    field = jitter_field(size, size, frame, pattern, centered=True)
    return field[..., 0] * size


def radial_power(img: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Radially averaged power spectrum, frequencies in cycles/pixel."""
    h, w = img.shape
    spectrum = np.abs(fftshift(fft2(img - img.mean()))) ** 2

    cy, cx = h // 2, w // 2
    y_coords, x_coords = np.ogrid[:h, :w]
    distances = np.sqrt((x_coords - cx) ** 2 + (y_coords - cy) ** 2)

    max_radius = min(cx, cy)
    power = []
    for r in range(1, max_radius):
        ring = np.abs(distances - r) < 0.5
        power.append(spectrum[ring].mean() if ring.any() else 0.0)

    freqs = np.arange(1, max_radius) / min(h, w)
    return freqs, np.array(power)


def coverage(offsets: np.ndarray, cells: int = 4) -> float:
    """Fraction of a cells x cells sub-pixel grid hit by the offsets."""
    idx = np.clip(np.floor((offsets + 0.5) * cells), 0, cells - 1).astype(int)
    hit = np.zeros((cells, cells), dtype=bool)
    hit[idx[:, 1], idx[:, 0]] = True
    return hit.mean()


def plot_pattern(pattern: JitterPattern, frames: int, size: int, output_path: Path):
    offsets = temporal_offsets(pattern, frames)
    spatial = spatial_offsets(pattern, size)
    freqs, power = radial_power(spatial)

    fig, axes = plt.subplots(1, 3, figsize=(15, 5))

    axes[0].scatter(offsets[:, 0], offsets[:, 1], c=np.arange(frames), cmap='viridis', s=12)
    axes[0].set_xlim(-0.5, 0.5)
    axes[0].set_ylim(-0.5, 0.5)
    axes[0].set_aspect('equal')
    axes[0].set_title(f'Pixel (0, 0), {frames} frames')
    axes[0].grid(True, alpha=0.3)

    axes[1].imshow(spatial, cmap='coolwarm', vmin=-0.5, vmax=0.5)
    axes[1].set_title('Horizontal offset, frame 0')
    axes[1].axis('off')

    axes[2].plot(freqs, 10 * np.log10(power + 1e-10), 'b-', alpha=0.8)
    axes[2].set_xlabel('Spatial Frequency (cycles/pixel)')
    axes[2].set_ylabel('Power (dB)')
    axes[2].set_title('Radial Power')
    axes[2].set_xlim(0, 0.5)
    axes[2].grid(True, alpha=0.3)

    fig.suptitle(f'{pattern.name.title()} jitter', fontsize=14, fontweight='bold')
    plt.tight_layout()
    plt.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close()


def main():
    parser = argparse.ArgumentParser(description='Analyze jitter pattern coverage and spectra')
    parser.add_argument('--output-dir', type=Path, default=Path('tools/jitter_analysis'),
                        help='Output directory')
    parser.add_argument('--pattern', action='append', default=None,
                        choices=[p.name.lower() for p in JitterPattern],
                        help='Pattern to analyze (repeatable, default: all)')
    parser.add_argument('--frames', type=int, default=32,
                        help='Frames for the temporal scatter (default: 32)')
    parser.add_argument('--size', type=int, default=64,
                        help='Tile size for the spatial spectrum (default: 64)')

    args = parser.parse_args()
    args.output_dir.mkdir(parents=True, exist_ok=True)

    patterns = [JitterPattern.parse(p) for p in args.pattern] if args.pattern else list(JitterPattern)

    print(f"Analyzing {len(patterns)} jitter pattern(s)...")
    print(f"  Frames: {args.frames}")
    print(f"  Tile: {args.size}x{args.size}")
    print(f"  Output: {args.output_dir}")
    print()
    print(f"  {'pattern':<10} {'bias x':>8} {'bias y':>8} {'coverage':>9}")

    for pattern in patterns:
        offsets = temporal_offsets(pattern, args.frames)
        bias = offsets.mean(axis=0)
        print(f"  {pattern.name.lower():<10} {bias[0]:+8.4f} {bias[1]:+8.4f} {coverage(offsets):9.2%}")

        output_path = args.output_dir / f"jitter_{pattern.name.lower()}.png"
        plot_pattern(pattern, args.frames, args.size, output_path)

    print()
    print("Done!")


if __name__ == '__main__':
    main()
