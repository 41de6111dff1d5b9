"""Command-line entry point for the path tracer.

Usage:
    pathtracer [options] OUTPUT
    python -m src.pathtracer [options] OUTPUT

Renders the random spheres scene (or a JSON scene file) and writes OUTPUT as
plain PPM, or PNG when OUTPUT ends in ".png". Without OUTPUT a usage line is
printed and nothing is rendered.

Options:
    --samples N         Samples per pixel (default: 500)
    --max-depth N       Maximum bounces per path (default: 50)
    --width N           Image width in pixels (default: 1200)
    --seed N            Seed for the scene layout and sampling
    --threads N         Number of CPU threads (default: all cores)
    --scene FILE        JSON scene description instead of the random spheres
    --quiet             Suppress progress output

Example:
    pathtracer --samples 10 --width 400 --seed 7 spheres.ppm
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

from src.pathtracer.config import RenderConfig, init_taichi

USAGE = "usage: pathtracer <file>"


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line argument parser."""
    parser = argparse.ArgumentParser(
        prog="pathtracer",
        description="Render a scene of spheres with Monte Carlo path tracing.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "output",
        nargs="?",
        help="Output image path (.ppm, or .png for PNG)",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=500,
        help="Number of samples per pixel (default: 500)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=50,
        help="Maximum bounces per path (default: 50)",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=1200,
        help="Image width in pixels (default: 1200)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the scene layout and sampling (default: random)",
    )
    parser.add_argument(
        "--threads",
        type=int,
        default=None,
        help="Number of CPU threads (default: all cores)",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default=None,
        help="JSON scene description (default: random spheres scene)",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress output",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> RenderConfig:
    """Build a validated RenderConfig from parsed arguments.

    Raises:
        ValueError: If an option is out of range.
    """
    config = RenderConfig(
        samples_per_pixel=args.samples,
        max_depth=args.max_depth,
        image_width=args.width,
        seed=args.seed,
        threads=args.threads,
    )
    config.validate()
    return config


def render_to_file(
    config: RenderConfig,
    output_path: str,
    scene_path: str | None = None,
    quiet: bool = False,
) -> Path:
    """Render a scene and save it.

    The output file is created before rendering starts, so an unwritable
    destination fails before any work is done.

    Args:
        config: The render configuration.
        output_path: Where to write the image.
        scene_path: Optional JSON scene file. The random spheres scene is
            used when absent.
        quiet: If True, suppress progress output.

    Returns:
        Path to the saved image file.

    Raises:
        OSError: If the output or scene file cannot be opened.
        ValueError: If the scene or camera is invalid.
    """
    output_file = Path(output_path)
    with open(output_file, "w"):
        pass

    seed = init_taichi(config)

    # Lazy imports so Taichi fields are declared after ti.init()
    from src.pathtracer.core.renderer import Renderer
    from src.pathtracer.scene.manager import load_scene_file
    from src.pathtracer.scene.random_spheres import create_random_spheres_scene

    camera = config.camera_config()
    if scene_path is not None:
        scene = load_scene_file(scene_path)
    else:
        scene, camera = create_random_spheres_scene(seed=seed, camera=camera)

    renderer = Renderer(
        camera,
        samples_per_pixel=config.samples_per_pixel,
        max_depth=config.max_depth,
        jitter=config.jitter,
    )

    if not quiet:
        print(
            f"Rendering {renderer.width}x{renderer.height}, "
            f"{scene.get_sphere_count()} spheres, "
            f"{config.samples_per_pixel} samples per pixel (seed {seed})",
            file=sys.stderr,
        )

    start_time = time.time()

    def progress_callback(remaining: int, total: int) -> None:
        if not quiet:
            print(f"\rScanlines remaining: {remaining} ", end="", file=sys.stderr, flush=True)

    renderer.render(callback=progress_callback)

    if not quiet:
        print("\nDone.", file=sys.stderr)

    renderer.save(output_file)

    total_time = time.time() - start_time
    if not quiet:
        print(f"Saved to: {output_file.absolute()}", file=sys.stderr)
        print(f"Total time: {total_time:.2f}s", file=sys.stderr)

    return output_file


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        The process exit status: 0 on success or when no output path is
        given, 1 on a filesystem or configuration error.
    """
    args = build_parser().parse_args(argv)

    if args.output is None:
        print(USAGE)
        return 0

    try:
        config = config_from_args(args)
        render_to_file(config, args.output, scene_path=args.scene, quiet=args.quiet)
        return 0
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
