"""Command line interface for rendering Perlin flow field trails to an image."""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from pathlib import Path

from .config import FieldConfig
from .errors import FlowFieldError
from .field import ParticleField
from .visualize import RenderConfig, TrailRenderer

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Create an argument parser describing the available CLI options."""

    parser = argparse.ArgumentParser(
        description=(
            "Let particles drift over a Perlin noise flow field for a number of "
            "frames and save their trails as a PNG file."
        )
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("flowfield_output.png"),
        help="Location where the generated image will be written",
    )
    parser.add_argument(
        "--settings",
        type=Path,
        help="JSON settings file; command line options override its values",
    )
    parser.add_argument(
        "--save-settings",
        type=Path,
        help="Write the effective settings to this JSON file",
    )
    parser.add_argument("--seed", type=int, help="Seed for the noise lattice and particles")
    parser.add_argument(
        "--resolution",
        type=float,
        nargs=2,
        metavar=("WIDTH", "HEIGHT"),
        help="Simulation area and image size in pixels (width height)",
    )
    parser.add_argument("--cell-size", type=float, help="Grid resolution in pixels")
    parser.add_argument("--particles", type=int, help="Number of particles")
    parser.add_argument(
        "--noise-step",
        type=float,
        help="Noise-space increment per grid cell; larger values give a more turbulent field",
    )
    parser.add_argument("--palette", help="Palette name, or colormap:<matplotlib colormap>")
    parser.add_argument(
        "--frames",
        type=int,
        default=RenderConfig.frames,
        help="Number of simulation ticks to run before drawing",
    )
    parser.add_argument(
        "--grid-cache",
        type=Path,
        help="Reuse the vector grid stored here when it matches, otherwise build and store it",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def resolve_config(args: argparse.Namespace) -> FieldConfig:
    """Merge the optional settings file with explicit command line options."""

    config = FieldConfig.load(args.settings) if args.settings else FieldConfig()
    overrides = {
        "seed": args.seed,
        "cell_size": args.cell_size,
        "number_of_particles": args.particles,
        "noise_step": args.noise_step,
        "palette": args.palette,
    }
    if args.resolution:
        overrides["width"], overrides["height"] = args.resolution
    return replace(config, **{k: v for k, v in overrides.items() if v is not None}).validate()


def apply_grid_cache(field: ParticleField, path: Path) -> None:
    if path.exists():
        try:
            field.load_grid(path)
            return
        except FlowFieldError as exc:
            logger.warning("Ignoring grid cache %s: %s", path, exc)
    field.save_grid(path)
    logger.info("Stored vector grid in %s", path)


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        config = resolve_config(args)
    except (FlowFieldError, OSError, ValueError) as exc:
        # Missing or malformed settings files land here too.
        parser.error(str(exc))
    if args.save_settings:
        config.save(args.save_settings)

    field = ParticleField(config)
    if args.grid_cache:
        apply_grid_cache(field, args.grid_cache)

    renderer = TrailRenderer(field, RenderConfig(frames=args.frames))
    output = renderer.render(args.output)

    print(f"Flow field written to {output.resolve()}")


if __name__ == "__main__":  # pragma: no cover - direct CLI execution entry point
    main()
