"""
Entry point: build a solid of revolution from a scene file or inline formulas.

Usage:
    python main.py <scene.json> [--output-dir DIR] [--stl] [--svg] [--dxf]
    python main.py --upper FORMULA [--lower FORMULA] --a A --b B [--angle DEG]

Examples:
    python main.py vase.json --svg --stl
    python main.py --upper "sqrt(x)" --a 0 --b 4 --angle 270 --stl
    python main.py --upper "x+1" --lower "x^2;0;1" --a 0 --b 1 --strategy disks
    python main.py vase.json --config project.revolve.json --validate
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from solid_revolution.config import GROUP_LOWER, GROUP_UPPER, STRATEGIES
from solid_revolution.envelope import CurveGroup, CurvePiece
from solid_revolution.export import write_outputs
from solid_revolution.geometry.mesh_stats import calculate_mesh_statistics
from solid_revolution.io.stl_io import MeshExportError
from solid_revolution.io.validator import validate_mesh
from solid_revolution.logging_config import setup_logging
from solid_revolution.project_config import (
    CONFIG_FILENAME,
    ProjectConfig,
    create_sample_config,
    load_config,
)
from solid_revolution.revolution import RevolutionResult, revolve_scene
from solid_revolution.scene import SceneError, SceneSpec

logger = logging.getLogger("solid_revolution.main")

EXIT_OK = 0
EXIT_INPUT_ERROR = 1
EXIT_UNEXPECTED = 2
EXIT_INVALID = 3

PIECE_SEPARATOR = ";"


def parse_piece(text: str) -> CurvePiece:
    """Parse "formula[;start[;end]]" into a CurvePiece.

    Empty start/end mean unbounded, e.g. "x^2;0;" is x^2 on [0, +inf).
    """
    parts = text.split(PIECE_SEPARATOR)
    if len(parts) > 3:
        raise ValueError(f"Piece {text!r} has more than formula;start;end")
    parts += [""] * (3 - len(parts))
    return CurvePiece.from_dict({
        'formula': parts[0],
        'domain_start': parts[1],
        'domain_end': parts[2],
    })


def build_scene(args: argparse.Namespace) -> SceneSpec:
    """Scene from a file, or from inline --upper/--lower pieces.

    Inline --a/--b/--angle override the values stored in a scene file.

    Raises:
        SceneError: if the scene file is invalid
        ValueError: if an inline piece is malformed
    """
    if args.scene:
        scene = SceneSpec.load(args.scene)
        overrides = {k: getattr(args, k) for k in ('a', 'b', 'angle')
                     if getattr(args, k) is not None}
        if overrides:
            data = scene.to_dict()
            data.update(overrides)
            scene = SceneSpec.from_dict(data, name=scene.name)
        return scene

    upper = [parse_piece(p) for p in args.upper]
    lower = [parse_piece(p) for p in (args.lower or ["0"])]
    return SceneSpec(
        upper=CurveGroup(GROUP_UPPER, tuple(upper)),
        lower=CurveGroup(GROUP_LOWER, tuple(lower)),
        a=args.a if args.a is not None else 0,
        b=args.b if args.b is not None else 1,
        angle=args.angle if args.angle is not None else 360.0,
        name=args.name or "solid",
    )


def apply_cli_overrides(config: ProjectConfig, args: argparse.Namespace) -> ProjectConfig:
    """CLI resolution and output flags take precedence over the config file."""
    config.resolution = config.resolution.with_overrides(
        strategy=args.strategy,
        x_segments=args.x_segments,
        angular_segments=args.angular_segments,
        disk_count=args.disks,
        quadrature_intervals=args.intervals,
    )
    formats = [fmt for fmt in ("stl", "svg", "dxf") if getattr(args, fmt)]
    if formats:
        config.output.formats = formats
    if args.ascii_stl:
        config.output.stl_binary = False
    if args.output_dir:
        config.output.output_dir = args.output_dir
    return config


def run_pipeline(
    scene: SceneSpec,
    config: Optional[ProjectConfig] = None,
    output_dir: Optional[str] = None,
    validate: bool = False,
    stats: bool = False,
) -> RevolutionResult:
    """Full pipeline: scene -> mesh/profiles/measurement -> output files.

    Steps:
      1. Compile curve groups, normalize bounds and angle.
      2. Sample envelopes, build the mesh with the configured strategy.
      3. Integrate volume and area.
      4. Optionally validate the mesh and print statistics.
      5. Write STL/SVG/DXF outputs.

    Args:
        scene: Scene to build
        config: Project configuration (defaults if None)
        output_dir: Output directory (config output_dir or cwd if None)
        validate: Run mesh validation and print the report
        stats: Print mesh statistics

    Returns:
        RevolutionResult of the scene

    Raises:
        MeshExportError: if the STL cannot be written
    """
    config = config or ProjectConfig()
    result = revolve_scene(scene, config.resolution)

    print(result.summary())

    if result.mesh is not None and not result.mesh.is_empty:
        if validate:
            print()
            print(validate_mesh(result.mesh).summary())
        if stats:
            print()
            print(calculate_mesh_statistics(result.mesh).summary())

    target_dir = Path(output_dir or config.output.output_dir or ".")
    written = write_outputs(result, target_dir, scene.name or "solid", config)
    for fmt, path in written.items():
        logger.info("Written %s: %s", fmt.upper(), path)

    return result


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Build a solid of revolution and measure its volume.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Inline pieces use 'formula;start;end', start/end optional.",
    )
    parser.add_argument(
        "scene",
        nargs="?",
        help="Scene JSON file (omit to use --upper/--lower).",
    )
    parser.add_argument(
        "--upper", "-f",
        action="append",
        default=[],
        metavar="PIECE",
        help="Upper boundary piece (repeatable).",
    )
    parser.add_argument(
        "--lower", "-g",
        action="append",
        metavar="PIECE",
        help="Lower boundary piece (repeatable, default: 0).",
    )
    parser.add_argument("--a", default=None, help="Left bound (number or formula).")
    parser.add_argument("--b", default=None, help="Right bound (number or formula).")
    parser.add_argument("--angle", type=float, default=None,
                        help="Revolution angle in degrees, 0..360.")
    parser.add_argument("--name", default=None,
                        help="Base name of output files for inline scenes.")
    parser.add_argument(
        "--strategy",
        choices=STRATEGIES,
        default=None,
        help="Mesh strategy: continuous lathe or discrete disks.",
    )
    parser.add_argument("--x-segments", type=int, default=None, dest="x_segments",
                        help="Display/lathe x-segments.")
    parser.add_argument("--angular-segments", type=int, default=None,
                        dest="angular_segments", help="Angular steps of the sweep.")
    parser.add_argument("--disks", type=int, default=None,
                        help="Number of slabs for the disk strategy.")
    parser.add_argument("--intervals", type=int, default=None,
                        help="Quadrature sub-intervals.")
    parser.add_argument("--output-dir", "-o", default=None, dest="output_dir",
                        help="Output directory.")
    parser.add_argument("--stl", action="store_true", help="Write an STL mesh.")
    parser.add_argument("--svg", action="store_true", help="Write an SVG profile drawing.")
    parser.add_argument("--dxf", action="store_true", help="Write a DXF profile drawing.")
    parser.add_argument("--ascii-stl", action="store_true", dest="ascii_stl",
                        help="Write ASCII instead of binary STL.")
    parser.add_argument(
        "--config", "-c",
        default=None,
        help=f"Path to a {CONFIG_FILENAME} configuration file.",
    )
    parser.add_argument("--init-config", action="store_true", dest="init_config",
                        help=f"Write a sample {CONFIG_FILENAME} and exit.")
    parser.add_argument("--validate", action="store_true",
                        help="Validate the generated mesh.")
    parser.add_argument("--stats", action="store_true",
                        help="Print mesh statistics.")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable debug logging.")
    parser.add_argument("--json-log", default=None, dest="json_log",
                        help="Also write JSON log lines to this file.")

    args = parser.parse_args(argv)
    if not args.init_config and not args.scene and not args.upper:
        parser.error("either a scene file or at least one --upper piece is required")
    return args


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)

    setup_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        json_file=args.json_log,
    )

    if args.init_config:
        create_sample_config(args.config or CONFIG_FILENAME)
        return EXIT_OK

    try:
        config = load_config(scene_path=args.scene, explicit_config=args.config)
        config = apply_cli_overrides(config, args)
        scene = build_scene(args)
        result = run_pipeline(
            scene,
            config=config,
            validate=args.validate,
            stats=args.stats,
        )
    except SceneError as exc:
        logger.critical("Scene error: %s", exc)
        return EXIT_INPUT_ERROR
    except MeshExportError as exc:
        logger.critical("Export error: %s", exc)
        return EXIT_INPUT_ERROR
    except ValueError as exc:
        logger.critical("Configuration error: %s", exc)
        return EXIT_INPUT_ERROR
    except Exception as exc:
        logger.critical("Unexpected error: %s", exc, exc_info=True)
        return EXIT_UNEXPECTED

    return EXIT_INVALID if result.invalid else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
