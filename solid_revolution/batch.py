"""
Batch processing of scene files.

Provides:
- Folder-based batch processing (scene JSON -> STL/SVG/DXF)
- Progress tracking and reporting
- Parallel processing on a thread pool

Usage:
    from solid_revolution.batch import batch_process

    results = batch_process(input_dir="./scenes", output_dir="./out", parallel=True)
    print(results.summary())
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from solid_revolution.export import write_outputs
from solid_revolution.io.stl_io import MeshExportError
from solid_revolution.logging_config import LogContext, configure_default_logging
from solid_revolution.project_config import ProjectConfig, load_config
from solid_revolution.quadrature import Measurement
from solid_revolution.revolution import revolve_scene
from solid_revolution.scene import SceneError, SceneSpec

logger = logging.getLogger(__name__)


@dataclass
class ProcessingResult:
    """Result of processing a single scene file."""
    input_path: Path
    outputs: Dict[str, Path] = field(default_factory=dict)
    success: bool = False
    invalid: bool = False
    measurement: Optional[Measurement] = None
    error: Optional[str] = None
    duration_seconds: float = 0.0

    @property
    def status(self) -> str:
        if self.invalid:
            return "INVALID"
        return "OK" if self.success else "FAILED"


@dataclass
class BatchResult:
    """Result of a batch run."""
    results: List[ProcessingResult] = field(default_factory=list)
    total_duration_seconds: float = 0.0

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def successful(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.success)

    @property
    def success_rate(self) -> float:
        """Success rate as percentage."""
        if self.total == 0:
            return 0.0
        return 100.0 * self.successful / self.total

    def summary(self) -> str:
        """Generate human-readable summary."""
        lines = [
            "Batch Summary",
            "=" * 40,
            f"Total scenes:    {self.total}",
            f"Successful:      {self.successful}",
            f"Failed:          {self.failed}",
            f"Success rate:    {self.success_rate:.1f}%",
            f"Total time:      {self.total_duration_seconds:.1f}s",
            "",
        ]

        for r in self.results:
            if r.success and r.measurement is not None:
                lines.append(
                    f"  {r.input_path.name}: V = {r.measurement.volume:.4f}, "
                    f"A = {r.measurement.area2D:.4f}"
                )

        if self.failed > 0:
            lines.append("")
            lines.append("Failed scenes:")
            for r in self.results:
                if not r.success:
                    lines.append(f"  - {r.input_path.name}: {r.error}")

        return "\n".join(lines)

    def to_dict(self) -> Dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'total': self.total,
            'successful': self.successful,
            'failed': self.failed,
            'success_rate': self.success_rate,
            'total_duration_seconds': self.total_duration_seconds,
            'results': [
                {
                    'input': str(r.input_path),
                    'outputs': {k: str(v) for k, v in r.outputs.items()},
                    'success': r.success,
                    'invalid': r.invalid,
                    'measurement': r.measurement.to_dict() if r.measurement else None,
                    'error': r.error,
                    'duration': r.duration_seconds,
                }
                for r in self.results
            ],
        }


def find_scene_files(
    input_dir: Union[str, Path],
    pattern: str = "*.json",
    recursive: bool = False,
) -> List[Path]:
    """Find scene files in a directory.

    Project config files (.revolve.json) are never treated as scenes.

    Raises:
        FileNotFoundError: If input_dir does not exist
        NotADirectoryError: If input_dir is not a directory
    """
    input_dir = Path(input_dir)

    if not input_dir.exists():
        raise FileNotFoundError(f"Input directory not found: {input_dir}")
    if not input_dir.is_dir():
        raise NotADirectoryError(f"Not a directory: {input_dir}")

    files = input_dir.rglob(pattern) if recursive else input_dir.glob(pattern)
    scenes = sorted(f for f in set(files) if f.is_file() and not f.name.startswith('.'))

    logger.info("Found %d scene files in %s", len(scenes), input_dir)
    return scenes


def process_scene_file(
    input_path: Path,
    output_dir: Path,
    config: Optional[ProjectConfig] = None,
) -> ProcessingResult:
    """Build one scene and write its outputs.

    Scene and export errors are recorded in the result, not raised.
    """
    start_time = time.perf_counter()
    config = config or ProjectConfig()
    result = ProcessingResult(input_path=input_path)

    with LogContext(scene=input_path.name):
        try:
            scene = SceneSpec.load(input_path)
            revolution = revolve_scene(scene, config.resolution)
            result.measurement = revolution.measurement
            if revolution.invalid:
                result.invalid = True
                result.error = "non-finite boundary samples, mesh withheld"
            else:
                result.outputs = write_outputs(revolution, output_dir, input_path.stem, config)
                result.success = True
        except (SceneError, MeshExportError, OSError) as e:
            result.error = str(e)
            logger.error("Failed to process %s: %s", input_path.name, e)

    result.duration_seconds = time.perf_counter() - start_time
    return result


def batch_process(
    input_dir: Union[str, Path],
    output_dir: Optional[Union[str, Path]] = None,
    pattern: str = "*.json",
    recursive: bool = False,
    config: Optional[ProjectConfig] = None,
    config_path: Optional[Union[str, Path]] = None,
    parallel: bool = False,
    max_workers: Optional[int] = None,
    progress_callback: Optional[Callable[[int, int, ProcessingResult], None]] = None,
) -> BatchResult:
    """Process every scene file in a directory.

    Args:
        input_dir: Directory containing scene JSON files
        output_dir: Output directory (default: same as input)
        pattern: Glob pattern for scene files
        recursive: Search subdirectories
        config: Project configuration
        config_path: Path to .revolve.json config file
        parallel: Process scenes on a thread pool
        max_workers: Maximum parallel workers (None = executor default)
        progress_callback: Called after each scene: (current, total, result)

    Returns:
        BatchResult with per-scene results in completion order
    """
    start_time = time.perf_counter()

    input_dir = Path(input_dir)
    output_dir = Path(output_dir) if output_dir else input_dir

    scene_files = find_scene_files(input_dir, pattern, recursive)
    output_dir.mkdir(parents=True, exist_ok=True)

    if config is None:
        config = load_config(scene_path=input_dir / "scene.json", explicit_config=config_path)

    if not scene_files:
        logger.warning("No scene files found in %s", input_dir)
        return BatchResult(total_duration_seconds=time.perf_counter() - start_time)

    logger.info("Starting batch: %d scenes, parallel=%s", len(scene_files), parallel)
    results: List[ProcessingResult] = []

    def _record(i: int, result: ProcessingResult) -> None:
        results.append(result)
        if progress_callback:
            progress_callback(i, len(scene_files), result)
        logger.info(
            "[%d/%d] %s: %s (%.2fs)",
            i, len(scene_files), result.input_path.name,
            result.status, result.duration_seconds
        )

    if parallel:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [
                executor.submit(process_scene_file, path, output_dir, config)
                for path in scene_files
            ]
            for i, future in enumerate(as_completed(futures), 1):
                _record(i, future.result())
    else:
        for i, path in enumerate(scene_files, 1):
            _record(i, process_scene_file(path, output_dir, config))

    batch_result = BatchResult(
        results=results,
        total_duration_seconds=time.perf_counter() - start_time,
    )

    logger.info(
        "Batch complete: %d/%d successful (%.1f%%) in %.1fs",
        batch_result.successful, batch_result.total,
        batch_result.success_rate, batch_result.total_duration_seconds
    )
    return batch_result


def batch_process_cli(argv: Optional[List[str]] = None) -> int:
    """CLI entry point for batch processing."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Build solids of revolution for every scene file in a folder"
    )
    parser.add_argument("input_dir", help="Directory containing scene JSON files")
    parser.add_argument("-o", "--output", dest="output_dir",
                        help="Output directory (default: same as input)")
    parser.add_argument("-p", "--pattern", default="*.json",
                        help="File pattern (default: *.json)")
    parser.add_argument("-r", "--recursive", action="store_true",
                        help="Search subdirectories")
    parser.add_argument("-c", "--config", dest="config_path",
                        help="Path to .revolve.json config file")
    parser.add_argument("--parallel", action="store_true",
                        help="Use parallel processing")
    parser.add_argument("-j", "--jobs", type=int, dest="max_workers",
                        help="Maximum parallel jobs")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable debug logging")

    args = parser.parse_args(argv)
    configure_default_logging(verbose=args.verbose)

    try:
        result = batch_process(
            input_dir=args.input_dir,
            output_dir=args.output_dir,
            pattern=args.pattern,
            recursive=args.recursive,
            config_path=args.config_path,
            parallel=args.parallel,
            max_workers=args.max_workers,
        )
    except (FileNotFoundError, NotADirectoryError) as e:
        logger.error("Batch failed: %s", e)
        return 1

    print("\n" + result.summary())
    return 0 if result.failed == 0 else 1


if __name__ == "__main__":
    import sys
    sys.exit(batch_process_cli())
