"""
Writing a RevolutionResult to the configured output formats.

Output names are <output_dir>/<prefix><stem><suffix>.<ext>. STL needs a
mesh, so it is skipped (with a warning) for invalid or empty results;
the profile drawings are skipped only for invalid results.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Union

from solid_revolution.drawing.dxf_renderer import render_profiles_dxf
from solid_revolution.drawing.svg_renderer import render_profiles_svg
from solid_revolution.io.stl_io import save_stl
from solid_revolution.project_config import ProjectConfig
from solid_revolution.revolution import RevolutionResult

logger = logging.getLogger(__name__)


def output_path(output_dir: Union[str, Path], stem: str, ext: str,
                config: ProjectConfig) -> Path:
    """Path of one output file, honouring prefix/suffix."""
    return Path(output_dir) / f"{config.output.prefix}{stem}{config.output.suffix}.{ext}"


def write_outputs(
    result: RevolutionResult,
    output_dir: Union[str, Path],
    stem: str,
    config: Optional[ProjectConfig] = None,
) -> Dict[str, Path]:
    """Write every configured format for one result.

    Returns:
        Mapping format -> written path (formats that were skipped are absent)

    Raises:
        MeshExportError: if the STL cannot be written
    """
    config = config or ProjectConfig()
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    written: Dict[str, Path] = {}

    if result.invalid:
        logger.warning("Result for %s is invalid, no outputs written", stem)
        return written

    for fmt in config.output.formats:
        path = output_path(output_dir, stem, fmt, config)
        if fmt == "stl":
            if result.mesh is None or result.mesh.is_empty:
                logger.warning("Empty mesh for %s, STL skipped", stem)
                continue
            save_stl(result.mesh, path, binary=config.output.stl_binary, name=stem)
        elif fmt == "svg":
            render_profiles_svg(result.profiles, result.interval, path,
                                drawing=config.drawing, measurement=result.measurement)
        elif fmt == "dxf":
            render_profiles_dxf(result.profiles, result.interval, path,
                                measurement=result.measurement)
        else:
            logger.warning("Unknown output format %r ignored", fmt)
            continue
        written[fmt] = path

    return written
