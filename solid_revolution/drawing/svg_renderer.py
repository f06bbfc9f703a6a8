"""
SVG drawing of the meridian profile.

Draws every profile polyline in the (x, y) plane with the rotation axis
as a dash-dot centerline and the bounds a, b as thin dashed verticals.
Model y points up; SVG y points down, so y is flipped on output.
"""

import logging
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

import svgwrite

from solid_revolution.bounds import Interval
from solid_revolution.config import GROUP_UPPER
from solid_revolution.drawing.extent import ProfileExtent
from solid_revolution.geometry.profiles import ProfilePolyline
from solid_revolution.project_config import DrawingConfig
from solid_revolution.quadrature import Measurement

logger = logging.getLogger(__name__)

AXIS_DASHARRAY = "8,2,1,2"
BOUND_DASHARRAY = "3,2"


class _Transform:
    """Model (x, y) -> SVG user units."""

    def __init__(self, extent: ProfileExtent, scale: float, margin: float):
        self.extent = extent
        self.scale = scale
        self.margin = margin

    @property
    def size(self) -> Tuple[float, float]:
        return (self.extent.width * self.scale + 2 * self.margin,
                self.extent.height * self.scale + 2 * self.margin)

    def __call__(self, x: float, y: float) -> Tuple[float, float]:
        return (
            round(self.margin + (x - self.extent.x_min) * self.scale, 4),
            round(self.margin + (self.extent.y_max - y) * self.scale, 4),
        )


def render_profiles_svg(
    profiles: Sequence[ProfilePolyline],
    interval: Interval,
    filename: Union[str, Path],
    drawing: Optional[DrawingConfig] = None,
    measurement: Optional[Measurement] = None,
) -> Path:
    """Write the profile drawing to an SVG file.

    Args:
        profiles: Polylines to draw
        interval: Rotation bounds (drawn as dashed verticals)
        filename: Output path
        drawing: Scale, margin, stroke width and colours
        measurement: If given, volume and area are written under the drawing

    Returns:
        Path of the written file
    """
    drawing = drawing or DrawingConfig()
    extent = ProfileExtent.from_profiles(profiles, interval)
    to_svg = _Transform(extent, drawing.scale, drawing.margin)
    width, height = to_svg.size
    if measurement is not None:
        height += drawing.margin

    path = Path(filename)
    dwg = svgwrite.Drawing(
        str(path),
        size=(f"{width:.2f}", f"{height:.2f}"),
        viewBox=f"0 0 {width:.2f} {height:.2f}",
        debug=False,
    )

    thin = max(drawing.stroke_width / 3, 0.25)

    if drawing.show_axis:
        axis = dwg.line(
            start=to_svg(extent.x_min, 0.0), end=to_svg(extent.x_max, 0.0),
            stroke=drawing.axis_color, stroke_width=thin,
            stroke_dasharray=AXIS_DASHARRAY,
        )
        axis['id'] = 'axis'
        dwg.add(axis)

    if drawing.show_bounds:
        bounds_group = dwg.g(id='bounds')
        for x in (interval.a, interval.b):
            bounds_group.add(dwg.line(
                start=to_svg(x, extent.y_min), end=to_svg(x, extent.y_max),
                stroke=drawing.axis_color, stroke_width=thin,
                stroke_dasharray=BOUND_DASHARRAY,
            ))
        dwg.add(bounds_group)

    profiles_group = dwg.g(id='profiles', fill='none')
    for profile in profiles:
        color = drawing.upper_color if profile.group == GROUP_UPPER else drawing.lower_color
        points = [to_svg(x, y) for x, y, _ in profile.points.tolist()]
        if len(points) == 1:
            cx, cy = points[0]
            element = dwg.circle(center=(cx, cy), r=drawing.stroke_width, fill=color)
        else:
            element = dwg.polyline(
                points=points, stroke=color, stroke_width=drawing.stroke_width,
                stroke_linejoin='round',
            )
        element['data-group'] = profile.group
        element['data-piece'] = str(profile.piece_index)
        profiles_group.add(element)
    dwg.add(profiles_group)

    if measurement is not None:
        dwg.add(dwg.text(
            f"V = {measurement.volume:.4f}   A = {measurement.area2D:.4f}",
            insert=(drawing.margin, height - drawing.margin / 2),
            font_size=f"{max(drawing.margin / 2, 6):.1f}",
            font_family="sans-serif",
        ))

    dwg.save()
    logger.info("SVG profile saved: %s", path, extra={'profiles': len(profiles)})
    return path
