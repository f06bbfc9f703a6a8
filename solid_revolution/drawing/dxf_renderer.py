"""
DXF output of the meridian profile.

Generates DXF files for CAD import using ezdxf. Coordinates are model
coordinates (1:1); the axis of revolution is the DXF x-axis.

Layer naming:
- PROFILE_UPPER - upper group polylines
- PROFILE_LOWER - lower group polylines
- AXIS - axis of revolution (centerline)
- BOUNDS - rotation bounds a, b
- TEXT - measurement annotation

Usage:
    from solid_revolution.drawing.dxf_renderer import DxfRenderer

    renderer = DxfRenderer()
    renderer.create_drawing()
    renderer.add_polyline([(0, 0), (1, 1)], style=DxfStyle(layer='PROFILE_UPPER'))
    renderer.save('profile.dxf')
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

import ezdxf
from ezdxf import units
from ezdxf.enums import TextEntityAlignment

from solid_revolution.bounds import Interval
from solid_revolution.config import GROUP_LOWER, GROUP_UPPER
from solid_revolution.drawing.extent import ProfileExtent
from solid_revolution.geometry.profiles import ProfilePolyline
from solid_revolution.quadrature import Measurement

logger = logging.getLogger(__name__)

# Layer definitions (ACI colours, lineweight in 0.01 mm)
PROFILE_LAYERS = {
    'PROFILE_UPPER': {'color': 1, 'linetype': 'CONTINUOUS', 'lineweight': 50},  # Red
    'PROFILE_LOWER': {'color': 5, 'linetype': 'CONTINUOUS', 'lineweight': 50},  # Blue
    'AXIS': {'color': 8, 'linetype': 'CENTER', 'lineweight': 18},
    'BOUNDS': {'color': 8, 'linetype': 'DASHED', 'lineweight': 18},
    'TEXT': {'color': 7, 'linetype': 'CONTINUOUS', 'lineweight': 25},
}

GROUP_TO_LAYER: Dict[str, str] = {
    GROUP_UPPER: 'PROFILE_UPPER',
    GROUP_LOWER: 'PROFILE_LOWER',
}


@dataclass
class DxfStyle:
    """Style parameters for DXF entities."""
    layer: str = 'PROFILE_UPPER'
    color: Optional[int] = None  # None = ByLayer
    lineweight: Optional[int] = None  # None = ByLayer (in 0.01mm units)
    linetype: Optional[str] = None  # None = ByLayer

    def attribs(self) -> Dict[str, object]:
        result: Dict[str, object] = {'layer': self.layer}
        if self.color is not None:
            result['color'] = self.color
        if self.lineweight is not None:
            result['lineweight'] = self.lineweight
        if self.linetype is not None:
            result['linetype'] = self.linetype
        return result


class DxfRenderer:
    """DXF drawing renderer using ezdxf."""

    def __init__(self):
        self.doc: Optional[ezdxf.document.Drawing] = None
        self.msp = None  # Modelspace

    def create_drawing(self, dxf_version: str = 'R2010') -> None:
        """Create new DXF drawing with standard linetypes and profile layers.

        Args:
            dxf_version: DXF version (R2000, R2004, R2007, R2010, R2013, R2018)
        """
        self.doc = ezdxf.new(dxf_version, setup=True, units=units.MM)
        self.msp = self.doc.modelspace()
        self._setup_layers()
        logger.debug("Created DXF drawing (%s)", dxf_version)

    def _setup_layers(self) -> None:
        for name, props in PROFILE_LAYERS.items():
            self.doc.layers.add(
                name,
                color=props['color'],
                linetype=props.get('linetype', 'CONTINUOUS'),
                lineweight=props.get('lineweight', 25),
            )

    def _require_drawing(self) -> None:
        if self.msp is None:
            raise RuntimeError("Drawing not created. Call create_drawing() first.")

    def add_line(
        self,
        start: Tuple[float, float],
        end: Tuple[float, float],
        style: Optional[DxfStyle] = None,
    ) -> None:
        """Add a line to the drawing."""
        self._require_drawing()
        style = style or DxfStyle()
        self.msp.add_line(start, end, dxfattribs=style.attribs())

    def add_polyline(
        self,
        points: List[Tuple[float, float]],
        closed: bool = False,
        style: Optional[DxfStyle] = None,
    ) -> None:
        """Add a polyline; fewer than two points draws nothing."""
        self._require_drawing()
        if len(points) < 2:
            return
        style = style or DxfStyle()
        self.msp.add_lwpolyline(points, close=closed, dxfattribs=style.attribs())

    def add_text(
        self,
        text: str,
        position: Tuple[float, float],
        height: float = 0.1,
        style: Optional[DxfStyle] = None,
    ) -> None:
        """Add left-aligned text with its baseline at position."""
        self._require_drawing()
        style = style or DxfStyle(layer='TEXT')
        attribs = style.attribs()
        attribs['height'] = height
        self.msp.add_text(text, dxfattribs=attribs).set_placement(
            position, align=TextEntityAlignment.LEFT
        )

    def save(self, path: Union[str, Path]) -> None:
        """Save drawing to DXF file."""
        if self.doc is None:
            raise RuntimeError("Drawing not created. Call create_drawing() first.")
        path = Path(path)
        self.doc.saveas(str(path))
        logger.info("DXF saved: %s", path)


def render_profiles_dxf(
    profiles: Sequence[ProfilePolyline],
    interval: Interval,
    output_path: Union[str, Path],
    measurement: Optional[Measurement] = None,
) -> Path:
    """Write profile polylines, axis and bounds to a DXF file.

    Args:
        profiles: Polylines to draw, one LWPOLYLINE each
        interval: Rotation bounds
        output_path: Output DXF path
        measurement: If given, volume and area are written below the axis

    Returns:
        Path of the written file
    """
    extent = ProfileExtent.from_profiles(profiles, interval)
    text_height = max(extent.height, extent.width) / 40

    renderer = DxfRenderer()
    renderer.create_drawing()

    renderer.add_line((extent.x_min, 0.0), (extent.x_max, 0.0), DxfStyle(layer='AXIS'))
    for x in (interval.a, interval.b):
        renderer.add_line((x, extent.y_min), (x, extent.y_max), DxfStyle(layer='BOUNDS'))

    for profile in profiles:
        points = [(x, y) for x, y, _ in profile.points.tolist()]
        renderer.add_polyline(points, style=DxfStyle(layer=GROUP_TO_LAYER[profile.group]))

    if measurement is not None:
        renderer.add_text(
            f"V = {measurement.volume:.4f}  A = {measurement.area2D:.4f}",
            (extent.x_min, extent.y_min - 2 * text_height),
            height=text_height,
        )

    path = Path(output_path)
    renderer.save(path)
    return path
