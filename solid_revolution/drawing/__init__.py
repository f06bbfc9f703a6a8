"""Profile drawings (SVG, DXF)."""

from solid_revolution.drawing.dxf_renderer import DxfRenderer, DxfStyle, render_profiles_dxf
from solid_revolution.drawing.extent import ProfileExtent
from solid_revolution.drawing.svg_renderer import render_profiles_svg

__all__ = [
    "DxfRenderer",
    "DxfStyle",
    "ProfileExtent",
    "render_profiles_dxf",
    "render_profiles_svg",
]
