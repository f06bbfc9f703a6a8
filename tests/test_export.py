"""
Unit tests for solid_revolution.export module.

Tests:
- Output naming with prefix/suffix
- Format selection
- Invalid and empty results
"""

from pathlib import Path

from solid_revolution.export import output_path, write_outputs
from solid_revolution.project_config import ProjectConfig
from solid_revolution.revolution import revolve_scene
from solid_revolution.scene import SceneSpec


def _config(resolution, formats, **output):
    config = ProjectConfig(resolution=resolution)
    config.output.formats = formats
    for key, value in output.items():
        setattr(config.output, key, value)
    return config


class TestOutputPath:
    """Tests for output_path."""

    def test_prefix_suffix(self):
        config = _config(ProjectConfig().resolution, ["stl"], prefix="p_", suffix="_v2")
        assert output_path("out", "vase", "stl", config) == Path("out") / "p_vase_v2.stl"


class TestWriteOutputs:
    """Tests for write_outputs."""

    def test_all_formats(self, cone_scene, coarse_resolution, tmp_path):
        """Test that every configured format is written."""
        result = revolve_scene(cone_scene, coarse_resolution)
        config = _config(coarse_resolution, ["stl", "svg", "dxf"])
        written = write_outputs(result, tmp_path / "out", "cone", config)

        assert set(written) == {"stl", "svg", "dxf"}
        for path in written.values():
            assert path.exists()
            assert path.stat().st_size > 0
        assert written["svg"].name == "cone.svg"

    def test_invalid_result_writes_nothing(self, coarse_resolution, tmp_path):
        result = revolve_scene(SceneSpec.from_formulas("sqrt(-1-x^2)"), coarse_resolution)
        config = _config(coarse_resolution, ["stl", "svg"])
        assert write_outputs(result, tmp_path, "bad", config) == {}
        assert list(tmp_path.iterdir()) == []

    def test_empty_mesh_skips_stl_only(self, coarse_resolution, tmp_path):
        """Test that a zero-angle solid still gets its profile drawing."""
        result = revolve_scene(SceneSpec.from_formulas("1", angle=0), coarse_resolution)
        config = _config(coarse_resolution, ["stl", "svg"])
        written = write_outputs(result, tmp_path, "flat", config)
        assert set(written) == {"svg"}

    def test_ascii_stl(self, cone_scene, coarse_resolution, tmp_path):
        result = revolve_scene(cone_scene, coarse_resolution)
        config = _config(coarse_resolution, ["stl"], stl_binary=False)
        written = write_outputs(result, tmp_path, "cone", config)
        assert written["stl"].read_text().startswith("solid cone")
