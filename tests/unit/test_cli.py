"""Unit tests for the command-line interface."""

from pathlib import Path

from typer.testing import CliRunner

from meshdecode.cli.app import app

runner = CliRunner()


class TestCli:
    """Test CLI commands."""

    def test_inspect_stl(self, sample_stl_path: Path):
        result = runner.invoke(app, ["inspect", str(sample_stl_path)])

        assert result.exit_code == 0
        assert "stl-binary" in result.output
        assert "Triangles" in result.output

    def test_inspect_multiple(self, sample_stl_path: Path, sample_ply_path: Path):
        result = runner.invoke(app, ["inspect", str(sample_stl_path), str(sample_ply_path)])

        assert result.exit_code == 0
        assert "ply-ascii" in result.output

    def test_inspect_reports_warnings(self, temp_dir: Path):
        stl_path = temp_dir / "empty.stl"
        stl_path.write_text("solid empty".ljust(90) + "\nendsolid empty\n")

        result = runner.invoke(app, ["inspect", str(stl_path)])

        assert result.exit_code == 0
        assert "no complete facet" in result.output

    def test_inspect_strict_failure(self, temp_dir: Path, quad_ply_text: str):
        ply_path = temp_dir / "broken.ply"
        ply_path.write_text(quad_ply_text.replace("1 1 0", "1 x 0"))

        lenient = runner.invoke(app, ["inspect", str(ply_path)])
        strict = runner.invoke(app, ["inspect", "--strict", str(ply_path)])

        assert lenient.exit_code == 0
        assert strict.exit_code == 1
        assert "data" in strict.output

    def test_inspect_with_config(self, temp_dir: Path, quad_ply_text: str):
        config_path = temp_dir / "meshdecode.toml"
        config_path.write_text("[decoder]\nstrict_ply = true\n")
        ply_path = temp_dir / "broken.ply"
        ply_path.write_text(quad_ply_text.replace("1 1 0", "1 x 0"))

        result = runner.invoke(app, ["inspect", "-c", str(config_path), str(ply_path)])

        assert result.exit_code == 1

    def test_sniff(self, sample_stl_path: Path, temp_dir: Path):
        result = runner.invoke(app, ["sniff", str(sample_stl_path)])
        assert result.exit_code == 0
        assert "stl-binary" in result.output

        short = temp_dir / "short.stl"
        short.write_bytes(b"solid")
        result = runner.invoke(app, ["sniff", str(short)])
        assert result.exit_code == 1

    def test_info(self):
        result = runner.invoke(app, ["info"])

        assert result.exit_code == 0
        assert "ply" in result.output
