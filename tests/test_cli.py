"""Tests for the command line entry point."""

import pytest

from py_terrapath import cli
from py_terrapath.core import session as session_module


class TestCommandLine:
    """Test argument handling and exit codes."""

    @pytest.fixture
    def land(self, monkeypatch, all_land_classifier):
        """Make every generated cell land so searches always succeed."""
        monkeypatch.setattr(session_module, "default_classifier", lambda: all_land_classifier)

    def test_path_found(self, land, capsys):
        code = cli.main([
            "--width", "20", "--height", "10", "--zoom", "10",
            "--start", "0", "0", "--end", "5", "5",
        ])
        assert code == cli.EXIT_FOUND
        assert "Path found" in capsys.readouterr().out

    def test_portal_option(self, land, capsys):
        code = cli.main([
            "--width", "20", "--height", "10", "--zoom", "10",
            "--start", "0", "0", "--end", "19", "9",
            "--portal", "0", "0", "19", "9",
        ])
        assert code == cli.EXIT_FOUND
        assert "Path found: 2 cells" in capsys.readouterr().out

    def test_out_of_bounds_is_configuration_error(self, land, capsys):
        code = cli.main([
            "--width", "20", "--height", "10",
            "--start", "0", "0", "--end", "25", "5",
        ])
        assert code == cli.EXIT_CONFIG_ERROR
        assert "out of bounds" in capsys.readouterr().err

    def test_invalid_size_is_configuration_error(self):
        code = cli.main(["--width", "0", "--start", "0", "0", "--end", "0", "0"])
        assert code == cli.EXIT_CONFIG_ERROR

    def test_saves_image(self, land, tmp_path):
        output = tmp_path / "map.png"
        code = cli.main([
            "--width", "20", "--height", "10", "--zoom", "10",
            "--start", "0", "0", "--end", "5", "5",
            "--output", str(output), "--show-explored",
        ])
        assert code == cli.EXIT_FOUND
        assert output.exists()
        assert output.stat().st_size > 0

    def test_start_and_end_required(self):
        with pytest.raises(SystemExit):
            cli.main(["--width", "10"])
