"""
Tests for the mildoc command line.
"""

import os

import pytest

from hother.mildoc import cli


@pytest.fixture(autouse=True)
def quiet_cli(monkeypatch, tmp_path):
    """Leave global logging alone and ignore stray settings."""
    monkeypatch.setattr(cli, "configure_logging", lambda *args, **kwargs: None)
    for key in list(os.environ):
        if key.startswith("MILDOC_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


class TestMain:
    """Test cli.main exit codes and outputs."""

    def test_success(self, manuscript, output_root):
        """Test a clean build exits 0."""
        assert cli.main([str(manuscript), str(output_root)]) == cli.EXIT_OK
        assert (output_root / "solved" / "C02_Basics" / "S01_Calculating.lean").exists()
        assert (output_root / "source" / "index.rst").exists()

    def test_structural_error(self, manuscript, output_root, capsys):
        """Test a marker error exits 1 with a line-qualified message."""
        bad = manuscript / "C02_Basics" / "S02_Proving_Identities.lean"
        bad.write_text("/- TEXT:\nx\n-- QUOTE:\n", encoding="utf-8")

        assert cli.main([str(manuscript), str(output_root)]) == cli.EXIT_STRUCTURE

        err = capsys.readouterr().err
        assert f"{bad}:3:" in err
        assert not output_root.exists()

    def test_strict_flag(self, manuscript, output_root, capsys):
        """Test --strict turns an unclosed region into an error."""
        (manuscript / "C03_Logic" / "S01_Implication.lean").write_text("-- QUOTE:\nx\n", encoding="utf-8")

        assert cli.main([str(manuscript), str(output_root / "a")]) == cli.EXIT_OK
        assert cli.main([str(manuscript), str(output_root / "b"), "--strict"]) == cli.EXIT_STRUCTURE
        assert "never closed" in capsys.readouterr().err

    def test_missing_root(self, tmp_path, output_root, capsys):
        """Test a missing manuscript root exits 2."""
        assert cli.main([str(tmp_path / "missing"), str(output_root)]) == cli.EXIT_ENVIRONMENT
        assert "not a directory" in capsys.readouterr().err

    def test_unknown_renderer(self, manuscript, output_root, capsys):
        """Test an unknown renderer is a configuration error."""
        assert cli.main([str(manuscript), str(output_root), "--renderer", "pdf"]) == cli.EXIT_ENVIRONMENT
        assert "invalid configuration" in capsys.readouterr().err

    def test_selection_and_options(self, manuscript, output_root):
        """Test chapter/section selection, renderer choice and placeholder."""
        code = cli.main(
            [
                str(manuscript),
                str(output_root),
                "--chapter",
                "C02_Basics",
                "--section",
                "S02_Proving_Identities",
                "--renderer",
                "exercise",
                "--placeholder",
                "sorry",
                "--workers",
                "1",
                "--timeout",
                "30",
            ]
        )

        assert code == cli.EXIT_OK
        files = sorted(p.relative_to(output_root).as_posix() for p in output_root.rglob("*") if p.is_file())
        assert files == ["exercises/C02_Basics/S02_Proving_Identities.lean"]
        assert (output_root / files[0]).read_text() == "Identities\n  sorry\n"

    def test_unknown_section(self, manuscript, output_root, capsys):
        """Test selecting a missing section exits 2."""
        assert cli.main([str(manuscript), str(output_root), "--section", "S99_Nothing"]) == cli.EXIT_ENVIRONMENT
        assert "Unknown section" in capsys.readouterr().err

    def test_listing(self, manuscript, output_root, tmp_path):
        """Test building from a listing file instead of a directory scan."""
        listing = tmp_path / "mkall.sh"
        listing.write_text("MIL/mkdoc.py C02_Basics S01_Calculating\n", encoding="utf-8")

        assert cli.main([str(manuscript), str(output_root), "--listing", str(listing), "--renderer", "solved"]) == cli.EXIT_OK
        files = sorted(p.relative_to(output_root).as_posix() for p in output_root.rglob("*") if p.is_file())
        assert files == ["solved/C02_Basics/S01_Calculating.lean"]


class TestLoadSettings:
    """Test command-line overrides of settings."""

    def test_overrides(self, monkeypatch):
        """Test flags win over environment values."""
        monkeypatch.setenv("MILDOC_PLACEHOLDER", "from-env")
        monkeypatch.setenv("MILDOC_MAX_WORKERS", "3")
        args = cli.build_parser().parse_args(["in", "out", "--placeholder", "sorry", "--strict"])

        settings = cli.load_settings(args)
        assert settings.placeholder == "sorry"
        assert settings.strict is True
        assert settings.max_workers == 3

    def test_unset_flags_keep_defaults(self):
        """Test absent flags do not override settings."""
        args = cli.build_parser().parse_args(["in", "out"])
        settings = cli.load_settings(args)
        assert settings.strict is False
        assert settings.json_logs is False
        assert settings.renderers == ["solved", "exercise", "solutions", "docs"]
