"""Tests for the CLI module."""

from __future__ import annotations

from pathlib import Path

import pytest

from bbpreview.cli import main

FIXTURE_DIR = Path(__file__).parent / "fixtures"
SAMPLE_BBCODE = FIXTURE_DIR / "sample.bbcode"


class TestCLIMain:
    """Test the main() entry point."""

    def test_list_themes(self, capsys):
        ret = main(["--list-themes"])
        assert ret == 0
        out = capsys.readouterr().out
        assert "vscode" in out
        assert "system" in out

    def test_missing_input(self):
        with pytest.raises(SystemExit):
            main([])

    def test_unknown_theme(self):
        with pytest.raises(SystemExit):
            main([str(SAMPLE_BBCODE), "-t", "neon"])

    def test_file_not_found(self, capsys):
        ret = main(["nonexistent.bbcode"])
        assert ret == 1
        err = capsys.readouterr().err
        assert "not found" in err

    def test_not_a_bbcode_file(self, tmp_path, capsys):
        md_file = tmp_path / "notes.md"
        md_file.write_text("[b]x[/b]", encoding="utf-8")
        ret = main([str(md_file)])
        assert ret == 1
        err = capsys.readouterr().err
        assert "Open a .bbcode or .bb file" in err
        assert not (tmp_path / "notes.html").exists()

    def test_convert_sample(self, tmp_path, capsys):
        out = tmp_path / "output.html"
        ret = main([str(SAMPLE_BBCODE), "-o", str(out)])
        assert ret == 0
        html = out.read_text(encoding="utf-8")
        assert html.startswith("<!DOCTYPE html>")
        assert "Rendered:" in capsys.readouterr().out

    def test_verbose_flag(self, tmp_path, capsys):
        out = tmp_path / "output.html"
        ret = main([str(SAMPLE_BBCODE), "-o", str(out), "-v"])
        assert ret == 0
        stdout = capsys.readouterr().out
        assert "Input:" in stdout
        assert "Output:" in stdout
        assert "Done." in stdout

    def test_default_output_name(self, tmp_path):
        src = tmp_path / "myfile.bbcode"
        src.write_text("[b]Test[/b]", encoding="utf-8")
        ret = main([str(src)])
        assert ret == 0
        expected = tmp_path / "myfile.html"
        assert expected.exists()

    def test_fragment_flag(self, tmp_path):
        src = tmp_path / "post.bb"
        src.write_text("[u]x[/u]", encoding="utf-8")
        out = tmp_path / "post.html"
        ret = main([str(src), "-o", str(out), "--fragment"])
        assert ret == 0
        assert out.read_text(encoding="utf-8") == "<u>x</u>"

    def test_theme_presets(self, tmp_path):
        for preset in ["vscode", "system", "custom-properties"]:
            out = tmp_path / f"output_{preset}.html"
            ret = main([str(SAMPLE_BBCODE), "-o", str(out), "-t", preset])
            assert ret == 0, f"Failed for theme: {preset}"
            assert out.exists()

    def test_bad_encoding_reports_error(self, tmp_path, capsys):
        src = tmp_path / "post.bbcode"
        src.write_bytes(b"\xff\xfe[b]x")
        ret = main([str(src), "-o", str(tmp_path / "o.html")])
        assert ret == 1
        assert "Error:" in capsys.readouterr().err

    def test_open_flag(self, tmp_path, monkeypatch):
        opened: list[str] = []
        monkeypatch.setattr("bbpreview.cli.webbrowser.open", opened.append)
        out = tmp_path / "output.html"
        ret = main([str(SAMPLE_BBCODE), "-o", str(out), "--open"])
        assert ret == 0
        assert opened == [out.resolve().as_uri()]
