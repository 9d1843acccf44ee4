"""Tests for the CLI."""

import base64

from click.testing import CliRunner

from ring_trng.cli import main


class TestCLI:
    def test_version(self):
        r = CliRunner().invoke(main, ["--version"])
        assert r.exit_code == 0
        assert "0.3.0" in r.output

    def test_generate_hex(self):
        r = CliRunner().invoke(main, ["generate", "--fallback", "--bytes", "4", "--format", "hex"])
        assert r.exit_code == 0
        out = r.output.strip()
        assert len(out) == 8
        assert all(c in "0123456789abcdef" for c in out)

    def test_generate_is_reproducible_in_fallback_mode(self):
        args = ["generate", "--fallback", "--bytes", "6"]
        a = CliRunner().invoke(main, args)
        b = CliRunner().invoke(main, args)
        assert a.output == b.output

    def test_generate_base64(self):
        r = CliRunner().invoke(main, ["generate", "--fallback", "--bytes", "3", "--format", "base64"])
        assert r.exit_code == 0
        assert len(base64.b64decode(r.output.strip())) == 3

    def test_even_length_is_usage_error(self):
        r = CliRunner().invoke(main, ["generate", "--fallback", "--length", "4"])
        assert r.exit_code == 2
        assert "odd" in r.output

    def test_negative_bytes_is_usage_error(self):
        r = CliRunner().invoke(main, ["generate", "--fallback", "--bytes", "-1"])
        assert r.exit_code == 2

    def test_float_length_in_config_is_usage_error(self, tmp_path):
        path = tmp_path / "trng.yaml"
        path.write_text("trng:\n  first_cell_length: 5.0\n  use_fallback_source: true\n")
        r = CliRunner().invoke(main, ["generate", "--config", str(path), "--bytes", "1"])
        assert r.exit_code == 2
        assert "odd positive integer" in r.output

    def test_stall_exits_nonzero(self):
        r = CliRunner().invoke(main, ["generate", "--fallback", "--bytes", "1", "--max-ticks", "50"])
        assert r.exit_code == 1

    def test_config_file(self, tmp_path):
        path = tmp_path / "trng.yaml"
        path.write_text("trng:\n  cell_count: 1\n  use_fallback_source: true\n")
        r = CliRunner().invoke(main, ["generate", "--config", str(path), "--bytes", "2"])
        assert r.exit_code == 0
        assert len(r.output.strip()) == 4

    def test_trace(self):
        r = CliRunner().invoke(main, ["trace", "--fallback", "--ticks", "12"])
        assert r.exit_code == 0

    def test_probe(self):
        r = CliRunner().invoke(main, ["probe", "--fallback", "--bytes", "16"])
        assert r.exit_code == 0
        assert "Grade" in r.output
        assert "fallback_lfsr" in r.output
