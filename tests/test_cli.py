# =============================================================================
# test_cli.py - kmedit Command-Line Tests
# =============================================================================
# Tests for the show, set and add-layer commands, run through Click's
# CliRunner against temporary files.
# =============================================================================

import pytest
from click.testing import CliRunner

from keymap_edit.cli.errors import ExitCode
from keymap_edit.cli.kmedit import main


SOURCE = "[0] = KEYMAP(KC_A, LT(1, KC_B), KC_C),\n[1] = KEYMAP(KC_1, KC_2, KC_3)\n"


@pytest.fixture
def keymap_file(tmp_path):
    path = tmp_path / "keymap.c"
    path.write_text(SOURCE)
    return path


@pytest.fixture
def runner(monkeypatch):
    for name in ("KMEDIT_MACRO", "KMEDIT_PLACEHOLDER", "KMEDIT_KEY_COUNT",
                 "KMEDIT_VALIDATE_APPEND"):
        monkeypatch.delenv(name, raising=False)
    return CliRunner()


class TestGeneral:
    """Test help and version output."""

    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "KEYMAP" in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "kmedit" in result.output


class TestShow:
    """Test the show command."""

    def test_show_layers(self, runner, keymap_file):
        result = runner.invoke(main, ["show", str(keymap_file)])
        assert result.exit_code == 0
        assert "Layer 0: KC_A, LT(1, KC_B), KC_C" in result.output
        assert "Layer 1: KC_1, KC_2, KC_3" in result.output

    def test_show_ast(self, runner, keymap_file):
        result = runner.invoke(main, ["show", str(keymap_file), "--ast"])
        assert result.exit_code == 0
        assert "Layer 0 (3 keys)" in result.output
        assert "Call: LT" in result.output
        assert "Word: KC_B" in result.output

    def test_show_wrong_key_count(self, runner, keymap_file):
        result = runner.invoke(main, ["show", str(keymap_file), "-k", "4"])
        assert result.exit_code == ExitCode.KEYMAP_ERROR
        assert "incorrect for this layout" in result.output

    def test_show_invalid_file(self, runner, tmp_path):
        path = tmp_path / "bad.c"
        path.write_text("KEYMAP(KC_A,)")
        result = runner.invoke(main, ["show", str(path)])
        assert result.exit_code == ExitCode.KEYMAP_ERROR
        assert "missing token" in result.output

    def test_show_missing_file(self, runner, tmp_path):
        result = runner.invoke(main, ["show", str(tmp_path / "nope.c")])
        assert result.exit_code == 2


class TestSet:
    """Test the set command."""

    def test_set_to_stdout(self, runner, keymap_file):
        result = runner.invoke(main, ["set", str(keymap_file), "1", "2", "KC_ESC"])
        assert result.exit_code == 0
        assert result.output == SOURCE.replace("KC_3", "KC_ESC")
        assert keymap_file.read_text() == SOURCE

    def test_set_in_place(self, runner, keymap_file):
        result = runner.invoke(
            main, ["set", str(keymap_file), "0", "1", "MO(2)", "--in-place"]
        )
        assert result.exit_code == 0
        assert keymap_file.read_text() == SOURCE.replace("LT(1, KC_B)", "MO(2)")

    def test_set_to_output(self, runner, keymap_file, tmp_path):
        out = tmp_path / "out.c"
        result = runner.invoke(
            main, ["set", str(keymap_file), "0", "0", "KC_Z", "-o", str(out)]
        )
        assert result.exit_code == 0
        assert out.read_text() == SOURCE.replace("KC_A", "KC_Z")

    def test_set_out_of_range(self, runner, keymap_file):
        result = runner.invoke(main, ["set", str(keymap_file), "9", "0", "KC_Z"])
        assert result.exit_code == 0
        assert result.output == SOURCE

    def test_set_invalid_value(self, runner, keymap_file):
        result = runner.invoke(main, ["set", str(keymap_file), "0", "0", "KC Z"])
        assert result.exit_code == ExitCode.KEYMAP_ERROR
        assert keymap_file.read_text() == SOURCE

    def test_set_output_and_in_place(self, runner, keymap_file, tmp_path):
        result = runner.invoke(main, [
            "set", str(keymap_file), "0", "0", "KC_Z",
            "-o", str(tmp_path / "out.c"), "--in-place",
        ])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_set_keeps_crlf_line_endings(self, runner, tmp_path):
        path = tmp_path / "crlf.c"
        path.write_bytes(b"// top\r\n[0] = KEYMAP(KC_A, KC_B)\r\n};\r\n")
        result = runner.invoke(
            main, ["set", str(path), "0", "0", "KC_Z", "--in-place"]
        )
        assert result.exit_code == 0
        assert path.read_bytes() == b"// top\r\n[0] = KEYMAP(KC_Z, KC_B)\r\n};\r\n"

    def test_set_keeps_utf8_comments(self, runner, tmp_path):
        path = tmp_path / "utf8.c"
        source = "/* Überschrift – ß */\nKEYMAP(KC_A, KC_B)\n".encode("utf-8")
        path.write_bytes(source)
        result = runner.invoke(
            main, ["set", str(path), "0", "1", "KC_Z", "--in-place"]
        )
        assert result.exit_code == 0
        assert path.read_bytes() == source.replace(b"KC_B", b"KC_Z")

    def test_set_non_utf8_source(self, runner, tmp_path):
        path = tmp_path / "latin1.c"
        path.write_bytes(b"/* \xe9 */ KEYMAP(KC_A)")
        result = runner.invoke(main, ["set", str(path), "0", "0", "KC_Z"])
        assert result.exit_code == ExitCode.INVALID_ARGS
        assert "UTF-8" in result.output

    def test_set_too_deeply_nested(self, runner, tmp_path):
        path = tmp_path / "deep.c"
        path.write_text("KEYMAP(" + "A(" * 2000 + "x" + ")" * 2000 + ")")
        result = runner.invoke(main, ["set", str(path), "0", "0", "KC_Z"])
        assert result.exit_code == ExitCode.KEYMAP_ERROR
        assert "nested too deeply" in result.output

    def test_set_uses_env_key_count(self, runner, keymap_file, monkeypatch):
        monkeypatch.setenv("KMEDIT_KEY_COUNT", "5")
        result = runner.invoke(main, ["set", str(keymap_file), "0", "0", "KC_Z"])
        assert result.exit_code == ExitCode.KEYMAP_ERROR


class TestAddLayer:
    """Test the add-layer command."""

    def test_add_layer(self, runner, keymap_file):
        result = runner.invoke(main, ["add-layer", str(keymap_file), "--in-place"])
        assert result.exit_code == 0
        text = keymap_file.read_text()
        assert "[2] = KEYMAP(KC_TRANSPARENT,KC_TRANSPARENT,KC_TRANSPARENT)" in text
        assert text.startswith(SOURCE.rstrip("\n"))

    def test_add_layer_placeholder(self, runner, keymap_file):
        result = runner.invoke(
            main, ["add-layer", str(keymap_file), "-p", "KC_NO"]
        )
        assert result.exit_code == 0
        assert "[2] = KEYMAP(KC_NO,KC_NO,KC_NO)" in result.output

    def test_add_layer_invalid_source(self, runner, tmp_path):
        path = tmp_path / "bad.c"
        path.write_text("KEYMAP(KC_A,)")
        result = runner.invoke(main, ["add-layer", str(path), "--in-place"])
        assert result.exit_code == 0
        assert path.read_text() == "KEYMAP(KC_A,)"
        assert "no layer added" in result.output

    def test_add_layer_validate_bad_placeholder(self, runner, keymap_file):
        result = runner.invoke(
            main, ["add-layer", str(keymap_file), "-p", "KC NO", "--validate"]
        )
        assert result.exit_code == ExitCode.KEYMAP_ERROR
