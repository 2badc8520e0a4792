# --------------------------------------------------------------
# File: test_cli.py
# Description: End-to-end runs through the command-line entry point.
# --------------------------------------------------------------

import pytest

from fcrypt import VERSION_NUMBER
from fcrypt.cli import main

from conftest import KEY, OTHER_KEY, snapshot


def test_version(capsys):
    assert main(["-v"]) == 0
    assert capsys.readouterr().out.strip() == VERSION_NUMBER


def test_help(capsys):
    assert main(["-h"]) == 0
    assert "Usage: fcrypt" in capsys.readouterr().out


def test_encrypt_then_decrypt_directory(sample_tree):
    original = snapshot(sample_tree)
    assert main(["-e", str(sample_tree), "-k", KEY, "--no-progress"]) == 0
    assert snapshot(sample_tree) != original
    assert main(["-d", str(sample_tree), "-k", KEY, "--no-progress"]) == 0
    assert snapshot(sample_tree) == original


def test_wrong_key_reports_partial_failure(sample_tree):
    original = snapshot(sample_tree)
    assert main(["-e", str(sample_tree), "-k", KEY, "--no-progress"]) == 0
    encrypted = snapshot(sample_tree)
    assert main(["-d", str(sample_tree), "-k", OTHER_KEY, "--no-progress"]) == 1
    assert snapshot(sample_tree) == encrypted
    assert main(["-d", str(sample_tree), "-k", KEY, "--no-progress"]) == 0
    assert snapshot(sample_tree) == original


def test_random_key_is_printed_and_usable(sample_tree, capsys):
    original = snapshot(sample_tree)
    assert main(["-e", str(sample_tree), "--rand-key", "--no-progress"]) == 0
    out = capsys.readouterr().out
    lines = [line for line in out.splitlines() if line.startswith("rand_key: ")]
    assert len(lines) == 1
    generated = lines[0][len("rand_key: "):]
    assert len(generated) == 32
    assert out.index("rand_key: ") < out.index("Encrypted:")
    assert main(["-d", str(sample_tree), "-k", generated, "--no-progress"]) == 0
    assert snapshot(sample_tree) == original


@pytest.mark.parametrize(
    "extra, message",
    [
        (["-d", "SAME"], "both the -e and -d flags"),
        (["-k", KEY, "--rand-key"], "both the -k and --rand-key flags"),
        ([], "either specify a key"),
        (["-k", "k" * 31], "Key must be 32 bytes long"),
        (["-k", "k" * 33], "Key must be 32 bytes long"),
    ],
)
def test_configuration_errors_touch_nothing(sample_tree, capsys, extra, message):
    before = snapshot(sample_tree)
    argv = ["-e", str(sample_tree)] + [str(sample_tree) if arg == "SAME" else arg for arg in extra]
    assert main(argv) == 2
    assert message in capsys.readouterr().out
    assert snapshot(sample_tree) == before


def test_missing_mode(capsys):
    assert main(["-k", KEY]) == 2
    assert "either the -e or -d flag" in capsys.readouterr().out


def test_missing_target(tmp_path, capsys):
    assert main(["-e", str(tmp_path / "missing"), "-k", KEY]) == 2
    assert "not found" in capsys.readouterr().out


def test_init_config_writes_file_once(tmp_path, capsys):
    path = tmp_path / "settings.ini"
    assert main(["--init-config", "--config", str(path)]) == 0
    assert path.is_file()
    assert main(["--init-config", "--config", str(path)]) == 2


def test_settings_file_enables_checksums(sample_tree, tmp_path, capsys):
    path = tmp_path / "settings.ini"
    path.write_text("[Settings]\nshow_checksums = yes\n[UI]\nshow_progress = no\n")
    assert main(["-e", str(sample_tree), "-k", KEY, "--config", str(path)]) == 0
    assert "SHA256:" in capsys.readouterr().out


def test_debug_mode_title(sample_tree, tmp_path, capsys):
    path = tmp_path / "settings.ini"
    path.write_text("[Settings]\ndebug_mode = yes\n")
    assert main(["-e", str(sample_tree), "-k", KEY, "--config", str(path), "--no-progress"]) == 0
    assert "[DEBUG]" in capsys.readouterr().out
