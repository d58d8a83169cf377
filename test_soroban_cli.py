#!/usr/bin/env python3
"""Tests for the soroban.py command line."""

import xml.etree.ElementTree as ET

import pytest

import soroban


@pytest.fixture
def no_config(tmp_path):
    return str(tmp_path / "missing.json")


def test_value(no_config, capsys):
    assert soroban.main(["--config", no_config, "--rods", "3", "--value", "509"]) == 0
    out = capsys.readouterr().out
    assert "SOROBAN - 3 RODS" in out
    assert "Value: 509 (509)" in out


def test_value_padded(no_config, capsys):
    soroban.main(["--config", no_config, "--rods", "5", "--value", "42"])
    assert "Value: 42 (00042)" in capsys.readouterr().out


def test_out_of_range(no_config, capsys):
    assert soroban.main(["--config", no_config, "--rods", "3", "--value", "1000"]) == 2
    assert "Error" in capsys.readouterr().err


def test_bad_rod_count(no_config, capsys):
    assert soroban.main(["--config", no_config, "--rods", "0"]) == 2
    assert "rod_count" in capsys.readouterr().err


def test_report(no_config, capsys):
    soroban.main(["--config", no_config, "--rods", "4", "--random", "--report"])
    assert "Invariants (4 rods): PASSED" in capsys.readouterr().out


def test_svg(no_config, tmp_path):
    path = tmp_path / "out.svg"
    assert soroban.main(["--config", no_config, "--rods", "2", "--value", "7",
                         "--svg", str(path), "--show-digits"]) == 0
    root = ET.parse(str(path)).getroot()
    texts = [t.text for t in root.iter("{http://www.w3.org/2000/svg}text")]
    assert texts == ["0", "7"]


def test_value_options_exclusive(no_config):
    with pytest.raises(SystemExit):
        soroban.main(["--config", no_config, "--value", "3", "--clear"])
