#!/usr/bin/env python3
# test_cover_options.py
# Tests for option name tables and program-info banners

import pytest

from cover_options import ConstraintType, GraphType, ProgramInfo, read_with_output_flag


def test_read_short_and_long_names():
    assert ConstraintType.read("seco") == ConstraintType.SECO
    assert ConstraintType.read("sequential-commander") == ConstraintType.SECO
    assert ConstraintType.read("") == ConstraintType.PRIME
    assert ConstraintType.read("Seco") is None
    assert GraphType.read("directed") == GraphType.DIRECTED


def test_names():
    assert str(ConstraintType.SECOUEP) == "secouep"
    assert ConstraintType.SECOUEP.long_name == "seco-unit-propagation"
    assert ConstraintType.describe() == "ct: prime|seco|secouep"
    assert GraphType.describe() == "gt: und|dir"


def test_output_flag():
    assert read_with_output_flag(ConstraintType, "+seco") == (ConstraintType.SECO, True)
    assert read_with_output_flag(ConstraintType, "seco") == (ConstraintType.SECO, False)
    assert read_with_output_flag(ConstraintType, "+") == (ConstraintType.PRIME, True)
    assert read_with_output_flag(ConstraintType, "+x") == (None, True)


def test_program_info():
    info = ProgramInfo("bcc2sat", "0.3.0", "19.10.2026", url="https://example.org/bcc2sat")
    banner = info.banner()
    assert banner.splitlines()[0] == "program name:       bcc2sat"
    assert " url:               https://example.org/bcc2sat" in banner
    assert info.error_prefix() == "ERROR[bcc2sat]: "
    with pytest.raises(AttributeError):
        info.version = "1.0"
