# This source code is part of the pdbkit package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

import pytest
from pytest import approx
import pdbkit.structure as struc
import pdbkit.structure.io.pdb as pdb


@pytest.mark.parametrize(
    "field, expected",
    [
        ("   42", 42),
        ("  -42 ", -42),
        ("+7", 7),
        ("12ab", 12),
        ("    ", 0),
        ("", 0),
        ("\t 3", 3),
    ],
)
def test_read_int(field, expected):
    assert pdb.read_int(field) == expected


@pytest.mark.parametrize(
    "field, expected",
    [
        ("  11.104", 11.104),
        ("  -6.504", -6.504),
        ("   1.00 ", 1.0),
        ("     42.", 42.0),
        ("   .5", 0.5),
        # The exponent notation is not supported
        ("1.5e3", 1.5),
        ("        ", 0.0),
    ],
)
def test_read_double(field, expected):
    assert pdb.read_double(field) == approx(expected)


@pytest.mark.parametrize(
    "field, expected",
    [
        ("  CA ", "CA"),
        ("HOH\n", "HOH"),
        (" A\r\n", "A"),
        ("AB\0CD", "AB"),
        ("    ", ""),
    ],
)
def test_read_string(field, expected):
    assert pdb.read_string(field) == expected


@pytest.mark.parametrize(
    "field, expected",
    [
        ("   1 ", (1, "")),
        ("  42A", (42, "A")),
        ("-999 ", (-999, "")),
        ("9999 ", (9999, "")),
        ("A000 ", (10000, "")),
        ("A001B", (10001, "B")),
        ("ZZZZ ", (1223055, "")),
        ("a000 ", (1223056, "")),
        ("zzzz ", (2436111, "")),
        ("  1", (1, "")),
    ],
)
def test_read_snic(field, expected):
    assert pdb.read_snic(field) == expected


def test_read_snic_mixed_case():
    # Not valid hybrid-36, read like 'strtol()' with base 36
    assert pdb.read_snic("Az00 ") == (
        10 * 36**3 + 35 * 36**2 - 466560 + 10000,
        "",
    )


@pytest.mark.parametrize(
    "digit, sign, expected",
    [
        ("2", "+", 2),
        ("+", "2", 2),
        ("2", "-", -2),
        ("-", "3", -3),
        ("1", " ", 1),
        (" ", " ", 0),
        ("", "", 0),
        ("1", "", 1),
    ],
)
def test_read_charge(digit, sign, expected):
    assert pdb.read_charge(digit, sign) == expected


@pytest.mark.parametrize("digit, sign", [("2", "X"), ("X", "2")])
def test_read_malformed_charge(digit, sign):
    with pytest.raises(struc.MalformedChargeError):
        pdb.read_charge(digit, sign)


@pytest.mark.parametrize(
    "line, record, expected",
    [
        ("ATOM      1  N", "ATOM", True),
        ("atom      1  N", "ATOM", True),
        ("HETATM    1  N", "HETA", True),
        ("END", "END", True),
        ("END\n", "END", True),
        ("END\r\n", "END", True),
        ("END   ", "END", True),
        ("ENDMDL", "END", False),
        ("TER", "TER", True),
        ("TER   ", "TER", True),
        ("MTRIX1", "MTRIXn", True),
        ("ATOM", "ANIS", False),
        ("", "END", False),
    ],
)
def test_is_record_type(line, record, expected):
    assert pdb.is_record_type(line, record) == expected


def test_record_key():
    assert pdb.record_key("end\n") == "END\0"
    assert pdb.record_key("ter") == "TER\0"
    assert pdb.record_key("") == "\0\0\0\0"


def test_rtrimmed():
    assert pdb.rtrimmed("  HYDROLASE   \n") == "  HYDROLASE"
