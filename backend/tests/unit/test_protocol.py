"""
Unit tests for the command protocol parser.
"""

import pytest

from core.protocol import decode_param, decode_value, parse_line, parse_token
from core.types import AxisId, Extension, MoveKind, PARAM_MAX, ParsedCommand


class TestDecodeValue:
    """Fixed-point decoding: first 4 digits, zero-padded on the right."""

    @pytest.mark.parametrize(
        "digits,expected",
        [
            ("7", 7000),
            ("73", 7300),
            ("730", 7300),
            ("7300", 7300),
            ("73005", 7300),
            ("0005", 5),
            ("0", 0),
            ("9999", 9999),
            ("99999999", 9999),
        ],
    )
    def test_decode(self, digits: str, expected: int):
        assert decode_value(digits) == expected

    def test_most_significant_first(self):
        """A short token is not read as a small number."""
        assert decode_value("5") != 5


class TestDecodeParam:
    """I/S parameters are plain integers with a saturating ceiling."""

    @pytest.mark.parametrize(
        "digits,expected",
        [
            ("0", 0),
            ("250", 250),
            ("000250", 250),
            ("999999999", PARAM_MAX),
            ("1000000000", PARAM_MAX),
            ("0" * 50 + "7", 7),
        ],
    )
    def test_decode(self, digits: str, expected: int):
        assert decode_param(digits) == expected

    @pytest.mark.parametrize("length", [400, 5000])
    def test_long_runs_saturate(self, length: int):
        """Runs past the int conversion limit still decode."""
        assert decode_param("9" * length) == PARAM_MAX


class TestParseToken:
    """Tests for single-token parsing."""

    def test_plain_command(self):
        """L0500 snaps L0 to half range."""
        assert parse_token("L0500") == ParsedCommand(AxisId.L0, 5000)

    def test_interpolate_extension(self):
        """R19999I250 moves R1 to full extent over 250 ms."""
        cmd = parse_token("R19999I250")
        assert cmd == ParsedCommand(AxisId.R1, 9999, Extension(MoveKind.INTERPOLATE, 250))

    def test_speed_extension(self):
        """L2100S50: target digits are padded, speed is a plain integer."""
        cmd = parse_token("L2100S50")
        assert cmd.axis is AxisId.L2
        assert cmd.raw_value == 1000
        assert cmd.extension == Extension(MoveKind.SPEED, 50)

    def test_extension_param_not_padded(self):
        """Only the target is fixed-point; I5 means 5 ms."""
        assert parse_token("L05I5").param == 5

    def test_zero_param_parses(self):
        assert parse_token("L0500I0").param == 0

    @pytest.mark.parametrize("ext", ["I", "S"])
    @pytest.mark.parametrize("length", [400, 5000])
    def test_long_param_saturates(self, ext: str, length: int):
        cmd = parse_token("L09999" + ext + "9" * length)
        assert cmd == ParsedCommand(AxisId.L0, 9999, Extension(MoveKind.from_letter(ext), PARAM_MAX))

    @pytest.mark.parametrize(
        "token",
        [
            "",
            "L0",
            "L3500",
            "ZZ1234",
            "l0500",
            "L0500X10",
            "L0500I",
            "L0I100",
            "L0-500",
            "L05.00",
            "L0500I10S5",
            "XL0500",
        ],
    )
    def test_rejects_malformed(self, token: str):
        assert parse_token(token) is None


class TestParseLine:
    """Tests for whole-line parsing."""

    def test_multiple_tokens(self):
        cmds = parse_line("L09999 R10000 R25000I100\n")
        assert [c.axis for c in cmds] == [AxisId.L0, AxisId.R1, AxisId.R2]

    def test_drops_bad_tokens_only(self):
        """One malformed token does not affect its neighbours."""
        cmds = parse_line("ZZ1234 L0500\n")
        assert cmds == [ParsedCommand(AxisId.L0, 5000)]

    def test_runs_of_whitespace(self):
        cmds = parse_line("  L0500 \t\t L11  \r\n")
        assert [c.axis for c in cmds] == [AxisId.L0, AxisId.L1]

    def test_empty_line(self):
        assert parse_line("\n") == []
        assert parse_line("") == []

    def test_preserves_order(self):
        """Repeated axes are kept in order; the last one wins downstream."""
        cmds = parse_line("L01 L02\n")
        assert [c.raw_value for c in cmds] == [1000, 2000]
