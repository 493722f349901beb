"""Unit tests for protocol version parsing and ordering."""

import pytest

from subwire.version import TOKEN_AUTH_VERSION, Version


class TestParse:
    """Test Version.parse."""

    def test_parse_full(self):
        """Test a three-component version."""
        assert Version.parse("1.11.0") == Version(1, 11, 0)

    def test_parse_missing_patch(self):
        """Test a missing patch component defaults to 0."""
        v = Version.parse("1.12")
        assert (v.major, v.minor, v.patch) == (1, 12, 0)

    def test_parse_major_only(self):
        """Test missing minor and patch default to 0."""
        assert Version.parse("2") == Version(2, 0, 0)

    def test_parse_version_passthrough(self):
        """Test parsing a Version returns it unchanged."""
        v = Version(1, 16, 1)
        assert Version.parse(v) is v

    @pytest.mark.parametrize("value", ["", "1.x", "one.two", "1..2", "-1.0.0"])
    def test_parse_invalid(self, value):
        """Test invalid strings raise ValueError."""
        with pytest.raises(ValueError):
            Version.parse(value)

    def test_str(self):
        """Test string form always has three components."""
        assert str(Version.parse("1.12")) == "1.12.0"
        assert str(Version(1, 16, 1)) == "1.16.1"


class TestOrdering:
    """Test total ordering of versions."""

    def test_numeric_not_lexical(self):
        """Test 1.13.0 sorts after 1.9.9."""
        assert Version(1, 13, 0) > Version(1, 9, 9)

    def test_token_threshold(self):
        """Test comparisons against the token auth threshold."""
        assert Version.parse("1.13.0") >= TOKEN_AUTH_VERSION
        assert Version.parse("1.12.9") < TOKEN_AUTH_VERSION
        assert Version.parse("1.16.1") > TOKEN_AUTH_VERSION

    def test_sorting(self):
        """Test a list of versions sorts numerically."""
        versions = [Version(1, 16, 1), Version(1, 2, 0), Version(1, 13, 0)]
        assert sorted(versions) == [Version(1, 2, 0), Version(1, 13, 0), Version(1, 16, 1)]
