"""Unit tests for ordered query-string encoding."""

import pytest

from subwire.query import Query, format_value


class TestEncoding:
    """Test Query.encode output strings."""

    def test_single_argument(self):
        """Test a single argument encodes as key=value."""
        assert Query.with_arg("id", 64).encode() == "id=64"

    def test_two_arguments_keep_insertion_order(self):
        """Test arguments encode in the order they were added."""
        q = Query().arg("id", 64).arg("album", 12)
        assert q.encode() == "id=64&album=12"

    def test_reverse_insertion_order(self):
        """Test order follows insertion, not key names."""
        q = Query().arg("album", 12).arg("id", 64)
        assert q.encode() == "album=12&id=64"

    def test_empty_query_is_empty_string(self):
        """Test an empty Query encodes to an empty string."""
        assert Query().encode() == ""
        assert str(Query()) == ""

    def test_absent_value_is_omitted(self):
        """Test None values contribute neither key nor separator."""
        q = Query().arg("album", None)
        assert q.encode() == ""
        q.arg("id", 64)
        assert q.encode() == "id=64"

    def test_absent_values_leave_no_stray_separators(self):
        """Test mixed absent/present values produce exactly the present pairs."""
        q = (
            Query()
            .arg("a", None)
            .arg("b", 1)
            .arg("c", None)
            .arg("d", 2)
            .arg("e", None)
        )
        assert q.encode() == "b=1&d=2"

    def test_empty_string_is_present(self):
        """Test an empty string is a value, unlike None."""
        q = Query().arg("title", "").arg("id", 1)
        assert q.encode() == "title=&id=1"

    def test_list_expands_to_repeated_keys(self):
        """Test arg_list adds one pair per element in order."""
        q = Query().arg_list("id", [1, 2, 3, 4])
        assert q.encode() == "id=1&id=2&id=3&id=4"

    def test_list_interleaves_with_other_keys(self):
        """Test list pairs sit where they were inserted."""
        q = Query().arg("action", "add").arg_list("id", ["a", "b"]).arg("index", 3)
        assert q.encode() == "action=add&id=a&id=b&index=3"

    def test_absent_list_is_omitted(self):
        """Test a None list contributes nothing."""
        q = Query().arg_list("id", None).arg("x", 1)
        assert q.encode() == "x=1"

    def test_none_elements_in_list_are_skipped(self):
        """Test None elements inside a list are skipped."""
        q = Query().arg_list("id", [1, None, 3])
        assert q.encode() == "id=1&id=3"

    def test_booleans_are_lowercase(self):
        """Test booleans render the way Subsonic servers parse them."""
        q = Query().arg("submission", True).arg("playing", False)
        assert q.encode() == "submission=true&playing=false"

    def test_float_value(self):
        """Test floats use their plain string form."""
        assert Query.with_arg("gain", 0.5).encode() == "gain=0.5"

    def test_values_are_percent_encoded(self):
        """Test reserved characters in values are escaped by default."""
        q = Query().arg("query", "rock & roll").arg("title", "a=b")
        assert q.encode() == "query=rock%20%26%20roll&title=a%3Db"

    def test_non_ascii_values_are_percent_encoded(self):
        """Test non-ASCII text is escaped as UTF-8."""
        assert Query.with_arg("artist", "Björk").encode() == "artist=Bj%C3%B6rk"

    def test_unescaped_encoding(self):
        """Test escape=False writes values verbatim."""
        q = Query().arg("query", "rock & roll")
        assert q.encode(escape=False) == "query=rock & roll"

    def test_alphanumeric_values_identical_either_way(self):
        """Test escaping does not alter plain values."""
        q = Query().arg("id", "abc123").arg("count", 20)
        assert q.encode() == q.encode(escape=False)


class TestComposition:
    """Test building, merging and comparing queries."""

    def test_arg_returns_same_query(self):
        """Test arg supports chaining on the same object."""
        q = Query()
        assert q.arg("id", 1) is q

    def test_empty_key_rejected(self):
        """Test an empty key raises ValueError."""
        with pytest.raises(ValueError):
            Query().arg("", "value")

    @pytest.mark.parametrize("value", [[1, 2], (1, 2), {1}])
    def test_collection_value_rejected(self, value):
        """Test arg refuses collections instead of encoding their repr."""
        q = Query()
        with pytest.raises(TypeError, match="arg_list"):
            q.arg("id", value)
        assert len(q) == 0

    def test_string_value_not_treated_as_collection(self):
        assert Query().arg("id", "12").encode() == "id=12"

    def test_merge_appends_in_order(self):
        """Test merge puts the other query's arguments last."""
        q = Query.with_arg("query", "x").merge(Query().arg("count", 20).arg("offset", 0))
        assert q.encode() == "query=x&count=20&offset=0"

    def test_add_returns_new_query(self):
        """Test + leaves both operands unchanged."""
        left = Query.with_arg("a", 1)
        right = Query.with_arg("b", 2)
        combined = left + right

        assert combined.encode() == "a=1&b=2"
        assert left.encode() == "a=1"
        assert right.encode() == "b=2"

    def test_equality_is_order_sensitive(self):
        """Test queries with the same pairs in another order differ."""
        assert Query().arg("a", 1).arg("b", 2) == Query().arg("a", 1).arg("b", 2)
        assert Query().arg("a", 1).arg("b", 2) != Query().arg("b", 2).arg("a", 1)

    def test_constructor_from_pairs(self):
        """Test building from pairs skips None values."""
        q = Query([("id", 1), ("size", None), ("x", "y")])
        assert q.encode() == "id=1&x=y"
        assert len(q) == 2

    def test_items_are_formatted(self):
        """Test items() yields string pairs."""
        q = Query().arg("id", 5).arg("flag", True)
        assert q.items() == [("id", "5"), ("flag", "true")]


def test_format_value():
    """Test value rendering for the supported types."""
    assert format_value(True) == "true"
    assert format_value(False) == "false"
    assert format_value(0) == "0"
    assert format_value("text") == "text"
