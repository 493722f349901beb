"""Ordered query-string building for Subsonic API requests.

Subsonic endpoints take repeated keys (``id=1&id=2``) and care about nothing
beyond the values themselves, so a plain dict is not enough: a Query keeps
every (key, value) pair in insertion order.

Example:
    >>> q = Query().arg("id", 64).arg("album", 12)
    >>> q.encode()
    'id=64&album=12'
    >>> Query().arg("id", None).arg_list("id", [1, 2]).encode()
    'id=1&id=2'
"""

from typing import Any, Iterable, Iterator, List, Optional, Tuple
from urllib.parse import quote


def format_value(value: Any) -> str:
    """Render a single argument value the way Subsonic servers expect it.

    Booleans are lowercase ("true"/"false"); everything else uses str().
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class Query:
    """An ordered sequence of query arguments.

    ``None`` values are absent and never appear in the encoded output, not
    even as a bare key. An empty string is a present value and encodes as
    ``key=``.
    """

    def __init__(self, pairs: Optional[Iterable[Tuple[str, Any]]] = None):
        self._pairs: List[Tuple[str, Any]] = []
        if pairs is not None:
            for key, value in pairs:
                self.arg(key, value)

    @classmethod
    def with_arg(cls, key: str, value: Any) -> "Query":
        """Create a Query holding a single argument."""
        return cls().arg(key, value)

    def arg(self, key: str, value: Any) -> "Query":
        """Append one argument, skipping it if the value is None.

        Args:
            key: Argument name
            value: Argument value; None means absent

        Returns:
            This Query, for chaining

        Raises:
            ValueError: If key is empty
            TypeError: If value is a list, tuple or set (use arg_list)
        """
        if not key:
            raise ValueError("query argument key must not be empty")
        if isinstance(value, (list, tuple, set, frozenset)):
            raise TypeError(f"use arg_list to add several values for {key!r}")
        if value is not None:
            self._pairs.append((key, value))
        return self

    def arg_list(self, key: str, values: Optional[Iterable[Any]]) -> "Query":
        """Append one argument per element of values, in order.

        A None list contributes nothing, as do None elements.
        """
        if values is None:
            return self
        for value in values:
            self.arg(key, value)
        return self

    def merge(self, other: "Query") -> "Query":
        """Append all of other's arguments after this Query's own."""
        self._pairs.extend(other._pairs)
        return self

    def encode(self, escape: bool = True) -> str:
        """Encode as ``k1=v1&k2=v2``, keys in insertion order.

        Args:
            escape: Percent-encode keys and values (default). With
                escape=False values are written verbatim, which breaks on
                values containing ``&``, ``=`` or non-ASCII text.

        Returns:
            The encoded query string, "" when there are no arguments
        """
        if escape:
            return "&".join(
                f"{quote(key, safe='')}={quote(format_value(value), safe='')}"
                for key, value in self._pairs
            )
        return "&".join(f"{key}={format_value(value)}" for key, value in self._pairs)

    def items(self) -> List[Tuple[str, str]]:
        """Return the arguments as formatted (key, value) string pairs."""
        return [(key, format_value(value)) for key, value in self._pairs]

    def __add__(self, other: "Query") -> "Query":
        if not isinstance(other, Query):
            return NotImplemented
        return Query(self._pairs).merge(other)

    def __iter__(self) -> Iterator[Tuple[str, Any]]:
        return iter(self._pairs)

    def __len__(self) -> int:
        return len(self._pairs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Query):
            return NotImplemented
        return self._pairs == other._pairs

    def __str__(self) -> str:
        return self.encode()

    def __repr__(self) -> str:
        return f"Query({self._pairs!r})"
