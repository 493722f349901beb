"""Paging through list and search results.

The Subsonic API pages results: a request asks for up to ``count`` results
starting ``offset`` pages in. A SearchPage holds that pair and turns it into
request arguments.

Example:
    >>> page = SearchPage()
    >>> page.advance()
    SearchPage(count=20, offset=1)
    >>> SearchPage().with_size(50).to_query("size", "offset").encode()
    'size=50&offset=0'
"""

from dataclasses import dataclass, replace

from .query import Query

DEFAULT_PAGE_SIZE = 20


@dataclass(frozen=True)
class SearchPage:
    """A (count, offset) paging cursor.

    Attributes:
        count: Maximum number of results to return
        offset: Page offset
    """

    count: int = DEFAULT_PAGE_SIZE
    offset: int = 0

    def __post_init__(self):
        """Validate paging values on initialization."""
        if self.count < 0:
            raise ValueError("count must be non-negative")
        if self.offset < 0:
            raise ValueError("offset must be non-negative")

    @classmethod
    def at_page(cls, offset: int) -> "SearchPage":
        """Create a page of the default size at the given offset."""
        return cls(offset=offset)

    def with_size(self, count: int) -> "SearchPage":
        """Return a copy of this page with count replaced."""
        return replace(self, count=count)

    def advance(self) -> "SearchPage":
        """Return the next page."""
        return replace(self, offset=self.offset + 1)

    def retreat(self) -> "SearchPage":
        """Return the previous page.

        Raises:
            ValueError: If this is already the first page
        """
        if self.offset == 0:
            raise ValueError("cannot retreat past the first page")
        return replace(self, offset=self.offset - 1)

    def to_query(self, count_key: str = "count", offset_key: str = "offset") -> Query:
        """Build the count/offset arguments for a list operation."""
        return Query().arg(count_key, self.count).arg(offset_key, self.offset)


# The maximum number of results most searches will accept
ALL = SearchPage(count=500, offset=0)

# Requests no results, effectively ignoring that result type
NONE = SearchPage(count=0, offset=0)
