"""Subsonic protocol version handling."""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True, order=True)
class Version:
    """A Subsonic REST protocol version (major, minor, patch).

    Versions compare as tuples, so ``Version(1, 13, 0) > Version(1, 9, 2)``.

    Example:
        >>> Version.parse("1.12")
        Version(major=1, minor=12, patch=0)
        >>> str(Version.parse("1.16.1"))
        '1.16.1'
    """

    major: int
    minor: int = 0
    patch: int = 0

    @classmethod
    def parse(cls, value: Union[str, "Version"]) -> "Version":
        """Parse a dotted version string.

        Missing components default to 0 and anything past the third
        component is ignored.

        Args:
            value: Version string such as "1.16.1" or "1.12", or a Version

        Returns:
            Parsed Version

        Raises:
            ValueError: If a component is not a non-negative integer
        """
        if isinstance(value, Version):
            return value

        parts = value.strip().split(".")
        numbers = []
        for part in parts[:3]:
            if not part.isdigit():
                raise ValueError(f"Invalid protocol version: {value!r}")
            numbers.append(int(part))

        while len(numbers) < 3:
            numbers.append(0)

        return cls(*numbers)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


# First protocol version accepting salted token authentication
TOKEN_AUTH_VERSION = Version(1, 13, 0)

DEFAULT_API_VERSION = "1.16.1"
