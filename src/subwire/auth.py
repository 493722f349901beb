"""Subsonic API authentication implementation.

Servers speaking protocol 1.13.0 or later accept a salted token instead of
the plaintext password:

    1. Generate a random alphanumeric salt (36 characters)
    2. Concatenate password + salt
    3. Calculate the MD5 hash of the concatenated string
    4. Send username, token (the hash) and salt

Older servers only understand ``u=<user>&p=<password>``, so the scheme is
picked from the client's target protocol version.

Example:
    >>> from subwire.models import SubsonicConfig
    >>> from subwire.auth import create_auth_params
    >>>
    >>> config = SubsonicConfig(
    ...     url="https://music.example.com",
    ...     username="admin",
    ...     password="sesame"
    ... )
    >>> create_auth_params(config).encode()
    'u=admin&t=26719a...&s=c19b2d...&v=1.16.1&c=subwire&f=json'

Security Notes:
    - A fresh salt is drawn for every request to prevent token replay
    - MD5 is what the Subsonic API prescribes (obfuscation, not cryptographic security)
"""

import hashlib
import secrets
import string
from datetime import datetime, timezone
from typing import Optional, Union

from .models import LegacyAuth, SubsonicAuthToken, SubsonicConfig
from .query import Query
from .version import TOKEN_AUTH_VERSION, Version

SALT_SIZE = 36
MIN_SALT_SIZE = 6
SALT_ALPHABET = string.ascii_letters + string.digits

RESPONSE_FORMAT = "json"


def generate_salt(length: int = SALT_SIZE) -> str:
    """Generate a random alphanumeric salt.

    Args:
        length: Number of characters (at least 6)

    Returns:
        Salt string drawn from a cryptographically secure source
    """
    if length < MIN_SALT_SIZE:
        raise ValueError(f"salt must be at least {MIN_SALT_SIZE} characters")
    return "".join(secrets.choice(SALT_ALPHABET) for _ in range(length))


def generate_token(config: SubsonicConfig, salt: Optional[str] = None) -> SubsonicAuthToken:
    """Generate Subsonic authentication token using MD5 salt+hash method.

    Args:
        config: Subsonic configuration containing username and password
        salt: Optional pre-generated salt. If None, generates a new one.
              Primarily for testing purposes.

    Returns:
        SubsonicAuthToken containing:
            - token: MD5 hash (32 hex chars, lowercase)
            - salt: Salt string
            - username: Username from config
            - created_at: UTC timestamp when token was created

    Raises:
        ValueError: If a supplied salt is shorter than 6 characters

    Example:
        >>> token = generate_token(config, salt="c19b2d")
        >>> token.token
        '26719a1196d2a940705a59634eb18eab'
    """
    if salt is None:
        salt = generate_salt()
    elif len(salt) < MIN_SALT_SIZE:
        raise ValueError(f"salt must be at least {MIN_SALT_SIZE} characters")

    token = hashlib.md5(f"{config.password}{salt}".encode("utf-8")).hexdigest()

    return SubsonicAuthToken(
        token=token,
        salt=salt,
        username=config.username,
        created_at=datetime.now(timezone.utc),
    )


def verify_token(config: SubsonicConfig, token: str, salt: str) -> bool:
    """Verify that a token matches the expected MD5(password + salt).

    Example:
        >>> auth = generate_token(config, salt="c19b2d")
        >>> verify_token(config, auth.token, auth.salt)
        True
    """
    expected_token = hashlib.md5(f"{config.password}{salt}".encode("utf-8")).hexdigest()
    return secrets.compare_digest(token, expected_token)


def get_auth(
    config: SubsonicConfig, version: Optional[Union[str, Version]] = None
) -> Union[SubsonicAuthToken, LegacyAuth]:
    """Pick the credential scheme for a target protocol version.

    Args:
        config: Subsonic configuration
        version: Target protocol version (default: config.api_version)

    Returns:
        A fresh SubsonicAuthToken for version >= 1.13.0, LegacyAuth otherwise
    """
    target = Version.parse(version) if version is not None else config.version
    if target >= TOKEN_AUTH_VERSION:
        return generate_token(config)
    return LegacyAuth(username=config.username, password=config.password)


def create_auth_params(
    config: SubsonicConfig, version: Optional[Union[str, Version]] = None
) -> Query:
    """Create the complete authentication arguments for one request.

    Args:
        config: Subsonic configuration
        version: Target protocol version (default: config.api_version)

    Returns:
        Query holding, in order:
            - u, t, s (token scheme) or u, p (legacy scheme)
            - v: protocol version
            - c: client name
            - f: response format ("json")
    """
    target = Version.parse(version) if version is not None else config.version
    auth = get_auth(config, target)

    query = Query()
    for key, value in auth.to_auth_params().items():
        query.arg(key, value)

    return query.arg("v", str(target)).arg("c", config.client_name).arg("f", RESPONSE_FORMAT)
