"""
SSO token cache lookup.

``aws sso login`` stores the portal access token in
``~/.aws/sso/cache/<sha1(start_url)>.json``. Several profiles may share a
start URL and therefore one cached token, so the file is found by hashing
the URL rather than by profile name.
"""

import hashlib
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from .errors import CacheMissError, ExpiredTokenError, InvalidCacheError
from .paths import _get_aws_sso_cache_dir
from .profile_manager import ProfileSection
from ..utils.timestamps import parse_timestamp, utcnow

__all__ = [
    'cache_key',
    'cache_path_for',
    'resolve_token',
    'check_fresh',
    'CachedToken'
]

logger = logging.getLogger(__name__)

CACHE_FILE_EXTENSION = ".json"


class CachedToken:
    """A bearer token read from the SSO cache."""
    def __init__(self, access_token: str, expires_at: datetime,
                 region: Optional[str] = None, path: Optional[Path] = None):
        self.access_token = access_token
        self.expires_at = expires_at
        self.region = region
        self.path = path

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """True when ``now`` is strictly after the expiry."""
        now = now or utcnow()
        return now > self.expires_at

    def __repr__(self) -> str:
        # never print the token itself
        return f"CachedToken(expires_at={self.expires_at.isoformat()!r}, path={str(self.path)!r})"


def cache_key(start_url: str) -> str:
    """
    Compute the cache file stem for an SSO start URL.

    Args:
        start_url: The profile's sso_start_url

    Returns:
        str: 40-character SHA-1 hex digest
    """
    return hashlib.sha1(start_url.encode("utf-8")).hexdigest()


def cache_path_for(start_url: str, cache_dir: Optional[Path] = None) -> Path:
    """Get the cache file path for an SSO start URL."""
    cache_dir = Path(cache_dir) if cache_dir else _get_aws_sso_cache_dir()
    return cache_dir / f"{cache_key(start_url)}{CACHE_FILE_EXTENSION}"


def resolve_token(profile: ProfileSection, cache_dir: Optional[Path] = None) -> CachedToken:
    """
    Load the cached SSO token that applies to a profile.

    Args:
        profile: The profile whose start URL selects the cache file
        cache_dir: Cache directory (defaults to ~/.aws/sso/cache)

    Returns:
        CachedToken: The token and its expiry

    Raises:
        CacheMissError: If no cache file exists for the start URL
        InvalidCacheError: If the cache file cannot be used
    """
    login_hint = f"Please run: aws sso login --profile {profile.short_name}"

    if not profile.sso_start_url:
        raise CacheMissError(
            f"Profile '{profile.short_name}' has no sso_start_url, so it has no SSO cache"
        )

    path = cache_path_for(profile.sso_start_url, cache_dir)
    logger.info("Checking for SSO credentials...")
    logger.debug("Reading SSO cache file %s", path)

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise CacheMissError(f"Missing SSO credentials. {login_hint}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise InvalidCacheError(f"Unable to read SSO cache file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise InvalidCacheError(f"SSO cache file {path} is not valid JSON. {login_hint}") from e

    if not isinstance(data, dict):
        raise InvalidCacheError(f"SSO cache file {path} does not contain a JSON object")

    access_token = data.get("accessToken")
    if not isinstance(access_token, str) or not access_token:
        raise InvalidCacheError(f"SSO cache file {path} has no accessToken. {login_hint}")

    try:
        expires_at = parse_timestamp(data.get("expiresAt"))
    except (TypeError, ValueError) as e:
        raise InvalidCacheError(
            f"SSO cache file {path} has an invalid expiresAt: {data.get('expiresAt')!r}"
        ) from e

    region = data.get("region")
    if region and profile.sso_region and region != profile.sso_region:
        logger.warning(
            "SSO cache region %s does not match sso_region %s of profile '%s'",
            region, profile.sso_region, profile.short_name
        )

    return CachedToken(access_token, expires_at, region=region, path=path)


def check_fresh(token: CachedToken, now: Optional[datetime] = None) -> None:
    """
    Fail when a cached token has expired.

    Args:
        token: The cached token
        now: Reference time (defaults to the current UTC time)

    Raises:
        ExpiredTokenError: If ``now`` is strictly after the token expiry
    """
    if token.is_expired(now):
        raise ExpiredTokenError(token.expires_at)
    logger.debug("SSO token valid until %s", token.expires_at.isoformat())
