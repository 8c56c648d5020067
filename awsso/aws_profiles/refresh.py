"""
Credential refresh pipeline.

Sequences an optional ``aws sso login``, the profile lookup, the SSO cache
lookup, the freshness check, loading the credentials file, the role
credentials exchange and the credentials file update. Every stage raises
on failure and nothing is retried.
"""

import logging
import subprocess
import time
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional, TextIO

from .credentials import load_credentials_store, merge_and_persist
from .errors import ConfigError, LoginSubprocessError, SectionNotFoundError
from .exchange import SsoExchangeClient
from .paths import AwsPaths
from .profile_manager import get_profile
from .sso_cache import check_fresh, resolve_token
from ..utils.timestamps import utcnow

__all__ = [
    'CredentialsRefresher',
    'RefreshResult',
    'refresh_credentials',
    'login_command'
]

logger = logging.getLogger(__name__)


class RefreshResult:
    """Outcome of a successful refresh."""
    def __init__(self, profile: str, credentials_path: Path, dry_run: bool,
                 backup_path: Optional[Path] = None, elapsed_ms: int = 0):
        self.profile = profile
        self.credentials_path = credentials_path
        self.dry_run = dry_run
        self.backup_path = backup_path
        self.elapsed_ms = elapsed_ms

    def __str__(self) -> str:
        if self.dry_run:
            return f"Dry run for profile '{self.profile}', {self.credentials_path} not modified"
        backup_str = f" (backup: {self.backup_path})" if self.backup_path else ""
        return f"Credentials for profile '{self.profile}' written to {self.credentials_path}{backup_str}"


def login_command(profile_name: str) -> List[str]:
    """Command line of the interactive SSO login."""
    return ["aws", "sso", "login", "--profile", profile_name]


class CredentialsRefresher:
    """
    Refreshes the short-term credentials of one SSO profile.
    """

    def __init__(self, paths: Optional[AwsPaths] = None,
                 exchange_client: Optional[SsoExchangeClient] = None,
                 runner: Optional[Callable[..., subprocess.CompletedProcess]] = None,
                 clock: Optional[Callable[[], datetime]] = None,
                 out: Optional[TextIO] = None):
        """
        Initialize the refresher.

        Args:
            paths: Locations of the AWS files (defaults to ~/.aws)
            exchange_client: Client for GetRoleCredentials
            runner: Replacement for subprocess.run, used for the login step
            clock: Returns the current time for the freshness check
            out: Stream for the dry-run preview (defaults to stdout)
        """
        self.paths = paths or AwsPaths()
        self.exchange_client = exchange_client or SsoExchangeClient()
        self.runner = runner or subprocess.run
        self.clock = clock or utcnow
        self.out = out

    def login(self, profile_name: str) -> None:
        """
        Run ``aws sso login`` with the caller's stdout and stderr.

        Raises:
            LoginSubprocessError: If the command cannot start or exits non-zero
        """
        cmd = login_command(profile_name)
        logger.info("Opening SSO login session: %s", " ".join(cmd))
        try:
            result = self.runner(cmd, check=False)
        except OSError as e:
            raise LoginSubprocessError(f"SSO login could not be started: {e}") from e

        if result.returncode != 0:
            raise LoginSubprocessError(
                f"SSO login failed with exit code {result.returncode}",
                returncode=result.returncode
            )

    def refresh(self, profile_name: str, login: bool = False,
                dry_run: bool = False, backup: bool = False) -> RefreshResult:
        """
        Refresh the credentials of a profile.

        Args:
            profile_name: Bare profile name (``work`` for ``[profile work]``)
            login: Run ``aws sso login`` first
            dry_run: Print the merged credentials file instead of writing it
            backup: Back up the credentials file before writing

        Returns:
            RefreshResult: Where the credentials went
        """
        start_time = time.monotonic()

        if login:
            self.login(profile_name)

        logger.info("Reading profile: %s", profile_name)
        profile = get_profile(profile_name, self.paths.config)
        missing = [key for key in ("sso_account_id", "sso_role_name", "sso_start_url")
                   if not getattr(profile, key)]
        if missing:
            raise ConfigError(
                f"Profile '{profile_name}' is not an SSO profile (missing {', '.join(missing)})"
            )
        region = profile.sso_region or profile.region
        if not region:
            raise ConfigError(
                f"Profile '{profile_name}' has neither sso_region nor region set"
            )

        token = resolve_token(profile, self.paths.sso_cache_dir)
        check_fresh(token, self.clock())

        store = load_credentials_store(self.paths.credentials)
        if not store.has_section(profile.short_name):
            raise SectionNotFoundError(profile.short_name, store.path)

        credentials = self.exchange_client.exchange(
            account_id=profile.sso_account_id,
            role_name=profile.sso_role_name,
            access_token=token.access_token,
            region=region,
        )

        backup_path = merge_and_persist(
            store, profile.short_name, credentials,
            dry_run=dry_run, backup=backup, out=self.out
        )

        elapsed_ms = int((time.monotonic() - start_time) * 1000)
        logger.info("Done in %d ms", elapsed_ms)
        return RefreshResult(
            profile=profile.short_name,
            credentials_path=store.path,
            dry_run=dry_run,
            backup_path=backup_path,
            elapsed_ms=elapsed_ms,
        )


def refresh_credentials(profile_name: str, login: bool = False,
                        dry_run: bool = False, backup: bool = False,
                        paths: Optional[AwsPaths] = None) -> RefreshResult:
    """
    Refresh the short-term credentials of an SSO profile.

    Args:
        profile_name: Bare profile name
        login: Run ``aws sso login`` first
        dry_run: Print instead of writing
        backup: Back up the credentials file before writing
        paths: Locations of the AWS files (defaults to ~/.aws)

    Returns:
        RefreshResult: Where the credentials went
    """
    refresher = CredentialsRefresher(paths=paths)
    return refresher.refresh(profile_name, login=login, dry_run=dry_run, backup=backup)
