"""
AWS Profile Manager

This module reads SSO profiles from the AWS config file. Config sections
keep their raw name (``profile work``) while the credentials file and the
CLI use the bare short name (``work``).
"""

import configparser
import logging
from pathlib import Path
from typing import Dict, List, Optional

from .errors import ConfigError, ProfileNotFoundError
from .paths import _get_aws_config_path

__all__ = [
    'load_profiles',
    'get_profile',
    'list_profiles',
    'section_name_for',
    'ProfileSection'
]

logger = logging.getLogger(__name__)


class ProfileSection:
    """Contains the SSO settings of one AWS config section."""
    def __init__(self, name: str, region: Optional[str] = None,
                 sso_account_id: Optional[str] = None, sso_role_name: Optional[str] = None,
                 sso_start_url: Optional[str] = None, sso_region: Optional[str] = None):
        self.name = name  # raw section name, e.g. "profile work"
        self.region = region
        self.sso_account_id = sso_account_id
        self.sso_role_name = sso_role_name
        self.sso_start_url = sso_start_url
        self.sso_region = sso_region

    @property
    def short_name(self) -> str:
        """Last whitespace-separated token of the section name."""
        return self.name.split()[-1]

    @property
    def is_sso(self) -> bool:
        return bool(self.sso_start_url)

    def __repr__(self) -> str:
        return f"ProfileSection(name={self.name!r}, sso_account_id={self.sso_account_id!r})"

    def __str__(self) -> str:
        """Return string representation of the profile section."""
        region_str = f" - {self.region}" if self.region else ""
        account_str = f" - Account: {self.sso_account_id}" if self.sso_account_id else ""
        role_str = f" [{self.sso_role_name}]" if self.sso_role_name else ""
        return f"{self.short_name}{region_str}{account_str}{role_str}"


def _read_config(config_path: Path) -> configparser.ConfigParser:
    """
    Parse an AWS config file.

    Args:
        config_path: Path to the config file

    Returns:
        The parsed config

    Raises:
        ConfigError: If the file is missing, unreadable or malformed
    """
    config = configparser.ConfigParser(interpolation=None)
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config.read_file(f, source=str(config_path))
    except FileNotFoundError as e:
        raise ConfigError(f"AWS config file not found: {config_path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Unable to read AWS config file {config_path}: {e}") from e
    except configparser.Error as e:
        raise ConfigError(f"Malformed AWS config file {config_path}: {e}") from e
    return config


def load_profiles(config_path: Optional[Path] = None) -> Dict[str, ProfileSection]:
    """
    Load every usable profile section from the AWS config file.

    Sections without keys are structural groupings and are skipped.

    Args:
        config_path: Config file to read (defaults to ~/.aws/config)

    Returns:
        Mapping of raw section name to ProfileSection, in file order
    """
    config_path = Path(config_path) if config_path else _get_aws_config_path()
    config = _read_config(config_path)

    profiles = {}
    for section in config.sections():
        if not config.options(section):
            logger.debug("Skipping empty section [%s]", section)
            continue

        profiles[section] = ProfileSection(
            name=section,
            region=config.get(section, "region", fallback=None),
            sso_account_id=config.get(section, "sso_account_id", fallback=None),
            sso_role_name=config.get(section, "sso_role_name", fallback=None),
            sso_start_url=config.get(section, "sso_start_url", fallback=None),
            sso_region=config.get(section, "sso_region", fallback=None),
        )

    logger.debug("Loaded %d profiles from %s", len(profiles), config_path)
    return profiles


def section_name_for(profile_name: str) -> str:
    """Config section name for a bare profile name."""
    return f"profile {profile_name}" if profile_name != "default" else "default"


def get_profile(profile_name: str, config_path: Optional[Path] = None) -> ProfileSection:
    """
    Look up a profile by its bare name.

    Args:
        profile_name: Name of the profile, without the "profile " prefix

    Returns:
        The matching ProfileSection

    Raises:
        ProfileNotFoundError: If the config has no such section
    """
    profiles = load_profiles(config_path)
    section = profiles.get(section_name_for(profile_name))
    if section is None:
        raise ProfileNotFoundError(profile_name)
    return section


def list_profiles(config_path: Optional[Path] = None, sso_only: bool = False) -> List[ProfileSection]:
    """
    List the profiles configured on the system.

    Args:
        config_path: Config file to read (defaults to ~/.aws/config)
        sso_only: Only return profiles that have an SSO start URL

    Returns:
        List of ProfileSection objects in file order
    """
    profiles = list(load_profiles(config_path).values())
    if sso_only:
        profiles = [p for p in profiles if p.is_sso]
    return profiles
