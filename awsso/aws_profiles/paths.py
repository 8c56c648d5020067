"""
Locations of the AWS CLI files awsso reads and writes.
"""

import os
from pathlib import Path
from typing import Optional


def _get_aws_dir() -> Path:
    """Get the path to the ~/.aws directory."""
    return Path.home() / ".aws"


def _get_aws_config_path() -> Path:
    """Get the path to the AWS config file, honouring AWS_CONFIG_FILE."""
    override = os.environ.get("AWS_CONFIG_FILE")
    if override:
        return Path(override).expanduser()
    return _get_aws_dir() / "config"


def _get_aws_credentials_path() -> Path:
    """Get the path to the AWS credentials file, honouring AWS_SHARED_CREDENTIALS_FILE."""
    override = os.environ.get("AWS_SHARED_CREDENTIALS_FILE")
    if override:
        return Path(override).expanduser()
    return _get_aws_dir() / "credentials"


def _get_aws_sso_cache_dir() -> Path:
    """Get the path to the AWS SSO cache directory."""
    return _get_aws_dir() / "sso" / "cache"


class AwsPaths:
    """The three file locations used by a refresh run."""

    def __init__(self, config: Optional[Path] = None,
                 credentials: Optional[Path] = None,
                 sso_cache_dir: Optional[Path] = None):
        self.config = Path(config) if config else _get_aws_config_path()
        self.credentials = Path(credentials) if credentials else _get_aws_credentials_path()
        self.sso_cache_dir = Path(sso_cache_dir) if sso_cache_dir else _get_aws_sso_cache_dir()

    @classmethod
    def under(cls, aws_dir: Path) -> "AwsPaths":
        """Build paths rooted at an arbitrary .aws-style directory."""
        aws_dir = Path(aws_dir)
        return cls(
            config=aws_dir / "config",
            credentials=aws_dir / "credentials",
            sso_cache_dir=aws_dir / "sso" / "cache",
        )

    def __repr__(self) -> str:
        return (f"AwsPaths(config={str(self.config)!r}, "
                f"credentials={str(self.credentials)!r}, "
                f"sso_cache_dir={str(self.sso_cache_dir)!r})")
