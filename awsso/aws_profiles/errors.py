"""
Error kinds raised by the credential refresh pipeline.

Every error is fatal to the current invocation. Library code raises them;
only the CLI entry point turns them into an exit code.
"""


class AwsSsoError(Exception):
    """Base class for all awsso failures."""


class ConfigError(AwsSsoError):
    """A config or credentials file is missing, unreadable or malformed."""


class ProfileNotFoundError(AwsSsoError):
    """The requested profile is not defined in the config file."""

    def __init__(self, profile_name: str):
        self.profile_name = profile_name
        super().__init__(f"Profile '{profile_name}' not found in AWS config")


class CacheMissError(AwsSsoError):
    """No cached SSO token exists for the profile's start URL."""


class InvalidCacheError(CacheMissError):
    """A cache file exists but does not hold a usable token."""


class ExpiredTokenError(AwsSsoError):
    """The cached SSO token is past its expiry."""

    hint = "re-run using '--login'"

    def __init__(self, expires_at):
        self.expires_at = expires_at
        super().__init__(
            f"SSO credentials have expired (at {expires_at.isoformat()}), "
            f"please {self.hint}"
        )


class ExchangeError(AwsSsoError):
    """The SSO GetRoleCredentials call failed."""


class StoreWriteError(AwsSsoError):
    """Backing up or writing the credentials file failed."""


class SectionNotFoundError(AwsSsoError):
    """The credentials file has no section for the profile."""

    def __init__(self, section_name: str, path=None):
        self.section_name = section_name
        self.path = path
        where = f" in {path}" if path else ""
        super().__init__(
            f"Section [{section_name}] not found{where}. "
            f"Add an empty [{section_name}] section to the credentials file first"
        )


class LoginSubprocessError(AwsSsoError):
    """The interactive `aws sso login` run did not succeed."""

    def __init__(self, message: str, returncode=None):
        self.returncode = returncode
        super().__init__(message)
