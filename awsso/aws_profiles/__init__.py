"""
AWS SSO profile and credential utilities: read SSO profiles, resolve the
cached SSO token and write short-term role credentials to the AWS
credentials file.
"""

from .errors import (
    AwsSsoError,
    ConfigError,
    ProfileNotFoundError,
    CacheMissError,
    InvalidCacheError,
    ExpiredTokenError,
    ExchangeError,
    StoreWriteError,
    SectionNotFoundError,
    LoginSubprocessError
)
from .paths import AwsPaths
from .profile_manager import (
    load_profiles,
    get_profile,
    list_profiles,
    ProfileSection
)
from .sso_cache import (
    cache_key,
    resolve_token,
    check_fresh,
    CachedToken
)
from .exchange import SsoExchangeClient, TemporaryCredentials
from .credentials import (
    CredentialsStore,
    load_credentials_store,
    merge_and_persist
)
from .refresh import (
    CredentialsRefresher,
    RefreshResult,
    refresh_credentials
)
