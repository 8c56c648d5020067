"""
Exchange of an SSO access token for temporary role credentials.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .errors import ExchangeError

__all__ = [
    'SsoExchangeClient',
    'TemporaryCredentials'
]

logger = logging.getLogger(__name__)


class TemporaryCredentials:
    """Short-term role credentials returned by the SSO portal."""
    def __init__(self, access_key_id: str, secret_access_key: str,
                 session_token: str, region: str,
                 expiration: Optional[datetime] = None):
        self.access_key_id = access_key_id
        self.secret_access_key = secret_access_key
        self.session_token = session_token
        self.region = region
        self.expiration = expiration

    def as_store_values(self):
        """The four credentials-file keys, in the order they are written."""
        return [
            ("region", self.region),
            ("aws_access_key_id", self.access_key_id),
            ("aws_secret_access_key", self.secret_access_key),
            ("aws_session_token", self.session_token),
        ]

    def __repr__(self) -> str:
        return f"TemporaryCredentials(access_key_id={self.access_key_id!r}, region={self.region!r})"


class SsoExchangeClient:
    """
    Calls SSO GetRoleCredentials through boto3.

    One blocking call per exchange, no retries.
    """

    def __init__(self, session: Optional[boto3.session.Session] = None):
        """
        Initialize the exchange client.

        Args:
            session: Optional boto3 session (a fresh one is created if not given)
        """
        self.session = session

    def _client(self, region: str):
        session = self.session or boto3.session.Session()
        return session.client("sso", region_name=region)

    def exchange(self, account_id: str, role_name: str,
                 access_token: str, region: str) -> TemporaryCredentials:
        """
        Exchange a cached access token for role credentials.

        Args:
            account_id: AWS account to assume the role in
            role_name: Permission set / role name
            access_token: Bearer token from the SSO cache
            region: SSO region the call is bound to

        Returns:
            TemporaryCredentials: The role credentials

        Raises:
            ExchangeError: On any transport or authorization failure
        """
        logger.info("Fetching short-term CLI session token...")
        logger.debug("GetRoleCredentials account=%s role=%s region=%s",
                     account_id, role_name, region)

        try:
            response = self._client(region).get_role_credentials(
                roleName=role_name,
                accountId=account_id,
                accessToken=access_token,
            )
        except ClientError as e:
            raise ExchangeError(f"GetRoleCredentials failed: {e}") from e
        except BotoCoreError as e:
            raise ExchangeError(f"GetRoleCredentials failed: {e}") from e

        role_credentials = response.get("roleCredentials") if response else None
        if not role_credentials:
            raise ExchangeError("Failed to get short-term credentials: empty response")

        try:
            expiration = None
            if role_credentials.get("expiration"):
                # milliseconds since the epoch
                expiration = datetime.fromtimestamp(
                    role_credentials["expiration"] / 1000, tz=timezone.utc
                )
            return TemporaryCredentials(
                access_key_id=role_credentials["accessKeyId"],
                secret_access_key=role_credentials["secretAccessKey"],
                session_token=role_credentials["sessionToken"],
                region=region,
                expiration=expiration,
            )
        except KeyError as e:
            raise ExchangeError(f"Failed to get short-term credentials: missing {e}") from e
