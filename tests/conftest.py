"""
Shared test fixtures and configuration.
"""

import hashlib
import json
import logging
import os
import sys
from unittest.mock import MagicMock

import pytest

# Add the parent directory to the path so we can import the awsso package
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from awsso.aws_profiles.exchange import TemporaryCredentials
from awsso.aws_profiles.paths import AwsPaths

START_URL = "https://x.awsapps.com/start"

SAMPLE_CONFIG = """\
[default]
region = us-east-1
output = json

[profile work]
region = eu-west-1
sso_start_url = https://x.awsapps.com/start
sso_region = eu-west-1
sso_account_id = 123456789012
sso_role_name = Developer

[profile admin]
region = us-west-2
sso_start_url = https://x.awsapps.com/start
sso_region = eu-west-1
sso_account_id = 210987654321
sso_role_name = AdministratorAccess

[sso-session corp]
"""

SAMPLE_CREDENTIALS = """\
# managed by hand
[default]
aws_access_key_id=AKIDEFAULT
aws_secret_access_key = defaultsecret

[work]
region = eu-west-1
aws_access_key_id = AKIAOLD
aws_secret_access_key = oldsecret
aws_session_token = oldtoken

[personal]
aws_access_key_id: AKIAPERSONAL
aws_secret_access_key: personalsecret
"""


class AwsDir:
    """A throwaway ~/.aws tree."""

    def __init__(self, root):
        self.root = root
        self.paths = AwsPaths.under(root)
        self.paths.sso_cache_dir.mkdir(parents=True)

    def write_config(self, text=SAMPLE_CONFIG):
        self.paths.config.write_text(text)
        return self.paths.config

    def write_credentials(self, text=SAMPLE_CREDENTIALS):
        self.paths.credentials.write_text(text)
        return self.paths.credentials

    def write_cache(self, data, start_url=START_URL):
        name = hashlib.sha1(start_url.encode("utf-8")).hexdigest() + ".json"
        path = self.paths.sso_cache_dir / name
        path.write_text(data if isinstance(data, str) else json.dumps(data))
        return path


@pytest.fixture(autouse=True)
def clean_aws_env(monkeypatch):
    """Keep the developer's AWS settings out of the tests."""
    for var in ("AWS_CONFIG_FILE", "AWS_SHARED_CREDENTIALS_FILE", "AWS_PROFILE"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def reset_awsso_logger():
    """Undo the CLI logging setup after each test."""
    yield
    logger = logging.getLogger("awsso")
    logger.handlers[:] = []
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def aws_dir(tmp_path):
    """Fixture for an empty .aws directory."""
    return AwsDir(tmp_path / ".aws")


@pytest.fixture
def fresh_credentials():
    """Credentials as returned by a successful exchange."""
    return TemporaryCredentials(
        access_key_id="AKIANEW",
        secret_access_key="secret1",
        session_token="tok1",
        region="eu-west-1",
    )


@pytest.fixture
def mock_exchange(fresh_credentials):
    """Mock exchange client that always succeeds."""
    client = MagicMock()
    client.exchange.return_value = fresh_credentials
    return client
