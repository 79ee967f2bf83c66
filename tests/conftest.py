"""Pytest configuration and fixtures."""

import pytest

from bouncer.auth.credentials import Credential, StaticCredentialProvider
from bouncer.common.settings import Settings

# Credentials from the AWS S3 REST authentication examples.
AWS_KEY_ID = "0PN5J17HBGZHT7JJ3X82"
AWS_SECRET = "uV3F3YluFJax1cknvbcGwgjvx4QpvB+leU8dUj2o"


@pytest.fixture
def settings() -> Settings:
    """Create test settings."""
    return Settings(
        admin_key_id=AWS_KEY_ID,
        admin_secret=AWS_SECRET,
        auth_scheme_tag="MOSS",
        custom_header_prefix="x-amz-",
        bouncer_host="bouncer.test",
        bouncer_port=8080,
        bouncer_ssl=False,
    )


@pytest.fixture
def credential() -> Credential:
    """Admin credential matching the settings fixture."""
    return Credential(key_id=AWS_KEY_ID, secret=AWS_SECRET)


@pytest.fixture
def credential_provider(credential: Credential) -> StaticCredentialProvider:
    return StaticCredentialProvider(credential)
