"""
Shared fixtures for the test suite.
"""
import os

import pytest

from config import AWSCredentials


@pytest.fixture
def aws_credentials():
    """Fake credentials so moto never touches a real account."""
    saved = {k: os.environ.get(k) for k in ('AWS_ACCESS_KEY_ID', 'AWS_SECRET_ACCESS_KEY', 'AWS_DEFAULT_REGION')}
    os.environ['AWS_ACCESS_KEY_ID'] = 'testing'
    os.environ['AWS_SECRET_ACCESS_KEY'] = 'testing'
    os.environ['AWS_DEFAULT_REGION'] = 'us-east-1'

    yield AWSCredentials(
        access_key_id='testing',
        secret_access_key='testing',
        region='us-east-1',
    )

    for key, value in saved.items():
        if value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = value
