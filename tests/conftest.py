import sys
import os
from unittest.mock import MagicMock

import pytest

# Ensure the project root is in sys.path so `from videoscribe.main import app` works
# without installing the package
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from videoscribe.config import Settings  # noqa: E402
from videoscribe.storage import StorageService  # noqa: E402

BUCKET = "test-bucket"


@pytest.fixture
def settings():
    return Settings({"AWS_S3_BUCKET_NAME": BUCKET, "AWS_S3_REGION": "eu-west-1"})


@pytest.fixture
def s3_client():
    """Stand-in for the boto3 S3 client; records every call."""
    return MagicMock()


@pytest.fixture
def storage(settings, s3_client):
    return StorageService(settings, client=s3_client)


@pytest.fixture
def api(storage):
    """The FastAPI app with its storage dependency pointed at the mocked S3 client."""
    from videoscribe.main import app
    from videoscribe.storage import get_storage

    app.dependency_overrides[get_storage] = lambda: storage
    yield app
    app.dependency_overrides.clear()
