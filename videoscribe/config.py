"""Environment-driven configuration and logging setup."""

import logging
import os
from collections.abc import Mapping
from functools import lru_cache
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class Settings:
    """Configuration read once from the environment."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None) -> None:
        env = os.environ if environ is None else environ

        # S3
        self.aws_region = env.get("AWS_S3_REGION", "eu-west-1")
        # When unset, boto3 falls back to AWS_PROFILE / instance roles
        self.aws_access_key_id = env.get("AWS_S3_ACCESS_KEY_ID") or None
        self.aws_secret_access_key = env.get("AWS_S3_SECRET_ACCESS_KEY") or None
        self.bucket = env.get("AWS_S3_BUCKET_NAME", "")
        self.upload_prefix = env.get("VIDEOSCRIBE_UPLOAD_PREFIX", "video_to_tran").strip("/")
        self.s3_connect_timeout = int(env.get("VIDEOSCRIBE_S3_CONNECT_TIMEOUT", "10"))
        self.s3_read_timeout = int(env.get("VIDEOSCRIBE_S3_READ_TIMEOUT", "120"))
        self.s3_max_attempts = int(env.get("VIDEOSCRIBE_S3_MAX_ATTEMPTS", "5"))

        # HTTP client
        self.api_url = env.get("VIDEOSCRIBE_API_URL", "http://localhost:8000").rstrip("/")
        self.transcribe_path = env.get("VIDEOSCRIBE_TRANSCRIBE_PATH", "/api/transcribe")
        self.request_timeout = float(env.get("VIDEOSCRIBE_REQUEST_TIMEOUT", "60"))

        self.log_level = env.get("VIDEOSCRIBE_LOG_LEVEL", "INFO").upper()

    def __repr__(self) -> str:
        return (
            f"Settings(aws_region={self.aws_region!r}, bucket={self.bucket!r}, "
            f"upload_prefix={self.upload_prefix!r}, api_url={self.api_url!r}, "
            f"credentials={'explicit' if self.aws_access_key_id else 'default-chain'})"
        )


@lru_cache()
def get_settings() -> Settings:
    """Settings shared by the whole process."""
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    """Attach a stream handler to the root logger unless one is already configured."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.INFO
    logging.basicConfig(level=numeric, format=LOG_FORMAT)
