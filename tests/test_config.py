import logging

from videoscribe.config import Settings, configure_logging, get_settings


def test_defaults():
    settings = Settings({})

    assert settings.aws_region == "eu-west-1"
    assert settings.bucket == ""
    assert settings.upload_prefix == "video_to_tran"
    assert settings.api_url == "http://localhost:8000"
    assert settings.transcribe_path == "/api/transcribe"
    assert settings.request_timeout == 60.0
    assert settings.aws_access_key_id is None
    assert settings.log_level == "INFO"


def test_environment_overrides():
    settings = Settings(
        {
            "AWS_S3_REGION": "us-west-2",
            "AWS_S3_BUCKET_NAME": "videos",
            "VIDEOSCRIBE_API_URL": "https://api.example.com/",
            "VIDEOSCRIBE_REQUEST_TIMEOUT": "5",
            "VIDEOSCRIBE_LOG_LEVEL": "debug",
        }
    )

    assert settings.aws_region == "us-west-2"
    assert settings.bucket == "videos"
    assert settings.api_url == "https://api.example.com"
    assert settings.request_timeout == 5.0
    assert settings.log_level == "DEBUG"


def test_repr_hides_secrets():
    settings = Settings({"AWS_S3_ACCESS_KEY_ID": "AKIDEXAMPLE", "AWS_S3_SECRET_ACCESS_KEY": "hunter2"})

    text = repr(settings)
    assert "hunter2" not in text
    assert "AKIDEXAMPLE" not in text
    assert "explicit" in text


def test_get_settings_reads_environment_once(monkeypatch):
    get_settings.cache_clear()
    monkeypatch.setenv("AWS_S3_BUCKET_NAME", "from-env")
    try:
        first = get_settings()
        monkeypatch.setenv("AWS_S3_BUCKET_NAME", "changed")
        assert get_settings() is first
        assert first.bucket == "from-env"
    finally:
        get_settings.cache_clear()


def test_configure_logging_accepts_unknown_level():
    configure_logging("NOT_A_LEVEL")
    assert logging.getLogger().getEffectiveLevel() <= logging.WARNING
