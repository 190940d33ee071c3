import pytest
from pydantic import ValidationError

from bytescale_provider.core.config import Settings


def test_defaults():
    s = Settings()

    assert s.BYTESCALE_API_BASE == "https://api.bytescale.com"
    assert s.BYTESCALE_CDN_BASE == "https://upcdn.io"
    assert s.STREAM_MAX_BUFFERED_CHUNKS == 16
    assert s.DEFAULT_PROVIDER == "bytescale-file"


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("BYTESCALE_API_KEY", "secret_env")
    monkeypatch.setenv("BYTESCALE_ACCOUNT_ID", "acc_env")
    monkeypatch.setenv("BYTESCALE_PREFIX", "/media/")
    monkeypatch.setenv("BYTESCALE_CDN_BASE", "https://cdn.example.com/")

    s = Settings()

    assert s.PROVIDER_OPTIONS == {"apiKey": "secret_env", "accountId": "acc_env", "prefix": "/media/"}
    assert s.BYTESCALE_CDN_BASE == "https://cdn.example.com"


def test_rejects_non_positive_buffer():
    with pytest.raises(ValidationError):
        Settings(STREAM_MAX_BUFFERED_CHUNKS=0)
