import pytest

import run
from bytescale_provider.core.config import settings

from conftest import FakeBytescaleClient


@pytest.fixture
def fake_client(monkeypatch):
    client = FakeBytescaleClient(account_id="acc")
    monkeypatch.setattr(settings, "BYTESCALE_API_KEY", "k")
    monkeypatch.setattr(settings, "BYTESCALE_ACCOUNT_ID", "acc")
    monkeypatch.setattr(settings, "BYTESCALE_PREFIX", "uploads")
    monkeypatch.setattr(settings, "BYTESCALE_CDN_BASE", "https://upcdn.io")
    monkeypatch.setattr(run, "setup_logging", lambda level, log_dir: None)
    original_create = run.StorageFactory.create.__func__

    def create(cls, identifier=None, options=None, logger=None, **kwargs):
        kwargs.setdefault("client", client)
        return original_create(cls, identifier, options, logger, **kwargs)

    monkeypatch.setattr(run.StorageFactory, "create", classmethod(create))
    return client


def test_url_command(fake_client, capsys):
    assert run.main(["url", "/uploads/a.png"]) == 0

    assert capsys.readouterr().out.strip() == "https://upcdn.io/acc/raw/uploads/a.png"


def test_upload_download_delete(fake_client, tmp_path, capsys):
    source = tmp_path / "notes.txt"
    source.write_bytes(b"line one\nline two\n")
    target = tmp_path / "copy.txt"

    assert run.main(["upload", str(source)]) == 0
    assert capsys.readouterr().out.strip() == "https://upcdn.io/acc/raw/uploads/notes.txt"
    assert fake_client.uploads[0]["mime"] == "text/plain"

    assert run.main(["download", "/uploads/notes.txt", "-o", str(target)]) == 0
    assert target.read_bytes() == source.read_bytes()

    assert run.main(["delete", "/uploads/notes.txt"]) == 0
    assert run.main(["delete", "/uploads/notes.txt"]) == 1


def test_failed_download_returns_error_code(fake_client):
    assert run.main(["download", "/uploads/missing"]) == 1
