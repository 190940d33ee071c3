import pytest
from unittest.mock import MagicMock, patch

from bytescale_provider.infrastructure.exceptions import InvalidConfiguration
from bytescale_provider.infrastructure.storage.object_storage import (
    BytescaleFileProviderService,
    ProviderConfig,
    build_file_path,
    normalize_upload_folder,
)


def test_validate_options_accepts_camel_and_snake_case():
    camel = BytescaleFileProviderService.validate_options({"apiKey": "k", "accountId": "a", "prefix": "media"})
    snake = BytescaleFileProviderService.validate_options({"api_key": "k", "account_id": "a", "prefix": "media"})

    assert camel == snake == ProviderConfig(api_key="k", account_id="a", prefix="media")


@pytest.mark.parametrize("options", [
    {},
    {"accountId": "a"},
    {"apiKey": "", "accountId": "a"},
    {"apiKey": None, "accountId": "a"},
])
def test_missing_api_key_is_rejected(options):
    with pytest.raises(InvalidConfiguration, match="apiKey"):
        BytescaleFileProviderService.validate_options(options)


@pytest.mark.parametrize("options", [
    {"apiKey": "k"},
    {"apiKey": "k", "accountId": ""},
    ProviderConfig(api_key="k", account_id=""),
])
def test_missing_account_id_is_rejected(options):
    with pytest.raises(InvalidConfiguration, match="accountId"):
        BytescaleFileProviderService.validate_options(options)


def test_constructor_fails_before_building_a_client():
    with patch(
        "bytescale_provider.infrastructure.storage.object_storage.bytescale_adapter.BytescaleClient"
    ) as client_cls:
        with pytest.raises(InvalidConfiguration):
            BytescaleFileProviderService({"apiKey": "k"})

    client_cls.assert_not_called()


def test_constructor_builds_client_from_options():
    with patch(
        "bytescale_provider.infrastructure.storage.object_storage.bytescale_adapter.BytescaleClient"
    ) as client_cls:
        service = BytescaleFileProviderService({"apiKey": "k", "accountId": "a"})

    client_cls.assert_called_once_with(
        api_key="k",
        account_id="a",
        api_base="https://api.bytescale.com",
        cdn_base="https://upcdn.io",
        timeout=300,
        chunk_size=64 * 1024,
    )
    assert service.client is client_cls.return_value
    assert service.options.prefix is None


def test_options_are_immutable():
    service = BytescaleFileProviderService({"apiKey": "k", "accountId": "a"}, client=MagicMock())

    with pytest.raises(AttributeError):
        service.options.prefix = "other"


@pytest.mark.parametrize("prefix, expected", [
    (None, "/uploads"),
    ("", "/uploads"),
    ("media", "/media"),
    ("/media", "/media"),
    ("/media/", "/media"),
    ("media/images/", "/media/images"),
    ("/media//", "/media"),
    ("media///", "/media"),
    ("//", "/"),
    ("/", "/"),
])
def test_normalize_upload_folder(prefix, expected):
    assert normalize_upload_folder(prefix) == expected


@pytest.mark.parametrize("prefix", [None, "", "media", "/media/", "/media//", "media///", "/", "a/b/"])
def test_normalize_upload_folder_is_idempotent(prefix):
    once = normalize_upload_folder(prefix)

    assert normalize_upload_folder(once) == once
    assert once == "/" or not once.endswith("/")


def test_build_file_path():
    assert build_file_path("/uploads", "a.png") == "/uploads/a.png"
    assert build_file_path("/", "a.png") == "/a.png"
    assert build_file_path("/uploads", "/a.png") == "/uploads/a.png"
