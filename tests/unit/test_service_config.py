"""サービス設定のテスト"""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from geocode_proxy.features.geocoding.domain.config import (
    FinderConfig,
    HereConfig,
    MapQuestConfig,
)
from geocode_proxy.infrastructure.config.service_config import (
    ServiceConfig,
    load_service_config,
    split_sock_addr,
)
from geocode_proxy.shared.exceptions.errors import (
    BadConfigFileError,
    FailedToOpenConfigFileError,
)

CONFIG = {
    "sock_addr": "127.0.0.1:3000",
    "finder": {
        "protocols": [
            {"MapQuest": {"key": "mq-key"}},
            {"Here": {"app_id": "here-id", "app_code": "here-code"}},
            {"MapQuest": {"key": "mq-key-2"}},
        ]
    },
}


def test_parse_tagged_providers_in_order() -> None:
    """タグ付きのプロバイダー設定を順序通りに読み込む"""
    config = ServiceConfig.model_validate_json(json.dumps(CONFIG))

    assert config.host == "127.0.0.1"
    assert config.port == 3000
    assert config.finder.protocols == (
        MapQuestConfig(key="mq-key"),
        HereConfig(app_id="here-id", app_code="here-code"),
        MapQuestConfig(key="mq-key-2"),
    )


def test_finder_config_round_trip_preserves_order() -> None:
    """JSONに書き出して読み直しても値と順序が変わらない"""
    finder = FinderConfig(
        protocols=(
            HereConfig(app_id="b", app_code="2"),
            MapQuestConfig(key="a"),
            HereConfig(app_id="a", app_code="1"),
        )
    )

    restored = FinderConfig.model_validate_json(finder.model_dump_json())

    assert restored.protocols == finder.protocols
    assert json.loads(finder.model_dump_json()) == {
        "protocols": [
            {"Here": {"app_id": "b", "app_code": "2"}},
            {"MapQuest": {"key": "a"}},
            {"Here": {"app_id": "a", "app_code": "1"}},
        ]
    }


def test_service_config_round_trip() -> None:
    """サービス設定全体の書き出しと読み直し"""
    config = ServiceConfig.model_validate(CONFIG)

    assert json.loads(config.model_dump_json()) == CONFIG


def test_defaults() -> None:
    """省略時は0.0.0.0:8080・プロバイダーなし"""
    config = ServiceConfig.model_validate_json("{}")

    assert config.sock_addr == "0.0.0.0:8080"
    assert config.finder.protocols == ()


@pytest.mark.parametrize(
    "protocols",
    [
        [{"Google": {"key": "x"}}],
        [{"MapQuest": {"key": "x"}, "Here": {"app_id": "a", "app_code": "b"}}],
        [{"MapQuest": {}}],
        [{"Here": "not an object"}],
        [{"kind": "other"}],
    ],
)
def test_invalid_providers_are_rejected(protocols: list) -> None:
    """不正なプロバイダー設定はエラー"""
    with pytest.raises(ValidationError):
        FinderConfig.model_validate({"protocols": protocols})


def test_unknown_fields_are_ignored() -> None:
    """未知の項目は無視して読み込む"""
    config = ServiceConfig.model_validate_json(
        json.dumps(
            {
                "sock_addr": "127.0.0.1:3000",
                "workers": 4,
                "finder": {
                    "protocols": [
                        {"MapQuest": {"key": "x", "extra": 1}},
                        {"Here": {"app_id": "a", "app_code": "b", "region": "eu"}},
                    ],
                    "cache": True,
                },
            }
        )
    )

    assert config.finder.protocols == (
        MapQuestConfig(key="x"),
        HereConfig(app_id="a", app_code="b"),
    )
    assert json.loads(config.model_dump_json())["finder"] == {
        "protocols": [
            {"MapQuest": {"key": "x"}},
            {"Here": {"app_id": "a", "app_code": "b"}},
        ]
    }


@pytest.mark.parametrize(
    "sock_addr",
    ["localhost:8080", "127.0.0.1", "127.0.0.1:http", "127.0.0.1:70000", "::1:8080", ":8080"],
)
def test_invalid_sock_addr_is_rejected(sock_addr: str) -> None:
    """不正な待ち受けアドレスはエラー"""
    with pytest.raises(ValidationError):
        ServiceConfig.model_validate({"sock_addr": sock_addr})


def test_ipv6_sock_addr() -> None:
    """IPv6アドレスは角括弧で囲む"""
    assert split_sock_addr("[::1]:9000") == ("::1", 9000)

    config = ServiceConfig.model_validate({"sock_addr": "[::1]:9000"})
    assert config.host == "::1"
    assert config.port == 9000


def test_overrides_keep_providers() -> None:
    """IPアドレス・ポートの上書き"""
    config = ServiceConfig.model_validate(CONFIG)

    updated = config.with_ip("10.0.0.1").with_port(9090)

    assert updated.sock_addr == "10.0.0.1:9090"
    assert updated.finder == config.finder
    assert config.sock_addr == "127.0.0.1:3000"

    assert config.with_ip("::").sock_addr == "[::]:3000"
    assert config.with_address("192.168.0.1:80").sock_addr == "192.168.0.1:80"


def test_invalid_overrides() -> None:
    """不正な上書き値はValueError"""
    config = ServiceConfig()

    with pytest.raises(ValueError):
        config.with_ip("not-an-ip")
    with pytest.raises(ValueError):
        config.with_port(65536)


def test_load_service_config(tmp_path: Path) -> None:
    """設定ファイルの読み込み"""
    path = tmp_path / "config.json"
    path.write_text(json.dumps(CONFIG), encoding="utf-8")

    config = load_service_config(path)

    assert config.sock_addr == "127.0.0.1:3000"
    assert len(config.finder.protocols) == 3


def test_load_missing_config_file(tmp_path: Path) -> None:
    """存在しない設定ファイル"""
    with pytest.raises(FailedToOpenConfigFileError) as exc_info:
        load_service_config(tmp_path / "missing.json")

    assert isinstance(exc_info.value.__cause__, OSError)


@pytest.mark.parametrize("content", ["not json", '{"finder": {"protocols": [1]}}', "[]"])
def test_load_bad_config_file(tmp_path: Path, content: str) -> None:
    """内容が不正な設定ファイル"""
    path = tmp_path / "config.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(BadConfigFileError):
        load_service_config(path)
