"""プロバイダー種別ごとの処理の振り分け"""
from ..domain.config import HereConfig, MapQuestConfig, ProviderConfig
from ..domain.models import Coordinates, RequestDescriptor
from . import here_provider, mapquest_provider


def build_request(provider: ProviderConfig, location: str) -> RequestDescriptor:
    """
    プロバイダーに応じたリクエストを作成

    Args:
        provider: プロバイダー設定
        location: 検索する住所・地名

    Returns:
        RequestDescriptor: GETリクエスト
    """
    if isinstance(provider, HereConfig):
        return here_provider.build_request(provider, location)
    if isinstance(provider, MapQuestConfig):
        return mapquest_provider.build_request(provider, location)
    raise TypeError(f"Unsupported provider: {provider!r}")


def parse_response(provider: ProviderConfig, body: bytes) -> Coordinates:
    """
    プロバイダーに応じてレスポンスを解析

    Args:
        provider: プロバイダー設定
        body: レスポンスボディ

    Returns:
        Coordinates: 座標

    Raises:
        GeocodeError: 解析に失敗した場合
    """
    if isinstance(provider, HereConfig):
        return here_provider.parse_response(body)
    if isinstance(provider, MapQuestConfig):
        return mapquest_provider.parse_response(body)
    raise TypeError(f"Unsupported provider: {provider!r}")


def provider_name(provider: ProviderConfig) -> str:
    """ログ用のプロバイダー名"""
    if isinstance(provider, HereConfig):
        return "Here"
    if isinstance(provider, MapQuestConfig):
        return "MapQuest"
    return type(provider).__name__
