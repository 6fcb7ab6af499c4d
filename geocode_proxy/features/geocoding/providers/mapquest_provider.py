"""MapQuest Geocoding API実装"""
from ..domain.config import MapQuestConfig
from ..domain.models import Coordinates, RequestDescriptor
from .base import read_coordinates

URL_BASE = "https://www.mapquestapi.com/geocoding/v1/address"

# 座標オブジェクトまでのパス
POSITION_PATH = ("results", 0, "locations", 0, "latLng")


def build_request(config: MapQuestConfig, location: str) -> RequestDescriptor:
    """
    MapQuest Geocoding APIへのリクエストを作成

    Args:
        config: APIキー
        location: 検索する住所・地名

    Returns:
        RequestDescriptor: GETリクエスト
    """
    params = (
        ("key", config.key),
        ("location", location),
    )
    return RequestDescriptor(url=URL_BASE, params=params)


def parse_response(body: bytes) -> Coordinates:
    """レスポンスの最初の結果から座標を取得"""
    return read_coordinates(body, POSITION_PATH, "lat", "lng")
