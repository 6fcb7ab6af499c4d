"""HERE Geocoder API実装"""
from ..domain.config import HereConfig
from ..domain.models import Coordinates, RequestDescriptor
from .base import read_coordinates

URL_BASE = "https://geocoder.api.here.com/6.2/geocode.json"

# 座標オブジェクトまでのパス
POSITION_PATH = ("Response", "View", 0, "Result", 0, "Location", "DisplayPosition")


def build_request(config: HereConfig, location: str) -> RequestDescriptor:
    """
    HERE Geocoder APIへのリクエストを作成

    Args:
        config: 認証情報
        location: 検索する住所・地名

    Returns:
        RequestDescriptor: GETリクエスト
    """
    params = (
        ("app_id", config.app_id),
        ("app_code", config.app_code),
        ("searchtext", location),
    )
    return RequestDescriptor(url=URL_BASE, params=params)


def parse_response(body: bytes) -> Coordinates:
    """レスポンスの最初の結果から座標を取得"""
    return read_coordinates(body, POSITION_PATH, "Latitude", "Longitude")
