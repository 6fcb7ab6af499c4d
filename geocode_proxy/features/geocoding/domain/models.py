"""ジオコーディング機能のドメインモデル"""
from dataclasses import dataclass, field
from urllib.parse import urlencode


@dataclass(frozen=True)
class Coordinates:
    """緯度・経度（度）"""

    latitude: float  # 緯度
    longitude: float  # 経度

    def to_dict(self) -> dict[str, float]:
        """レスポンス用の辞書に変換"""
        return {"latitude": self.latitude, "longitude": self.longitude}


@dataclass(frozen=True)
class RequestDescriptor:
    """バックエンドへのGETリクエスト"""

    url: str  # ベースURL
    params: tuple[tuple[str, str], ...] = field(default_factory=tuple)  # クエリパラメータ（順序保持）

    @property
    def full_url(self) -> str:
        """クエリ文字列付きのURL"""
        if not self.params:
            return self.url
        return f"{self.url}?{urlencode(self.params)}"
