"""カスタム例外定義"""
from enum import Enum
from typing import Any, Optional, Union


class ErrorKind(str, Enum):
    """ジオコーディングリクエストのエラー種別"""

    BACKEND_FAILURE = "BackendFailure"  # バックエンドの障害
    BAD_REQUEST = "BadRequest"  # 不正なリクエスト
    LOCATION_NOT_FOUND = "LocationNotFound"  # 位置が見つからない

    @property
    def message(self) -> str:
        """表示用メッセージを取得"""
        return ERROR_MESSAGES[self]


# エラー種別ごとの表示用メッセージ
ERROR_MESSAGES = {
    ErrorKind.BACKEND_FAILURE: "Backend failure",
    ErrorKind.BAD_REQUEST: "Bad request",
    ErrorKind.LOCATION_NOT_FOUND: "Location not found",
}


def walk_causes(error: BaseException) -> list[BaseException]:
    """
    例外の原因を外側から内側へたどる

    ``raise ... from`` の ``__cause__`` を優先し、
    抑制されていない ``__context__`` も原因として扱う

    Args:
        error: 起点となる例外（結果に含まれない）

    Returns:
        list[BaseException]: 原因の例外リスト（外側が先頭）
    """
    causes = []
    seen = {id(error)}
    current = _source_of(error)

    while current is not None and id(current) not in seen:
        causes.append(current)
        seen.add(id(current))
        current = _source_of(current)

    return causes


def _source_of(error: BaseException) -> Optional[BaseException]:
    if error.__cause__ is not None:
        return error.__cause__
    if not error.__suppress_context__:
        return error.__context__
    return None


class GeocodeError(Exception):
    """
    ジオコーディング処理のエラー

    全レイヤーで共通の構造化エラー。原因チェーンは生成時に
    文字列として確定させる（例外オブジェクトはシリアライズできないため）
    """

    def __init__(
        self,
        kind: ErrorKind,
        cause: Union[BaseException, str, None] = None,
    ) -> None:
        """
        Args:
            kind: エラー種別
            cause: 原因となった例外またはメッセージ（Noneの場合は原因なし）
        """
        super().__init__(kind.message)
        self.kind = kind

        if cause is None:
            self.cause_chain: tuple[str, ...] = ()
        elif isinstance(cause, BaseException):
            self.__cause__ = cause
            self.cause_chain = tuple(
                str(e) for e in [cause, *walk_causes(cause)]
            )
        else:
            self.cause_chain = (str(cause),)

    @classmethod
    def from_transport(cls, error: BaseException) -> "GeocodeError":
        """通信エラーをバックエンド障害に変換"""
        return cls(ErrorKind.BACKEND_FAILURE, error)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GeocodeError":
        """
        シリアライズされた辞書からエラーを復元

        Args:
            data: ``{"kind": ..., "cause": [...]}`` 形式の辞書

        Returns:
            GeocodeError: 復元されたエラー
        """
        error = cls(ErrorKind(data["kind"]))
        error.cause_chain = tuple(str(c) for c in data.get("cause", []))
        return error

    def to_dict(self) -> dict[str, Any]:
        """レスポンス用の辞書に変換"""
        return {
            "kind": self.kind.value,
            "cause": list(self.cause_chain),
        }

    def __repr__(self) -> str:
        return f"GeocodeError(kind={self.kind.value}, cause={list(self.cause_chain)})"


class GeocodeProxyError(Exception):
    """起動処理の基底例外"""

    message = "Geocoding proxy error"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.message)


class FailedToOpenConfigFileError(GeocodeProxyError):
    """設定ファイルを開けない"""

    message = "Failed to open configuration file"


class BadConfigFileError(GeocodeProxyError):
    """設定ファイルの内容が不正"""

    message = "Bad configuration file"


class BadAddressError(GeocodeProxyError):
    """IPアドレスが不正"""

    message = "Bad address"


class BadPortError(GeocodeProxyError):
    """ポート番号が不正"""

    message = "Bad port"


class ServiceError(GeocodeProxyError):
    """HTTPサーバーの起動・実行エラー"""

    message = "Service error"
