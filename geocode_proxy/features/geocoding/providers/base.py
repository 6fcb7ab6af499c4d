"""プロバイダー共通のレスポンス解析処理"""
import json
import math
from typing import Any, Optional, Sequence, Union

from ....shared.exceptions.errors import ErrorKind, GeocodeError
from ....shared.logging.config import get_logger
from ..domain.models import Coordinates

logger = get_logger(__name__)


def load_json_body(body: bytes) -> Any:
    """
    レスポンスボディをJSONとして読み込む

    Args:
        body: レスポンスボディ

    Returns:
        Any: JSONの値

    Raises:
        GeocodeError: JSONとして不正な場合（BackendFailure）
    """
    try:
        return json.loads(
            body,
            parse_constant=_reject_constant,
            parse_float=_parse_finite_float,
        )
    except (ValueError, RecursionError) as e:
        logger.warning(f"Backend returned invalid JSON: {e}")
        raise GeocodeError(ErrorKind.BACKEND_FAILURE, e) from e


def _reject_constant(name: str) -> Any:
    # NaN, Infinity, -Infinity はJSONの値ではない
    raise ValueError(f"Invalid JSON constant: {name}")


def _parse_finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"Number out of range: {text}")
    return value


def lookup(value: Any, path: Sequence[Union[str, int]]) -> Optional[Any]:
    """
    パスに沿ってJSONの値をたどる

    文字列はオブジェクトのキー、整数は配列のインデックスとして扱う

    Args:
        value: JSONの値
        path: キーとインデックスの並び

    Returns:
        Optional[Any]: 見つかった値（途中で見つからない場合はNone）
    """
    current = value
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, list) or step >= len(current):
                return None
        elif not isinstance(current, dict) or step not in current:
            return None
        current = current[step]
    return current


def as_float(value: Any) -> Optional[float]:
    """JSONの数値をfloatに変換（数値以外・有限でない値はNone）"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        result = float(value)
    except OverflowError:
        return None
    if not math.isfinite(result):
        return None
    return result


def read_coordinates(
    body: bytes,
    path: Sequence[Union[str, int]],
    latitude_key: str,
    longitude_key: str,
) -> Coordinates:
    """
    レスポンスボディから座標を取り出す

    Args:
        body: レスポンスボディ
        path: 座標オブジェクトまでのパス
        latitude_key: 緯度のキー
        longitude_key: 経度のキー

    Returns:
        Coordinates: 座標

    Raises:
        GeocodeError: JSONが不正な場合はBackendFailure、
            座標が見つからない場合はLocationNotFound
    """
    obj = load_json_body(body)

    position = lookup(obj, path)
    if not isinstance(position, dict):
        raise GeocodeError(ErrorKind.LOCATION_NOT_FOUND)

    latitude = as_float(position.get(latitude_key))
    longitude = as_float(position.get(longitude_key))

    if latitude is None or longitude is None:
        raise GeocodeError(ErrorKind.LOCATION_NOT_FOUND)

    return Coordinates(latitude=latitude, longitude=longitude)
