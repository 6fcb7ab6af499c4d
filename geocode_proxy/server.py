"""HTTPサーバー（FastAPI）"""
import json
from decimal import Decimal
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .features.geocoding.domain.models import Coordinates
from .features.geocoding.services.location_finder import LocationFinder
from .shared.exceptions.errors import ErrorKind, GeocodeError
from .shared.logging.config import get_logger

logger = get_logger(__name__)

JSON_MEDIA_TYPE = "application/json; charset=utf-8"
MAP_URL = "https://www.google.com/maps/search/?api=1&query={latitude},{longitude}"
MISSING_LOCATION_MESSAGE = "Missing location parameter"

# エラー種別 -> HTTPステータス
# LocationNotFoundは「結果なし」の正常応答として扱う
STATUS_CODES = {
    ErrorKind.BACKEND_FAILURE: 503,
    ErrorKind.BAD_REQUEST: 400,
    ErrorKind.LOCATION_NOT_FOUND: 200,
}


class PrettyJSONResponse(JSONResponse):
    """整形済みJSONレスポンス"""

    media_type = JSON_MEDIA_TYPE

    def render(self, content: Any) -> bytes:
        return json.dumps(
            content, ensure_ascii=False, allow_nan=False, indent=2
        ).encode("utf-8")


def render_coordinates(coordinates: Coordinates) -> Response:
    """座標をJSONで返す"""
    return PrettyJSONResponse(status_code=200, content={"Ok": coordinates.to_dict()})


def render_error(error: GeocodeError) -> Response:
    """エラーをJSONで返す（ステータスはエラー種別から決定）"""
    return PrettyJSONResponse(
        status_code=STATUS_CODES[error.kind],
        content={"Err": error.to_dict()},
    )


def format_degrees(value: float) -> str:
    """地図URL用に度数を固定小数点で文字列化（整数値は小数点なし）"""
    text = format(Decimal(repr(value)), "f")
    if text.endswith(".0"):
        text = text[:-2]
    return text


def render_map(coordinates: Coordinates) -> Response:
    """Googleマップへリダイレクト"""
    target = MAP_URL.format(
        latitude=format_degrees(coordinates.latitude),
        longitude=format_degrees(coordinates.longitude),
    )
    return RedirectResponse(url=target, status_code=307)


def find_location(request: Request) -> Coordinates:
    """
    クエリの ``location`` から座標を取得

    Args:
        request: HTTPリクエスト

    Returns:
        Coordinates: 座標

    Raises:
        GeocodeError: ``location`` がない場合（BadRequest）、または検索に失敗した場合
    """
    # 同名パラメータが複数ある場合は最初の値を使う
    values = request.query_params.getlist("location")
    if not values:
        raise GeocodeError(ErrorKind.BAD_REQUEST, MISSING_LOCATION_MESSAGE)

    location = values[0]
    logger.info(f"{request.method} {request.url.path} location={location!r}")

    finder: LocationFinder = request.app.state.finder
    return finder.find(location)


def create_app(finder: LocationFinder) -> FastAPI:
    """
    FastAPIアプリケーションを作成

    Args:
        finder: 位置検索サービス（全リクエストで共有、読み取り専用）

    Returns:
        FastAPI: アプリケーション
    """
    app = FastAPI(
        title="Geocoding proxy",
        description="住所・地名を座標に変換するジオコーディングプロキシ",
        version="1.0.0",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        redirect_slashes=False,
    )
    app.state.finder = finder

    @app.get("/geocode")
    def geocode(request: Request) -> Response:
        """座標をJSONで返す"""
        return render_coordinates(find_location(request))

    @app.get("/map")
    def open_map(request: Request) -> Response:
        """座標をGoogleマップで開く"""
        return render_map(find_location(request))

    @app.exception_handler(GeocodeError)
    async def geocode_error_handler(request: Request, exc: GeocodeError) -> Response:
        """ジオコーディングエラーハンドラー"""
        logger.info(
            f"{request.method} {request.url.path} -> {exc.kind.value} {list(exc.cause_chain)}"
        )
        return render_error(exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> Response:
        """未定義のパス・メソッドは不正なリクエストとして扱う"""
        logger.info(
            f"Rejected request: {request.method} {request.url.path} (status={exc.status_code})"
        )
        return render_error(GeocodeError(ErrorKind.BAD_REQUEST))

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> Response:
        """グローバル例外ハンドラー"""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return render_error(GeocodeError(ErrorKind.BACKEND_FAILURE, exc))

    return app
