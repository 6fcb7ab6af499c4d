"""位置検索サービス（プロバイダーの順次フォールバック）"""

from typing import Optional

from ....shared.exceptions.errors import ErrorKind, GeocodeError
from ....shared.http.client import HTTPClient
from ....shared.logging.config import get_logger
from ..domain.config import FinderConfig, ProviderConfig
from ..domain.models import Coordinates
from ..providers import protocol

logger = get_logger(__name__)

NO_BACKEND_MESSAGE = "No backend service configured"


class LocationFinder:
    """
    設定順にプロバイダーへ問い合わせ、最初に成功した結果を返す

    問い合わせは常に逐次実行し、前のプロバイダーの処理が
    完了するまで次のプロバイダーには問い合わせない
    """

    def __init__(
        self,
        config: FinderConfig,
        http_client: Optional[HTTPClient] = None,
    ) -> None:
        """
        Args:
            config: プロバイダー設定（並び順が優先順位）
            http_client: HTTPクライアント（Noneの場合は新規作成）
        """
        self.config = config
        self.http_client = http_client or HTTPClient()

        logger.info(
            f"LocationFinder initialized: providers="
            f"{[protocol.provider_name(p) for p in self.providers]}"
        )

    @property
    def providers(self) -> tuple[ProviderConfig, ...]:
        """問い合わせ順のプロバイダー設定"""
        return self.config.protocols

    def find(self, location: str) -> Coordinates:
        """
        住所・地名から座標を取得

        Args:
            location: 検索する住所・地名

        Returns:
            Coordinates: 最初に成功したプロバイダーの座標

        Raises:
            GeocodeError: プロバイダー未設定、または全プロバイダーが失敗した場合
                （LocationNotFound）
        """
        if not self.providers:
            logger.warning("No backend service configured")
            raise GeocodeError(ErrorKind.LOCATION_NOT_FOUND, NO_BACKEND_MESSAGE)

        for index, provider in enumerate(self.providers):
            name = protocol.provider_name(provider)
            try:
                coordinates = self.query(provider, location)
            except GeocodeError as e:
                # 個別の失敗はクライアントに返さない
                logger.warning(
                    f"Provider {name} (#{index}) failed for {location!r}: "
                    f"{e.kind.value} {list(e.cause_chain)}"
                )
                continue

            logger.debug(
                f"Provider {name} (#{index}) resolved {location!r} -> "
                f"({coordinates.latitude}, {coordinates.longitude})"
            )
            return coordinates

        logger.info(f"Location not found by any provider: {location!r}")
        raise GeocodeError(ErrorKind.LOCATION_NOT_FOUND)

    def query(self, provider: ProviderConfig, location: str) -> Coordinates:
        """
        1つのプロバイダーに問い合わせる

        Args:
            provider: プロバイダー設定
            location: 検索する住所・地名

        Returns:
            Coordinates: 座標

        Raises:
            GeocodeError: 通信または解析に失敗した場合
        """
        request = protocol.build_request(provider, location)
        body = self.http_client.get(request)
        return protocol.parse_response(provider, body)
