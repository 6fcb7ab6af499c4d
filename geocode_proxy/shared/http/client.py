"""HTTPクライアント"""

from typing import Optional

import requests

from ...features.geocoding.domain.models import RequestDescriptor
from ..exceptions.errors import GeocodeError
from ..logging.config import get_logger

logger = get_logger(__name__)

DEFAULT_USER_AGENT = "geocode-proxy/1.0"


class HTTPClient:
    """
    バックエンド問い合わせ用HTTPクライアント

    Features:
    - 呼び出しごとにセッションを作成（接続の使い回しなし）
    - リトライなし
    - HTTPステータスは検査せず、ボディの解析はプロバイダーに任せる
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        user_agent: Optional[str] = None,
    ):
        """
        Args:
            timeout: リクエストタイムアウト（秒、Noneの場合は無制限）
            user_agent: User-Agentヘッダー
        """
        self.timeout = timeout
        self.user_agent = user_agent or DEFAULT_USER_AGENT

    def _create_session(self) -> requests.Session:
        """セッションを作成"""
        session = requests.Session()

        # デフォルトヘッダー
        session.headers.update({"User-Agent": self.user_agent})

        return session

    def get(self, request: RequestDescriptor) -> bytes:
        """
        GETリクエスト

        Args:
            request: リクエスト内容

        Returns:
            bytes: レスポンスボディ

        Raises:
            GeocodeError: 通信に失敗した場合（BackendFailure）
        """
        try:
            logger.debug(f"GET request to {request.url}")
            with self._create_session() as session:
                response = session.get(
                    request.url,
                    params=list(request.params),
                    timeout=self.timeout,
                )
                body = response.content

            logger.debug(
                f"GET request completed: {request.url} "
                f"(status={response.status_code}, {len(body)} bytes)"
            )
            return body

        except requests.RequestException as e:
            logger.error(f"GET request failed: {request.url} - {e}")
            raise GeocodeError.from_transport(e) from e
