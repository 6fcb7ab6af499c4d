"""プロセス設定（Pydantic Settings）"""
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ...shared.http.client import DEFAULT_USER_AGENT, HTTPClient


class Settings(BaseSettings):
    """
    プロセス設定

    環境変数（GEOCODE_PROXY_ 接頭辞）または.envファイルから読み込む。
    プロバイダーと待ち受けアドレスは設定ファイル側で指定する
    """

    model_config = SettingsConfigDict(
        env_prefix="GEOCODE_PROXY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Backend
    backend_timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="バックエンド問い合わせのタイムアウト（秒、未設定の場合は無制限）",
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        min_length=1,
        description="バックエンド問い合わせのUser-Agent",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="ログレベル (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    def create_http_client(self) -> HTTPClient:
        """設定に従ったバックエンド用HTTPクライアントを作成"""
        return HTTPClient(timeout=self.backend_timeout, user_agent=self.user_agent)
