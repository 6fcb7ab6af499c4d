"""サービス設定（設定ファイル）"""
import ipaddress
from pathlib import Path
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ...features.geocoding.domain.config import FinderConfig
from ...shared.exceptions.errors import BadConfigFileError, FailedToOpenConfigFileError
from ...shared.logging.config import get_logger

logger = get_logger(__name__)

DEFAULT_IP = "0.0.0.0"
DEFAULT_PORT = 8080


def split_sock_addr(sock_addr: str) -> tuple[str, int]:
    """
    ``ip:port`` 形式のアドレスを分割

    IPv6は ``[::1]:8080`` の形式で指定する

    Args:
        sock_addr: ソケットアドレス

    Returns:
        tuple[str, int]: (IPアドレス, ポート番号)

    Raises:
        ValueError: 形式が不正な場合
    """
    host, sep, port_text = sock_addr.rpartition(":")
    if not sep or not host:
        raise ValueError(f"Invalid socket address: {sock_addr!r}")

    if host.startswith("[") and host.endswith("]"):
        ip = ipaddress.ip_address(host[1:-1])
        if ip.version != 6:
            raise ValueError(f"Invalid socket address: {sock_addr!r}")
    else:
        ip = ipaddress.ip_address(host)
        if ip.version != 4:
            raise ValueError(f"IPv6 address must be enclosed in brackets: {sock_addr!r}")

    return str(ip), parse_port(port_text)


def parse_port(text: str) -> int:
    """ポート番号を解析（0-65535）"""
    if not text.isdigit():
        raise ValueError(f"Invalid port: {text!r}")
    port = int(text)
    if port > 65535:
        raise ValueError(f"Port out of range: {port}")
    return port


def join_sock_addr(ip: str, port: int) -> str:
    """IPアドレスとポート番号を ``ip:port`` 形式にまとめる"""
    if ipaddress.ip_address(ip).version == 6:
        return f"[{ip}]:{port}"
    return f"{ip}:{port}"


class ServiceConfig(BaseModel):
    """
    サービス設定

    起動時に一度だけ読み込み、以降は読み取り専用として全リクエストで共有する
    """

    model_config = ConfigDict(frozen=True)

    sock_addr: str = Field(
        default=join_sock_addr(DEFAULT_IP, DEFAULT_PORT),
        description="待ち受けアドレス（ip:port）",
    )
    finder: FinderConfig = Field(
        default_factory=FinderConfig,
        description="問い合わせ先プロバイダー",
    )

    @field_validator("sock_addr")
    @classmethod
    def _validate_sock_addr(cls, value: str) -> str:
        ip, port = split_sock_addr(value)
        return join_sock_addr(ip, port)

    @property
    def host(self) -> str:
        """待ち受けIPアドレス"""
        return split_sock_addr(self.sock_addr)[0]

    @property
    def port(self) -> int:
        """待ち受けポート番号"""
        return split_sock_addr(self.sock_addr)[1]

    def with_address(self, sock_addr: str) -> "ServiceConfig":
        """待ち受けアドレスを差し替えた設定を返す"""
        return self.model_validate({**self.model_dump(), "sock_addr": sock_addr})

    def with_ip(self, ip: str) -> "ServiceConfig":
        """
        IPアドレスを差し替えた設定を返す

        Raises:
            ValueError: IPアドレスが不正な場合
        """
        ip = str(ipaddress.ip_address(ip))
        return self.model_copy(update={"sock_addr": join_sock_addr(ip, self.port)})

    def with_port(self, port: int) -> "ServiceConfig":
        """
        ポート番号を差し替えた設定を返す

        Raises:
            ValueError: ポート番号が範囲外の場合
        """
        if not 0 <= port <= 65535:
            raise ValueError(f"Port out of range: {port}")
        return self.model_copy(update={"sock_addr": join_sock_addr(self.host, port)})


def load_service_config(path: Union[str, Path]) -> ServiceConfig:
    """
    設定ファイル（JSON）を読み込む

    Args:
        path: 設定ファイルのパス

    Returns:
        ServiceConfig: サービス設定

    Raises:
        FailedToOpenConfigFileError: ファイルを開けない場合
        BadConfigFileError: 内容が不正な場合
    """
    try:
        text = Path(path).read_bytes()
    except OSError as e:
        raise FailedToOpenConfigFileError() from e

    try:
        config = ServiceConfig.model_validate_json(text)
    except ValidationError as e:
        raise BadConfigFileError() from e

    logger.info(
        f"Loaded configuration from {path}: "
        f"{len(config.finder.protocols)} provider(s)"
    )
    return config
