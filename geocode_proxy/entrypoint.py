"""CLIエントリーポイント"""
import argparse
import socket
import sys
from importlib.metadata import PackageNotFoundError, version
from typing import Optional, Sequence, TextIO

import uvicorn

from .features.geocoding.services.location_finder import LocationFinder
from .infrastructure.config.service_config import (
    DEFAULT_IP,
    DEFAULT_PORT,
    ServiceConfig,
    load_service_config,
    parse_port,
)
from .infrastructure.config.settings import Settings
from .server import create_app
from .shared.exceptions.errors import (
    BadAddressError,
    BadPortError,
    GeocodeProxyError,
    ServiceError,
    walk_causes,
)
from .shared.logging.config import get_logger, setup_logging

logger = get_logger(__name__)

APP_NAME = "geocode-proxy"


def get_version() -> str:
    """インストール済みパッケージのバージョンを取得"""
    try:
        return version(APP_NAME)
    except PackageNotFoundError:
        return "0.0.0"


def build_parser() -> argparse.ArgumentParser:
    """コマンドライン引数のパーサーを作成"""
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Geocoding proxy service",
    )

    parser.add_argument(
        "-a",
        "--address",
        type=str,
        help=f"IP address to start service on (default: {DEFAULT_IP})",
    )

    parser.add_argument(
        "-p",
        "--port",
        type=str,
        help=f"Port to start service on (default: {DEFAULT_PORT})",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=str,
        required=True,
        help="Path to configuration file",
    )

    parser.add_argument(
        "--env-file",
        type=str,
        default=".env",
        help="環境変数ファイルのパス（デフォルト: .env）",
    )

    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="ログレベル",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {get_version()}",
    )

    return parser


def apply_overrides(
    config: ServiceConfig,
    address: Optional[str],
    port: Optional[str],
) -> ServiceConfig:
    """
    コマンドライン引数で待ち受けアドレスを上書き

    Args:
        config: 設定ファイルから読み込んだ設定
        address: IPアドレス（Noneの場合は上書きしない）
        port: ポート番号（Noneの場合は上書きしない）

    Returns:
        ServiceConfig: 上書き後の設定

    Raises:
        BadAddressError: IPアドレスが不正な場合
        BadPortError: ポート番号が不正な場合
    """
    if address is not None:
        try:
            config = config.with_ip(address)
        except ValueError as e:
            raise BadAddressError() from e

    if port is not None:
        try:
            config = config.with_port(parse_port(port))
        except ValueError as e:
            raise BadPortError() from e

    return config


def bind_socket(config: ServiceConfig) -> socket.socket:
    """
    待ち受けソケットを作成

    Raises:
        ServiceError: バインドに失敗した場合
    """
    family = socket.AF_INET6 if ":" in config.host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((config.host, config.port))
    except OSError as e:
        sock.close()
        raise ServiceError() from e
    return sock


def serve(config: ServiceConfig, settings: Settings) -> None:
    """
    HTTPサーバーを起動（停止するまで戻らない）

    Args:
        config: サービス設定（待ち受けアドレスとプロバイダー）
        settings: プロセス設定（バックエンド通信とログレベル）

    Raises:
        ServiceError: サーバーの起動・実行に失敗した場合
    """
    finder = LocationFinder(config.finder, http_client=settings.create_http_client())
    app = create_app(finder)

    sock = bind_socket(config)
    server = uvicorn.Server(
        uvicorn.Config(app, log_level=settings.log_level.lower(), log_config=None)
    )
    try:
        server.run(sockets=[sock])
    except OSError as e:
        raise ServiceError() from e
    finally:
        sock.close()


def print_error(error: BaseException, stream: Optional[TextIO] = None) -> None:
    """エラーと原因チェーンを出力（既定は標準エラー出力）"""
    stream = stream or sys.stderr
    print(f"Error: {error}", file=stream)
    for cause in walk_causes(error):
        print(f"Because: {cause}", file=stream)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    メインエントリーポイント

    Returns:
        int: 終了コード（0: 正常終了, 1: 起動失敗）
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        # 設定を読み込み
        settings = Settings(_env_file=args.env_file)

        # ログレベルを上書き
        if args.log_level:
            settings.log_level = args.log_level

        setup_logging(level=settings.log_level)

        config = load_service_config(args.config)
        config = apply_overrides(config, args.address, args.port)

        logger.info(f"Geocoding service starting on {config.sock_addr}")
        serve(config, settings)
        return 0

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130  # SIGINT
    except GeocodeProxyError as e:
        logger.error(f"Startup failed: {e}")
        print_error(e)
        return 1
    except Exception as e:
        logger.error(f"Application failed: {e}", exc_info=True)
        print_error(e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
