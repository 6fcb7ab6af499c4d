"""HTTPクライアントのテスト"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from geocode_proxy.features.geocoding.domain.models import RequestDescriptor
from geocode_proxy.shared.exceptions.errors import ErrorKind, GeocodeError
from geocode_proxy.shared.http.client import HTTPClient

REQUEST = RequestDescriptor(
    url="https://example.com/geocode",
    params=(("key", "k"), ("location", "Paris")),
)


@patch("geocode_proxy.shared.http.client.requests.Session.get")
def test_get_returns_body(mock_get: MagicMock) -> None:
    """レスポンスボディを返す"""
    mock_resp = MagicMock()
    mock_resp.status_code = 200
    mock_resp.content = b'{"ok": true}'
    mock_get.return_value = mock_resp

    body = HTTPClient().get(REQUEST)

    assert body == b'{"ok": true}'
    mock_get.assert_called_once_with(
        "https://example.com/geocode",
        params=[("key", "k"), ("location", "Paris")],
        timeout=None,
    )


@patch("geocode_proxy.shared.http.client.requests.Session.get")
def test_get_does_not_check_status(mock_get: MagicMock) -> None:
    """HTTPステータスがエラーでもボディを返す"""
    mock_resp = MagicMock()
    mock_resp.status_code = 403
    mock_resp.content = b'{"error": "forbidden"}'
    mock_get.return_value = mock_resp

    assert HTTPClient().get(REQUEST) == b'{"error": "forbidden"}'
    mock_resp.raise_for_status.assert_not_called()


@pytest.mark.parametrize(
    "error",
    [
        requests.ConnectionError("connection refused"),
        requests.exceptions.SSLError("certificate verify failed"),
        requests.Timeout("read timed out"),
    ],
)
@patch("geocode_proxy.shared.http.client.requests.Session.get")
def test_transport_error_is_backend_failure(
    mock_get: MagicMock, error: requests.RequestException
) -> None:
    """通信エラーはBackendFailure（原因付き）"""
    mock_get.side_effect = error

    with pytest.raises(GeocodeError) as exc_info:
        HTTPClient().get(REQUEST)

    assert exc_info.value.kind is ErrorKind.BACKEND_FAILURE
    assert exc_info.value.cause_chain[0] == str(error)
    assert exc_info.value.__cause__ is error


def test_user_agent_header() -> None:
    """User-Agentヘッダーを設定する"""
    client = HTTPClient(user_agent="test-agent/1.0")

    with client._create_session() as session:
        assert session.headers["User-Agent"] == "test-agent/1.0"
