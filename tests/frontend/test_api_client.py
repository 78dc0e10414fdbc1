"""フロントエンド api_client のテスト

通信エラー時に例外を送出せず、空の結果を返すことを確認する。
"""

from unittest.mock import MagicMock, patch

import pytest
import httpx

from schemas import EndpointConfig, Indicator


def _mock_client(response=None, error=None):
    """_get_client() が返すコンテキストマネージャのモック"""
    mock_client = MagicMock()
    for method in ("get", "post", "put"):
        if error is not None:
            getattr(mock_client, method).side_effect = error
        else:
            getattr(mock_client, method).return_value = response
    mock_client.__enter__ = MagicMock(return_value=mock_client)
    mock_client.__exit__ = MagicMock(return_value=False)
    return mock_client


def _mock_response(data, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = data
    return response


@pytest.fixture
def snapshot_payload():
    return {
        "id": 0,
        "plantId": "Plant-7",
        "reactorTemp": 412.0,
        "separatorTemp": 180.0,
        "furnaceTemp": 650.0,
        "condenserTemp": 45.0,
        "atmTemp": 31.0,
        "reactorPressure": 2.0,
        "gasTankPressure": 1.0,
        "processStartTime": 930,
        "timeOfReaction": 240,
        "processEndTime": 1330,
        "coolingEndTime": 1500,
        "nitrogenPurging": "nominal",
        "carbonDoorStatus": "nominal",
        "coCh4Leakage": "nominal",
        "jaaliBlockage": "nominal",
        "machineMaintenance": "alarm",
        "autoShutDown": "nominal",
        "timestamp": "2025-11-12T10:30:00",
    }


class TestApiClientSettings:
    """設定のテスト"""

    def test_api_base_url_uses_settings(self):
        """API_BASE_URLが設定から構築されること"""
        from frontend.api_client import API_BASE_URL

        assert "127.0.0.1" in API_BASE_URL or "localhost" in API_BASE_URL
        assert "8000" in API_BASE_URL


class TestFetchSnapshot:
    """fetch_snapshotのテスト"""

    def test_fetch_snapshot_parses_payload(self, snapshot_payload):
        """camelCaseのペイロードをSnapshotに変換すること"""
        import frontend.api_client as api_client

        with patch("frontend.api_client._get_client") as mock_get_client:
            mock_get_client.return_value = _mock_client(_mock_response(snapshot_payload))
            snapshot = api_client.fetch_snapshot()

        assert snapshot is not None
        assert snapshot.plant_id == "Plant-7"
        assert snapshot.machine_maintenance is Indicator.ALARM

    def test_fetch_snapshot_null(self):
        """nullの場合はNoneを返すこと"""
        import frontend.api_client as api_client

        with patch("frontend.api_client._get_client") as mock_get_client:
            mock_get_client.return_value = _mock_client(_mock_response(None))
            assert api_client.fetch_snapshot() is None

    def test_fetch_snapshot_timeout_returns_none(self):
        """タイムアウト時はNoneを返すこと"""
        import frontend.api_client as api_client

        with patch("frontend.api_client._get_client") as mock_get_client:
            mock_get_client.return_value = _mock_client(
                error=httpx.TimeoutException("timeout")
            )
            assert api_client.fetch_snapshot() is None

    def test_fetch_snapshot_invalid_payload_returns_none(self):
        """不正なペイロードはNoneを返すこと"""
        import frontend.api_client as api_client

        with patch("frontend.api_client._get_client") as mock_get_client:
            mock_get_client.return_value = _mock_client(
                _mock_response({"reactorTemp": "hot"})
            )
            assert api_client.fetch_snapshot() is None


class TestStatusAndConfig:
    """ステータス・設定取得のテスト"""

    def test_get_api_status_connection_error(self):
        """接続エラー時は未接続のステータスを返すこと"""
        import frontend.api_client as api_client

        with patch("frontend.api_client._get_client") as mock_get_client:
            mock_get_client.return_value = _mock_client(
                error=httpx.ConnectError("refused")
            )
            status = api_client.get_api_status()

        assert status["field_link_connected"] is False
        assert status["last_error"] == "API接続エラー"

    def test_fetch_config(self):
        """保存済み設定を取得できること"""
        import frontend.api_client as api_client

        with patch("frontend.api_client._get_client") as mock_get_client:
            mock_get_client.return_value = _mock_client(
                _mock_response({"plantId": "Plant-7", "comPort": "COM9"})
            )
            config = api_client.fetch_config()

        assert config == EndpointConfig(plant_id="Plant-7", com_port="COM9")

    def test_fetch_config_error_returns_empty(self):
        """通信エラー時は空の設定を返すこと"""
        import frontend.api_client as api_client

        with patch("frontend.api_client._get_client") as mock_get_client:
            mock_get_client.return_value = _mock_client(
                error=httpx.ConnectError("refused")
            )
            assert api_client.fetch_config() == EndpointConfig()

    def test_save_config_sends_camel_case(self):
        """camelCaseのJSONで保存を依頼すること"""
        import frontend.api_client as api_client

        mock_client = _mock_client(_mock_response({}))
        with patch("frontend.api_client._get_client", return_value=mock_client):
            ok = api_client.save_config(EndpointConfig(plant_id="P", com_port="COM1"))

        assert ok is True
        mock_client.put.assert_called_once_with(
            "/api/config", json={"plantId": "P", "comPort": "COM1"}
        )

    def test_save_config_http_error_returns_false(self):
        """500応答ならFalseを返すこと"""
        import frontend.api_client as api_client

        request = httpx.Request("PUT", "http://127.0.0.1:8000/api/config")
        error_response = httpx.Response(500, request=request)
        response = MagicMock()
        response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "server error", request=request, response=error_response
        )
        with patch("frontend.api_client._get_client") as mock_get_client:
            mock_get_client.return_value = _mock_client(response)
            assert api_client.save_config(EndpointConfig()) is False


class TestConnectRequests:
    """接続・切断リクエストのテスト"""

    def test_request_connect_sends_endpoint(self):
        """接続先をcamelCaseで送ること"""
        import frontend.api_client as api_client

        mock_client = _mock_client(_mock_response({"connected": True, "message": "ok"}))
        with patch("frontend.api_client._get_client", return_value=mock_client):
            result = api_client.request_connect("Plant-7", "COM9")

        assert result["connected"] is True
        mock_client.post.assert_called_once_with(
            "/api/connect", json={"plantId": "Plant-7", "comPort": "COM9"}
        )

    def test_request_connect_without_args_sends_empty_body(self):
        """引数省略時は空のボディを送ること"""
        import frontend.api_client as api_client

        mock_client = _mock_client(_mock_response({"connected": True, "message": "ok"}))
        with patch("frontend.api_client._get_client", return_value=mock_client):
            api_client.request_connect()

        mock_client.post.assert_called_once_with("/api/connect", json={})

    def test_request_connect_error(self):
        """通信エラー時は connected=False を返すこと"""
        import frontend.api_client as api_client

        with patch("frontend.api_client._get_client") as mock_get_client:
            mock_get_client.return_value = _mock_client(
                error=httpx.ConnectError("refused")
            )
            result = api_client.request_connect("Plant-7", "COM9")

        assert result["connected"] is False
        assert "API通信エラー" in result["message"]

    def test_request_disconnect(self):
        """切断を依頼できること"""
        import frontend.api_client as api_client

        mock_client = _mock_client(_mock_response({"connected": False, "message": "切断しました"}))
        with patch("frontend.api_client._get_client", return_value=mock_client):
            result = api_client.request_disconnect()

        assert result["connected"] is False
        mock_client.post.assert_called_once_with("/api/disconnect")
