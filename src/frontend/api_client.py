"""APIクライアントモジュール

FastAPIバックエンドと通信するためのクライアント。
Streamlitフロントエンドから使用する。

フェイルセーフ機能:
- タイムアウト付きリクエスト (デフォルト3秒)
- 通信エラー時は例外を送出せず、空の結果を返す
"""

from typing import Any

import httpx
from pydantic import ValidationError

from config.settings import Settings
from schemas import EndpointConfig, Snapshot
from backend.logging import app_logger as logger

# 設定読み込み
_settings = Settings()
API_BASE_URL = f"http://{_settings.API_HOST}:{_settings.API_PORT}"

# タイムアウト設定 (設定ファイルから読み込み)
API_TIMEOUT = _settings.FRONTEND_API_TIMEOUT

# 状態取得失敗時に返すステータス
_UNKNOWN_STATUS: dict[str, Any] = {
    "field_link_connected": False,
    "transport_state": "disconnected",
    "scheduler_state": "idle",
    "use_field_device": False,
    "plant_id": None,
    "com_port": None,
    "last_update": None,
    "last_error": "API接続エラー",
}


def _get_client() -> httpx.Client:
    """HTTPクライアントを取得"""
    return httpx.Client(base_url=API_BASE_URL, timeout=API_TIMEOUT)


def fetch_snapshot() -> Snapshot | None:
    """APIから最新スナップショットを取得

    Returns:
        Snapshot | None: 最新スナップショット (未取得・通信エラー時はNone)
    """
    try:
        with _get_client() as client:
            response = client.get("/api/snapshot")
            response.raise_for_status()
            data = response.json()
    except httpx.TimeoutException as e:
        logger.warning(f"API request timeout ({API_TIMEOUT}s): {e}")
        return None
    except httpx.HTTPStatusError as e:
        logger.error(
            f"API returned error: {e.response.status_code} - {e.response.text}"
        )
        return None
    except httpx.RequestError as e:
        logger.error(f"API connection error: {e}")
        return None

    if data is None:
        return None
    try:
        return Snapshot.model_validate(data)
    except ValidationError as e:
        logger.error(f"Invalid snapshot payload: {e}")
        return None


def check_api_health() -> bool:
    """APIサーバーのヘルスチェック

    Returns:
        bool: APIが正常ならTrue
    """
    try:
        with _get_client() as client:
            response = client.get("/health")
            return response.status_code == 200
    except httpx.RequestError:
        return False


def get_api_status() -> dict[str, Any]:
    """APIからステータスを取得

    Returns:
        dict: ステータス情報
    """
    try:
        with _get_client() as client:
            response = client.get("/api/status")
            response.raise_for_status()
            return response.json()
    except (httpx.RequestError, httpx.HTTPStatusError) as e:
        logger.error(f"Failed to get API status: {e}")
        return dict(_UNKNOWN_STATUS)


def fetch_config() -> EndpointConfig:
    """保存済みの接続先設定を取得

    Returns:
        EndpointConfig: 接続先設定 (通信エラー時は空の設定)
    """
    try:
        with _get_client() as client:
            response = client.get("/api/config")
            response.raise_for_status()
            return EndpointConfig.model_validate(response.json())
    except (httpx.RequestError, httpx.HTTPStatusError) as e:
        logger.error(f"Failed to get config: {e}")
        return EndpointConfig()


def save_config(config: EndpointConfig) -> bool:
    """接続先設定を保存

    Args:
        config: 保存する接続先設定

    Returns:
        bool: 保存できた場合True
    """
    try:
        with _get_client() as client:
            response = client.put(
                "/api/config", json=config.model_dump(by_alias=True)
            )
            response.raise_for_status()
            return True
    except (httpx.RequestError, httpx.HTTPStatusError) as e:
        logger.error(f"Failed to save config: {e}")
        return False


def request_connect(
    plant_id: str | None = None, com_port: str | None = None
) -> dict[str, Any]:
    """フィールドリンクの接続をリクエスト

    引数を省略した場合、バックエンドは保存済みの設定で接続する。

    Returns:
        dict: 接続結果 {"connected": bool, "message": str}
    """
    body: dict[str, str] = {}
    if plant_id is not None:
        body["plantId"] = plant_id
    if com_port is not None:
        body["comPort"] = com_port

    try:
        with _get_client() as client:
            response = client.post("/api/connect", json=body)
            response.raise_for_status()
            return response.json()
    except (httpx.RequestError, httpx.HTTPStatusError) as e:
        logger.error(f"Connect request failed: {e}")
        return {"connected": False, "message": f"API通信エラー: {e}"}


def request_disconnect() -> dict[str, Any]:
    """フィールドリンクの切断をリクエスト

    Returns:
        dict: 切断結果
    """
    try:
        with _get_client() as client:
            response = client.post("/api/disconnect")
            response.raise_for_status()
            return response.json()
    except (httpx.RequestError, httpx.HTTPStatusError) as e:
        logger.error(f"Disconnect request failed: {e}")
        return {"connected": False, "message": f"API通信エラー: {e}"}
