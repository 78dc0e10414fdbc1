"""テレメトリ関連エンドポイント

/api/status     - リンク・配信・スケジューラの状態
/api/snapshot   - 最新スナップショット
/api/connect    - フィールドリンク接続
/api/disconnect - フィールドリンク切断
"""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from api.services.telemetry_service import telemetry_service
from backend.logging import api_logger as logger
from schemas import Snapshot

router = APIRouter()


class StatusResponse(BaseModel):
    """ステータスレスポンス"""

    field_link_connected: bool
    transport_state: str
    scheduler_state: str
    use_field_device: bool
    plant_id: str | None
    com_port: str | None
    last_update: str | None
    last_error: str | None


class ConnectRequest(BaseModel):
    """接続リクエスト (省略時は保存済み設定を使用)"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    plant_id: str | None = None
    com_port: str | None = None


class ConnectResponse(BaseModel):
    """接続レスポンス"""

    connected: bool
    message: str


@router.get("/status", response_model=StatusResponse)
async def get_status() -> StatusResponse:
    """接続状態を取得

    Returns:
        StatusResponse: 接続状態
    """
    return StatusResponse(**telemetry_service.get_status())


@router.get("/snapshot", response_model=Snapshot | None)
async def get_snapshot() -> Snapshot | None:
    """最新スナップショットを取得

    ポーリング中でない場合、または未取得の場合はnullを返す。
    """
    return telemetry_service.get_latest_snapshot()


@router.post("/connect", response_model=ConnectResponse)
async def connect(request: ConnectRequest | None = None) -> ConnectResponse:
    """フィールドリンクを接続

    接続中に呼ばれた場合は何もせず成功を返す。

    Returns:
        ConnectResponse: 接続結果
    """
    request = request or ConnectRequest()
    try:
        connected = await telemetry_service.connect(request.plant_id, request.com_port)
    except Exception as e:
        logger.error(f"Connect request error: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    if connected:
        return ConnectResponse(connected=True, message="接続しました")
    error = telemetry_service.get_status()["last_error"]
    return ConnectResponse(connected=False, message=f"接続に失敗しました: {error}")


@router.post("/disconnect", response_model=ConnectResponse)
async def disconnect() -> ConnectResponse:
    """フィールドリンクを切断"""
    try:
        await telemetry_service.disconnect()
    except Exception as e:
        logger.error(f"Disconnect request error: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    return ConnectResponse(connected=False, message="切断しました")
