"""接続先設定エンドポイント

/api/config - 接続先設定 (プラントID / COMポート) の取得・保存
"""

from fastapi import APIRouter, HTTPException

from api.services.telemetry_service import telemetry_service
from backend.errors import ConfigIOError
from backend.logging import api_logger as logger
from schemas import EndpointConfig

router = APIRouter()


@router.get("/config", response_model=EndpointConfig)
async def get_config() -> EndpointConfig:
    """保存済みの接続先設定を取得

    未保存または読み込み失敗時は空の設定を返す。
    """
    return telemetry_service.load_config()


@router.put("/config", response_model=EndpointConfig)
async def put_config(config: EndpointConfig) -> EndpointConfig:
    """接続先設定を保存

    値はそのまま保存する (トリムや検証はしない)。
    接続中のフィールドリンクには影響しない。

    Raises:
        HTTPException: 保存失敗時 (500)
    """
    try:
        telemetry_service.save_config(config)
    except ConfigIOError as e:
        logger.error(f"Failed to save config: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    return config
