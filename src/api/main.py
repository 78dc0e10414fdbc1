"""FastAPI メインアプリケーション

ボイラー監視ダッシュボードのバックエンドAPI。
フィールド機器との通信と配信を一元管理し、フロントエンドにRESTful APIを提供。

起動方法:
    uvicorn src.api.main:app --host 127.0.0.1 --port 8000
"""

import os
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI
from dotenv import load_dotenv

# プロジェクトルートをパスに追加 (dashboard_app.pyと同じパターン)
sys.path.insert(0, str(Path(__file__).parent.parent))

# .envファイルを読み込む
load_dotenv()

from api.routes import config, telemetry
from api.services.telemetry_service import telemetry_service
from backend.logging import api_logger as logger


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """アプリケーションのライフサイクル管理

    起動時: 各マネージャを生成し、トランスポート接続を開始
    終了時: ポーリングを停止し、全リンクを安全に切断
    """
    logger.info("API Server starting...")
    await telemetry_service.initialize()

    yield

    logger.info("API Server shutting down...")
    await telemetry_service.shutdown()
    logger.info("API Server shutdown complete")


app = FastAPI(
    title="Boiler Telemetry API",
    description="熱分解プラント ボイラー監視 バックエンドAPI",
    version="1.0.0",
    lifespan=lifespan,
)

# ルーター登録
app.include_router(telemetry.router, prefix="/api", tags=["telemetry"])
app.include_router(config.router, prefix="/api", tags=["config"])


@app.get("/", tags=["root"])
async def root() -> dict[str, str]:
    """ルートパス

    APIサーバーの情報を返す。
    """
    return {
        "name": "Boiler Telemetry API",
        "docs": "/docs",
        "health": "/health",
    }


@app.get("/health", tags=["health"])
async def health_check() -> dict[str, str | int]:
    """ヘルスチェック (軽量)

    フィールド機器との通信は行わず、APIプロセスの生存確認のみを行う。
    ランチャーの起動待ちに使用。

    Returns:
        {"status": "ok", "pid": <プロセスID>}
    """
    return {"status": "ok", "pid": os.getpid()}
