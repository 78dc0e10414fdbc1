"""テレメトリサービス

接続先設定ストア・フィールドリンク・トランスポート・スケジューラを
APIサーバー内で一元管理するシングルトンサービス。
プレゼンテーション層に公開する操作はすべてここを経由する。

ライフサイクル:
- initialize(): 各マネージャを生成し、トランスポート接続を開始
- shutdown(): スケジューラ停止、フィールドリンク・トランスポート切断
"""

import threading
from datetime import datetime
from typing import Any

from backend.config_helpers import get_register_map, get_settings, get_use_field_device
from backend.config_store import EndpointConfigStore
from backend.errors import LinkConnectError
from backend.field.base import BaseFieldClient
from backend.field.link import FieldLinkManager
from backend.logging import BACKEND_LOGGERS, apply_log_level
from backend.logging import api_logger as logger
from backend.scheduler import PollPublishScheduler, SchedulerEvent
from backend.transport.link import TransportLinkManager
from schemas import EndpointConfig, Snapshot


class TelemetryService:
    """テレメトリサービス (シングルトン)

    APIサーバー内でテレメトリ同期コアを一元管理する。
    すべての操作はAPIサーバーのイベントループ上で実行される。
    """

    _instance: "TelemetryService | None" = None
    _lock = threading.Lock()
    _initialized: bool = False

    def __new__(cls) -> "TelemetryService":
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self) -> None:
        if self._initialized:
            return
        self._initialized = True

        self._settings = get_settings()
        self._use_field_device = get_use_field_device()
        self._store = EndpointConfigStore(self._settings.CONFIG_FILE)

        self._field_link: FieldLinkManager | None = None
        self._transport_link: TransportLinkManager | None = None
        self._scheduler: PollPublishScheduler | None = None

        self._last_update: datetime | None = None
        self._last_error: str | None = None

        logger.info(
            f"TelemetryService created (USE_FIELD_DEVICE={self._use_field_device}, "
            f"interval={self._settings.POLL_INTERVAL}s, "
            f"transport={self._settings.TRANSPORT_URL})"
        )

    def _create_field_client(self) -> BaseFieldClient:
        # 遅延インポート (pymodbusはフィールド機器使用時のみ必要)
        if self._use_field_device:
            from backend.field.modbus_client import ModbusFieldClient

            return ModbusFieldClient(self._settings)

        from backend.field.dummy_client import DummyFieldClient

        return DummyFieldClient(get_register_map().REGISTER_START)

    async def initialize(self) -> None:
        """マネージャを生成し、トランスポート接続を開始する"""
        if self._scheduler is not None:
            return

        apply_log_level(BACKEND_LOGGERS, self._settings.LOG_LEVEL.value)

        self._field_link = FieldLinkManager(
            self._create_field_client(),
            get_register_map(),
            boiler_id=self._settings.BOILER_ID,
        )
        self._transport_link = TransportLinkManager(
            self._settings.TRANSPORT_URL,
            reconnection=self._settings.TRANSPORT_RECONNECT,
            reconnection_delay=self._settings.TRANSPORT_RECONNECT_DELAY,
            reconnection_attempts=self._settings.TRANSPORT_RECONNECT_ATTEMPTS,
        )
        self._scheduler = PollPublishScheduler(
            self._field_link,
            self._transport_link,
            interval=self._settings.POLL_INTERVAL,
            channel=self._settings.TRANSPORT_CHANNEL,
        )
        self._scheduler.add_listener(self._on_scheduler_event)

        await self._transport_link.connect()
        logger.info("TelemetryService initialized")

    async def shutdown(self) -> None:
        """スケジューラを停止し、全リンクを切断する"""
        if self._scheduler is not None:
            await self._scheduler.shutdown()
        if self._field_link is not None:
            await self._field_link.disconnect()
        if self._transport_link is not None:
            await self._transport_link.disconnect()

        self._scheduler = None
        self._field_link = None
        self._transport_link = None
        logger.info("TelemetryService shut down")

    def _require_scheduler(self) -> PollPublishScheduler:
        if self._scheduler is None:
            raise RuntimeError("TelemetryService not initialized. Call initialize() first.")
        return self._scheduler

    def _on_scheduler_event(self, event: SchedulerEvent, data: Any) -> None:
        if event is SchedulerEvent.SNAPSHOT:
            self._last_update = datetime.now()
            self._last_error = None
        elif event is SchedulerEvent.LINK_LOST:
            self._last_error = f"link lost: {data}"

    # --------------------------
    #  接続先設定
    # --------------------------
    def load_config(self) -> EndpointConfig:
        """保存済みの接続先設定を取得"""
        return self._store.load()

    def save_config(self, config: EndpointConfig) -> None:
        """接続先設定を保存

        Raises:
            ConfigIOError: 保存失敗時
        """
        self._store.save(config)

    # --------------------------
    #  プレゼンテーション層向け操作
    # --------------------------
    async def connect(
        self, plant_id: str | None = None, com_port: str | None = None
    ) -> bool:
        """フィールドリンクを接続する

        引数を省略した場合は保存済みの接続先設定を使用する。

        Returns:
            bool: 接続できた場合True (失敗理由はget_status()のlast_error)
        """
        scheduler = self._require_scheduler()
        if plant_id is None or com_port is None:
            stored = self._store.load()
            plant_id = stored.plant_id if plant_id is None else plant_id
            com_port = stored.com_port if com_port is None else com_port

        try:
            connected = await scheduler.connect(plant_id, com_port)
        except LinkConnectError as e:
            logger.error(f"Connect request failed: {e}")
            self._last_error = str(e)
            return False

        self._last_error = None
        return connected

    async def disconnect(self) -> None:
        """フィールドリンクを切断する"""
        await self._require_scheduler().disconnect()

    def is_field_link_connected(self) -> bool:
        return self._scheduler is not None and self._scheduler.is_field_link_connected()

    def get_latest_snapshot(self) -> Snapshot | None:
        if self._scheduler is None:
            return None
        return self._scheduler.get_latest_snapshot()

    def get_status(self) -> dict[str, Any]:
        """サービス状態を取得

        Returns:
            dict: 状態情報
        """
        endpoint = self._field_link.endpoint if self._field_link is not None else None
        return {
            "field_link_connected": self.is_field_link_connected(),
            "transport_state": (
                self._transport_link.state.value
                if self._transport_link is not None
                else "disconnected"
            ),
            "scheduler_state": (
                self._scheduler.state.value if self._scheduler is not None else "idle"
            ),
            "use_field_device": self._use_field_device,
            "plant_id": endpoint.plant_id if endpoint else None,
            "com_port": endpoint.com_port if endpoint else None,
            "last_update": (
                self._last_update.isoformat() if self._last_update else None
            ),
            "last_error": self._last_error,
        }


# シングルトンインスタンス
telemetry_service = TelemetryService()
