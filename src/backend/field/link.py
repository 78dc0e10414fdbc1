"""フィールドリンク管理

責務:
- フィールド機器への接続/切断/読み取りのライフサイクル
- リンク状態 (Disconnected / Connected) の保持と変更通知

読み取りに1回でも失敗したらリンク断とみなす。自動再接続はしない
(オペレーターが再度接続操作を行う)。
"""

import asyncio
from enum import Enum
from typing import Callable

from .base import BaseFieldClient
from .decoder import decode_snapshot
from backend.errors import LinkConnectError, ReadError
from backend.logging import field_logger as logger
from config.settings import FieldRegisterMap
from schemas import EndpointConfig, Snapshot


class LinkState(str, Enum):
    """フィールドリンク状態

    Attributes:
        DISCONNECTED: 未接続
        CONNECTED: 接続中 (ポーリング対象)
    """

    DISCONNECTED = "disconnected"
    CONNECTED = "connected"


LinkListener = Callable[[LinkState], None]

# 読み取り失敗としてリンク断に落とす例外
_READ_FAILURES = (
    ReadError,
    ConnectionError,
    OSError,
    asyncio.TimeoutError,
    ValueError,
    IndexError,
)


class FieldLinkManager:
    """フィールドリンクの状態機械

    Disconnected --connect()--> Connected
    Connected --読み取り失敗 | disconnect()--> Disconnected

    使用例:
        >>> link = FieldLinkManager(client, FieldRegisterMap())
        >>> await link.connect("Plant-7", "COM9")
        >>> snapshot = await link.read_snapshot()
    """

    def __init__(
        self,
        client: BaseFieldClient,
        register_map: FieldRegisterMap,
        boiler_id: int = 0,
    ) -> None:
        self._client = client
        self._register_map = register_map
        self._boiler_id = boiler_id
        self._state = LinkState.DISCONNECTED
        self._endpoint: EndpointConfig | None = None
        # 接続のたびに進める (前の接続で始まった読み取りの失敗を区別するため)
        self._generation = 0
        self._listeners: list[LinkListener] = []

    @property
    def state(self) -> LinkState:
        return self._state

    @property
    def endpoint(self) -> EndpointConfig | None:
        """接続中の接続先 (未接続時はNone)"""
        return self._endpoint

    def is_connected(self) -> bool:
        return self._state is LinkState.CONNECTED

    def add_listener(self, listener: LinkListener) -> None:
        """状態変更の通知先を登録"""
        self._listeners.append(listener)

    def remove_listener(self, listener: LinkListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _set_state(self, state: LinkState) -> None:
        if state is self._state:
            return
        self._state = state
        logger.info(f"Field link state changed: {state.value}")
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                logger.error(f"Field link listener failed: {e}")

    async def connect(self, plant_id: str, com_port: str) -> bool:
        """フィールド機器に接続する

        接続中に呼ばれた場合は何もせずTrueを返す (記録済みの接続先は変えない)。

        Args:
            plant_id: プラントID
            com_port: シリアルポート名

        Returns:
            bool: 接続成功時True

        Raises:
            LinkConnectError: 接続失敗時 (状態はDisconnectedのまま)
        """
        if self.is_connected():
            logger.info(
                f"Field link already connected to {self._endpoint}, ignoring connect"
            )
            return True

        if not com_port:
            logger.error("Cannot connect field link: COM port is empty")
            raise LinkConnectError("COM port is not configured")

        try:
            await self._client.connect(com_port)
        except LinkConnectError as e:
            logger.error(f"Field link connect failed: {e}")
            raise
        except (ConnectionError, OSError, asyncio.TimeoutError) as e:
            logger.error(f"Field link connect failed: {e}")
            raise LinkConnectError(f"Failed to connect to {com_port}: {e}") from e

        self._generation += 1
        self._endpoint = EndpointConfig(plant_id=plant_id, com_port=com_port)
        logger.info(f"Field link connected (plantId={plant_id!r}, comPort={com_port!r})")
        self._set_state(LinkState.CONNECTED)
        return True

    async def read_snapshot(self) -> Snapshot:
        """スナップショットを1件読み取る

        失敗時は例外を送出する前にDisconnectedへ遷移する。再試行はしない。
        読み取り中に切断・再接続された場合、古い読み取りの失敗では
        新しい接続を落とさない。

        Returns:
            Snapshot: 読み取った計測値

        Raises:
            ReadError: 未接続、通信エラー、異常応答、デコード失敗時
        """
        if not self.is_connected():
            raise ReadError("Field link is not connected")

        generation = self._generation
        plant_id = self._endpoint.plant_id if self._endpoint else ""
        try:
            registers: list[int] = []
            for address, count in self._register_map.blocks():
                registers.extend(
                    await self._client.read_holding_registers(address, count)
                )
            snapshot = decode_snapshot(
                registers, boiler_id=self._boiler_id, plant_id=plant_id
            )
        except _READ_FAILURES as e:
            if generation != self._generation or not self.is_connected():
                logger.debug(f"Read from a previous connection failed: {e}")
            else:
                logger.error(f"Snapshot read failed, dropping field link: {e}")
                await self._drop_link()
            if isinstance(e, ReadError):
                raise
            raise ReadError(f"Snapshot read failed: {e}") from e

        logger.debug("Successfully read all registers")
        return snapshot

    async def disconnect(self) -> None:
        """フィールド機器から切断する (未接続時は何もしない)"""
        if not self.is_connected():
            return
        logger.info("Disconnecting field link")
        await self._drop_link()

    async def _drop_link(self) -> None:
        try:
            await self._client.close()
        except (ConnectionError, OSError) as e:
            logger.warning(f"Error while closing field client: {e}")
        finally:
            self._endpoint = None
            self._set_state(LinkState.DISCONNECTED)
