"""配信トランスポート管理

Socket.IOクライアントを1つ所有し、接続状態を
Disconnected / Connecting / Connected として公開する。

- 再接続はSocket.IOクライアント自身の方式に任せる (固定間隔)
- 未接続時のpublishは何もしない (キュー・リトライなし)
"""

import asyncio
import contextlib
from enum import Enum
from typing import Callable, Sequence

import socketio
from socketio.exceptions import ConnectionError as SocketIOConnectionError
from socketio.exceptions import SocketIOError

from backend.errors import TransportError
from backend.logging import transport_logger as logger
from schemas import Snapshot

# サーバー側から切断された場合、Socket.IOクライアントは再接続しない
SERVER_DISCONNECT_REASON = "server disconnect"


class TransportState(str, Enum):
    """トランスポート状態

    Attributes:
        DISCONNECTED: 未接続
        CONNECTING: 接続中 (初回接続または自動再接続待ち)
        CONNECTED: 接続済み (配信可能)
    """

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


TransportListener = Callable[[TransportState], None]


class TransportLinkManager:
    """Socket.IO配信リンク

    使用例:
        >>> transport = TransportLinkManager("http://localhost:5000")
        >>> await transport.connect()
        >>> await transport.publish("realtime", snapshot)

    Attributes:
        url (str): ブローカーURL
    """

    def __init__(
        self,
        url: str,
        reconnection: bool = True,
        reconnection_delay: float = 5.0,
        reconnection_attempts: int = 0,
        transports: Sequence[str] = ("websocket",),
        client: socketio.AsyncClient | None = None,
    ) -> None:
        """
        Args:
            url: ブローカーURL
            reconnection: 自動再接続を有効にするか
            reconnection_delay: 再接続間隔 (秒、固定)
            reconnection_attempts: 再接続試行回数 (0で無制限)
            transports: 使用するトランスポート (websocketのみ)
            client: 差し替え用クライアント (テスト用)
        """
        self.url = url
        self._reconnection = reconnection
        self._transports = list(transports)
        self._client = client or socketio.AsyncClient(
            reconnection=reconnection,
            reconnection_attempts=reconnection_attempts,
            reconnection_delay=reconnection_delay,
            reconnection_delay_max=reconnection_delay,
            randomization_factor=0,
        )
        self._client.on("connect", self._on_connect)
        self._client.on("disconnect", self._on_disconnect)
        self._client.on("connect_error", self._on_connect_error)

        self._state = TransportState.DISCONNECTED
        self._connect_task: asyncio.Task | None = None
        self._closing = False
        self._listeners: list[TransportListener] = []

    @property
    def state(self) -> TransportState:
        return self._state

    def is_connected(self) -> bool:
        return self._state is TransportState.CONNECTED

    def add_listener(self, listener: TransportListener) -> None:
        """状態変更の通知先を登録"""
        self._listeners.append(listener)

    def _set_state(self, state: TransportState) -> None:
        if state is self._state:
            return
        self._state = state
        logger.info(f"Transport state changed: {state.value}")
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                logger.error(f"Transport listener failed: {e}")

    # --------------------------
    #  Socket.IO イベント
    # --------------------------
    async def _on_connect(self) -> None:
        logger.info(f"Connected to transport server: {self.url}")
        self._set_state(TransportState.CONNECTED)

    async def _on_disconnect(self, *args: object) -> None:
        reason = args[0] if args else None
        if self._closing or not self._reconnection or reason == SERVER_DISCONNECT_REASON:
            logger.info(f"Disconnected from transport server (reason={reason})")
            self._set_state(TransportState.DISCONNECTED)
        else:
            logger.warning(
                f"Transport connection lost (reason={reason}), waiting for reconnect"
            )
            self._set_state(TransportState.CONNECTING)

    async def _on_connect_error(self, data: object = None) -> None:
        logger.warning(f"Transport connect error: {data}")

    # --------------------------
    #  ライフサイクル
    # --------------------------
    async def connect(self) -> None:
        """ブローカーへの接続を開始する

        接続中または接続済みの場合は何もしない。接続処理はバックグラウンドで
        行い、この呼び出しはすぐに戻る。
        """
        if self._state is not TransportState.DISCONNECTED:
            logger.debug(f"Transport connect ignored (state={self._state.value})")
            return

        self._closing = False
        self._set_state(TransportState.CONNECTING)
        self._connect_task = asyncio.get_running_loop().create_task(
            self._run_connect()
        )

    async def _run_connect(self) -> None:
        try:
            await self._client.connect(
                self.url, transports=self._transports, retry=self._reconnection
            )
        except SocketIOConnectionError as e:
            if not self._closing:
                logger.warning(f"Transport connection to {self.url} failed: {e}")
                self._set_state(TransportState.DISCONNECTED)

    async def disconnect(self) -> None:
        """切断し、次にconnect()が呼ばれるまで自動再接続を止める"""
        self._closing = True

        task, self._connect_task = self._connect_task, None
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

        try:
            await self._client.shutdown()
        except (SocketIOError, OSError) as e:
            logger.warning(f"Error while shutting down transport client: {e}")

        self._set_state(TransportState.DISCONNECTED)
        logger.info("Transport disconnected")

    async def publish(self, channel: str, snapshot: Snapshot) -> bool:
        """スナップショットを配信する

        Connected以外では何もせずFalseを返す。送信エラーはログに残して破棄する。

        Args:
            channel: イベント名 (例: "realtime")
            snapshot: 配信するスナップショット

        Returns:
            bool: 送信した場合True、破棄した場合False
        """
        if not self.is_connected():
            logger.debug(f"Transport not connected, skipping send to {channel!r}")
            return False

        try:
            await self._client.emit(channel, snapshot.to_payload())
        except (SocketIOError, OSError) as e:
            error = TransportError(f"Failed to emit {channel!r}: {e}")
            logger.warning(f"{error}, snapshot dropped")
            return False

        logger.debug(f"Sent snapshot to {channel!r}")
        return True
