"""ポーリング/配信スケジューラ

フィールドリンクが接続中の間だけ一定周期でスナップショットを取得し、
トランスポートが接続中なら配信、未接続なら破棄する。

状態:
- IDLE: フィールドリンク未接続 (タイマー停止、保持スナップショットなし)
- POLLING: フィールドリンク接続中 (タイマー動作中)

1回の取得/配信サイクルが終わる前に次のティックが来た場合、
そのティックは読み飛ばす (キューイングしない)。
"""

import asyncio
import contextlib
from enum import Enum
from typing import Any, Callable

from backend.errors import ReadError
from backend.field.link import FieldLinkManager, LinkState
from backend.logging import scheduler_logger as logger
from backend.timer import PeriodicTimer
from backend.transport.link import TransportLinkManager
from schemas import Snapshot

DEFAULT_CHANNEL = "realtime"
DEFAULT_INTERVAL = 2.0  # 秒


class SchedulerState(str, Enum):
    """スケジューラ状態

    Attributes:
        IDLE: 停止中
        POLLING: ポーリング中
    """

    IDLE = "idle"
    POLLING = "polling"


class SchedulerEvent(str, Enum):
    """スケジューラの通知イベント

    Attributes:
        STATE_CHANGED: 状態変更 (data: SchedulerState)
        SNAPSHOT: スナップショット更新 (data: Snapshot)
        LINK_LOST: 読み取り失敗によるリンク断 (data: エラーメッセージ)
    """

    STATE_CHANGED = "state_changed"
    SNAPSHOT = "snapshot"
    LINK_LOST = "link_lost"


SchedulerListener = Callable[[SchedulerEvent, Any], None]


class PollPublishScheduler:
    """ポーリング/配信スケジューラ

    フィールドリンクとトランスポートの所有者ではなく、両者を調停するだけ。
    タイマーと最新スナップショットはスケジューラが保持する。

    使用例:
        >>> scheduler = PollPublishScheduler(field_link, transport_link)
        >>> await scheduler.connect("Plant-7", "COM9")
        >>> scheduler.get_latest_snapshot()
    """

    def __init__(
        self,
        field_link: FieldLinkManager,
        transport_link: TransportLinkManager,
        interval: float = DEFAULT_INTERVAL,
        channel: str = DEFAULT_CHANNEL,
    ) -> None:
        self._field_link = field_link
        self._transport_link = transport_link
        self._channel = channel
        self._timer = PeriodicTimer(interval, self._on_tick)

        self._state = SchedulerState.IDLE
        self._latest: Snapshot | None = None
        self._cycle: asyncio.Task | None = None
        # POLLING開始と明示的な停止のたびに進める (古いサイクルの結果を捨てるため)
        self._epoch = 0
        self._skipped_ticks = 0
        self._listeners: list[SchedulerListener] = []

        self._field_link.add_listener(self._on_field_link_state)

    # --------------------------
    #  問い合わせ
    # --------------------------
    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def interval(self) -> float:
        return self._timer.interval

    @property
    def skipped_ticks(self) -> int:
        """サイクル実行中のため読み飛ばしたティック数"""
        return self._skipped_ticks

    def is_field_link_connected(self) -> bool:
        return self._field_link.is_connected()

    def get_latest_snapshot(self) -> Snapshot | None:
        """最新スナップショット (IDLE時はNone)"""
        return self._latest

    def add_listener(self, listener: SchedulerListener) -> None:
        """イベントの通知先を登録"""
        self._listeners.append(listener)

    def _notify(self, event: SchedulerEvent, data: Any) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, data)
            except Exception as e:
                logger.error(f"Scheduler listener failed on {event.value}: {e}")

    # --------------------------
    #  操作
    # --------------------------
    async def connect(self, plant_id: str, com_port: str) -> bool:
        """フィールドリンクを接続してポーリングを開始する

        接続中の場合は何もしない (周期もリセットしない)。

        Returns:
            bool: 接続中ならTrue

        Raises:
            LinkConnectError: 接続失敗時
        """
        if self._field_link.is_connected():
            logger.info("Field link already connected, connect request ignored")
            return True
        return await self._field_link.connect(plant_id, com_port)

    async def disconnect(self) -> None:
        """フィールドリンクを切断してポーリングを停止する

        実行中のサイクルは取り消してから切断する。
        """
        self._epoch += 1
        await self._cancel_cycle()
        await self._field_link.disconnect()
        self._enter_idle()

    async def shutdown(self) -> None:
        """タイマーと実行中のサイクルを停止する (アプリ終了時)"""
        self._epoch += 1
        self._enter_idle()
        await self._cancel_cycle()
        self._field_link.remove_listener(self._on_field_link_state)
        logger.info("Scheduler shut down")

    async def _cancel_cycle(self) -> None:
        cycle, self._cycle = self._cycle, None
        if cycle is not None and not cycle.done():
            cycle.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await cycle

    async def wait_for_cycle(self) -> None:
        """実行中のサイクルの完了を待つ (テスト用)"""
        if self._cycle is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await self._cycle

    # --------------------------
    #  状態遷移
    # --------------------------
    def _on_field_link_state(self, state: LinkState) -> None:
        if state is LinkState.CONNECTED:
            self._enter_polling()
        else:
            self._enter_idle()

    def _enter_polling(self) -> None:
        if self._state is SchedulerState.POLLING:
            return
        self._epoch += 1
        self._state = SchedulerState.POLLING
        logger.info(f"Polling started (interval={self._timer.interval}s)")
        self._notify(SchedulerEvent.STATE_CHANGED, self._state)
        # 前の接続のサイクルが残っていれば取り消す (読み取りを重ねない)
        if self._cycle is not None and not self._cycle.done():
            self._cycle.cancel()
        # 即時に1サイクル実行してからタイマーを開始
        self._start_cycle()
        self._timer.arm()

    def _enter_idle(self) -> None:
        self._timer.disarm()
        self._latest = None
        if self._state is SchedulerState.IDLE:
            return
        self._state = SchedulerState.IDLE
        logger.info("Polling stopped")
        self._notify(SchedulerEvent.STATE_CHANGED, self._state)

    # --------------------------
    #  取得/配信サイクル
    # --------------------------
    def _on_tick(self) -> None:
        if self._state is not SchedulerState.POLLING:
            return
        if self._cycle is not None and not self._cycle.done():
            self._skipped_ticks += 1
            logger.debug("Previous cycle still running, tick skipped")
            return
        self._start_cycle()

    def _start_cycle(self) -> None:
        self._cycle = asyncio.get_running_loop().create_task(
            self._run_cycle(self._epoch)
        )

    async def _run_cycle(self, epoch: int) -> None:
        if not self._field_link.is_connected():
            logger.debug("Field link not connected, skipping fetch")
            return

        try:
            snapshot = await self._field_link.read_snapshot()
        except ReadError as e:
            if epoch != self._epoch:
                logger.debug(f"Read aborted after stop request: {e}")
                return
            # フィールドリンクは既にDisconnected → IDLEへ遷移済み
            self._enter_idle()
            logger.error(f"Field link lost: {e}")
            self._notify(SchedulerEvent.LINK_LOST, str(e))
            return

        if epoch != self._epoch or self._state is not SchedulerState.POLLING:
            logger.debug("Discarding snapshot from a stale cycle")
            return

        self._latest = snapshot
        self._notify(SchedulerEvent.SNAPSHOT, snapshot)

        if self._transport_link.is_connected():
            await self._transport_link.publish(self._channel, snapshot)
        else:
            logger.debug("Transport not connected, snapshot dropped")
