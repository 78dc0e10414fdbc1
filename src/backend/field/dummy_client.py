import random

from .base import BaseFieldClient
from backend.errors import ReadError
from backend.logging import field_logger as logger
from backend.field.decoder import CHANNEL_LAYOUT, OPERATIONAL_INDICATORS

# ダミーデータ生成用の値域 (チャネル名 → (最小, 最大))
_DUMMY_RANGES: dict[str, tuple[int, int]] = {
    "reactor_temp": (350, 450),
    "separator_temp": (150, 220),
    "furnace_temp": (600, 700),
    "condenser_temp": (30, 60),
    "atm_temp": (20, 40),
    "reactor_pressure": (0, 5),
    "gas_tank_pressure": (0, 3),
    "process_start_time": (900, 1000),
    "time_of_reaction": (120, 360),
    "process_end_time": (1300, 1400),
    "cooling_end_time": (1400, 1600),
}

# 安全表示が異常になる確率
ALARM_PROBABILITY = 0.05


class DummyFieldClient(BaseFieldClient):
    """ダミーのフィールド機器クライアント (開発/テスト用)

    USE_FIELD_DEVICE=false の場合に使用する。実機なしで
    ポーリングと配信の流れを確認できるよう、それらしい値を返す。

    先頭ブロック (register_start) を読むたびにレジスタイメージを作り直し、
    後続ブロックは同じイメージから返す。
    """

    def __init__(self, register_start: int) -> None:
        self._register_start = register_start
        self._port: str | None = None
        self._image: list[int] = []

    @property
    def connected(self) -> bool:
        return self._port is not None

    async def connect(self, com_port: str) -> None:
        self._port = com_port
        logger.info(f"Dummy field device attached to {com_port}")

    async def close(self) -> None:
        self._port = None
        self._image = []

    async def read_holding_registers(self, address: int, count: int) -> list[int]:
        if self._port is None:
            raise ReadError("Dummy field device not connected")

        offset = address - self._register_start
        if offset < 0:
            raise ReadError(f"Register {address} is outside the dummy register map")

        if offset == 0 or not self._image:
            self._image = [self._dummy_value(name) for name in CHANNEL_LAYOUT]

        frame = self._image + [0] * max(0, offset + count - len(self._image))
        return frame[offset : offset + count]

    @staticmethod
    def _dummy_value(channel: str) -> int:
        if channel in _DUMMY_RANGES:
            low, high = _DUMMY_RANGES[channel]
            return random.randint(low, high)
        if channel in OPERATIONAL_INDICATORS:
            return 1  # 運転表示は正常 (1)
        return 1 if random.random() < ALARM_PROBABILITY else 0
