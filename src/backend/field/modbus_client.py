import asyncio

from pymodbus import FramerType
from pymodbus.client import AsyncModbusSerialClient
from pymodbus.exceptions import ModbusException

from .base import BaseFieldClient
from backend.errors import LinkConnectError, ReadError
from backend.logging import field_logger as logger
from config.settings import Settings


class ModbusFieldClient(BaseFieldClient):
    """Modbus ASCII フィールド機器クライアント

    シリアルポート経由でプラントの制御器から保持レジスタを読み取る。
    リンク断の判定はFieldLinkManagerが行うため、pymodbus側の
    自動再接続とリトライは無効にしている。

    使用例:
        >>> client = ModbusFieldClient(Settings())
        >>> await client.connect("COM9")
        >>> await client.read_holding_registers(4466, 8)

    Attributes:
        settings (Settings): シリアル通信設定
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self._client: AsyncModbusSerialClient | None = None

    @property
    def connected(self) -> bool:
        return self._client is not None and self._client.connected

    def _framing(self) -> str:
        """ログ用の通信形式 (例: "ASCII 7E1")"""
        return (
            f"ASCII {self.settings.FIELD_BYTESIZE}"
            f"{self.settings.FIELD_PARITY.value}{self.settings.FIELD_STOPBITS}"
        )

    async def connect(self, com_port: str) -> None:
        """シリアルポートを開いてModbusクライアントを準備する

        Args:
            com_port: シリアルポート名

        Raises:
            LinkConnectError: ポートを開けなかった場合
        """
        await self.close()

        client = AsyncModbusSerialClient(
            com_port,
            framer=FramerType.ASCII,
            baudrate=self.settings.FIELD_BAUDRATE,
            bytesize=self.settings.FIELD_BYTESIZE,
            parity=self.settings.FIELD_PARITY.value,
            stopbits=self.settings.FIELD_STOPBITS,
            timeout=self.settings.FIELD_TIMEOUT,
            retries=0,
            reconnect_delay=0,
        )

        try:
            opened = await client.connect()
        except (ModbusException, OSError) as e:
            client.close()
            raise LinkConnectError(
                f"Failed to connect with {self._framing()} to {com_port}: {e}"
            ) from e

        if not opened:
            client.close()
            raise LinkConnectError(
                f"Failed to connect with {self._framing()} to {com_port}"
            )

        self._client = client
        logger.info(f"Connected with {self._framing()} to COM port: {com_port}")

    async def close(self) -> None:
        if self._client is None:
            return
        client, self._client = self._client, None
        client.close()
        logger.debug("Modbus serial client closed")

    async def read_holding_registers(self, address: int, count: int) -> list[int]:
        if self._client is None or not self._client.connected:
            raise ReadError("Modbus client not connected")

        last = address + count - 1
        try:
            result = await self._client.read_holding_registers(
                address, count=count, slave=self.settings.FIELD_SLAVE_ID
            )
        except (ModbusException, OSError, asyncio.TimeoutError) as e:
            raise ReadError(f"Error reading registers {address}-{last}: {e}") from e

        if result.isError():
            raise ReadError(f"Device rejected read of registers {address}-{last}: {result}")

        registers = list(result.registers)
        if len(registers) != count:
            raise ReadError(
                f"Short response for registers {address}-{last}: "
                f"expected {count}, got {len(registers)}"
            )

        logger.debug(f"Read registers {address}-{last}: {registers}")
        return registers
