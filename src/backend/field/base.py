from abc import ABC, abstractmethod


class BaseFieldClient(ABC):
    """フィールド機器通信クライアントの抽象基底クラス

    新しい機器種別を追加する場合は、このクラスを継承して実装する。
    現在の実装: ModbusFieldClient (Modbus ASCII), DummyFieldClient (開発用)
    """

    @property
    @abstractmethod
    def connected(self) -> bool:
        """接続中ならTrue"""
        ...

    @abstractmethod
    async def connect(self, com_port: str) -> None:
        """指定ポートで機器に接続する

        Args:
            com_port: シリアルポート名 (例: "COM9")

        Raises:
            LinkConnectError: 接続失敗時
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """接続を閉じる (未接続時は何もしない)"""
        ...

    @abstractmethod
    async def read_holding_registers(self, address: int, count: int) -> list[int]:
        """保持レジスタを連続で読み取る

        Args:
            address: 先頭レジスタアドレス (例: 4466)
            count: 読み取るレジスタ数

        Returns:
            list[int]: 読み取ったレジスタ値 (0-65535) length=count

        Raises:
            ReadError: 未接続、タイムアウト、異常応答時
        """
        ...
