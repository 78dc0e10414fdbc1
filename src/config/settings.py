import os
from enum import Enum
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Any

# スナップショット1件に含まれるレジスタチャネル数
SNAPSHOT_CHANNEL_COUNT = 17

_ENV_NOT_FOUND_MESSAGE = (
    "\n❌ .env file not found.\n"
    "Please copy .env.example to .env and configure it:\n"
    "  cp .env.example .env  (Linux/Mac)\n"
    "  Copy-Item .env.example .env  (Windows)\n"
)


class LogLevel(str, Enum):
    """ログレベル

    Attributes:
        DEBUG: デバッグ情報
        INFO: 通常情報
        WARNING: 警告
        ERROR: エラー
    """

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class Parity(str, Enum):
    """シリアル通信のパリティ

    Attributes:
        NONE: パリティなし
        EVEN: 偶数パリティ
        ODD: 奇数パリティ
    """

    NONE = "N"
    EVEN = "E"
    ODD = "O"


class Settings(BaseSettings):
    """アプリケーション設定 (Pydantic Settings)

    .envファイルから環境変数を読み込み、型安全な設定管理を提供する。
    接続先 (プラントID / COMポート) は画面から保存するため、ここには含めない。

    Attributes:
        USE_FIELD_DEVICE: フィールド機器使用フラグ (Falseの場合はダミーデータ)
        FIELD_BAUDRATE: Modbus ASCII ボーレート
        FIELD_BYTESIZE: データビット長 (7 or 8)
        FIELD_PARITY: パリティ (Parity Enum)
        FIELD_STOPBITS: ストップビット (1 or 2)
        FIELD_SLAVE_ID: Modbusスレーブ番号 (1-247)
        FIELD_TIMEOUT: 読み取りタイムアウト秒数
        BOILER_ID: 配信するスナップショットのボイラーID
        POLL_INTERVAL: ポーリング周期 (秒)
        TRANSPORT_URL: Socket.IOブローカーのURL
        TRANSPORT_CHANNEL: 配信イベント名
        TRANSPORT_RECONNECT: トランスポートの自動再接続フラグ
        TRANSPORT_RECONNECT_DELAY: 再接続間隔 (秒)
        TRANSPORT_RECONNECT_ATTEMPTS: 再接続試行回数 (0で無制限)
        CONFIG_FILE: 接続先設定の保存先JSONファイル
        LOG_LEVEL: ログレベル (LogLevel Enum)
        API_HOST: APIサーバーホスト (デフォルト: 127.0.0.1)
        API_PORT: APIサーバーポート (デフォルト: 8000)
        REFRESH_INTERVAL: フロントエンド自動更新間隔 (秒)
        FRONTEND_API_TIMEOUT: フロントエンドのAPI通信タイムアウト (秒)
    """

    USE_FIELD_DEVICE: bool = True

    # Modbus ASCII 7E1 (フィールド機器の既定値)
    FIELD_BAUDRATE: int = Field(default=9600, gt=0)
    FIELD_BYTESIZE: int = Field(default=7, ge=7, le=8)
    FIELD_PARITY: Parity = Parity.EVEN
    FIELD_STOPBITS: int = Field(default=1, ge=1, le=2)
    FIELD_SLAVE_ID: int = Field(default=1, ge=1, le=247)
    FIELD_TIMEOUT: float = Field(default=10.0, ge=0.5, le=60.0)

    BOILER_ID: int = Field(default=0, ge=0)
    POLL_INTERVAL: float = Field(default=2.0, ge=0.1, le=60.0)

    # 配信トランスポート設定
    TRANSPORT_URL: str = "http://localhost:5000"
    TRANSPORT_CHANNEL: str = "realtime"
    TRANSPORT_RECONNECT: bool = True
    TRANSPORT_RECONNECT_DELAY: float = Field(default=5.0, ge=0.0, le=60.0)
    TRANSPORT_RECONNECT_ATTEMPTS: int = Field(default=0, ge=0)

    CONFIG_FILE: str = "config.json"
    LOG_LEVEL: LogLevel = LogLevel.INFO
    API_HOST: str = "127.0.0.1"
    API_PORT: int = Field(default=8000, gt=0, le=65535)

    # フロントエンド設定
    REFRESH_INTERVAL: float = Field(default=2.0, ge=1.0, le=60.0)
    FRONTEND_API_TIMEOUT: float = Field(default=3.0, ge=1.0, le=30.0)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def __init__(self: Any, **kwargs: Any) -> None:
        # 環境変数プレセット: DEBUG_LOG が真なら LOG_LEVEL を DEBUG にする
        # ユーザーが明示的に LOG_LEVEL を設定している場合は上書きしない
        if "LOG_LEVEL" not in kwargs and os.getenv("LOG_LEVEL") is None:
            debug_env = os.getenv("DEBUG_LOG")
            if isinstance(debug_env, str) and debug_env.lower() in (
                "1",
                "true",
                "yes",
                "on",
            ):
                kwargs.setdefault("LOG_LEVEL", LogLevel.DEBUG)

        # .envファイルの存在チェック
        if not os.path.exists(".env") and not kwargs:
            raise FileNotFoundError(_ENV_NOT_FOUND_MESSAGE)

        super().__init__(**kwargs)


class FieldRegisterMap(BaseSettings):
    """フィールド機器の保持レジスタ配置 (Pydantic Settings)

    REGISTER_START から REGISTER_BLOCK_SIZE 個ずつ REGISTER_BLOCK_COUNT 回読み取り、
    連結したレジスタ列の先頭17個を各チャネルに割り当てる。

    Attributes:
        REGISTER_START: 先頭レジスタアドレス
        REGISTER_BLOCK_SIZE: 1回の読み取りレジスタ数
        REGISTER_BLOCK_COUNT: 読み取り回数
    """

    REGISTER_START: int = Field(default=4466, ge=0, le=65535)
    REGISTER_BLOCK_SIZE: int = Field(default=8, ge=1, le=125)
    REGISTER_BLOCK_COUNT: int = Field(default=3, ge=1, le=16)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def __init__(self: Any, **kwargs: Any) -> None:
        if not os.path.exists(".env") and not kwargs:
            raise FileNotFoundError(_ENV_NOT_FOUND_MESSAGE)
        super().__init__(**kwargs)

    @model_validator(mode="after")
    def _check_channel_coverage(self) -> "FieldRegisterMap":
        total = self.REGISTER_BLOCK_SIZE * self.REGISTER_BLOCK_COUNT
        if total < SNAPSHOT_CHANNEL_COUNT:
            raise ValueError(
                f"register map covers {total} registers, "
                f"at least {SNAPSHOT_CHANNEL_COUNT} are required"
            )
        if self.REGISTER_START + total > 65536:
            raise ValueError("register map exceeds the Modbus address space")
        return self

    def blocks(self) -> list[tuple[int, int]]:
        """読み取りブロック (先頭アドレス, レジスタ数) の一覧を返す

        Returns:
            list[tuple[int, int]]: 例: [(4466, 8), (4474, 8), (4482, 8)]
        """
        return [
            (self.REGISTER_START + i * self.REGISTER_BLOCK_SIZE, self.REGISTER_BLOCK_SIZE)
            for i in range(self.REGISTER_BLOCK_COUNT)
        ]
