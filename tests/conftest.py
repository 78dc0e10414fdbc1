"""pytest設定とフィクスチャ"""

import asyncio
import os
import sys
import tempfile
from pathlib import Path
import shutil
from unittest.mock import AsyncMock, MagicMock

import pytest

# srcディレクトリをパスに追加
project_root = Path(__file__).parent.parent
src_dir = project_root / "src"
sys.path.insert(0, str(src_dir))

# テスト実行前に.envファイルを準備(.env.exampleからコピー)
env_file = project_root / ".env"
env_example = project_root / ".env.example"
if not env_file.exists() and env_example.exists():
    shutil.copy(env_example, env_file)

# テスト用環境変数を設定
os.environ["USE_FIELD_DEVICE"] = "false"
os.environ["BOILER_ID"] = "0"
os.environ["POLL_INTERVAL"] = "2.0"
os.environ["TRANSPORT_URL"] = "http://127.0.0.1:5999"
os.environ["TRANSPORT_RECONNECT"] = "false"
os.environ["CONFIG_FILE"] = str(Path(tempfile.gettempdir()) / "boiler_test_config.json")
os.environ["LOG_LEVEL"] = "INFO"

from backend.errors import ReadError  # noqa: E402
from backend.field.base import BaseFieldClient  # noqa: E402

REGISTER_START = 4466

# 17チャネル + 余り7レジスタ (3ブロック x 8)
SAMPLE_REGISTERS: list[int] = [
    412, 180, 650, 45, 31,  # 温度
    2, 1,  # 圧力
    930, 240, 1330, 1500,  # 工程タイマー
    1, 1,  # 運転表示 (正常)
    0, 0, 1, 0,  # 安全表示 (要メンテナンスのみ異常)
] + [0] * 7


class FakeFieldClient(BaseFieldClient):
    """テスト用のフィールド機器クライアント

    読み取り回数・同時実行数を記録し、任意のタイミングで
    接続エラーや読み取りエラーを発生させられる。
    """

    def __init__(self, registers: list[int] | None = None) -> None:
        self.registers = list(registers if registers is not None else SAMPLE_REGISTERS)
        self.port: str | None = None
        self.connect_error: Exception | None = None
        self.read_error: Exception | None = None
        self.read_delay = 0.0
        self.read_calls: list[tuple[int, int]] = []
        self.close_calls = 0
        self.in_flight = 0
        self.max_in_flight = 0

    @property
    def connected(self) -> bool:
        return self.port is not None

    async def connect(self, com_port: str) -> None:
        if self.connect_error is not None:
            raise self.connect_error
        self.port = com_port

    async def close(self) -> None:
        self.close_calls += 1
        self.port = None

    async def read_holding_registers(self, address: int, count: int) -> list[int]:
        self.read_calls.append((address, count))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.read_delay:
                await asyncio.sleep(self.read_delay)
            if self.read_error is not None:
                raise self.read_error
            offset = address - REGISTER_START
            return self.registers[offset : offset + count]
        finally:
            self.in_flight -= 1

    def fail_next_read(self, message: str = "timeout") -> None:
        """以降の読み取りをReadErrorにする"""
        self.read_error = ReadError(message)


@pytest.fixture
def project_root_path():
    """プロジェクトルートのパスを返す"""
    return Path(__file__).parent.parent


@pytest.fixture
def register_map():
    """標準のレジスタ配置 (4466から8個 x 3ブロック)"""
    from config.settings import FieldRegisterMap

    return FieldRegisterMap(
        REGISTER_START=REGISTER_START, REGISTER_BLOCK_SIZE=8, REGISTER_BLOCK_COUNT=3
    )


@pytest.fixture
def fake_client():
    """テスト用フィールド機器クライアント"""
    return FakeFieldClient()


@pytest.fixture
def mock_sio_client():
    """Socket.IO AsyncClientのモック"""
    client = MagicMock()
    client.connect = AsyncMock()
    client.emit = AsyncMock()
    client.shutdown = AsyncMock()
    return client


@pytest.fixture(autouse=True)
def reset_telemetry_service_singleton():
    """TelemetryServiceシングルトンをテストごとにリセット

    テストがシングルトンを汚染して、実際の起動時に
    テスト用の設定が残るのを防ぐ。
    """
    yield
    try:
        from api.services.telemetry_service import TelemetryService

        TelemetryService._instance = None
        TelemetryService._initialized = False
    except ImportError:
        pass  # インポートできない場合はスキップ
