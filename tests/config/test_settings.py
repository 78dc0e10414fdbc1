"""config.settingsのテスト"""

from unittest.mock import patch

import pytest
from pydantic import ValidationError

from config.settings import FieldRegisterMap, LogLevel, Parity, Settings


class TestSettings:
    """Settings設定クラスのテスト"""

    def test_settings_loads_from_env(self):
        """環境変数から正しく設定を読み込めるか"""
        settings = Settings()

        assert settings.USE_FIELD_DEVICE is False  # conftest.pyで設定
        assert settings.TRANSPORT_RECONNECT is False  # conftest.pyで設定
        assert settings.TRANSPORT_URL == "http://127.0.0.1:5999"
        assert settings.POLL_INTERVAL == 2.0
        assert settings.LOG_LEVEL == LogLevel.INFO

    def test_settings_serial_defaults_are_ascii_7e1(self):
        """シリアル設定の既定値が 9600bps 7E1 / スレーブ1 / 10秒 であるか"""
        settings = Settings()

        assert settings.FIELD_BAUDRATE == 9600
        assert settings.FIELD_BYTESIZE == 7
        assert settings.FIELD_PARITY == Parity.EVEN
        assert settings.FIELD_STOPBITS == 1
        assert settings.FIELD_SLAVE_ID == 1
        assert settings.FIELD_TIMEOUT == 10.0

    def test_settings_transport_defaults(self):
        """配信チャネルと再接続間隔の既定値"""
        settings = Settings()

        assert settings.TRANSPORT_CHANNEL == "realtime"
        assert settings.TRANSPORT_RECONNECT_DELAY == 5.0
        assert settings.TRANSPORT_RECONNECT_ATTEMPTS == 0

    def test_settings_parity_accepts_letter(self):
        """パリティを1文字 (N/E/O) で指定できるか"""
        settings = Settings(FIELD_PARITY="N")
        assert settings.FIELD_PARITY == Parity.NONE

    def test_settings_invalid_slave_id_raises_error(self):
        """不正なスレーブ番号でValidationErrorが発生するか"""
        with pytest.raises(ValidationError):
            Settings(FIELD_SLAVE_ID=0)

    def test_settings_invalid_poll_interval_raises_error(self):
        """ポーリング周期が0以下ならValidationErrorが発生するか"""
        with pytest.raises(ValidationError):
            Settings(POLL_INTERVAL=0)

    def test_settings_invalid_port_raises_error(self):
        """不正なAPIポート番号でValidationErrorが発生するか"""
        with pytest.raises(ValidationError):
            Settings(API_PORT=99999)

    def test_settings_invalid_log_level_raises_error(self):
        """不正なログレベルでValidationErrorが発生するか"""
        with pytest.raises(ValidationError):
            Settings(LOG_LEVEL="INVALID")

    def test_debug_log_preset_sets_debug_level(self, monkeypatch):
        """DEBUG_LOG=true かつ LOG_LEVEL未指定なら DEBUG になるか"""
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.setenv("DEBUG_LOG", "true")

        settings = Settings(USE_FIELD_DEVICE=False)
        assert settings.LOG_LEVEL == LogLevel.DEBUG

    def test_explicit_log_level_wins_over_debug_preset(self, monkeypatch):
        """LOG_LEVELが明示されていればDEBUG_LOGより優先されるか"""
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        monkeypatch.setenv("DEBUG_LOG", "true")

        settings = Settings()
        assert settings.LOG_LEVEL == LogLevel.WARNING


class TestFieldRegisterMap:
    """保持レジスタ配置のテスト"""

    def test_register_map_defaults(self):
        """既定値が 4466 から 8個 x 3ブロック であるか"""
        register_map = FieldRegisterMap()

        assert register_map.REGISTER_START == 4466
        assert register_map.REGISTER_BLOCK_SIZE == 8
        assert register_map.REGISTER_BLOCK_COUNT == 3

    def test_blocks(self):
        """読み取りブロックが連続したアドレスになるか"""
        register_map = FieldRegisterMap()

        assert register_map.blocks() == [(4466, 8), (4474, 8), (4482, 8)]

    def test_custom_layout(self):
        """1ブロックで17チャネルをカバーする配置も使えるか"""
        register_map = FieldRegisterMap(
            REGISTER_START=100, REGISTER_BLOCK_SIZE=17, REGISTER_BLOCK_COUNT=1
        )
        assert register_map.blocks() == [(100, 17)]

    def test_insufficient_coverage_raises_error(self):
        """17チャネルに満たない配置はValidationErrorになるか"""
        with pytest.raises(ValidationError):
            FieldRegisterMap(REGISTER_BLOCK_SIZE=8, REGISTER_BLOCK_COUNT=2)

    def test_address_space_overflow_raises_error(self):
        """アドレス空間を超える配置はValidationErrorになるか"""
        with pytest.raises(ValidationError):
            FieldRegisterMap(REGISTER_START=65530)


class TestSettingsEnvFileNotFound:
    """環境変数ファイルが見つからない場合のテスト"""

    @patch("os.path.exists")
    def test_settings_raises_error_when_env_file_missing(self, mock_exists):
        """環境変数ファイルが見つからない場合にFileNotFoundErrorが発生するか"""
        mock_exists.return_value = False

        with pytest.raises(FileNotFoundError, match=r".env file not found"):
            Settings()

    @patch("os.path.exists")
    def test_register_map_raises_error_when_env_file_missing(self, mock_exists):
        """環境変数ファイルが見つからない場合にFileNotFoundErrorが発生するか"""
        mock_exists.return_value = False

        with pytest.raises(FileNotFoundError, match=r".env file not found"):
            FieldRegisterMap()
