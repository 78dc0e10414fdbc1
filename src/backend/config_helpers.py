"""設定取得ヘルパー関数

環境変数やPydantic Settingsから各種設定値を取得する関数群。
モジュールレベルでSettingsをシングルトン化し、効率的にアクセス。
"""

from config.settings import FieldRegisterMap, Settings

# 設定のシングルトンインスタンス（モジュールレベルで1回だけ初期化）
_settings = Settings()

# レジスタ配置のシングルトンインスタンス
_register_map = FieldRegisterMap()


def get_settings() -> Settings:
    """アプリケーション設定を取得

    Returns:
        Settings: 設定のシングルトン
    """
    return _settings


def get_register_map() -> FieldRegisterMap:
    """フィールド機器のレジスタ配置を取得

    Returns:
        FieldRegisterMap: レジスタ配置のシングルトン
    """
    return _register_map


def get_use_field_device() -> bool:
    """USE_FIELD_DEVICE設定を取得

    Returns:
        bool: フィールド機器使用フラグ
    """
    return _settings.USE_FIELD_DEVICE


def get_refresh_interval() -> float:
    """フロントエンドのリフレッシュ間隔（秒）を取得

    Returns:
        float: リフレッシュ間隔（秒）
    """
    return _settings.REFRESH_INTERVAL
