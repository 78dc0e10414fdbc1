from pathlib import Path

from .logger import apply_log_level, setup_logger

# プロジェクトルートのlogsフォルダを使用
# src/backend/logging/__init__.py → 3つ上がプロジェクトルート
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent.parent
_LOGS_DIR = _PROJECT_ROOT / "logs"

# アプリケーション全体で共通のロガー設定
launcher_logger = setup_logger(
    "backend.launcher", log_file=str(_LOGS_DIR / "launcher.log")
)
field_logger = setup_logger("backend.field", log_file=str(_LOGS_DIR / "field.log"))
transport_logger = setup_logger(
    "backend.transport", log_file=str(_LOGS_DIR / "transport.log")
)
scheduler_logger = setup_logger(
    "backend.scheduler", log_file=str(_LOGS_DIR / "scheduler.log")
)
backend_logger = setup_logger("backend.utils", log_file=str(_LOGS_DIR / "backend.log"))
app_logger = setup_logger(
    "frontend", log_file=str(_LOGS_DIR / "app.log"), level=20
)  # INFO
api_logger = setup_logger("api", log_file=str(_LOGS_DIR / "api.log"), level=20)  # INFO

# LOG_LEVEL設定の適用対象 (バックエンド側)
BACKEND_LOGGERS = (
    field_logger,
    transport_logger,
    scheduler_logger,
    backend_logger,
    api_logger,
)

__all__ = [
    "setup_logger",
    "apply_log_level",
    "launcher_logger",
    "field_logger",
    "transport_logger",
    "scheduler_logger",
    "backend_logger",
    "app_logger",
    "api_logger",
    "BACKEND_LOGGERS",
]
