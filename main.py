#!/usr/bin/env python3
"""ボイラー監視ダッシュボード統合ランチャー

FastAPI (バックエンド) + Streamlit (フロントエンド) を起動し、
両プロセスを監視する。

使い方:
    python main.py
    または
    uv run python main.py
"""

import atexit
import signal
import subprocess
import sys
import time
from pathlib import Path
from typing import Optional
from logging import Logger

import httpx

# プロジェクトルートをPythonパスに追加（インポートパス解決のため）
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / "src"))


# --------------------------
#  設定
# --------------------------
STREAMLIT_PORT = 8501
API_STARTUP_TIMEOUT = 30  # 秒
STREAMLIT_STARTUP_DELAY = 3  # 秒
MONITOR_INTERVAL = 2  # 秒


# --------------------------
#  プロセス管理
# --------------------------
class ProcessManager:
    """複数プロセスのライフサイクルを管理"""

    def __init__(self, logger: Logger) -> None:
        self.logger = logger
        self.api_process: Optional[subprocess.Popen] = None
        self.streamlit_process: Optional[subprocess.Popen] = None

    def cleanup(self) -> None:
        """全プロセスを安全に停止

        APIサーバーはSIGTERMで停止し、lifespan終了処理で
        フィールドリンクと配信リンクを切断させる。
        """
        self.logger.info("シャットダウン中...")
        self._stop_process(self.streamlit_process, "Streamlit")
        self._stop_process(self.api_process, "APIサーバー")
        self.logger.info("シャットダウン完了")

    def _stop_process(self, process: Optional[subprocess.Popen], name: str) -> None:
        """プロセスを安全に終了"""
        if process and process.poll() is None:
            self.logger.info(f"{name}を停止中...")
            process.terminate()
            try:
                process.wait(timeout=5)
            except subprocess.TimeoutExpired:
                self.logger.warning(f"{name}の停止がタイムアウト、強制終了します")
                process.kill()
                process.wait()


def start_api_server(logger: Logger, host: str, port: int) -> subprocess.Popen:
    """FastAPI サーバーを起動

    Returns:
        subprocess.Popen: APIサーバープロセス
    """
    logger.info(f"APIサーバーを起動中... ({host}:{port})")

    return subprocess.Popen(
        [
            sys.executable,
            "-m",
            "uvicorn",
            "src.api.main:app",
            "--host",
            host,
            "--port",
            str(port),
        ],
    )


def wait_for_api_ready(logger: Logger, host: str, port: int) -> bool:
    """APIサーバーの起動を待機

    Returns:
        bool: 起動成功ならTrue
    """
    logger.info("APIサーバーの起動を待機中...")

    for _ in range(API_STARTUP_TIMEOUT):
        try:
            response = httpx.get(f"http://{host}:{port}/health", timeout=2.0)
            if response.status_code == 200:
                logger.info("✓ APIサーバー正常起動")
                return True
        except httpx.RequestError:
            pass
        time.sleep(1)

    logger.error("APIサーバーの起動がタイムアウトしました")
    return False


def start_streamlit(logger: Logger) -> subprocess.Popen:
    """Streamlit サーバーを起動

    Returns:
        subprocess.Popen: Streamlitプロセス
    """
    logger.info(f"Streamlitを起動中... (port {STREAMLIT_PORT})")

    process = subprocess.Popen(
        [
            sys.executable,
            "-m",
            "streamlit",
            "run",
            "src/frontend/dashboard_app.py",
            "--server.port",
            str(STREAMLIT_PORT),
            "--server.headless",
            "true",
        ],
    )

    # Streamlitの起動を待つ
    time.sleep(STREAMLIT_STARTUP_DELAY)
    logger.info(f"✓ Streamlit起動 (PID: {process.pid})")

    return process


def main() -> None:
    """メインエントリーポイント"""
    from backend.config_helpers import get_settings
    from backend.logging import launcher_logger as logger

    settings = get_settings()

    print("=" * 50)
    print("ボイラー監視ダッシュボード起動スクリプト")
    print("(FastAPI + Streamlit 構成)")
    print("=" * 50)
    print()

    manager = ProcessManager(logger)

    # シグナルハンドラとatexit登録
    def signal_handler(signum: int, frame: object) -> None:
        manager.cleanup()
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)
    atexit.register(manager.cleanup)

    try:
        # 1. APIサーバー起動
        manager.api_process = start_api_server(
            logger, settings.API_HOST, settings.API_PORT
        )

        if not wait_for_api_ready(logger, settings.API_HOST, settings.API_PORT):
            logger.error("APIサーバーの起動に失敗しました")
            manager.cleanup()
            sys.exit(1)

        # 2. Streamlit起動
        manager.streamlit_process = start_streamlit(logger)

        print()
        print("=" * 50)
        print("起動完了!")
        print("=" * 50)
        print()
        print(f"  API:       http://{settings.API_HOST}:{settings.API_PORT}")
        print(f"  Frontend:  http://localhost:{STREAMLIT_PORT}")
        print(f"  Transport: {settings.TRANSPORT_URL}")
        print()
        print("Ctrl+C で終了")
        print()

        # プロセス監視ループ
        while True:
            if manager.api_process and manager.api_process.poll() is not None:
                logger.error("APIサーバーが予期せず停止しました")
                break

            if (
                manager.streamlit_process
                and manager.streamlit_process.poll() is not None
            ):
                logger.error("Streamlitが予期せず停止しました")
                break

            time.sleep(MONITOR_INTERVAL)

    except KeyboardInterrupt:
        logger.info("ユーザーによる停止")

    finally:
        manager.cleanup()
        sys.exit(0)


if __name__ == "__main__":
    main()
