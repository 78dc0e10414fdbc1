import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logger(
    name: str,
    log_file: Optional[str] = None,
    level: int | str = logging.DEBUG,
    console: bool = True,
    file_encoding: str = "utf-8",
) -> logging.Logger:
    """
    ロガーをセットアップする

    Args:
        name: ロガー名（コンポーネント名を渡す）
        log_file: ログファイルのパス（Noneの場合はファイル出力なし）
        level: ログレベル（数値または "INFO" 等のレベル名）
        console: コンソール出力するかどうか
        file_encoding: ログファイルのエンコーディング

    Returns:
        設定済みのロガーインスタンス
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    # ルートロガーへの二重出力を防ぐ
    logger.propagate = False

    # 既存のハンドラをクリア（重複防止）
    if logger.handlers:
        logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    # コンソールハンドラ
    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    # ファイルハンドラ
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding=file_encoding)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def apply_log_level(loggers: Iterable[logging.Logger], level: int | str) -> None:
    """
    複数ロガーのログレベルをまとめて変更する

    ハンドラ側にはレベルを設定していないため、ロガーのレベルだけで出力が決まる。

    Args:
        loggers: 対象ロガー
        level: ログレベル（数値または "INFO" 等のレベル名）
    """
    for logger in loggers:
        logger.setLevel(level)
