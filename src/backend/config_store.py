"""接続先設定ストア

責務:
- プラントID / COMポートのJSONファイルへの保存
- 起動時の読み込み (未保存・破損時はゼロ値)
"""

import json
from pathlib import Path

from pydantic import ValidationError

from backend.errors import ConfigIOError
from backend.logging import backend_logger as logger
from schemas import EndpointConfig


class EndpointConfigStore:
    """接続先設定ストア

    保存した値は加工せずにそのまま書き出し、次の save() までは
    load() が同じ値を返す。

    使用例:
        >>> store = EndpointConfigStore("config.json")
        >>> store.save(EndpointConfig(plant_id="Plant-7", com_port="COM9"))
        >>> store.load().com_port
        'COM9'
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        """保存先ファイルパス"""
        return self._path

    def load(self) -> EndpointConfig:
        """保存済みの接続先設定を読み込む

        ファイルが無い場合はゼロ値を返す。読み込みや解析に失敗した場合も
        警告ログを出してゼロ値を返す (例外は送出しない)。

        Returns:
            EndpointConfig: 接続先設定
        """
        if not self._path.exists():
            logger.info(f"Endpoint config not found at {self._path}, using defaults")
            return EndpointConfig()

        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return EndpointConfig.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            error = ConfigIOError(f"Failed to load endpoint config from {self._path}: {e}")
            logger.warning(f"{error}, using defaults")
            return EndpointConfig()

    def save(self, config: EndpointConfig) -> None:
        """接続先設定を保存する

        Args:
            config: 保存する接続先設定

        Raises:
            ConfigIOError: ファイル書き込みに失敗した場合
        """
        data = config.model_dump(by_alias=True)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.error(f"Failed to save endpoint config to {self._path}: {e}")
            raise ConfigIOError(
                f"Failed to save endpoint config to {self._path}: {e}"
            ) from e

        logger.info(
            f"Endpoint config saved (plantId={config.plant_id!r}, "
            f"comPort={config.com_port!r})"
        )
