from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Indicator(str, Enum):
    """表示灯チャネルの状態

    フィールド機器のビット値 (0/1) はデコード時にこの2値へ正規化する。
    赤/緑の色付けはフロントエンド側でのみ行う。

    Attributes:
        NOMINAL: 正常
        ALARM: 異常
    """

    NOMINAL = "nominal"
    ALARM = "alarm"

    @property
    def is_alarm(self) -> bool:
        return self is Indicator.ALARM


# publish時に必ず含まれる17チャネル (ワイヤ上の名前)
CHANNEL_FIELDS: tuple[str, ...] = (
    "reactorTemp",
    "separatorTemp",
    "furnaceTemp",
    "condenserTemp",
    "atmTemp",
    "reactorPressure",
    "gasTankPressure",
    "processStartTime",
    "timeOfReaction",
    "processEndTime",
    "coolingEndTime",
    "nitrogenPurging",
    "carbonDoorStatus",
    "coCh4Leakage",
    "jaaliBlockage",
    "machineMaintenance",
    "autoShutDown",
)


class Snapshot(BaseModel):
    """計測スナップショットのスキーマ

    フィールド機器から1回の読み取りで取得した計測値一式を保持する。
    1ティックで生成され、表示と配信に使われた後は破棄される。

    Attributes:
        id: ボイラーID
        plant_id: 取得元プラントID
        reactor_temp: 反応器温度
        separator_temp: セパレータ温度
        furnace_temp: 炉温度
        condenser_temp: コンデンサ温度
        atm_temp: 外気温度
        reactor_pressure: 反応器圧力
        gas_tank_pressure: ガスタンク圧力
        process_start_time: 工程開始時刻
        time_of_reaction: 反応時間
        process_end_time: 工程終了時刻
        cooling_end_time: 冷却終了時刻
        nitrogen_purging: 窒素パージ表示
        carbon_door_status: カーボン扉状態表示
        co_ch4_leakage: CO/CH4ガス漏れ表示
        jaali_blockage: ジャーリ閉塞表示
        machine_maintenance: 要メンテナンス表示
        auto_shut_down: 自動停止表示
        timestamp: データ取得時刻
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": 0,
                "plantId": "Plant-7",
                "reactorTemp": 412,
                "separatorTemp": 180,
                "furnaceTemp": 650,
                "condenserTemp": 45,
                "atmTemp": 31,
                "reactorPressure": 2,
                "gasTankPressure": 1,
                "processStartTime": 930,
                "timeOfReaction": 240,
                "processEndTime": 1330,
                "coolingEndTime": 1500,
                "nitrogenPurging": "nominal",
                "carbonDoorStatus": "nominal",
                "coCh4Leakage": "nominal",
                "jaaliBlockage": "nominal",
                "machineMaintenance": "alarm",
                "autoShutDown": "nominal",
                "timestamp": "2025-11-12T10:30:00",
            }
        },
    )

    id: int = Field(default=0, ge=0, description="ボイラーID")
    plant_id: str = Field(default="", description="プラントID")

    # 温度
    reactor_temp: float = Field(..., description="反応器温度")
    separator_temp: float = Field(..., description="セパレータ温度")
    furnace_temp: float = Field(..., description="炉温度")
    condenser_temp: float = Field(..., description="コンデンサ温度")
    atm_temp: float = Field(..., description="外気温度")

    # 圧力
    reactor_pressure: float = Field(..., description="反応器圧力")
    gas_tank_pressure: float = Field(..., description="ガスタンク圧力")

    # 工程タイマー
    process_start_time: int = Field(..., ge=0, description="工程開始時刻")
    time_of_reaction: int = Field(..., ge=0, description="反応時間")
    process_end_time: int = Field(..., ge=0, description="工程終了時刻")
    cooling_end_time: int = Field(..., ge=0, description="冷却終了時刻")

    # 運転表示
    nitrogen_purging: Indicator = Field(..., description="窒素パージ")
    carbon_door_status: Indicator = Field(..., description="カーボン扉状態")

    # 安全表示
    co_ch4_leakage: Indicator = Field(..., description="CO/CH4ガス漏れ")
    jaali_blockage: Indicator = Field(..., description="ジャーリ閉塞")
    machine_maintenance: Indicator = Field(..., description="要メンテナンス")
    auto_shut_down: Indicator = Field(..., description="自動停止")

    timestamp: datetime = Field(
        default_factory=datetime.now, description="データ取得時刻"
    )

    @property
    def has_alarm(self) -> bool:
        """いずれかの表示灯チャネルが異常ならTrue"""
        return any(
            indicator.is_alarm
            for indicator in (
                self.nitrogen_purging,
                self.carbon_door_status,
                self.co_ch4_leakage,
                self.jaali_blockage,
                self.machine_maintenance,
                self.auto_shut_down,
            )
        )

    def to_payload(self) -> dict[str, Any]:
        """配信用のJSON互換辞書を返す (キーはcamelCase)

        Returns:
            dict[str, Any]: realtimeチャネルへ送るペイロード
        """
        return self.model_dump(mode="json", by_alias=True)
