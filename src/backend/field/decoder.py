"""フィールド機器レジスタのデコード

保持レジスタ列 (REGISTER_START から連結したもの) を
Snapshotへ変換する関数群。表示灯の0/1はここでIndicatorへ正規化し、
以降のコアでは生の値を扱わない。
"""

from typing import Sequence

from schemas import Indicator, Snapshot

# レジスタ列の先頭からのチャネル割り当て (オフセット順)
CHANNEL_LAYOUT: tuple[str, ...] = (
    "reactor_temp",
    "separator_temp",
    "furnace_temp",
    "condenser_temp",
    "atm_temp",
    "reactor_pressure",
    "gas_tank_pressure",
    "process_start_time",
    "time_of_reaction",
    "process_end_time",
    "cooling_end_time",
    "nitrogen_purging",
    "carbon_door_status",
    "co_ch4_leakage",
    "jaali_blockage",
    "machine_maintenance",
    "auto_shut_down",
)

# 温度・圧力は符号付き16ビット
SIGNED_CHANNELS = frozenset(CHANNEL_LAYOUT[:7])

# 運転表示: 0で異常 (窒素パージ停止 / 扉開)
OPERATIONAL_INDICATORS = frozenset({"nitrogen_purging", "carbon_door_status"})

# 安全表示: 0以外で異常
SAFETY_INDICATORS = frozenset(
    {"co_ch4_leakage", "jaali_blockage", "machine_maintenance", "auto_shut_down"}
)


def to_signed16(value: int) -> int:
    """16ビットレジスタ値を符号付き整数に変換

    Args:
        value: レジスタ値 (0-65535)

    Returns:
        int: 符号付き値 (-32768 ~ 32767)

    Examples:
        >>> to_signed16(0xFFFF)
        -1
        >>> to_signed16(412)
        412
    """
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"register value out of range: {value}")
    return value - 0x10000 if value & 0x8000 else value


def decode_indicator(value: int, alarm_on_zero: bool) -> Indicator:
    """表示灯レジスタをIndicatorへ変換

    Args:
        value: レジスタ値
        alarm_on_zero: Trueなら0を異常とみなす (運転表示)

    Returns:
        Indicator: NOMINAL または ALARM
    """
    is_zero = value == 0
    return Indicator.ALARM if is_zero == alarm_on_zero else Indicator.NOMINAL


def decode_snapshot(
    registers: Sequence[int], boiler_id: int = 0, plant_id: str = ""
) -> Snapshot:
    """レジスタ列からスナップショットを構築

    Args:
        registers: REGISTER_STARTから連結した保持レジスタ値
        boiler_id: ボイラーID
        plant_id: 接続先プラントID

    Returns:
        Snapshot: デコード済みの計測値

    Raises:
        ValueError: レジスタ数不足または値が範囲外の場合
    """
    if len(registers) < len(CHANNEL_LAYOUT):
        raise ValueError(
            f"expected at least {len(CHANNEL_LAYOUT)} registers, got {len(registers)}"
        )

    values: dict[str, object] = {}
    for name, raw in zip(CHANNEL_LAYOUT, registers):
        if name in SIGNED_CHANNELS:
            values[name] = to_signed16(raw)
        elif name in OPERATIONAL_INDICATORS:
            values[name] = decode_indicator(raw, alarm_on_zero=True)
        elif name in SAFETY_INDICATORS:
            values[name] = decode_indicator(raw, alarm_on_zero=False)
        else:
            values[name] = raw

    return Snapshot(id=boiler_id, plant_id=plant_id, **values)
