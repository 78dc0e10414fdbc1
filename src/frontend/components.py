"""フロントエンドUIコンポーネント

ボイラーカードの各セクション (温度/圧力/工程時間/運転表示/安全表示) と
接続状態の表示コンポーネントを提供する。

表示灯の赤/緑の判定はこのモジュールだけが行う。
"""

import html

import streamlit as st

from frontend.styles import INDICATOR_BACKGROUNDS, STATUS_TEXT_COLORS
from schemas import Indicator, Snapshot

# (フィールド名, 表示ラベル)
TEMPERATURE_ROWS: tuple[tuple[str, str], ...] = (
    ("reactor_temp", "Reactor Temperature"),
    ("separator_temp", "Separator Temperature"),
    ("furnace_temp", "Furnace Temperature"),
    ("condenser_temp", "Condenser Temperature"),
    ("atm_temp", "Atmosphere Temperature"),
)
PRESSURE_ROWS: tuple[tuple[str, str], ...] = (
    ("reactor_pressure", "Reactor Pressure"),
    ("gas_tank_pressure", "Gas Tank Pressure"),
)
PROCESS_TIMER_ROWS: tuple[tuple[str, str], ...] = (
    ("process_start_time", "Process Start Time"),
    ("time_of_reaction", "Time of Reaction"),
    ("process_end_time", "Process End Time"),
    ("cooling_end_time", "Cooling End Time"),
)
OPERATIONAL_INDICATOR_ROWS: tuple[tuple[str, str], ...] = (
    ("nitrogen_purging", "Nitrogen Purging"),
    ("carbon_door_status", "Carbon Door Status"),
)
SAFETY_INDICATOR_ROWS: tuple[tuple[str, str], ...] = (
    ("co_ch4_leakage", "Co-ch4 Gas Leakage"),
    ("jaali_blockage", "Jaali Blockage"),
    ("machine_maintenance", "Machine Maintenance"),
    ("auto_shut_down", "Auto Shut Down"),
)


def indicator_color(indicator: Indicator) -> str:
    """表示灯の状態を表示色に変換

    Args:
        indicator: 表示灯の状態

    Returns:
        str: "red" (警報) または "green" (正常)

    Examples:
        >>> indicator_color(Indicator.ALARM)
        'red'
        >>> indicator_color(Indicator.NOMINAL)
        'green'
    """
    return "red" if indicator is Indicator.ALARM else "green"


def format_reading(value: float | int) -> str:
    """計測値を表示用文字列に変換

    Examples:
        >>> format_reading(12.0)
        '12'
        >>> format_reading(-3.5)
        '-3.5'
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _reading_row(label: str, value_html: str) -> str:
    return (
        f"<div class='reading-row'><span>{html.escape(label)}</span>"
        f"<span>{value_html}</span></div>"
    )


def _indicator_badge(indicator: Indicator) -> str:
    color = indicator_color(indicator)
    return (
        f"<span class='indicator-badge' "
        f"style='background:{INDICATOR_BACKGROUNDS[color]};'>{color}</span>"
    )


def _card_status_badge(snapshot: Snapshot) -> str:
    if not snapshot.has_alarm:
        return "<span class='card-status'>ACTIVE</span>"
    background = INDICATOR_BACKGROUNDS[indicator_color(Indicator.ALARM)]
    return (
        f"<span class='card-status' style='background:{background};'>ALARM</span>"
    )


def build_reading_section(
    title: str, rows: tuple[tuple[str, str], ...], snapshot: Snapshot
) -> str:
    """数値セクションのHTMLを生成

    Args:
        title: セクション見出し
        rows: (フィールド名, 表示ラベル) の並び
        snapshot: 表示するスナップショット

    Returns:
        str: セクションのHTML
    """
    body = "".join(
        _reading_row(label, format_reading(getattr(snapshot, field)))
        for field, label in rows
    )
    return f"<div class='section-title'>{html.escape(title)}</div>{body}"


def build_indicator_section(
    title: str, rows: tuple[tuple[str, str], ...], snapshot: Snapshot
) -> str:
    """表示灯セクションのHTMLを生成"""
    body = "".join(
        _reading_row(label, _indicator_badge(getattr(snapshot, field)))
        for field, label in rows
    )
    return f"<div class='section-title'>{html.escape(title)}</div>{body}"


def render_link_status(connected: bool) -> None:
    """フィールドリンクの接続状態をレンダリング

    Args:
        connected: 接続中ならTrue
    """
    text = "Connected" if connected else "Disconnected"
    st.markdown(
        f"<div class='link-status' style='color:{STATUS_TEXT_COLORS[connected]};'>"
        f"{text}</div>",
        unsafe_allow_html=True,
    )


def render_boiler_card(snapshot: Snapshot) -> None:
    """ボイラーカードをレンダリング

    温度・圧力・工程時間・運転表示・安全表示の5セクションを
    1枚のカードにまとめて表示する。表示灯が1つでも異常なら
    見出しの状態バッジをALARMにする。

    Args:
        snapshot: 表示するスナップショット
    """
    sections = [
        build_reading_section("Temperature Reading", TEMPERATURE_ROWS, snapshot),
        build_reading_section("Pressure Reading", PRESSURE_ROWS, snapshot),
        build_reading_section("Operational Outputs", PROCESS_TIMER_ROWS, snapshot),
        build_indicator_section(
            "Operational Indication", OPERATIONAL_INDICATOR_ROWS, snapshot
        ),
        build_indicator_section(
            "Safety Indication", SAFETY_INDICATOR_ROWS, snapshot
        ),
    ]
    st.markdown(
        f"<div class='boiler-card'>"
        f"<div class='boiler-title'>Boiler {snapshot.id} "
        f"{_card_status_badge(snapshot)}</div>"
        f"{''.join(sections)}</div>",
        unsafe_allow_html=True,
    )
