"""frontend.componentsのテスト"""

from unittest.mock import patch

import pytest

from backend.field.decoder import decode_snapshot
from frontend.components import (
    OPERATIONAL_INDICATOR_ROWS,
    SAFETY_INDICATOR_ROWS,
    TEMPERATURE_ROWS,
    build_indicator_section,
    build_reading_section,
    format_reading,
    indicator_color,
    render_boiler_card,
    render_link_status,
)
from schemas import CHANNEL_FIELDS, Indicator

from conftest import SAMPLE_REGISTERS


@pytest.fixture
def snapshot():
    return decode_snapshot(SAMPLE_REGISTERS, boiler_id=3, plant_id="Plant-7")


class TestIndicatorColor:
    """indicator_color関数のテスト"""

    def test_alarm_is_red(self):
        """異常は赤"""
        assert indicator_color(Indicator.ALARM) == "red"

    def test_nominal_is_green(self):
        """正常は緑"""
        assert indicator_color(Indicator.NOMINAL) == "green"


class TestFormatReading:
    """format_reading関数のテスト"""

    def test_integral_float_has_no_decimal(self):
        assert format_reading(412.0) == "412"

    def test_fractional_float(self):
        assert format_reading(-3.5) == "-3.5"

    def test_int(self):
        assert format_reading(1500) == "1500"


class TestSections:
    """セクションHTML生成のテスト"""

    def test_all_channels_have_a_row(self):
        """表示行が17チャネルをすべて網羅しているか"""
        from frontend import components

        rows = (
            components.TEMPERATURE_ROWS
            + components.PRESSURE_ROWS
            + components.PROCESS_TIMER_ROWS
            + components.OPERATIONAL_INDICATOR_ROWS
            + components.SAFETY_INDICATOR_ROWS
        )
        assert len(rows) == len(CHANNEL_FIELDS) == 17

    def test_reading_section(self, snapshot):
        """温度セクションにラベルと値が含まれるか"""
        html = build_reading_section("Temperature Reading", TEMPERATURE_ROWS, snapshot)

        assert "Temperature Reading" in html
        assert "Reactor Temperature" in html
        assert "412" in html

    def test_operational_indicators_green(self, snapshot):
        """運転表示 (値1) は緑で表示されるか"""
        html = build_indicator_section(
            "Operational Indication", OPERATIONAL_INDICATOR_ROWS, snapshot
        )

        assert html.count(">green<") == 2
        assert ">red<" not in html

    def test_safety_indicators_mark_alarm_red(self, snapshot):
        """安全表示の異常だけが赤で表示されるか"""
        html = build_indicator_section("Safety Indication", SAFETY_INDICATOR_ROWS, snapshot)

        assert html.count(">red<") == 1
        assert html.count(">green<") == 3


class TestRender:
    """Streamlitへの出力のテスト"""

    @patch("frontend.components.st")
    def test_render_boiler_card(self, mock_st, snapshot):
        """ボイラーカードを1回のmarkdownで出力するか"""
        render_boiler_card(snapshot)

        mock_st.markdown.assert_called_once()
        html = mock_st.markdown.call_args.args[0]
        assert "Boiler 3" in html
        assert "Safety Indication" in html
        assert mock_st.markdown.call_args.kwargs["unsafe_allow_html"] is True

    @patch("frontend.components.st")
    def test_render_boiler_card_alarm_badge(self, mock_st, snapshot):
        """表示灯に異常があれば見出しにALARMを表示するか"""
        assert snapshot.has_alarm is True

        render_boiler_card(snapshot)

        html = mock_st.markdown.call_args.args[0]
        assert ">ALARM</span>" in html
        assert ">ACTIVE</span>" not in html

    @patch("frontend.components.st")
    def test_render_boiler_card_active_badge(self, mock_st):
        """表示灯がすべて正常なら見出しにACTIVEを表示するか"""
        registers = list(SAMPLE_REGISTERS)
        registers[15] = 0  # 要メンテナンスを正常に
        snapshot = decode_snapshot(registers, boiler_id=3, plant_id="Plant-7")
        assert snapshot.has_alarm is False

        render_boiler_card(snapshot)

        html = mock_st.markdown.call_args.args[0]
        assert ">ACTIVE</span>" in html
        assert ">ALARM</span>" not in html

    @pytest.mark.parametrize("connected, text",[(True, "Connected"), (False, "Disconnected")])
    @patch("frontend.components.st")
    def test_render_link_status(self, mock_st, connected, text):
        """接続状態のテキストを出力するか"""
        render_link_status(connected)

        html = mock_st.markdown.call_args.args[0]
        assert f">{text}</div>" in html
