"""Streamlit ボイラー監視ダッシュボード

FastAPI バックエンドからデータを取得し、表示するUIアプリケーション。
フィールド機器との通信と配信はバックエンドに委譲し、
フロントエンドは設定入力・接続操作・表示に専念。

起動方法:
    streamlit run src/frontend/dashboard_app.py
"""

import sys
from pathlib import Path

import streamlit as st
from streamlit_autorefresh import st_autorefresh
from dotenv import load_dotenv

# プロジェクトルートをパスに追加
sys.path.insert(0, str(Path(__file__).parent.parent))

# .envファイルを読み込む
load_dotenv()

from frontend.styles import get_page_styles
from frontend.components import render_boiler_card, render_link_status
from frontend.api_client import (
    check_api_health,
    fetch_config,
    fetch_snapshot,
    get_api_status,
    request_connect,
    save_config,
)
from schemas import EndpointConfig
from backend.config_helpers import get_refresh_interval
from backend.logging import app_logger as logger

# --------------------------
#  定数定義
# --------------------------
REFRESH_INTERVAL = get_refresh_interval()

# --------------------------
#  ページ基本設定
# --------------------------
st.set_page_config(
    page_title="Boiler Monitor",
    layout="wide",
)

st.markdown(get_page_styles(), unsafe_allow_html=True)

# --------------------------
#  自動更新
# --------------------------
st_autorefresh(interval=int(REFRESH_INTERVAL * 1000), key="datarefresh")

if not check_api_health():
    logger.error("API server is not available!")
    st.error("⚠️ APIサーバーに接続できません。バックエンドが起動しているか確認してください。")
    st.stop()

# --------------------------
#  接続先設定フォーム
# --------------------------
if "endpoint" not in st.session_state:
    st.session_state["endpoint"] = fetch_config()

endpoint: EndpointConfig = st.session_state["endpoint"]

with st.form("endpoint_form"):
    col_plant, col_port, col_save = st.columns([3, 3, 1])
    with col_plant:
        plant_id = st.text_input(
            "Plant ID",
            value=endpoint.plant_id,
            placeholder="Please Enter Plant ID",
        )
    with col_port:
        com_port = st.text_input(
            "COM Port",
            value=endpoint.com_port,
            placeholder="Please Enter COM PORT i.e COM9",
        )
    with col_save:
        submitted = st.form_submit_button("Save")

if submitted:
    new_endpoint = EndpointConfig(plant_id=plant_id, com_port=com_port)
    if save_config(new_endpoint):
        st.session_state["endpoint"] = new_endpoint
        endpoint = new_endpoint
        st.success("設定を保存しました")
    else:
        st.error("設定の保存に失敗しました")

# --------------------------
#  接続状態 + 接続ボタン
# --------------------------
status = get_api_status()
connected = bool(status["field_link_connected"])

col_status, col_button = st.columns([3, 1])
with col_status:
    render_link_status(connected)
with col_button:
    if st.button("Connect", disabled=connected):
        result = request_connect(endpoint.plant_id, endpoint.com_port)
        if result["connected"]:
            st.rerun()
        st.error(result["message"])

if status.get("last_error") and not connected:
    st.caption(f"最終エラー: {status['last_error']}")

# --------------------------
#  ボイラーカード
# --------------------------
snapshot = fetch_snapshot() if connected else None

if snapshot is not None:
    try:
        render_boiler_card(snapshot)
    except Exception as e:
        # レンダリングエラー時も画面を維持し、更新を継続
        logger.error(f"Rendering error: {e}")
        st.error(f"表示エラー: {e}")

st.markdown(
    f"<div class='footer'>配信: {status['transport_state']} / "
    f"更新間隔：{REFRESH_INTERVAL}秒 / Powered by Streamlit + FastAPI</div>",
    unsafe_allow_html=True,
)
