"""フロントエンドスタイル管理

ダッシュボード画面のCSSスタイルと表示色を管理する。
"""

# 表示灯の色 (色名 -> 背景色)
INDICATOR_BACKGROUNDS: dict[str, str] = {
    "red": "#7f1d1d",
    "green": "#14532d",
}

# リンク状態の文字色
STATUS_TEXT_COLORS: dict[bool, str] = {
    True: "#16a34a",
    False: "#b91c1c",
}


def get_page_styles() -> str:
    """ページ全体のカスタムCSSスタイルを取得

    Returns:
        str: HTML <style>タグを含むCSS文字列
    """
    return """
    <style>
    /* Streamlitのメニューボタンを非表示 */
    #MainMenu {
        visibility: hidden;
    }
    footer {
        visibility: hidden;
    }
    .block-container {
        padding-top: 1.2rem;
        max-width: 80rem;
    }
    .link-status {
        font-size: 1.4rem;
        font-weight: 700;
        text-align: center;
    }
    .boiler-card {
        border: 2px solid #000000;
        border-radius: 0.3rem;
        padding: 0.8rem;
    }
    .boiler-title {
        font-size: 2.0rem;
        font-weight: 600;
        text-transform: uppercase;
        text-align: center;
    }
    .section-title {
        font-size: 1.4rem;
        font-weight: 600;
        text-transform: uppercase;
        text-align: center;
        margin-top: 0.8rem;
    }
    .reading-row {
        display: flex;
        justify-content: space-between;
        padding: 0.2rem 0.4rem;
        border-bottom: 1px solid #dddddd;
    }
    .indicator-badge {
        color: white;
        border-radius: 0.25rem;
        padding: 0.05rem 0.75rem;
    }
    .card-status {
        font-size: 0.5em;
        color: white;
        border-radius: 0.25rem;
        padding: 0.05rem 0.5rem;
    }
    .footer {
        font-size: 0.7rem;
        color: #888888;
        text-align: right;
        padding-top: 0.2rem;
    }
    </style>
"""
