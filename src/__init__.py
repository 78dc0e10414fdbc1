"""
Boiler Telemetry Dashboard - 熱分解プラント ボイラー監視システム

## アーキテクチャ概要

レイヤー構造 (依存関係は下位→上位のみ):

┌─────────────────────────────────────────────────────┐
│ frontend/                                           │  最上位層
│  └── dashboard_app.py - Streamlit UI               │
├─────────────────────────────────────────────────────┤
│ api/                                                │  API層
│  └── services/telemetry_service.py - 一元管理       │
├─────────────────────────────────────────────────────┤
│ backend/                                            │  中間層
│  ├── scheduler.py - ポーリング/配信スケジューラ     │
│  ├── field/ - フィールドリンク (Modbus ASCII)       │
│  ├── transport/ - 配信リンク (Socket.IO)            │
│  ├── config_store.py - 接続先設定の保存             │
│  └── logging/ - アプリケーションロガー             │
├─────────────────────────────────────────────────────┤
│ config/                                             │  設定層
│  └── settings.py - 環境変数管理 (Pydantic Settings)│
├─────────────────────────────────────────────────────┤
│ schemas/                                            │  最下位層
│  ├── snapshot.py - Snapshot / Indicator            │
│  └── endpoint.py - EndpointConfig                  │
└─────────────────────────────────────────────────────┘

## 依存ルール

1. **上位層 → 下位層**: 許可 (frontend → api → backend → config → schemas)
2. **下位層 → 上位層**: 禁止 (循環参照防止)
3. **schemas/**: 外部ライブラリ (pydantic) のみに依存
4. **frontend/**: バックエンドとはHTTP (api_client) 経由でのみ通信

## 使用例

```python
from schemas import Snapshot, EndpointConfig
from config import Settings
from backend.field.link import FieldLinkManager
```
"""

__version__ = "0.1.0"
__author__ = "Moge800"
