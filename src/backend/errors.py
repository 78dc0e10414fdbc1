"""テレメトリ同期コアの例外定義

どの例外もプロセスを停止させない。呼び出し側で
Idle / Disconnected / 破棄 のいずれかの状態に落とし込む。
"""


class TelemetryError(Exception):
    """テレメトリ関連エラーの基底クラス"""

    pass


class ConfigIOError(TelemetryError):
    """接続先設定の読み書きエラー

    読み込み時はデフォルト値へフォールバックし、保存時は呼び出し元へ送出する。
    """

    pass


class LinkConnectError(TelemetryError):
    """フィールド機器への接続失敗 (リンクはDisconnectedのまま)"""

    pass


class ReadError(TelemetryError):
    """スナップショット読み取り失敗

    送出前にフィールドリンクはDisconnectedへ遷移している。再試行はしない。
    """

    pass


class TransportError(TelemetryError):
    """配信トランスポートのエラー (内部で回復し、配信は破棄される)"""

    pass
