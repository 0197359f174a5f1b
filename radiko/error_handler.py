"""
エラーハンドリングモジュール

このモジュールはradikoクライアントの統一エラーハンドリングを提供します。
- カスタム例外クラス（ハンドシェイクの各ステップ別）
- エラー分類（通信・プロトコル違反・サービス側拒否・入力誤り）
- ログ出力とユーザー向けメッセージ生成
"""

import logging
from typing import Optional, Dict, Any
from enum import Enum

from .logging_config import get_logger


class ErrorSeverity(Enum):
    """エラー重要度"""
    LOW = "low"           # 軽微な警告
    MEDIUM = "medium"     # 注意が必要なエラー
    HIGH = "high"         # 重要なエラー
    CRITICAL = "critical" # 致命的なエラー


class ErrorCategory(Enum):
    """エラーカテゴリ"""
    NETWORK = "network"                   # 一時的な通信エラー（呼び出し側で再試行可）
    CANCELLED = "cancelled"               # タイムアウト・キャンセル
    PROTOCOL = "protocol"                 # プロトコル違反（ヘッダー欠落・不正な応答）
    REJECTED = "rejected"                 # サービス側の拒否（地域制限・ログイン失敗）
    INPUT = "input"                       # 呼び出し側の入力誤り
    MEDIA = "media"                       # ffmpeg/ffplay 関連
    CONFIGURATION = "configuration"       # 設定関連
    UNKNOWN = "unknown"                   # 不明


# カスタム例外クラス群

class RadikoError(Exception):
    """radikoクライアント基底例外クラス

    step には失敗したステップ名（area, seed, login, check, auth1, auth2,
    stations, playlist, stream, player ...）が入る。
    """
    category = ErrorCategory.UNKNOWN
    severity = ErrorSeverity.MEDIUM

    def __init__(self, message: str, step: str = "",
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.step = step
        self.context = context or {}

    def __str__(self) -> str:
        if self.step:
            return f"{self.step}: {self.message}"
        return self.message


# 通信エラー

class NetworkError(RadikoError):
    """接続失敗などの一時的な通信エラー"""
    category = ErrorCategory.NETWORK


class RequestCancelledError(RadikoError):
    """タイムアウトまたは呼び出し側によるキャンセル"""
    category = ErrorCategory.CANCELLED
    severity = ErrorSeverity.LOW


# プロトコル違反

class ProtocolError(RadikoError):
    """サーバー応答がプロトコルの前提を満たさない"""
    category = ErrorCategory.PROTOCOL
    severity = ErrorSeverity.HIGH


class GeoLookupError(ProtocolError):
    """エリア判定の応答を解析できない"""


class EmptyAreaError(ProtocolError):
    """エリアIDが空"""


class SeedNotFoundError(ProtocolError):
    """playerCommon.js から認証キーを取り出せない"""


class SessionCookieMissingError(ProtocolError):
    """radiko_session クッキーが返されない"""


class MissingAuthTokenError(ProtocolError):
    """認証トークンが取得できない"""


class InvalidKeyBoundsError(ProtocolError):
    """KeyOffset/KeyLength が不正（クライアントとサーバーの仕様のずれ）"""


class SecondAuthFailedError(ProtocolError):
    """auth2 が 200 以外を返した"""


class CatalogFetchError(ProtocolError):
    """放送局一覧の取得失敗"""


class CatalogParseError(ProtocolError):
    """放送局一覧XMLの解析失敗"""


class PlaylistFetchError(ProtocolError):
    """プレイリストXMLの取得失敗"""


class PlaylistParseError(ProtocolError):
    """プレイリストXMLの解析失敗"""


# サービス側の拒否

class RejectedError(RadikoError):
    """サービス側で拒否された"""
    category = ErrorCategory.REJECTED
    severity = ErrorSeverity.HIGH


class GeoRestrictedError(RejectedError):
    """国外IPなどによる地域制限"""


class LoginError(RejectedError):
    """プレミアム会員ログインに失敗"""


# 入力誤り

class InputError(RadikoError):
    """呼び出し側の入力誤り"""
    category = ErrorCategory.INPUT


class InvalidWindowError(InputError):
    """録音区間が不正（長さが0以下など）"""


class StationNotFoundError(InputError):
    """放送局IDが見つからない"""


# 外部プロセス

class PlayerError(RadikoError):
    """ffmpeg/ffplay による再生エラー"""
    category = ErrorCategory.MEDIA
    severity = ErrorSeverity.HIGH


class RecordingError(RadikoError):
    """ffmpeg による録音エラー"""
    category = ErrorCategory.MEDIA
    severity = ErrorSeverity.HIGH


class ConfigurationError(RadikoError):
    """設定エラー"""
    category = ErrorCategory.CONFIGURATION
    severity = ErrorSeverity.HIGH


class ErrorHandler:
    """統一エラーハンドラー

    例外をカテゴリと重要度に応じたレベルでログに記録し、
    ユーザー向けのメッセージを返す。
    """

    # カテゴリ別のユーザー向けヒント
    HINTS = {
        ErrorCategory.NETWORK: "ネットワーク接続を確認して再実行してください",
        ErrorCategory.CANCELLED: "タイムアウトしました。時間をおいて再実行してください",
        ErrorCategory.PROTOCOL: "radikoの仕様が変更された可能性があります",
        ErrorCategory.REJECTED: "アカウントまたは接続元地域を確認してください",
        ErrorCategory.INPUT: "入力内容を確認してください",
        ErrorCategory.MEDIA: "ffmpeg/ffplay のインストールを確認してください",
        ErrorCategory.CONFIGURATION: "設定ファイルを確認してください",
    }

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or get_logger("radiko.ErrorHandler")
        self.error_count_by_category: Dict[str, int] = {}

    def handle_error(self, error: Exception,
                     context: Optional[Dict[str, Any]] = None) -> str:
        """エラーを記録し、ユーザー向けメッセージを返す"""
        if isinstance(error, RadikoError):
            category = error.category
            severity = error.severity
            if error.context:
                context = {**(context or {}), **error.context}
        else:
            category = ErrorCategory.UNKNOWN
            severity = ErrorSeverity.CRITICAL

        key = category.value
        self.error_count_by_category[key] = self.error_count_by_category.get(key, 0) + 1

        self.logger.log(self._get_log_level(severity), f"{category.value}: {error}")
        if context:
            self.logger.debug(f"Context: {context}")

        hint = self.HINTS.get(category)
        if hint:
            return f"{error} ({hint})"
        return str(error)

    def _get_log_level(self, severity: ErrorSeverity) -> int:
        """重要度に対応するログレベルを取得"""
        level_map = {
            ErrorSeverity.LOW: logging.INFO,
            ErrorSeverity.MEDIUM: logging.WARNING,
            ErrorSeverity.HIGH: logging.ERROR,
            ErrorSeverity.CRITICAL: logging.CRITICAL
        }
        return level_map.get(severity, logging.ERROR)


# グローバルエラーハンドラーインスタンス
_global_error_handler: Optional[ErrorHandler] = None


def get_error_handler() -> ErrorHandler:
    """グローバルエラーハンドラーを取得"""
    global _global_error_handler
    if _global_error_handler is None:
        _global_error_handler = ErrorHandler()
    return _global_error_handler


def handle_error(error: Exception, context: Optional[Dict[str, Any]] = None) -> str:
    """エラーを処理（便利関数）"""
    return get_error_handler().handle_error(error, context)
