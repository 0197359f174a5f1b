"""
ネットワーク処理ユーティリティ

radiko API 用の requests.Session 作成と、ステップ名付きのHTTP呼び出しを提供します。
- タイムアウト・呼び出し側の期限（deadline）・キャンセル
- requests の例外をステップ名付きの NetworkError / RequestCancelledError に変換
"""

import threading
import time
from typing import Dict, Optional

import requests

from radiko.error_handler import NetworkError, RequestCancelledError
from radiko.utils.base import LoggerMixin
from radiko.version import __version__


def create_radiko_session(
    additional_headers: Optional[Dict[str, str]] = None
) -> requests.Session:
    """Radiko API用の標準セッションを作成

    Args:
        additional_headers: 追加ヘッダー辞書

    Returns:
        requests.Session: 設定済みセッション

    Note:
        タイムアウトは requests.Session では保持できないため、
        RadikoHTTP が呼び出しごとに指定する。
    """
    session = requests.Session()

    standard_headers = {
        'User-Agent': f'RadikoClient/{__version__}',
        'Accept': '*/*',
        'Accept-Language': 'ja,en;q=0.9',
        'Connection': 'keep-alive'
    }

    if additional_headers:
        standard_headers.update(additional_headers)

    session.headers.update(standard_headers)
    return session


class RadikoHTTP(LoggerMixin):
    """ステップ名付きHTTPクライアント

    すべての呼び出しは逐次・ブロッキング。1回の呼び出しのタイムアウトは
    timeout と期限までの残り時間の小さい方になる。
    """

    DEFAULT_TIMEOUT = 30.0

    def __init__(self,
                 session: Optional[requests.Session] = None,
                 timeout: float = DEFAULT_TIMEOUT,
                 deadline: Optional[float] = None):
        """
        Args:
            session: 使用するセッション（None時は create_radiko_session()）
            timeout: 1リクエストあたりのタイムアウト秒数
            deadline: 現在からの期限秒数（None時は期限なし）
        """
        super().__init__()
        self.session = session or create_radiko_session()
        self.timeout = timeout
        self._deadline_at: Optional[float] = None
        self._cancelled = threading.Event()
        if deadline is not None:
            self.set_deadline(deadline)

    def set_deadline(self, seconds: Optional[float]) -> None:
        """現在から seconds 秒後を期限に設定（None で解除）"""
        if seconds is None:
            self._deadline_at = None
        else:
            self._deadline_at = time.monotonic() + seconds

    def remaining(self) -> Optional[float]:
        """期限までの残り秒数（期限なしはNone）"""
        if self._deadline_at is None:
            return None
        return self._deadline_at - time.monotonic()

    def cancel(self) -> None:
        """以降の呼び出しをキャンセルし、進行中の接続を閉じる"""
        self._cancelled.set()
        self.session.close()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def get(self, step: str, url: str, **kwargs) -> requests.Response:
        return self._send(step, 'get', url, **kwargs)

    def post(self, step: str, url: str, **kwargs) -> requests.Response:
        return self._send(step, 'post', url, **kwargs)

    def _deadline_passed(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def _timeout_for(self, step: str) -> float:
        if self.cancelled:
            raise RequestCancelledError("キャンセルされました", step=step)

        remaining = self.remaining()
        if remaining is None:
            return self.timeout
        if remaining <= 0:
            raise RequestCancelledError("期限を過ぎました", step=step)
        return min(self.timeout, remaining)

    def _send(self, step: str, method: str, url: str, **kwargs) -> requests.Response:
        timeout = self._timeout_for(step)
        self.logger.debug(f"{step}: {method.upper()} {url}")

        sender = getattr(self.session, method)
        try:
            response = sender(url, timeout=timeout, **kwargs)
        except requests.RequestException as e:
            if self.cancelled:
                raise RequestCancelledError("キャンセルされました", step=step) from e
            if isinstance(e, requests.Timeout):
                if self._deadline_passed():
                    raise RequestCancelledError(f"期限を過ぎました ({timeout:.1f}秒): {e}",
                                                step=step) from e
                raise NetworkError(f"タイムアウトしました ({timeout:.1f}秒): {e}",
                                   step=step) from e
            raise NetworkError(f"通信エラー: {e}", step=step) from e

        self.logger.debug(f"{step}: status code: {response.status_code}")
        return response
