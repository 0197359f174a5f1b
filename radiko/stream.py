"""
ストリームURL生成モジュール

認証済みセッションから HLS プレイリストのURLを組み立てます（通信は行いません）。
- ライブ: /so/playlist.m3u8
- タイムフリー: /tf/playlist.m3u8（開始・終了時刻付き）

メディア取得時には URL に加えて X-Radiko-AuthToken ヘッダーが必要です。
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Optional
from urllib.parse import urlencode

from .auth import Session
from .error_handler import InvalidWindowError, MissingAuthTokenError
from .utils.config_utils import DEFAULT_LIVE_HOST
from .utils.datetime_utils import format_radiko_timestamp

AUTH_TOKEN_HEADER = "X-Radiko-AuthToken"

# セグメント長（秒）
SEGMENT_LENGTH = 15


@dataclass
class StreamRequest:
    """メディア取得リクエスト（ffmpeg に渡す内容）"""
    station_id: str
    url: str
    auth_token: str
    duration: Optional[timedelta] = None

    @property
    def is_live(self) -> bool:
        return self.duration is None

    @property
    def headers(self) -> Dict[str, str]:
        return {AUTH_TOKEN_HEADER: self.auth_token}

    @property
    def header_line(self) -> str:
        """'X-Radiko-AuthToken: <token>'"""
        return f"{AUTH_TOKEN_HEADER}: {self.auth_token}"


class StreamURLBuilder:
    """HLS プレイリストURL生成クラス"""

    LIVE_PATH = "/so/playlist.m3u8"
    TIMEFREE_PATH = "/tf/playlist.m3u8"

    def __init__(self, live_host: str = DEFAULT_LIVE_HOST):
        self.live_host = live_host.rstrip('/')

    def build(self, station_id: str, session: Session,
              start_at: Optional[datetime] = None,
              length: Optional[timedelta] = None) -> StreamRequest:
        """開始時刻がなければライブ、あればタイムフリーのリクエストを返す"""
        if start_at is None and length is None:
            return self.live(station_id, session)
        return self.timefree(station_id, session, start_at, length)

    def live(self, station_id: str, session: Session) -> StreamRequest:
        token = self._token(session)
        query = urlencode([
            ('station_id', station_id),
            ('l', SEGMENT_LENGTH),
            ('lsid', session.nonce),
            ('type', 'c'),
        ])
        return StreamRequest(
            station_id=station_id,
            url=f"{self.live_host}{self.LIVE_PATH}?{query}",
            auth_token=token,
        )

    def timefree(self, station_id: str, session: Session,
                 start_at: Optional[datetime],
                 length: Optional[timedelta]) -> StreamRequest:
        validate_window(start_at, length)
        token = self._token(session)

        start = format_radiko_timestamp(start_at)
        end = format_radiko_timestamp(start_at + length)
        query = urlencode([
            ('station_id', station_id),
            ('start_at', start),
            ('ft', start),
            ('end_at', end),
            ('to', end),
            ('l', SEGMENT_LENGTH),
            ('lsid', session.nonce),
            ('type', 'c'),
        ])
        return StreamRequest(
            station_id=station_id,
            url=f"{self.live_host}{self.TIMEFREE_PATH}?{query}",
            auth_token=token,
            duration=length,
        )

    @staticmethod
    def _token(session: Session) -> str:
        if not session.auth_token:
            raise MissingAuthTokenError("セッションに認証トークンがありません", step="stream")
        return session.auth_token


def validate_window(start_at: Optional[datetime], length: Optional[timedelta]) -> None:
    """録音区間を検証

    Raises:
        InvalidWindowError: 開始時刻がない、または長さが正でない
    """
    if length is None or length <= timedelta(0):
        raise InvalidWindowError(f"録音の長さは0より大きくしてください: {length}", step="stream")
    if start_at is None:
        raise InvalidWindowError("録音の開始時刻を指定してください", step="stream")
