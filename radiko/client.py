"""
radikoクライアント

エリア判定・フルキー取得・ハンドシェイク・プレイリスト取得・URL生成を
決まった順序で実行するファサードです。

    client = RadikoClient(credentials)
    stream = client.live_stream("QRR")
    MediaLauncher().play(stream)

ハンドシェイクのたびにエリアIDとフルキーを取得し直します（使い回さない）。
"""

from datetime import datetime, timedelta
from typing import List, Optional

from .area import AreaResolver
from .auth import Session, SessionAuthenticator
from .error_handler import StationNotFoundError
from .playlist import PlaylistEntry, PlaylistResolver, select_entry
from .seed import KeySeedFetcher
from .station import Station, StationCatalog, StationList
from .stream import StreamRequest, StreamURLBuilder, validate_window
from .utils.base import LoggerMixin
from .utils.config_utils import Credentials, DEFAULT_LIVE_HOST, Settings
from .utils.network_utils import RadikoHTTP


class RadikoClient(LoggerMixin):
    """radiko APIクライアント"""

    def __init__(self,
                 credentials: Optional[Credentials] = None,
                 http: Optional[RadikoHTTP] = None,
                 live_host: str = DEFAULT_LIVE_HOST):
        super().__init__()
        self.credentials = credentials
        self.http = http or RadikoHTTP()

        self.area_resolver = AreaResolver(self.http)
        self.seed_fetcher = KeySeedFetcher(self.http)
        self.station_catalog = StationCatalog(self.http)
        self.playlist_resolver = PlaylistResolver(self.http)
        self.url_builder = StreamURLBuilder(live_host)

    @classmethod
    def from_settings(cls, settings: Settings) -> 'RadikoClient':
        """設定からクライアントを作成"""
        return cls(
            credentials=settings.credentials,
            http=RadikoHTTP(timeout=settings.timeout),
            live_host=settings.live_host,
        )

    def get_area(self) -> str:
        """接続元のエリアIDを取得"""
        return self.area_resolver.resolve()

    def get_full_key(self) -> str:
        """フルキーを取得"""
        return self.seed_fetcher.fetch()

    def get_stations(self) -> StationList:
        """全国の放送局一覧を取得"""
        return self.station_catalog.fetch()

    def require_station(self, station_id: str) -> Station:
        """放送局IDが存在することを確認して放送局情報を返す

        Raises:
            StationNotFoundError: 放送局が見つからない
        """
        station = self.get_stations().lookup(station_id)
        if station is None:
            raise StationNotFoundError(f"放送局が見つかりません: id={station_id.upper()!r}",
                                       step="stations")
        return station

    def authenticate(self) -> Session:
        """エリア判定・フルキー取得からハンドシェイクまでを実行"""
        area_id = self.get_area()
        full_key = self.get_full_key()

        authenticator = SessionAuthenticator(self.http, self.credentials)
        return authenticator.authenticate(area_id, full_key)

    def playlist(self, session: Session, station_id: str) -> List[PlaylistEntry]:
        """放送局のストリームURL候補を取得"""
        return self.playlist_resolver.resolve(session, station_id)

    def live_stream(self, station_id: str) -> StreamRequest:
        """ライブ再生用のリクエストを作成"""
        station = self.require_station(station_id)
        session = self.authenticate()

        entries = self.playlist(session, station.id)
        candidate = select_entry(entries, timefree=False)
        if candidate is not None:
            self.logger.debug(f"live: 候補 {candidate.playlist_create_url}")

        return self.url_builder.live(station.id, session)

    def timefree_stream(self, station_id: str, start_at: datetime,
                        length: timedelta) -> StreamRequest:
        """タイムフリー録音用のリクエストを作成

        区間は通信の前に検証する。
        """
        validate_window(start_at, length)

        station = self.require_station(station_id)
        if not station.is_timefree:
            self.logger.warning(f"{station.id} はタイムフリー非対応の可能性があります")

        session = self.authenticate()
        return self.url_builder.timefree(station.id, session, start_at, length)

    def cancel(self) -> None:
        """進行中・以降の通信をキャンセル"""
        self.http.cancel()
