"""
プレイリスト情報モジュール

放送局ごとのストリームURL候補（/v3/station/stream/pc_html5/<ID>.xml）を取得・解析します。

    <urls>
      <url areafree="0" max_delay="100" timefree="0">
        <playlist_create_url>https://si-f-radiko.smartstream.ne.jp/so/playlist.m3u8</playlist_create_url>
      </url>
    </urls>

候補は文書順のまま返し、どれを使うかは呼び出し側が決めます。
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import List, Optional, Union

from .auth import Session
from .error_handler import PlaylistFetchError, PlaylistParseError
from .utils.base import LoggerMixin
from .utils.network_utils import RadikoHTTP


@dataclass
class PlaylistEntry:
    """ストリームURL候補"""
    areafree: int
    max_delay: int
    timefree: int
    playlist_create_url: str


def _int_attribute(element: ET.Element, name: str) -> int:
    value = element.get(name)
    if value is None or value == "":
        return 0
    try:
        return int(value)
    except ValueError:
        raise PlaylistParseError(f"{name} が整数ではありません: {value!r}", step="playlist")


def parse_playlist_create_xml(data: Union[bytes, str]) -> List[PlaylistEntry]:
    """プレイリストXMLを解析

    <url> 要素がない場合は空リストを返す。

    Raises:
        PlaylistParseError: XMLが不正
    """
    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        raise PlaylistParseError(f"XML解析エラー: {e}", step="playlist")

    entries = []
    for elem in root.findall('url'):
        url_elem = elem.find('playlist_create_url')
        entries.append(PlaylistEntry(
            areafree=_int_attribute(elem, 'areafree'),
            max_delay=_int_attribute(elem, 'max_delay'),
            timefree=_int_attribute(elem, 'timefree'),
            playlist_create_url=(url_elem.text or "").strip() if url_elem is not None else "",
        ))

    return entries


class PlaylistResolver(LoggerMixin):
    """ストリームURL候補取得クラス（認証済みセッションが必要）"""

    STREAM_XML_URL = "https://radiko.jp/v3/station/stream/pc_html5/{station_id}.xml"

    def __init__(self, http: RadikoHTTP):
        super().__init__()
        self.http = http

    def resolve(self, session: Session, station_id: str) -> List[PlaylistEntry]:
        """放送局のストリームURL候補を取得"""
        url = self.STREAM_XML_URL.format(station_id=station_id)
        cookie = session.cookie_header()
        self.logger.debug(f"playlist: cookie={cookie}")

        response = self.http.get("playlist", url, headers={'Cookie': cookie})

        if response.status_code != 200:
            raise PlaylistFetchError(
                f"プレイリストの取得に失敗しました (HTTP {response.status_code}, station={station_id})",
                step="playlist")

        self.logger.debug(f"playlist: response body: {response.content[:500]!r}")

        entries = parse_playlist_create_xml(response.content)
        self.logger.info(f"プレイリスト候補取得: {station_id} {len(entries)}件")
        return entries


def select_entry(entries: List[PlaylistEntry], timefree: bool = False,
                 areafree: Optional[bool] = None) -> Optional[PlaylistEntry]:
    """条件に合う最初の候補を返す（なければNone）"""
    for entry in entries:
        if bool(entry.timefree) != timefree:
            continue
        if areafree is not None and bool(entry.areafree) != areafree:
            continue
        return entry
    return None
