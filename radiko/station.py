"""
放送局情報モジュール

全国の放送局一覧（/v3/station/region/full.xml）を取得・解析します。

    <region>
      <stations ascii_name="HOKKAIDO TOHOKU" region_id="hokkaido-tohoku" region_name="北海道・東北">
        <station>
          <id>HBC</id>
          <name>HBCラジオ</name>
          ...
        </station>
      </stations>
    </region>

地域ごとのグループは文書順のまま1つのリストに平坦化します（並べ替えはしない）。
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass, asdict
from typing import Any, Callable, Dict, Optional, Union

from .error_handler import CatalogFetchError, CatalogParseError
from .utils.base import LoggerMixin
from .utils.network_utils import RadikoHTTP


@dataclass
class Region:
    """地域情報"""
    ascii_name: str
    region_id: str
    region_name: str


@dataclass
class Station:
    """放送局情報"""
    id: str
    name: str
    ascii_name: str = ""
    ruby: str = ""
    areafree: int = 0
    timefree: int = 0
    region: Optional[Region] = None

    @property
    def is_areafree(self) -> bool:
        """エリア外から聴取可能か"""
        return self.areafree == 1

    @property
    def is_timefree(self) -> bool:
        """タイムフリー聴取可能か"""
        return self.timefree == 1

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class StationList(list):
    """放送局リスト（文書順）"""

    def find(self, predicate: Callable[[Station], bool]) -> bool:
        """条件に一致する放送局があるか"""
        return any(predicate(station) for station in self)

    def lookup(self, station_id: str) -> Optional[Station]:
        """放送局IDで検索（大文字小文字を区別しない、最初の一致）"""
        wanted = station_id.strip().upper()
        for station in self:
            if station.id.upper() == wanted:
                return station
        return None

    def contains(self, station_id: str) -> bool:
        return self.lookup(station_id) is not None


def _element_text(element: ET.Element, tag: str) -> str:
    """子要素のテキストを取得（存在しない場合は空文字）"""
    child = element.find(tag)
    if child is None or child.text is None:
        return ""
    return child.text.strip()


def _to_int(value: str, name: str) -> int:
    if not value:
        return 0
    try:
        return int(value)
    except ValueError:
        raise CatalogParseError(f"{name} が整数ではありません: {value!r}", step="stations")


def parse_full_station_xml(data: Union[bytes, str]) -> StationList:
    """full.xml を解析して放送局リストを返す

    Raises:
        CatalogParseError: XMLが不正
    """
    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        raise CatalogParseError(f"XML解析エラー: {e}", step="stations")

    stations = StationList()
    for group in root.findall('stations'):
        region = Region(
            ascii_name=group.get('ascii_name', ''),
            region_id=group.get('region_id', ''),
            region_name=group.get('region_name', ''),
        )

        for elem in group.findall('station'):
            stations.append(Station(
                id=_element_text(elem, 'id'),
                name=_element_text(elem, 'name'),
                ascii_name=_element_text(elem, 'ascii_name'),
                ruby=_element_text(elem, 'ruby'),
                areafree=_to_int(_element_text(elem, 'areafree'), 'areafree'),
                timefree=_to_int(_element_text(elem, 'timefree'), 'timefree'),
                region=region,
            ))

    return stations


class StationCatalog(LoggerMixin):
    """放送局一覧取得クラス（認証不要）"""

    FULL_STATION_URL = "https://radiko.jp/v3/station/region/full.xml"

    def __init__(self, http: RadikoHTTP):
        super().__init__()
        self.http = http

    def fetch(self) -> StationList:
        """全国の放送局一覧を取得"""
        response = self.http.get("stations", self.FULL_STATION_URL)

        if response.status_code != 200:
            raise CatalogFetchError(f"放送局一覧の取得に失敗しました (HTTP {response.status_code})",
                                    step="stations")

        self.logger.debug(f"stations: response body: {response.content[:500]!r}")

        stations = parse_full_station_xml(response.content)
        self.logger.info(f"放送局一覧取得完了: {len(stations)}局")
        return stations
