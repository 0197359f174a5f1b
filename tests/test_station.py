"""
StationCatalog単体テスト

full.xml の解析（文書順・地域情報）と大文字小文字を区別しない検索を確認。
"""

import unittest

from radiko.error_handler import CatalogFetchError, CatalogParseError
from radiko.station import Region, Station, StationCatalog, StationList, parse_full_station_xml
from radiko.utils.network_utils import RadikoHTTP
from tests.utils.http_fixtures import FULL_STATION_URL, make_response, mock_session, read_testdata


class TestParseFullStationXml(unittest.TestCase):
    """full.xml 解析テスト"""

    def setUp(self):
        self.data = read_testdata("FullStation.xml")

    def test_01_文書順に平坦化(self):
        stations = parse_full_station_xml(self.data)

        self.assertIsInstance(stations, StationList)
        self.assertEqual([s.id for s in stations], ["HBC", "STV", "TBS", "QRR", "JOAK"])

    def test_02_放送局の属性と地域(self):
        stations = parse_full_station_xml(self.data)
        qrr = stations[3]

        self.assertEqual(qrr.name, "文化放送")
        self.assertEqual(qrr.ascii_name, "JOQR BUNKA HOSO")
        self.assertEqual(qrr.ruby, "ぶんかほうそう")
        self.assertTrue(qrr.is_areafree)
        self.assertTrue(qrr.is_timefree)
        self.assertEqual(qrr.region, Region("KANTO", "kanto", "関東"))
        self.assertEqual(stations[0].region.region_id, "hokkaido-tohoku")

    def test_03_フラグ0の放送局(self):
        joak = parse_full_station_xml(self.data)[4]
        self.assertFalse(joak.is_areafree)
        self.assertFalse(joak.is_timefree)

    def test_04_同じ入力は同じ結果(self):
        self.assertEqual(parse_full_station_xml(self.data), parse_full_station_xml(self.data))

    def test_05_放送局なしは空リスト(self):
        self.assertEqual(parse_full_station_xml(b"<region></region>"), StationList())

    def test_06_不正なXML(self):
        with self.assertRaises(CatalogParseError) as cm:
            parse_full_station_xml(b"<region><stations>")
        self.assertEqual(cm.exception.step, "stations")

    def test_07_フラグが整数でない(self):
        data = (b"<region><stations><station><id>X</id><name>x</name>"
                b"<timefree>yes</timefree></station></stations></region>")
        with self.assertRaises(CatalogParseError):
            parse_full_station_xml(data)

    def test_08_辞書に変換(self):
        station = parse_full_station_xml(self.data)[0]
        data = station.to_dict()

        self.assertEqual(data['id'], "HBC")
        self.assertEqual(data['region']['region_name'], "北海道・東北")


class TestStationList(unittest.TestCase):
    """放送局検索テスト"""

    def setUp(self):
        self.stations = StationList([
            Station(id="TBS", name="TBSラジオ"),
            Station(id="QRR", name="文化放送"),
        ])

    def test_01_大文字小文字を区別しない(self):
        for station_id in ("qrr", "QRR", "Qrr"):
            with self.subTest(station_id=station_id):
                station = self.stations.lookup(station_id)
                self.assertIsNotNone(station)
                self.assertEqual(station.id, "QRR")
                self.assertTrue(self.stations.contains(station_id))

    def test_02_見つからない(self):
        self.assertIsNone(self.stations.lookup("LFR"))
        self.assertFalse(self.stations.contains("LFR"))

    def test_03_条件による検索(self):
        self.assertTrue(self.stations.find(lambda s: s.name == "文化放送"))
        self.assertFalse(self.stations.find(lambda s: s.id.startswith("NHK")))

    def test_04_同じIDは最初の一致(self):
        self.stations.append(Station(id="qrr", name="duplicate"))
        self.assertEqual(self.stations.lookup("QRR").name, "文化放送")


class TestStationCatalog(unittest.TestCase):
    """StationCatalogテスト"""

    def test_01_放送局一覧取得(self):
        session = mock_session({
            FULL_STATION_URL: make_response(200, read_testdata("FullStation.xml"))})

        stations = StationCatalog(RadikoHTTP(session=session)).fetch()

        self.assertEqual(len(stations), 5)

    def test_02_取得失敗(self):
        session = mock_session({FULL_STATION_URL: make_response(503, b"")})

        with self.assertRaises(CatalogFetchError):
            StationCatalog(RadikoHTTP(session=session)).fetch()


if __name__ == "__main__":
    unittest.main()
