"""
RadikoClient結合テスト

エリア判定からストリームURL生成までの流れをモックセッションで確認。
"""

import unittest
from datetime import datetime, timedelta

import requests

from radiko.client import RadikoClient
from radiko.error_handler import (
    InvalidWindowError, RequestCancelledError, SeedNotFoundError, StationNotFoundError,
)
from radiko.utils.config_utils import Settings
from radiko.utils.network_utils import RadikoHTTP
from tests.utils.http_fixtures import (
    AREA_URL, AUTH1_URL, AUTH2_URL, PLAYER_SCRIPT_URL, anonymous_routes, make_response,
    mock_session, playlist_url, read_testdata, requested_urls,
)


class TestRadikoClient(unittest.TestCase):
    """RadikoClientテスト"""

    def setUp(self):
        self.routes = anonymous_routes()
        self.routes[playlist_url("QRR")] = make_response(200, read_testdata("PlaylistCreate.xml"))
        self.session = mock_session(self.routes)
        self.client = RadikoClient(http=RadikoHTTP(session=self.session))

    def test_01_ライブ再生のリクエスト(self):
        # Given: 小文字の放送局ID
        # When
        stream = self.client.live_stream("qrr")

        # Then: カタログ上のIDでURLが作られる
        self.assertIn("station_id=QRR", stream.url)
        self.assertIn("/so/playlist.m3u8", stream.url)
        self.assertEqual(stream.auth_token, "T1")
        self.assertIn(playlist_url("QRR"), requested_urls(self.session))

    def test_02_タイムフリー録音のリクエスト(self):
        stream = self.client.timefree_stream("TBS", datetime(2024, 1, 1, 12, 0),
                                             timedelta(minutes=30))

        self.assertIn("/tf/playlist.m3u8", stream.url)
        self.assertIn("station_id=TBS", stream.url)
        self.assertEqual(stream.duration, timedelta(minutes=30))

    def test_03_不正な区間は通信しない(self):
        for length in (timedelta(0), timedelta(minutes=-5)):
            with self.subTest(length=length):
                with self.assertRaises(InvalidWindowError):
                    self.client.timefree_stream("TBS", datetime(2024, 1, 1), length)

        self.session.get.assert_not_called()
        self.session.post.assert_not_called()

    def test_04_存在しない放送局(self):
        with self.assertRaises(StationNotFoundError):
            self.client.live_stream("NOPE")

        # 放送局一覧の確認だけで止まる
        self.assertNotIn(AREA_URL, requested_urls(self.session))

    def test_05_フルキーが見つからなければAuth1を呼ばない(self):
        self.routes[PLAYER_SCRIPT_URL] = make_response(200, "var player = null;")

        with self.assertRaises(SeedNotFoundError):
            self.client.authenticate()

        urls = requested_urls(self.session)
        self.assertNotIn(AUTH1_URL, urls)
        self.assertNotIn(AUTH2_URL, urls)

    def test_06_認証ごとにエリアとフルキーを取得し直す(self):
        first = self.client.authenticate()
        second = self.client.authenticate()

        urls = requested_urls(self.session)
        self.assertEqual(urls.count(AREA_URL), 2)
        self.assertEqual(urls.count(PLAYER_SCRIPT_URL), 2)
        self.assertNotEqual(first.nonce, second.nonce)

    def test_07_キャンセル後は通信しない(self):
        self.client.cancel()

        with self.assertRaises(RequestCancelledError):
            self.client.get_area()

        self.session.get.assert_not_called()
        self.session.close.assert_called_once()

    def test_08_通信中のキャンセル(self):
        # Given: 応答待ちの間に別スレッドからキャンセルされ、接続が切れる
        def cancelled_during_request(url, **kwargs):
            self.client.cancel()
            raise requests.ConnectionError("connection closed")

        self.session.get.side_effect = cancelled_during_request

        # When & Then
        with self.assertRaises(RequestCancelledError) as cm:
            self.client.get_area()
        self.assertEqual(cm.exception.step, "area")

    def test_09_設定から作成(self):
        settings = Settings(username="user", password="pass", timeout=5.0,
                            live_host="https://example.com")

        client = RadikoClient.from_settings(settings)

        self.assertEqual(client.credentials.username, "user")
        self.assertEqual(client.http.timeout, 5.0)
        self.assertEqual(client.url_builder.live_host, "https://example.com")


if __name__ == "__main__":
    unittest.main()
