"""
RadikoHTTP単体テスト

タイムアウト・期限・キャンセルと、requests の例外からの変換を確認。
"""

import unittest
from unittest.mock import MagicMock, patch

import requests

from radiko.error_handler import ErrorCategory, NetworkError, RequestCancelledError
from radiko.utils.network_utils import RadikoHTTP, create_radiko_session
from radiko.version import __version__
from tests.utils.http_fixtures import make_response


class TestCreateRadikoSession(unittest.TestCase):

    def test_01_標準ヘッダー(self):
        session = create_radiko_session()

        self.assertIsInstance(session, requests.Session)
        self.assertEqual(session.headers['User-Agent'], f"RadikoClient/{__version__}")

    def test_02_追加ヘッダー(self):
        session = create_radiko_session({'X-Test': '1', 'Accept': 'text/xml'})

        self.assertEqual(session.headers['X-Test'], '1')
        self.assertEqual(session.headers['Accept'], 'text/xml')


class TestRadikoHTTP(unittest.TestCase):
    """RadikoHTTPテスト"""

    def setUp(self):
        self.session = MagicMock(spec=requests.Session)
        self.session.get.return_value = make_response(200, b"ok")
        self.session.post.return_value = make_response(200, b"ok")
        self.http = RadikoHTTP(session=self.session, timeout=10.0)

    def test_01_タイムアウトを指定して送信(self):
        response = self.http.get("area", "https://radiko.jp/area", headers={'A': 'b'})

        self.assertEqual(response.text, "ok")
        self.session.get.assert_called_once_with(
            "https://radiko.jp/area", timeout=10.0, headers={'A': 'b'})

    def test_02_POST(self):
        self.http.post("login", "https://radiko.jp/login", data={'mail': 'x'})

        self.session.post.assert_called_once_with(
            "https://radiko.jp/login", timeout=10.0, data={'mail': 'x'})

    def test_03_期限なしのタイムアウトは一時的な通信エラー(self):
        self.session.get.side_effect = requests.ReadTimeout("timed out")

        with self.assertRaises(NetworkError) as cm:
            self.http.get("auth1", "https://radiko.jp/v2/api/auth1")

        self.assertNotIsInstance(cm.exception, RequestCancelledError)
        self.assertEqual(cm.exception.step, "auth1")
        self.assertEqual(cm.exception.category, ErrorCategory.NETWORK)

    def test_03b_期限切れによるタイムアウトはキャンセル扱い(self):
        # Given: 応答待ちの間に呼び出し側の期限を過ぎる
        self.http.set_deadline(5.0)

        def deadline_passes(url, **kwargs):
            self.http.set_deadline(-1)
            raise requests.ReadTimeout("timed out")

        self.session.get.side_effect = deadline_passes

        # When & Then
        with self.assertRaises(RequestCancelledError) as cm:
            self.http.get("auth1", "https://radiko.jp/v2/api/auth1")

        self.assertEqual(cm.exception.step, "auth1")
        self.assertEqual(cm.exception.category, ErrorCategory.CANCELLED)

    def test_03c_期限内のタイムアウトは一時的な通信エラー(self):
        self.http.set_deadline(60.0)
        self.session.get.side_effect = requests.ConnectTimeout("timed out")

        with self.assertRaises(NetworkError) as cm:
            self.http.get("area", "https://radiko.jp/area")

        self.assertNotIsInstance(cm.exception, RequestCancelledError)

    def test_04_接続エラーはNetworkError(self):
        self.session.get.side_effect = requests.ConnectionError("refused")

        with self.assertRaises(NetworkError) as cm:
            self.http.get("stations", "https://radiko.jp/v3/station/region/full.xml")

        self.assertEqual(cm.exception.step, "stations")
        self.assertEqual(cm.exception.category, ErrorCategory.NETWORK)
        self.assertIsInstance(cm.exception.__cause__, requests.ConnectionError)

    def test_05_キャンセル後は送信しない(self):
        # When
        self.http.cancel()

        # Then
        self.assertTrue(self.http.cancelled)
        self.session.close.assert_called_once()
        with self.assertRaises(RequestCancelledError):
            self.http.get("seed", "https://radiko.jp/apps/js/playerCommon.js")
        self.session.get.assert_not_called()

    def test_06_期限切れ(self):
        self.http.set_deadline(-1)

        with self.assertRaises(RequestCancelledError):
            self.http.get("area", "https://radiko.jp/area")
        self.session.get.assert_not_called()

    @patch('radiko.utils.network_utils.time.monotonic')
    def test_07_残り時間がタイムアウトより短い(self, mock_monotonic):
        # Given: 期限まで残り3秒
        mock_monotonic.return_value = 100.0
        self.http.set_deadline(3.0)

        # When
        self.http.get("area", "https://radiko.jp/area")

        # Then
        self.assertEqual(self.session.get.call_args.kwargs['timeout'], 3.0)

    def test_08_期限解除(self):
        self.http.set_deadline(5.0)
        self.http.set_deadline(None)

        self.assertIsNone(self.http.remaining())
        self.http.get("area", "https://radiko.jp/area")
        self.assertEqual(self.session.get.call_args.kwargs['timeout'], 10.0)

    def test_09_コンストラクタで期限指定(self):
        http = RadikoHTTP(session=self.session, deadline=60.0)
        self.assertLessEqual(http.remaining(), 60.0)


if __name__ == "__main__":
    unittest.main()
