"""
KeySeedFetcher単体テスト

プレーヤースクリプトからのフルキー抽出規則を確認。
"""

import unittest

from radiko.error_handler import SeedNotFoundError
from radiko.seed import KeySeedFetcher, extract_full_key
from radiko.utils.network_utils import RadikoHTTP
from tests.utils.http_fixtures import (
    FULL_KEY, PLAYER_SCRIPT, PLAYER_SCRIPT_URL, make_response, mock_session,
)


class TestExtractFullKey(unittest.TestCase):
    """フルキー抽出テスト"""

    def test_01_呼び出し箇所の2つ後のトークン(self):
        self.assertEqual(extract_full_key(PLAYER_SCRIPT), FULL_KEY)

    def test_02_実際のスクリプト形式(self):
        # Given: 配信中のプレーヤーと同じ書式
        script = ("new RadikoJSPlayer($audio[0], 'pc_html5', "
                  "'bcd151073c03b352e1ef2fd66c32209da9ca0afa', {")

        # When & Then: 引用符とカンマが取り除かれる
        self.assertEqual(extract_full_key(script), "bcd151073c03b352e1ef2fd66c32209da9ca0afa")

    def test_03_呼び出し箇所なし(self):
        with self.assertRaises(SeedNotFoundError) as cm:
            extract_full_key("var player = new OtherPlayer('pc_html5', 'key', {});")
        self.assertEqual(cm.exception.step, "seed")

    def test_04_キーのトークンが足りない(self):
        with self.assertRaises(SeedNotFoundError):
            extract_full_key("new RadikoJSPlayer($audio[0], 'pc_html5',")

    def test_05_空のキー(self):
        with self.assertRaises(SeedNotFoundError):
            extract_full_key("new RadikoJSPlayer($audio[0], 'pc_html5', '', {")


class TestKeySeedFetcher(unittest.TestCase):
    """KeySeedFetcherテスト"""

    def test_01_フルキー取得(self):
        session = mock_session({PLAYER_SCRIPT_URL: make_response(200, PLAYER_SCRIPT)})

        full_key = KeySeedFetcher(RadikoHTTP(session=session)).fetch()

        self.assertEqual(full_key, FULL_KEY)
        self.assertEqual(len(full_key), 64)

    def test_02_フルキーはINFOログに出さない(self):
        session = mock_session({PLAYER_SCRIPT_URL: make_response(200, PLAYER_SCRIPT)})
        fetcher = KeySeedFetcher(RadikoHTTP(session=session))

        with self.assertLogs('radiko.seed', level='INFO') as logs:
            fetcher.fetch()

        for line in logs.output:
            self.assertNotIn(FULL_KEY, line)


if __name__ == "__main__":
    unittest.main()
