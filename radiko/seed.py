"""
認証キー取得モジュール

radiko のプレーヤースクリプト playerCommon.js に埋め込まれた認証キー（フルキー）を取得します。

    new RadikoJSPlayer($audio[0], 'pc_html5', 'bcd151073c03b352e1ef2fd66c32209da9ca0afa', {

呼び出し箇所のトークンから2つ後のトークンがフルキーです。スクリプトの構造そのものが
互換性の前提なので、抽出規則は変えないこと。
"""

from .error_handler import SeedNotFoundError
from .utils.base import LoggerMixin
from .utils.network_utils import RadikoHTTP

PLAYER_MARKER = "RadikoJSPlayer("


def extract_full_key(script: str) -> str:
    """スクリプト本文からフルキーを取り出す

    Raises:
        SeedNotFoundError: 呼び出し箇所が見つからない、またはキーが空
    """
    tokens = script.split()

    for i, token in enumerate(tokens):
        if not token.startswith(PLAYER_MARKER):
            continue

        if i + 2 >= len(tokens):
            break

        full_key = tokens[i + 2]
        if full_key.startswith("'"):
            full_key = full_key[1:]
        if full_key.endswith("',"):
            full_key = full_key[:-2]

        if not full_key:
            raise SeedNotFoundError("フルキーが空です", step="seed")
        return full_key

    raise SeedNotFoundError(f"{PLAYER_MARKER} の呼び出しが見つかりません", step="seed")


class KeySeedFetcher(LoggerMixin):
    """フルキー取得クラス（認証不要）

    フルキーはハンドシェイクごとに取得し直す。キャッシュしない。
    """

    PLAYER_SCRIPT_URL = "https://radiko.jp/apps/js/playerCommon.js"

    def __init__(self, http: RadikoHTTP):
        super().__init__()
        self.http = http

    def fetch(self) -> str:
        """フルキーを取得"""
        response = self.http.get("seed", self.PLAYER_SCRIPT_URL)
        full_key = extract_full_key(response.text)
        self.logger.info(f"フルキー取得成功 ({len(full_key)}文字)")
        self.logger.debug(f"フルキー: {full_key}")
        return full_key
