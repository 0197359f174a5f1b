"""
エリア判定モジュール

接続元IPから radiko のエリアID（JP13 など）を取得します。
応答は document.write('<span class="JP13">TOKYO JAPAN</span>'); のような
JavaScript で、最初のダブルクォートに囲まれた部分がエリアIDです。
"""

from .error_handler import EmptyAreaError, GeoLookupError, GeoRestrictedError
from .utils.base import LoggerMixin
from .utils.network_utils import RadikoHTTP

# 国内サービスのエリアIDの接頭辞
DOMESTIC_AREA_PREFIX = "JP"


def extract_area_id(body: str) -> str:
    """エリア判定の応答本文からエリアIDを取り出す

    Raises:
        GeoLookupError: ダブルクォートが2つ未満
        EmptyAreaError: エリアIDが空
        GeoRestrictedError: 国内のエリアIDではない
    """
    tokens = body.split('"')
    if len(tokens) < 3:
        raise GeoLookupError(f"想定外の応答です: {body[:200]!r}", step="area")

    area_id = tokens[1]
    if not area_id:
        raise EmptyAreaError("エリアIDが空です", step="area")

    if not area_id.startswith(DOMESTIC_AREA_PREFIX):
        raise GeoRestrictedError(f"接続元IPが地域制限されています (area={area_id!r})",
                                 step="area", context={'area_id': area_id})

    return area_id


class AreaResolver(LoggerMixin):
    """エリアID取得クラス（認証不要）"""

    AREA_URL = "https://radiko.jp/area"

    def __init__(self, http: RadikoHTTP):
        super().__init__()
        self.http = http

    def resolve(self) -> str:
        """接続元IPのエリアIDを取得"""
        response = self.http.get("area", self.AREA_URL)
        area_id = extract_area_id(response.text)
        self.logger.info(f"エリアID取得成功: {area_id}")
        return area_id
