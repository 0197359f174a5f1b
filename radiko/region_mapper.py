"""
地域IDマッピングモジュール

radiko のエリアID（JP1〜JP47）と都道府県名の対応を提供します。
"""

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass
class RegionInfo:
    """地域情報"""
    area_id: str           # 地域ID（JP13等）
    prefecture_ja: str     # 都道府県名（日本語）
    prefecture_en: str     # 都道府県名（英語）
    region_name: str       # 地方名


_PREFECTURES = [
    ("北海道", "Hokkaido", "北海道"),
    ("青森県", "Aomori", "東北"), ("岩手県", "Iwate", "東北"), ("宮城県", "Miyagi", "東北"),
    ("秋田県", "Akita", "東北"), ("山形県", "Yamagata", "東北"), ("福島県", "Fukushima", "東北"),
    ("茨城県", "Ibaraki", "関東"), ("栃木県", "Tochigi", "関東"), ("群馬県", "Gunma", "関東"),
    ("埼玉県", "Saitama", "関東"), ("千葉県", "Chiba", "関東"), ("東京都", "Tokyo", "関東"),
    ("神奈川県", "Kanagawa", "関東"),
    ("新潟県", "Niigata", "中部"), ("富山県", "Toyama", "中部"), ("石川県", "Ishikawa", "中部"),
    ("福井県", "Fukui", "中部"), ("山梨県", "Yamanashi", "中部"), ("長野県", "Nagano", "中部"),
    ("岐阜県", "Gifu", "中部"), ("静岡県", "Shizuoka", "中部"), ("愛知県", "Aichi", "中部"),
    ("三重県", "Mie", "近畿"), ("滋賀県", "Shiga", "近畿"), ("京都府", "Kyoto", "近畿"),
    ("大阪府", "Osaka", "近畿"), ("兵庫県", "Hyogo", "近畿"), ("奈良県", "Nara", "近畿"),
    ("和歌山県", "Wakayama", "近畿"),
    ("鳥取県", "Tottori", "中国"), ("島根県", "Shimane", "中国"), ("岡山県", "Okayama", "中国"),
    ("広島県", "Hiroshima", "中国"), ("山口県", "Yamaguchi", "中国"),
    ("徳島県", "Tokushima", "四国"), ("香川県", "Kagawa", "四国"), ("愛媛県", "Ehime", "四国"),
    ("高知県", "Kochi", "四国"),
    ("福岡県", "Fukuoka", "九州・沖縄"), ("佐賀県", "Saga", "九州・沖縄"),
    ("長崎県", "Nagasaki", "九州・沖縄"), ("熊本県", "Kumamoto", "九州・沖縄"),
    ("大分県", "Oita", "九州・沖縄"), ("宮崎県", "Miyazaki", "九州・沖縄"),
    ("鹿児島県", "Kagoshima", "九州・沖縄"), ("沖縄県", "Okinawa", "九州・沖縄"),
]


class RegionMapper:
    """地域IDマッピングクラス"""

    # JIS都道府県コード順（JP1〜JP47）
    REGION_INFO: Dict[str, RegionInfo] = {
        f"JP{code}": RegionInfo(f"JP{code}", ja, en, region)
        for code, (ja, en, region) in enumerate(_PREFECTURES, start=1)
    }

    @classmethod
    def get_region_info(cls, area_id: str) -> Optional[RegionInfo]:
        """地域IDから詳細情報を取得"""
        return cls.REGION_INFO.get(area_id.strip().upper())

    @classmethod
    def get_prefecture_name(cls, area_id: str) -> Optional[str]:
        """地域IDから都道府県名（日本語）を取得"""
        info = cls.get_region_info(area_id)
        return info.prefecture_ja if info else None

    @classmethod
    def get_area_id(cls, prefecture_name: str) -> Optional[str]:
        """都道府県名（日本語・英語、接尾辞の有無を問わない）から地域IDを取得"""
        name = prefecture_name.strip()
        if not name:
            return None

        for area_id, info in cls.REGION_INFO.items():
            if name.lower() == info.prefecture_en.lower():
                return area_id
            if name == info.prefecture_ja:
                return area_id
            # 「北海道」は接尾辞を除かない
            if info.prefecture_ja[-1] in "都府県" and name == info.prefecture_ja[:-1]:
                return area_id
        return None

    @classmethod
    def describe(cls, area_id: str) -> str:
        """'JP13 (東京都 / Tokyo)' 形式の表示用文字列"""
        info = cls.get_region_info(area_id)
        if info is None:
            return area_id
        return f"{info.area_id} ({info.prefecture_ja} / {info.prefecture_en})"

    @classmethod
    def validate_area_id(cls, area_id: str) -> bool:
        """地域IDの妥当性を確認"""
        return cls.get_region_info(area_id) is not None
