"""
日時処理ユーティリティ

radiko API は日本時間（JST）の14桁タイムスタンプ（YYYYMMDDHHMMSS）を使う。
タイムゾーン変換は pytz で行う。
"""

import re
from datetime import datetime, timedelta

import pytz

JST = pytz.timezone('Asia/Tokyo')

# radiko API のタイムスタンプ形式
RADIKO_TIMESTAMP_FORMAT = '%Y%m%d%H%M%S'

# rec --target の入力形式
TARGET_FORMAT = '%Y%m%d%H%M'

_DURATION_PART = re.compile(r'(\d+(?:\.\d*)?|\.\d+)(ms|h|m|s)')
_DURATION_UNITS = {
    'h': 3600.0,
    'm': 60.0,
    's': 1.0,
    'ms': 0.001,
}


def to_jst(value: datetime) -> datetime:
    """日時を日本時間に変換

    タイムゾーン情報のない日時は日本時間とみなす。
    """
    if value.tzinfo is None:
        return JST.localize(value)
    return value.astimezone(JST)


def format_radiko_timestamp(value: datetime) -> str:
    """日時を14桁のradikoタイムスタンプに変換

    Example:
        format_radiko_timestamp(datetime(2024, 1, 2, 3, 4, 5))
        # '20240102030405'
    """
    return to_jst(value).strftime(RADIKO_TIMESTAMP_FORMAT)


def parse_target(value: str) -> datetime:
    """'YYYYMMDDhhmm' 形式の録音開始日時を日本時間として解析

    Raises:
        ValueError: 形式が不正
    """
    return JST.localize(datetime.strptime(value.strip(), TARGET_FORMAT))


def parse_duration(value: str) -> timedelta:
    """'90s', '30m', '1h30m', '1.5h' 形式の長さを解析

    単位は h, m, s, ms。先頭に '-' を付けると負の長さになる。

    Raises:
        ValueError: 形式が不正
    """
    text = value.strip()
    if not text:
        raise ValueError("長さが空です")

    sign = 1.0
    if text[0] in '+-':
        sign = -1.0 if text[0] == '-' else 1.0
        text = text[1:]

    if text == '0':
        return timedelta(0)

    seconds = 0.0
    position = 0
    for match in _DURATION_PART.finditer(text):
        if match.start() != position:
            break
        seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        position = match.end()

    if position == 0 or position != len(text):
        raise ValueError(f"不正な長さの形式です: {value!r}")

    return timedelta(seconds=sign * seconds)
