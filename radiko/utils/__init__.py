"""
radiko ユーティリティモジュール

共通機能やヘルパー関数を提供するユーティリティパッケージ
"""

from typing import List
from .base import LoggerMixin
from .datetime_utils import format_radiko_timestamp, parse_duration, parse_target, to_jst
from .network_utils import RadikoHTTP, create_radiko_session
from .config_utils import Credentials, Settings, load_settings

__all__: List[str] = [
    'LoggerMixin',
    'format_radiko_timestamp',
    'parse_duration',
    'parse_target',
    'to_jst',
    'RadikoHTTP',
    'create_radiko_session',
    'Credentials',
    'Settings',
    'load_settings',
]
