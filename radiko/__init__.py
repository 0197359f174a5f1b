"""
radiko - radiko.jp のライブ再生・タイムフリー録音クライアント

このパッケージは radiko のハンドシェイクとストリームURL生成を提供します。

主要コンポーネント:
- area / seed: エリアID・フルキー取得
- auth: ハンドシェイク（Login → Check → Auth1 → Auth2）
- station / playlist: 放送局一覧・ストリームURL候補
- stream: HLS プレイリストURL生成
- player: ffmpeg / ffplay の起動
- client: 全体を順に実行するファサード
- cli: コマンドライン操作
"""

from .version import __version__

# 主要クラスのインポート
from .area import AreaResolver
from .seed import KeySeedFetcher
from .auth import Session, SessionAuthenticator, JsonApiLogin, WebFormLogin
from .station import Region, Station, StationList, StationCatalog
from .playlist import PlaylistEntry, PlaylistResolver
from .stream import StreamRequest, StreamURLBuilder
from .player import MediaLauncher
from .client import RadikoClient
from .error_handler import ErrorHandler, RadikoError, ErrorSeverity, ErrorCategory
from .utils.config_utils import Credentials, Settings
from .cli import RadikoCLI

__all__ = [
    '__version__',

    # ハンドシェイク関連
    'AreaResolver',
    'KeySeedFetcher',
    'Session',
    'SessionAuthenticator',
    'JsonApiLogin',
    'WebFormLogin',
    'Credentials',

    # 放送局・ストリーム関連
    'Region',
    'Station',
    'StationList',
    'StationCatalog',
    'PlaylistEntry',
    'PlaylistResolver',
    'StreamRequest',
    'StreamURLBuilder',

    # 再生・録音
    'MediaLauncher',
    'RadikoClient',
    'Settings',

    # エラーハンドリング関連
    'ErrorHandler',
    'RadikoError',
    'ErrorSeverity',
    'ErrorCategory',

    # インターフェース関連
    'RadikoCLI',
]
