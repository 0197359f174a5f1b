"""
設定管理ユーティリティ

設定は以下の順で上書きされます（後勝ち）。
1. デフォルト値
2. JSON設定ファイル（--config で指定）
3. 環境変数（RADIKO_USERNAME, RADIKO_PASSWORD, RADIKO_TIMEOUT, RADIKO_LIVE_HOST）

認証情報は読み込むだけで、ファイルへの書き戻しは行いません。
"""

import json
import os
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Dict, Any, Optional, Union

from radiko.error_handler import ConfigurationError
from radiko.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_LIVE_HOST = "https://rd-wowza-radiko.radiko-cf.com"

# 環境変数名と設定キーの対応
ENVIRONMENT_KEYS = {
    'RADIKO_USERNAME': 'username',
    'RADIKO_PASSWORD': 'password',
    'RADIKO_TIMEOUT': 'timeout',
    'RADIKO_LIVE_HOST': 'live_host',
}


@dataclass
class Credentials:
    """プレミアム会員の認証情報"""
    username: str
    password: str

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password='***')"


@dataclass
class Settings:
    """実行時設定"""
    username: str = ""
    password: str = ""
    timeout: float = 30.0
    live_host: str = DEFAULT_LIVE_HOST
    ffmpeg_path: str = "ffmpeg"
    ffplay_path: str = "ffplay"
    log_level: str = "WARNING"
    log_file: str = ""

    @property
    def credentials(self) -> Optional[Credentials]:
        """ユーザー名とパスワードが両方ある場合のみ認証情報を返す"""
        if self.username and self.password:
            return Credentials(self.username, self.password)
        return None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if data['password']:
            data['password'] = '***'
        return data


class ConfigManager:
    """設定読み込みクラス

    Usage:
        settings = ConfigManager("config.json").load_settings()
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None,
                 encoding: str = 'utf-8'):
        self.config_path = Path(config_path) if config_path else None
        self.encoding = encoding

    def load_file(self) -> Dict[str, Any]:
        """JSON設定ファイルを読み込み

        Raises:
            ConfigurationError: ファイルが読めない、またはJSONとして不正
        """
        if self.config_path is None:
            return {}

        try:
            with open(self.config_path, 'r', encoding=self.encoding) as f:
                config = json.load(f)
        except OSError as e:
            raise ConfigurationError(f"設定ファイルを読み込めません: {self.config_path} - {e}",
                                     step="config")
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"設定ファイルJSON解析エラー: {self.config_path} - {e}",
                                     step="config")

        if not isinstance(config, dict):
            raise ConfigurationError(f"設定データが辞書型ではありません: {self.config_path}",
                                     step="config")

        logger.debug(f"設定ファイル読み込み成功: {self.config_path}")
        return config

    def load_environment(self, environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        """環境変数から設定を読み込み"""
        environ = os.environ if environ is None else environ
        return {key: environ[name] for name, key in ENVIRONMENT_KEYS.items()
                if environ.get(name)}

    def load_settings(self, environ: Optional[Dict[str, str]] = None) -> Settings:
        """デフォルト・ファイル・環境変数をマージして Settings を返す"""
        known = {f.name for f in fields(Settings)}

        merged: Dict[str, Any] = {}
        for source in (self.load_file(), self.load_environment(environ)):
            for key, value in source.items():
                if key in known:
                    merged[key] = value
                else:
                    logger.warning(f"未知の設定キーを無視します: {key}")

        if 'timeout' in merged:
            try:
                merged['timeout'] = float(merged['timeout'])
            except (TypeError, ValueError):
                raise ConfigurationError(f"timeout は数値で指定してください: {merged['timeout']!r}",
                                         step="config")
            if merged['timeout'] <= 0:
                raise ConfigurationError("timeout は正の数で指定してください", step="config")

        for key, value in merged.items():
            if key != 'timeout' and not isinstance(value, str):
                raise ConfigurationError(f"{key} は文字列で指定してください", step="config")

        settings = Settings(**merged)
        logger.debug(f"設定: {settings.to_dict()}")
        return settings


def load_settings(config_path: Optional[Union[str, Path]] = None,
                  environ: Optional[Dict[str, str]] = None) -> Settings:
    """設定を読み込み（関数版）"""
    return ConfigManager(config_path).load_settings(environ)
