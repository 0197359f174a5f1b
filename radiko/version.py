"""バージョン情報"""

from importlib import metadata

__version__ = "1.0.0"

DISTRIBUTION_NAME = "radiko-client"


def get_version() -> str:
    """インストール済みパッケージのバージョンを返す（未インストール時はソースの値）"""
    try:
        return metadata.version(DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        return __version__
