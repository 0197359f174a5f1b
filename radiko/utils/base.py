"""
基底クラスとMixin
"""

import logging
from typing import Optional

from radiko.logging_config import get_logger


class LoggerMixin:
    """ロガー機能を提供するMixin

    各コンポーネントは super().__init__() を呼ぶだけで self.logger を使える。
    logger_name を指定するとモジュール名の代わりにその名前を使う。

    Usage:
        class StationCatalog(LoggerMixin):
            def __init__(self, http):
                super().__init__()
                self.logger.debug("...")
    """

    logger: logging.Logger
    logger_name: Optional[str] = None

    def __init__(self) -> None:
        self.logger = get_logger(self.logger_name or self.__class__.__module__)
