"""
pytest configuration and fixtures for radiko tests

通信はすべて tests.utils.http_fixtures のモックセッションで置き換える。
"""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from radiko.logging_config import reset_logging

# 実行環境の設定がテストに混ざらないようにする
_RADIKO_ENVIRONMENT = (
    "RADIKO_USERNAME",
    "RADIKO_PASSWORD",
    "RADIKO_TIMEOUT",
    "RADIKO_LIVE_HOST",
    "RADIKO_LOG_LEVEL",
    "RADIKO_LOG_FILE",
    "RADIKO_CONSOLE_OUTPUT",
)


@pytest.fixture(autouse=True)
def radiko_test_environment(monkeypatch):
    """テスト用の環境変数"""
    monkeypatch.setenv("RADIKO_TEST_MODE", "true")
    for name in _RADIKO_ENVIRONMENT:
        monkeypatch.delenv(name, raising=False)

    yield

    reset_logging()
