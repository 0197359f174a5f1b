#!/usr/bin/env python3
"""
Radiko - radiko.jp のライブ再生・タイムフリー録音クライアント

このファイルはインストールせずに実行するためのエントリーポイントです。

使用例:
    # 放送局一覧
    python Radiko.py station

    # ライブ再生
    python Radiko.py play QRR

    # タイムフリー録音
    python Radiko.py rec TBS --target 202401011200 --length 30m --output news.m4a
"""

import sys
from pathlib import Path

# プロジェクトルートディレクトリをPythonパスに追加
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from radiko.cli import main


if __name__ == "__main__":
    main()
