"""
radiko テストパッケージ

テスト構造:
- test_area.py / test_seed.py: エリアID・フルキー取得のテスト
- test_auth.py: ハンドシェイクのテスト
- test_station.py / test_playlist.py: XML解析と取得のテスト
- test_stream.py: ストリームURL生成のテスト
- test_client.py: 全体の流れのテスト
- test_player.py: ffmpeg / ffplay 起動のテスト
- test_cli.py: CLIインターフェースのテスト
"""

import sys
from pathlib import Path

# プロジェクトルートをパスに追加
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
