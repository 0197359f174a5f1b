"""
CLIインターフェースモジュール

このモジュールはradikoクライアントのコマンドライン操作を提供します。
- station: 放送局一覧（JSON）
- area: 接続元のエリアID
- authkey: 認証トークン（--seed でフルキー）
- play: ライブ再生
- rec: タイムフリー録音
- version: バージョン表示
"""

import argparse
import json
import sys
from typing import Callable, List, Optional

from .client import RadikoClient
from .error_handler import InvalidWindowError, RadikoError, handle_error
from .logging_config import setup_logging
from .player import DEFAULT_VOLUME, MediaLauncher
from .region_mapper import RegionMapper
from .stream import validate_window
from .utils.base import LoggerMixin
from .utils.config_utils import Settings, load_settings
from .utils.datetime_utils import parse_duration, parse_target
from .version import get_version

DEFAULT_OUTPUT = "output.m4a"

# Ctrl-C で中断した場合の終了コード（128 + SIGINT）
EXIT_INTERRUPTED = 130


class RadikoCLI(LoggerMixin):
    """radiko CLIメインクラス"""

    COMMANDS = ['station', 'area', 'authkey', 'play', 'rec', 'version']

    def __init__(self,
                 client_factory: Optional[Callable[[Settings], RadikoClient]] = None,
                 launcher_factory: Optional[Callable[[Settings], MediaLauncher]] = None,
                 stdout=None, stderr=None):
        """
        Args:
            client_factory: Settings から RadikoClient を作る関数（テスト用に差し替え可）
            launcher_factory: Settings から MediaLauncher を作る関数
            stdout: 結果の出力先
            stderr: エラーメッセージの出力先
        """
        super().__init__()
        self.client_factory = client_factory or RadikoClient.from_settings
        self.launcher_factory = launcher_factory or (
            lambda settings: MediaLauncher(settings.ffmpeg_path, settings.ffplay_path))
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr
        self.client: Optional[RadikoClient] = None

    def create_parser(self) -> argparse.ArgumentParser:
        """コマンドライン引数パーサーを作成"""
        parser = argparse.ArgumentParser(
            prog='radiko',
            description='radiko.jp のライブ再生・タイムフリー録音クライアント',
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
使用例:
  radiko station                                   # 放送局一覧（JSON）
  radiko area --detail                             # エリアIDと都道府県
  radiko play QRR                                  # ライブ再生
  radiko rec TBS --target 202401011200 --length 30m --output news.m4a

環境変数 RADIKO_USERNAME / RADIKO_PASSWORD でプレミアム会員としてログインします。
            """
        )

        # グローバルオプション
        parser.add_argument('--debug', action='store_true', help='デバッグログを標準エラーに表示')
        parser.add_argument('--config', help='設定ファイルパス（JSON）', default=None)

        subparsers = parser.add_subparsers(dest='command', metavar='<command>')

        subparsers.add_parser('station', help='放送局一覧をJSONで表示')

        area_parser = subparsers.add_parser('area', help='接続元のエリアIDを表示')
        area_parser.add_argument('--detail', action='store_true', help='都道府県名も表示')

        authkey_parser = subparsers.add_parser('authkey', help='認証トークンを表示')
        authkey_parser.add_argument('--seed', action='store_true', help='フルキーを表示')

        play_parser = subparsers.add_parser('play', help='ライブ再生')
        play_parser.add_argument('station_id', help='放送局ID（例: QRR）')
        play_parser.add_argument('--volume', type=int, default=DEFAULT_VOLUME,
                                 help='音量（0〜100）')

        rec_parser = subparsers.add_parser('rec', help='タイムフリー録音')
        rec_parser.add_argument('station_id', help='放送局ID（例: TBS）')
        rec_parser.add_argument('--target', required=True, help='開始日時（YYYYMMDDhhmm、日本時間）')
        rec_parser.add_argument('--length', required=True, help='録音時間（例: 90s, 30m, 1h30m）')
        rec_parser.add_argument('--output', default=DEFAULT_OUTPUT, help='出力ファイル')

        subparsers.add_parser('version', help='バージョンを表示')

        return parser

    def run(self, args: Optional[List[str]] = None) -> int:
        """CLIメインエントリーポイント

        Returns:
            int: 終了コード（成功 0、エラー 1、中断 130）
        """
        parser = self.create_parser()
        parsed_args = parser.parse_args(args)

        if parsed_args.debug:
            setup_logging('DEBUG', console_output=True, force=True)
        else:
            setup_logging()

        if parsed_args.command is None:
            parser.print_help(self.stdout)
            return 0

        if parsed_args.command == 'version':
            return self._cmd_version(parsed_args)

        try:
            settings = load_settings(parsed_args.config)
            if not parsed_args.debug and (settings.log_file or settings.log_level != 'WARNING'):
                setup_logging(settings.log_level, settings.log_file or None, force=True)

            self.client = self.client_factory(settings)
            handler = getattr(self, f"_cmd_{parsed_args.command}")
            return handler(parsed_args, settings)

        except KeyboardInterrupt:
            if self.client is not None:
                self.client.cancel()
            print("\n操作がキャンセルされました", file=self.stderr)
            return EXIT_INTERRUPTED
        except RadikoError as e:
            print(f"エラー: {handle_error(e)}", file=self.stderr)
            return 1
        except Exception as e:
            handle_error(e, {'command': parsed_args.command})
            print(f"予期しないエラーが発生しました: {e}", file=self.stderr)
            return 1

    def _cmd_station(self, args, settings: Settings) -> int:
        """放送局一覧をJSONで表示"""
        stations = self.client.get_stations()
        print(json.dumps([station.to_dict() for station in stations],
                         ensure_ascii=False, indent=2), file=self.stdout)
        return 0

    def _cmd_area(self, args, settings: Settings) -> int:
        """エリアIDを表示"""
        area_id = self.client.get_area()
        if args.detail:
            print(RegionMapper.describe(area_id), file=self.stdout)
        else:
            print(area_id, file=self.stdout)
        return 0

    def _cmd_authkey(self, args, settings: Settings) -> int:
        """認証トークン（--seed 時はフルキー）を表示"""
        if args.seed:
            print(self.client.get_full_key(), file=self.stdout)
            return 0

        session = self.client.authenticate()
        print(session.auth_token, file=self.stdout)
        return 0

    def _cmd_play(self, args, settings: Settings) -> int:
        """ライブ再生"""
        launcher = self.launcher_factory(settings)
        launcher.check_available(launcher.ffmpeg_path, launcher.ffplay_path)

        stream = self.client.live_stream(args.station_id)
        self.logger.info(f"再生開始: {stream.station_id}")
        launcher.play(stream, volume=args.volume)
        return 0

    def _cmd_rec(self, args, settings: Settings) -> int:
        """タイムフリー録音"""
        try:
            start_at = parse_target(args.target)
        except ValueError:
            raise InvalidWindowError(
                f"開始日時は YYYYMMDDhhmm 形式で指定してください: {args.target!r}", step="rec")
        try:
            length = parse_duration(args.length)
        except ValueError:
            raise InvalidWindowError(
                f"録音時間は 90s, 30m, 1h30m のように指定してください: {args.length!r}", step="rec")
        validate_window(start_at, length)

        launcher = self.launcher_factory(settings)
        launcher.check_available(launcher.ffmpeg_path)

        stream = self.client.timefree_stream(args.station_id, start_at, length)
        output_path = launcher.record(stream, args.output)
        print(f"録音完了: {output_path}", file=self.stdout)
        return 0

    def _cmd_version(self, args, settings: Optional[Settings] = None) -> int:
        """バージョンを表示"""
        print(f"radiko {get_version()}", file=self.stdout)
        return 0


def main(argv: Optional[List[str]] = None) -> None:
    """コンソールスクリプトのエントリーポイント"""
    sys.exit(RadikoCLI().run(argv))


if __name__ == "__main__":
    main()
