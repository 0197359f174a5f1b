"""
外部プレーヤー起動モジュール

解決したストリームを ffmpeg / ffplay に渡します（デコード・エンコードは外部プロセスが行う）。
- 再生: ffmpeg（HLS取得 → matroska 出力）をパイプで ffplay に接続
- 録音: ffmpeg で AAC をコピーしてファイルに保存

ffmpeg のコマンドラインは ffmpeg-python で組み立てます。
"""

import shutil
import subprocess
from pathlib import Path
from typing import Optional, Union

import ffmpeg

from .error_handler import PlayerError, RecordingError
from .stream import StreamRequest
from .utils.base import LoggerMixin

DEFAULT_VOLUME = 100


def find_executable(name: str) -> Optional[str]:
    """実行ファイルのパスを探す（見つからない場合はNone）"""
    return shutil.which(name)


class MediaLauncher(LoggerMixin):
    """ffmpeg / ffplay の起動クラス"""

    def __init__(self, ffmpeg_path: str = "ffmpeg", ffplay_path: str = "ffplay",
                 quiet: bool = False):
        super().__init__()
        self.ffmpeg_path = ffmpeg_path
        self.ffplay_path = ffplay_path
        self.quiet = quiet

    def check_available(self, *names: str) -> None:
        """必要な実行ファイルが存在するか確認

        Raises:
            PlayerError: 見つからない
        """
        for name in names or (self.ffmpeg_path,):
            if find_executable(name) is None:
                raise PlayerError(f"{name} が見つかりません。インストールしてください。",
                                  step="player")

    def live_input(self, stream: StreamRequest):
        """ストリームを入力とする ffmpeg ノード"""
        return ffmpeg.input(stream.url, headers=stream.header_line)

    def play(self, stream: StreamRequest, volume: int = DEFAULT_VOLUME) -> None:
        """ffmpeg | ffplay でライブ再生（終了するまでブロック）

        Raises:
            PlayerError: プロセスの起動失敗または異常終了
        """
        if volume < 0 or volume > 100:
            volume = DEFAULT_VOLUME

        producer_spec = self.live_input(stream).output('pipe:', format='matroska')
        self.logger.debug(f"player: {' '.join(producer_spec.compile(cmd=self.ffmpeg_path))}")

        try:
            producer = producer_spec.run_async(cmd=self.ffmpeg_path, pipe_stdout=True,
                                               quiet=False)
        except OSError as e:
            raise PlayerError(f"ffmpeg を起動できません: {e}", step="player")

        consumer_args = [self.ffplay_path, '-volume', str(volume), '-i', '-']
        if self.quiet:
            consumer_args[1:1] = ['-nodisp', '-loglevel', 'error']

        try:
            consumer = subprocess.Popen(consumer_args, stdin=producer.stdout)
        except OSError as e:
            producer.kill()
            producer.stdout.close()
            producer.wait()
            raise PlayerError(f"ffplay を起動できません: {e}", step="player")

        # 親プロセス側の読み口を閉じる（ffplay だけがパイプを読む）
        producer.stdout.close()

        try:
            producer_code = producer.wait()
            consumer_code = consumer.wait()
        except KeyboardInterrupt:
            self._terminate(producer)
            self._terminate(consumer)
            raise

        self.logger.debug(f"player: ffmpeg={producer_code}, ffplay={consumer_code}")

        if producer_code != 0:
            raise PlayerError(f"ffmpeg が異常終了しました (code={producer_code})", step="player")
        if consumer_code != 0:
            raise PlayerError(f"ffplay が異常終了しました (code={consumer_code})", step="player")

    def record(self, stream: StreamRequest, output_path: Union[str, Path]) -> Path:
        """ffmpeg で録音してファイルに保存

        Raises:
            RecordingError: ffmpeg の起動失敗または異常終了
        """
        output_path = Path(output_path)

        output_kwargs = {
            'acodec': 'copy',
            'vn': None,
            'bsf:a': 'aac_adtstoasc',
        }
        if stream.duration is not None:
            output_kwargs['t'] = f"{stream.duration.total_seconds():g}"

        stream_spec = self.live_input(stream).output(str(output_path), **output_kwargs)
        self.logger.debug(f"recorder: {' '.join(stream_spec.compile(cmd=self.ffmpeg_path))}")

        try:
            ffmpeg.run(stream_spec, cmd=self.ffmpeg_path, overwrite_output=True,
                       quiet=self.quiet)
        except ffmpeg.Error as e:
            detail = (e.stderr or b'').decode('utf-8', errors='replace').strip().splitlines()
            message = detail[-1] if detail else str(e)
            raise RecordingError(f"ffmpeg エラー: {message}", step="recorder")
        except OSError as e:
            raise RecordingError(f"ffmpeg を起動できません: {e}", step="recorder")

        self.logger.info(f"録音完了: {output_path}")
        return output_path

    def _terminate(self, process: subprocess.Popen) -> None:
        if process.poll() is None:
            process.terminate()
            try:
                process.wait(timeout=5)
            except subprocess.TimeoutExpired:
                process.kill()
                process.wait()
