"""
Radiko認証モジュール

このモジュールはradikoのハンドシェイクを管理します。

    Login → Check → Auth1 → Auth2

- Login: プレミアム会員ログイン（認証情報がない場合はリクエスト自体を行わない）
- Check: 会員状態の確認と radiko_session クッキーの取得（Login で取得済みならスキップ）
- Auth1: 認証トークンと部分キーの位置（KeyOffset/KeyLength）の取得
- Auth2: 部分キーを送って認証トークンを有効化

各ステップは前のステップの結果を使うため順序は固定です。失敗したステップは再試行せず、
再試行する場合は呼び出し側がエリアIDとフルキーの取得からやり直します。
"""

import base64
import hashlib
import secrets
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .error_handler import (
    InvalidKeyBoundsError, LoginError, MissingAuthTokenError,
    SecondAuthFailedError, SessionCookieMissingError,
)
from .utils.base import LoggerMixin
from .utils.config_utils import Credentials
from .utils.network_utils import RadikoHTTP

SESSION_COOKIE_NAME = "radiko_session"


def generate_a_exp(now: Optional[float] = None) -> str:
    """a_exp クッキーの値（現在のUNIX時刻のMD5）を生成"""
    if now is None:
        now = time.time()
    return hashlib.md5(str(int(now)).encode('utf-8')).hexdigest()


def generate_nonce() -> str:
    """ストリームリクエスト用のセッション識別子（lsid）を生成"""
    return secrets.token_hex(16)


def make_partial_key(full_key: str, offset: int, length: int) -> str:
    """フルキーの offset から length バイトを切り出し、base64 で返す

    Raises:
        InvalidKeyBoundsError: 範囲がフルキーの外にはみ出す
    """
    key_bytes = full_key.encode('utf-8')

    if length <= 0 or offset < 0 or offset + length > len(key_bytes):
        raise InvalidKeyBoundsError(
            f"不正なキー範囲です: length={length}, offset={offset}, full key={len(key_bytes)}",
            step="auth1",
            context={'key_offset': offset, 'key_length': length})

    partial_key = key_bytes[offset:offset + length]
    return base64.b64encode(partial_key).decode('ascii')


@dataclass
class Session:
    """ハンドシェイクの状態

    空の状態で作成され、各ステップが順に値を埋める。authenticated は Auth2 の
    成功後にのみ True になる。有効期限は持たない（サーバーが判断する）。
    """
    area_id: str = ""
    radiko_session: str = ""
    auth_token: str = ""
    partial_key: str = ""
    key_offset: int = 0
    key_length: int = 0
    nonce: str = field(default_factory=generate_nonce)
    a_exp: str = field(default_factory=generate_a_exp)
    authenticated: bool = False

    def cookie_header(self) -> str:
        """Auth1/Auth2/プレイリスト取得で送る Cookie ヘッダー"""
        return (
            f"a_exp={self.a_exp}; "
            f"default_area_id={self.area_id}; "
            f"{SESSION_COOKIE_NAME}={self.radiko_session}; "
            f"tracking_area_id={self.area_id}"
        )

    def __repr__(self) -> str:
        return (f"Session(area_id={self.area_id!r}, authenticated={self.authenticated}, "
                f"key_offset={self.key_offset}, key_length={self.key_length})")


class LoginStrategy(LoggerMixin):
    """ログイン方式の基底クラス

    attempt() は成功時に radiko_session を返し、サービス側に拒否された場合は None を返す。
    通信エラーは例外のまま伝播する。
    """

    name = "login"

    def __init__(self, http: RadikoHTTP):
        super().__init__()
        self.http = http

    def attempt(self, credentials: Credentials) -> Optional[str]:
        raise NotImplementedError

    @staticmethod
    def _form(credentials: Credentials) -> Dict[str, str]:
        return {'mail': credentials.username, 'pass': credentials.password}


class JsonApiLogin(LoginStrategy):
    """JSON API によるログイン

    成功すると {"radiko_session": "..."} が返る。
    """

    name = "json-api"
    LOGIN_URL = "https://radiko.jp/v4/api/member/login"

    # ログイン成功後の待機（サービス側の想定するリクエスト間隔）
    POST_LOGIN_WAIT = 0.1

    def attempt(self, credentials: Credentials) -> Optional[str]:
        response = self.http.post(
            "login", self.LOGIN_URL,
            data=self._form(credentials),
            headers={'Content-Type': 'application/x-www-form-urlencoded'},
        )

        if response.status_code != 200:
            self.logger.info(f"JSON API ログイン失敗 (HTTP {response.status_code})")
            return None

        try:
            radiko_session = response.json().get(SESSION_COOKIE_NAME, "")
        except (ValueError, AttributeError) as e:
            self.logger.info(f"JSON API ログイン応答を解析できません: {e}")
            return None

        if not radiko_session:
            self.logger.info("JSON API ログイン応答に radiko_session がありません")
            return None

        self.wait_after_login()
        return radiko_session

    def wait_after_login(self) -> None:
        time.sleep(self.POST_LOGIN_WAIT)


class WebFormLogin(LoginStrategy):
    """Webフォームによるログイン

    成功するとリダイレクトが返り、Set-Cookie に radiko_session が入る。
    """

    name = "web-form"
    LOGIN_URL = "https://radiko.jp/ap/member/login/login"

    def attempt(self, credentials: Credentials) -> Optional[str]:
        response = self.http.post(
            "login", self.LOGIN_URL,
            data=self._form(credentials),
            headers={'Content-Type': 'application/x-www-form-urlencoded'},
            allow_redirects=False,
        )

        if not response.is_redirect:
            self.logger.info(f"Webフォームログイン失敗 (HTTP {response.status_code})")
            return None

        radiko_session = response.cookies.get(SESSION_COOKIE_NAME)
        if not radiko_session:
            self.logger.info("Webフォームログインの応答に radiko_session クッキーがありません")
            return None

        return radiko_session


class SessionAuthenticator(LoggerMixin):
    """radikoハンドシェイクを実行するクラス"""

    # Radiko API エンドポイント
    CHECK_URL = "https://radiko.jp/ap/member/webapi/v2/member/login/check"
    AUTH1_URL = "https://radiko.jp/v2/api/auth1"
    AUTH2_URL = "https://radiko.jp/v2/api/auth2"

    # 端末識別ヘッダー
    AUTH1_HEADERS = {
        'x-radiko-app': 'pc_html5',
        'x-radiko-app-version': '0.0.1',
        'x-radiko-user': 'dummy_user',
        'x-radiko-device': 'pc',
    }
    AUTH2_HEADERS = {
        'x-radiko-user': 'dummy_user',
        'x-radiko-device': 'pc',
    }

    def __init__(self, http: RadikoHTTP,
                 credentials: Optional[Credentials] = None,
                 login_strategies: Optional[Sequence[LoginStrategy]] = None):
        super().__init__()
        self.http = http
        self.credentials = credentials
        if login_strategies is None:
            login_strategies = [JsonApiLogin(http), WebFormLogin(http)]
        self.login_strategies: List[LoginStrategy] = list(login_strategies)

    def authenticate(self, area_id: str, full_key: str,
                     session: Optional[Session] = None) -> Session:
        """ハンドシェイクを実行して認証済みセッションを返す

        Args:
            area_id: AreaResolver で取得したエリアID
            full_key: KeySeedFetcher で取得したフルキー
            session: 状態を書き込むセッション（None時は新規作成）
        """
        session = session or Session()
        session.area_id = area_id

        self.login(session)
        self.check(session)
        self.auth1(session, full_key)
        self.auth2(session)

        self.logger.info(f"認証完了: area_id={session.area_id}")
        return session

    def login(self, session: Session) -> None:
        """プレミアム会員ログイン"""
        if self.credentials is None:
            self.logger.info("login: 通常会員として続行します")
            return

        self.logger.info("login: プレミアム会員としてログインします")

        for strategy in self.login_strategies:
            radiko_session = strategy.attempt(self.credentials)
            if radiko_session:
                session.radiko_session = radiko_session
                self.logger.info(f"login: ログイン成功 ({strategy.name})")
                self.logger.debug(f"login: radiko_session={radiko_session}")
                return
            self.logger.info(f"login: {strategy.name} で失敗、次の方式を試します")

        raise LoginError("ログインに失敗しました", step="login")

    def check(self, session: Session) -> None:
        """会員状態の確認（radiko_session クッキーの取得）"""
        if session.radiko_session:
            self.logger.debug("check: ログイン済みのためスキップ")
            return

        response = self.http.get("check", self.CHECK_URL)
        # 通常会員では 400 が返るのが正常
        self.logger.debug(f"check: status code: {response.status_code}")

        radiko_session = response.cookies.get(SESSION_COOKIE_NAME)
        if not radiko_session:
            raise SessionCookieMissingError(f"{SESSION_COOKIE_NAME} が見つかりません", step="check")

        session.radiko_session = radiko_session
        self.logger.debug(f"check: radiko_session={radiko_session}")

    def auth1(self, session: Session, full_key: str) -> None:
        """第1認証: 認証トークンと部分キーの位置を取得"""
        cookie = session.cookie_header()
        self.logger.debug(f"auth1: cookie={cookie}")

        response = self.http.get(
            "auth1", self.AUTH1_URL,
            headers={**self.AUTH1_HEADERS, 'Cookie': cookie},
        )

        auth_token = response.headers.get('X-Radiko-Authtoken', '')
        if not auth_token:
            raise MissingAuthTokenError("認証トークンが取得できませんでした", step="auth1")

        key_length = self._int_header(response.headers, 'X-Radiko-KeyLength')
        key_offset = self._int_header(response.headers, 'X-Radiko-KeyOffset')
        if key_length == 0:
            raise InvalidKeyBoundsError("KeyLength が 0 です", step="auth1")

        partial_key = make_partial_key(full_key, key_offset, key_length)

        session.auth_token = auth_token
        session.key_length = key_length
        session.key_offset = key_offset
        session.partial_key = partial_key

        self.logger.info("auth1: 認証トークンとキー情報取得成功")
        self.logger.debug(f"auth1: offset={key_offset}, length={key_length}, partial key={partial_key}")

    def auth2(self, session: Session) -> None:
        """第2認証: 部分キーで認証トークンを有効化"""
        cookie = session.cookie_header()
        self.logger.debug(f"auth2: cookie={cookie}")

        response = self.http.get(
            "auth2", self.AUTH2_URL,
            headers={
                **self.AUTH2_HEADERS,
                'x-radiko-authtoken': session.auth_token,
                'x-radiko-partialkey': session.partial_key,
                'Cookie': cookie,
            },
        )

        if response.status_code != 200:
            raise SecondAuthFailedError(f"第2認証に失敗しました (HTTP {response.status_code})",
                                        step="auth2")

        session.authenticated = True

    @staticmethod
    def _int_header(headers, name: str) -> int:
        value = headers.get(name)
        try:
            return int(value)
        except (TypeError, ValueError):
            raise InvalidKeyBoundsError(f"{name} を解析できません: {value!r}", step="auth1")
