from dataclasses import dataclass
from functools import wraps

from flask import current_app, redirect, session, url_for
from sqlalchemy.exc import SQLAlchemyError

from curtain_quoter import db
from curtain_quoter import store
from curtain_quoter.models.user import User
from curtain_quoter.store import StoreError


@dataclass(frozen=True)
class SessionContext:
    """保護ビューに明示的に渡すログイン情報（リクエスト毎に再取得）"""

    user_id: int
    email: str
    display_name: str


def get_session():
    """
    現在のセッションを返す。未ログイン・無効ユーザーなら None
    ユーザー取得で DB エラーになった場合は StoreError
    """
    user_id = session.get("user_id")
    if not user_id:
        return None
    try:
        user = db.session.get(User, user_id)
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.warning("[AUTH] session lookup failed user_id=%s: %s", user_id, e)
        raise StoreError("Session check failed.", table="users")
    if not user or not user.is_active or not user.email:
        return None
    return SessionContext(user_id=user.id, email=user.email, display_name=user.display_name)


def peek_session():
    """ランディング・ログイン画面用。確認に失敗したら未ログイン扱い"""
    try:
        return get_session()
    except StoreError:
        return None


def sign_in(user):
    session.clear()
    session["user_id"] = user.id


def sign_out():
    session.clear()


def is_authorized(email):
    """許可リストに email が1件あるか。エラーは呼び出し側で拒否扱い"""
    try:
        store.table("authorized_users").select("email").eq("email", email.lower()).single()
    except store.NotFoundError:
        return False
    return True


def authorized_required(f):
    """
    セッション確認 + 許可リスト確認
    - セッション無し: ランディングへ
    - 許可リストに無い / 確認でエラー: サインアウトして /?error=unauthorized へ
    成功時のみ session_ctx=SessionContext を渡してビューを実行する
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            ctx = get_session()
        except StoreError:
            sign_out()
            return redirect(url_for("main.landing", error="unauthorized"))
        if ctx is None:
            return redirect(url_for("main.landing"))
        try:
            allowed = is_authorized(ctx.email)
        except StoreError as e:
            current_app.logger.warning("[AUTH] allow-list check failed for %s: %s", ctx.email, e)
            allowed = False
        if not allowed:
            current_app.logger.info("[AUTH] denied email=%s", ctx.email)
            sign_out()
            return redirect(url_for("main.landing", error="unauthorized"))
        kwargs["session_ctx"] = ctx
        return f(*args, **kwargs)
    return decorated_function
