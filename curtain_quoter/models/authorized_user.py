from datetime import datetime
from curtain_quoter import db


class AuthorizedUser(db.Model):
    """ダッシュボード利用を許可するメールアドレス（IdP側のアカウント有効性とは独立）"""

    __tablename__ = "authorized_users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
