import os

base_dir = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))
db_path = os.environ.get("CURTAIN_DB_PATH") or os.path.join(base_dir, "quotes.db")


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key")
    SQLALCHEMY_DATABASE_URI = f"sqlite:///{db_path}"
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # 起動時に作成・許可リスト登録するブートストラップアカウント（任意）
    SEED_EMAIL = os.environ.get("CURTAIN_SEED_EMAIL")
    SEED_PASSWORD = os.environ.get("CURTAIN_SEED_PASSWORD")

    DEFAULT_CURRENCY = "USD"
