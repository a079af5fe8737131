# tests/conftest.py
import os
import sys
from datetime import datetime, timedelta

import pytest

# プロジェクトルートを sys.path の先頭へ
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from curtain_quoter import create_app, db  # noqa: E402
from curtain_quoter.models import (  # noqa: E402
    AuthorizedUser,
    Fabric,
    Product,
    ProductFabric,
    Quote,
    User,
)

ALLOWED_EMAIL = "allowed@example.com"
OUTSIDER_EMAIL = "outsider@example.com"
PASSWORD = "correct-horse"


def _seed(app):
    with app.app_context():
        for email in (ALLOWED_EMAIL, OUTSIDER_EMAIL):
            u = User(email=email, display_name=email.split("@")[0], is_active=True)
            u.set_password(PASSWORD)
            db.session.add(u)
        db.session.add(AuthorizedUser(email=ALLOWED_EMAIL))

        db.session.add_all([
            Product(id=1, name="Roller Blind", code="ROLLER"),
            Product(id=2, name="Zebra Blind", code="ZEBRA"),
            Product(id=3, name="Empty System", code="EMPTY"),
        ])
        db.session.add_all([
            Fabric(id=1, collection="Blackout", color_name="Charcoal", code="BO-002", system_code="ROLLER"),
            Fabric(id=2, collection="Blackout", color_name="Arctic White", code="BO-001", system_code="ROLLER"),
            Fabric(id=3, collection="Screen 5%", color_name="Pearl", code="SC5-101", system_code="ROLLER"),
            Fabric(id=4, collection="Duo", color_name="Ivory", code="DU-201", system_code="ZEBRA"),
            Fabric(id=5, collection="Blackout", color_name="Sand", code="BO-003", system_code="ZEBRA"),
        ])
        db.session.flush()
        for product_id, fabric_id in [(1, 1), (1, 2), (1, 3), (2, 4), (2, 5)]:
            db.session.add(ProductFabric(product_id=product_id, fabric_id=fabric_id))
        db.session.commit()


@pytest.fixture
def app(tmp_path):
    app = create_app({
        "TESTING": True,
        "SECRET_KEY": "test-secret",
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'test.db'}",
        "SEED_EMAIL": None,
        "SEED_PASSWORD": None,
    })
    _seed(app)
    yield app
    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


def user_id_for(app, email):
    with app.app_context():
        return User.query.filter_by(email=email).first().id


def sign_in_as(client, app, email):
    uid = user_id_for(app, email)
    with client.session_transaction() as sess:
        sess["user_id"] = uid


@pytest.fixture
def auth_client(app, client):
    sign_in_as(client, app, ALLOWED_EMAIL)
    return client


def add_quote(app, project_name="Lobby", customer_name="Acme", status="Draft", age_minutes=0):
    """DB へ直接見積を登録して id を返す（created_at を制御したいテスト用）"""
    with app.app_context():
        q = Quote(
            customer_name=customer_name,
            project_name=project_name,
            status=status,
            quote_date="2026-01-15",
            created_at=datetime.utcnow() - timedelta(minutes=age_minutes),
        )
        db.session.add(q)
        db.session.commit()
        return q.id
