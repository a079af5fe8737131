import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from curtain_quoter import create_app  # noqa: E402
from curtain_quoter.models import AuthorizedUser, User  # noqa: E402


def main():
    app = create_app()
    with app.app_context():
        print(f"[INFO] DB={app.config['SQLALCHEMY_DATABASE_URI']}")
        allowed = {a.email for a in AuthorizedUser.query.all()}
        users = User.query.order_by(User.id).all()
        print(f"[INFO] users.count={len(users)}")
        for u in users:
            print((u.id, u.email, u.display_name, u.is_active, u.email in allowed))
    return 0


if __name__ == "__main__":
    sys.exit(main())
