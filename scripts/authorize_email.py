"""
許可リスト（authorized_users）の追加・削除・一覧
  python scripts/authorize_email.py add user@example.com
  python scripts/authorize_email.py remove user@example.com
  python scripts/authorize_email.py list
"""
import argparse
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from curtain_quoter import create_app, db  # noqa: E402
from curtain_quoter.models import AuthorizedUser  # noqa: E402


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("command", choices=["add", "remove", "list"])
    parser.add_argument("email", nargs="?")
    args = parser.parse_args()

    app = create_app()
    with app.app_context():
        if args.command == "list":
            rows = AuthorizedUser.query.order_by(AuthorizedUser.email).all()
            print(f"[INFO] authorized_users.count={len(rows)}")
            for r in rows:
                print(r.email)
            return 0

        if not args.email:
            print("[ERROR] email is required")
            return 2
        email = args.email.strip().lower()
        row = AuthorizedUser.query.filter_by(email=email).first()
        if args.command == "add":
            if row:
                print(f"[OK] already authorized: {email}")
                return 0
            db.session.add(AuthorizedUser(email=email))
            db.session.commit()
            print(f"[OK] authorized: {email}")
        else:
            if not row:
                print(f"[OK] not in allow-list: {email}")
                return 0
            db.session.delete(row)
            db.session.commit()
            print(f"[OK] removed: {email}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
