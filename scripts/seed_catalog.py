"""
デモ用カタログ（products / fabrics / product_fabrics）を投入する
  python scripts/seed_catalog.py [--reset]
"""
import argparse
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from curtain_quoter import create_app, db  # noqa: E402
from curtain_quoter.models import Fabric, Product, ProductFabric  # noqa: E402

PRODUCTS = [
    ("Roller Blind", "ROLLER"),
    ("Zebra Blind", "ZEBRA"),
    ("Panel Track", "PANEL"),
]

# (collection, color_name, code, system_code)
FABRICS = [
    ("Blackout", "Arctic White", "BO-001", "ROLLER"),
    ("Blackout", "Charcoal", "BO-002", "ROLLER"),
    ("Blackout", "Sand", "BO-003", "ROLLER"),
    ("Screen 5%", "Pearl", "SC5-101", "ROLLER"),
    ("Screen 5%", "Graphite", "SC5-102", "ROLLER"),
    ("Duo", "Ivory", "DU-201", "ZEBRA"),
    ("Duo", "Stone", "DU-202", "ZEBRA"),
    ("Linen", "Natural", "LN-301", "PANEL"),
    ("Linen", "Smoke", "LN-302", "PANEL"),
]

# 製品コード → 選択可能なコレクション
LINKS = {
    "ROLLER": ["Blackout", "Screen 5%"],
    "ZEBRA": ["Duo"],
    "PANEL": ["Linen", "Blackout"],
}


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--reset", action="store_true", help="delete existing catalog rows first")
    args = parser.parse_args()

    app = create_app()
    with app.app_context():
        if args.reset:
            ProductFabric.query.delete()
            Fabric.query.delete()
            Product.query.delete()
            db.session.commit()
            print("[SEED] catalog cleared")

        products = {}
        for name, code in PRODUCTS:
            p = Product.query.filter_by(code=code).first()
            if not p:
                p = Product(name=name, code=code)
                db.session.add(p)
            products[code] = p

        fabrics = []
        for collection, color_name, code, system_code in FABRICS:
            f = Fabric.query.filter_by(code=code).first()
            if not f:
                f = Fabric(collection=collection, color_name=color_name, code=code, system_code=system_code)
                db.session.add(f)
            fabrics.append(f)
        db.session.flush()

        added = 0
        for code, collections in LINKS.items():
            product = products[code]
            for f in fabrics:
                if f.collection not in collections:
                    continue
                if not db.session.get(ProductFabric, (product.id, f.id)):
                    db.session.add(ProductFabric(product_id=product.id, fabric_id=f.id))
                    added += 1
        db.session.commit()
        print(f"[SEED] products={len(products)} fabrics={len(fabrics)} new_links={added}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
