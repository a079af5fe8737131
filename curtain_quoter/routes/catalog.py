from flask import Blueprint, jsonify, request

from curtain_quoter.auth_utils import authorized_required
from curtain_quoter.cascade import Catalog
from curtain_quoter.store import StoreError

catalog_bp = Blueprint("catalog", __name__, url_prefix="/api/catalog")


def _token():
    # ブラウザ側が振った連番をそのまま返す（古い応答の破棄用）
    return request.args.get("token", default=0, type=int)


@catalog_bp.route("/products")
@authorized_required
def products(session_ctx):
    try:
        rows = Catalog().products()
    except StoreError as e:
        return jsonify({"error": e.message}), 502
    return jsonify({"products": rows})


@catalog_bp.route("/products/<int:product_id>/collections")
@authorized_required
def collections(product_id, session_ctx):
    token = _token()
    try:
        options = Catalog().collections(product_id)
    except StoreError as e:
        return jsonify({"token": token, "error": e.message, "collections": []}), 502
    return jsonify({"token": token, "collections": options})


@catalog_bp.route("/products/<int:product_id>/colors")
@authorized_required
def colors(product_id, session_ctx):
    token = _token()
    collection = request.args.get("collection", "").strip()
    if not collection:
        return jsonify({"token": token, "colors": []})
    try:
        options = Catalog().colors(product_id, collection)
    except StoreError as e:
        return jsonify({"token": token, "error": e.message, "colors": []}), 502
    return jsonify({"token": token, "colors": options})
