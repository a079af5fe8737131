import pytest

from curtain_quoter import store
from curtain_quoter.cascade import (
    COLLECTION_CHOSEN,
    COLOR_CHOSEN,
    NO_SYSTEM,
    SYSTEM_CHOSEN,
    Catalog,
    SelectorChain,
)
from curtain_quoter.store import StoreError


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield


def test_choose_system_loads_distinct_sorted_collections(ctx):
    chain = SelectorChain()
    assert chain.state == NO_SYSTEM
    chain.choose_system(1)
    assert chain.state == SYSTEM_CHOSEN
    assert chain.system_type == "ROLLER"
    assert chain.collection_options == ["Blackout", "Screen 5%"]


def test_colors_are_linked_and_in_collection(ctx):
    chain = SelectorChain()
    chain.choose_system(1)
    chain.choose_collection("Blackout")
    assert chain.state == COLLECTION_CHOSEN
    # Sand も Blackout だが ZEBRA にしか紐付いていない
    assert [c["color_name"] for c in chain.color_options] == ["Arctic White", "Charcoal"]


def test_choose_color_copies_code(ctx):
    chain = SelectorChain()
    chain.choose_system(1)
    chain.choose_collection("Blackout")
    assert chain.choose_color("1")
    assert chain.state == COLOR_CHOSEN
    assert chain.fabric_color == "Charcoal"
    assert chain.fabric_code == "BO-002"


def test_switching_system_clears_downstream(ctx):
    chain = SelectorChain()
    chain.choose_system(1)
    chain.choose_collection("Blackout")
    chain.choose_color(1)

    chain.choose_system(2)
    assert chain.collection == ""
    assert chain.fabric_id is None
    assert chain.fabric_color == ""
    assert chain.fabric_code == ""
    assert chain.color_options == []
    assert chain.collection_options == ["Blackout", "Duo"]


def test_switching_collection_clears_color(ctx):
    chain = SelectorChain()
    chain.choose_system(1)
    chain.choose_collection("Blackout")
    chain.choose_color(2)
    chain.choose_collection("Screen 5%")
    assert chain.fabric_id is None
    assert chain.fabric_code == ""
    assert [c["code"] for c in chain.color_options] == ["SC5-101"]


def test_system_without_fabrics_has_no_collections(ctx):
    chain = SelectorChain()
    chain.choose_system(3)
    assert chain.state == SYSTEM_CHOSEN
    assert chain.collection_options == []


def test_unknown_system(ctx):
    chain = SelectorChain()
    chain.choose_system(99)
    assert chain.state == NO_SYSTEM
    assert "system" in chain.errors


def test_stale_collections_response_is_dropped(ctx):
    chain = SelectorChain()
    first = chain.begin_system(1)
    second = chain.begin_system(2)
    assert not chain.apply_collections(first, ["Blackout", "Screen 5%"])
    assert chain.collection_options == []
    assert chain.apply_collections(second, ["Blackout", "Duo"])
    assert chain.collection_options == ["Blackout", "Duo"]
    # 後から古い応答が届いても上書きされない
    assert not chain.apply_collections(first, ["Screen 5%"])
    assert chain.collection_options == ["Blackout", "Duo"]


def test_system_switch_invalidates_pending_colors(ctx):
    chain = SelectorChain()
    chain.choose_system(1)
    token = chain.begin_collection("Blackout")
    chain.begin_system(2)
    assert not chain.apply_colors(token, [{"id": 1, "color_name": "Charcoal", "code": "BO-002"}])
    assert chain.color_options == []


def test_tokens_are_monotonic(ctx):
    chain = SelectorChain()
    tokens = [chain.begin_system(1) for _ in range(3)]
    assert tokens == sorted(tokens)
    assert len(set(tokens)) == 3
    assert chain.latest_token("collections") == tokens[-1]


def test_lookup_failure_sets_inline_error(ctx, monkeypatch):
    catalog = Catalog()

    def broken(product_id):
        raise StoreError("timeout while loading fabrics")

    monkeypatch.setattr(catalog, "collections", broken)
    chain = SelectorChain(catalog)
    chain.choose_system(1)
    assert chain.errors["collections"] == "timeout while loading fabrics"
    assert chain.collection_options == []


def test_catalog_memoizes_lookups(ctx, monkeypatch):
    calls = []
    real_table = store.table

    def counting(name):
        calls.append(name)
        return real_table(name)

    monkeypatch.setattr(store, "table", counting)
    catalog = Catalog()
    catalog.products()
    catalog.products()
    catalog.eligible_fabric_ids(1)
    catalog.eligible_fabric_ids(1)
    assert calls.count("products") == 1
    assert calls.count("product_fabrics") == 1


def test_restore_from_saved_strings(ctx):
    chain = SelectorChain()
    assert chain.restore("ROLLER", "Blackout", "BO-001")
    assert chain.product_id == 1
    assert chain.collection == "Blackout"
    assert chain.fabric_color == "Arctic White"


def test_restore_stops_at_unknown_collection(ctx):
    chain = SelectorChain()
    assert not chain.restore("ROLLER", "Duo", "DU-201")
    assert chain.state == SYSTEM_CHOSEN


def test_api_collections_echo_token(auth_client):
    resp = auth_client.get("/api/catalog/products/1/collections?token=7")
    assert resp.status_code == 200
    assert resp.get_json() == {"token": 7, "collections": ["Blackout", "Screen 5%"]}


def test_api_colors(auth_client):
    resp = auth_client.get("/api/catalog/products/1/colors?collection=Blackout&token=3")
    data = resp.get_json()
    assert data["token"] == 3
    assert [c["code"] for c in data["colors"]] == ["BO-001", "BO-002"]


def test_api_colors_without_collection(auth_client):
    data = auth_client.get("/api/catalog/products/1/colors?token=2").get_json()
    assert data == {"token": 2, "colors": []}


def test_api_products(auth_client):
    data = auth_client.get("/api/catalog/products").get_json()
    assert [p["code"] for p in data["products"]] == ["EMPTY", "ROLLER", "ZEBRA"]
