"""
明細入力フォームの連動プルダウン（システム → コレクション → 色/コード）

状態: NoSystem → SystemChosen → CollectionChosen → ColorChosen
上流を変更すると下流の選択値と候補リストは同じ更新内ですべてクリアする。
各ルックアップにはフィールド毎の単調増加トークンを振り、
最新トークンの結果だけを反映する（古い応答は捨てる）。
"""
from curtain_quoter import store
from curtain_quoter.store import StoreError

NO_SYSTEM = "NoSystem"
SYSTEM_CHOSEN = "SystemChosen"
COLLECTION_CHOSEN = "CollectionChosen"
COLOR_CHOSEN = "ColorChosen"


class Catalog:
    """1フォーム分のカタログ参照。取得済みの結果はメモ化する"""

    def __init__(self):
        self._products = None
        self._eligible = {}

    def products(self):
        if self._products is None:
            self._products = (
                store.table("products").select("id", "name", "code").order("name").execute()
            )
        return self._products

    def product(self, product_id):
        for p in self.products():
            if str(p["id"]) == str(product_id):
                return p
        return None

    def product_by_code(self, code):
        for p in self.products():
            if p["code"] == code:
                return p
        return None

    def eligible_fabric_ids(self, product_id):
        key = str(product_id)
        if key not in self._eligible:
            rows = (
                store.table("product_fabrics")
                .select("fabric_id")
                .eq("product_id", product_id)
                .execute()
            )
            self._eligible[key] = [r["fabric_id"] for r in rows if r["fabric_id"] is not None]
        return self._eligible[key]

    def collections(self, product_id):
        fabric_ids = self.eligible_fabric_ids(product_id)
        if not fabric_ids:
            return []
        rows = store.table("fabrics").select("id", "collection").in_("id", fabric_ids).execute()
        return sorted({r["collection"] for r in rows if r["collection"]})

    def colors(self, product_id, collection):
        fabric_ids = self.eligible_fabric_ids(product_id)
        if not fabric_ids:
            return []
        return (
            store.table("fabrics")
            .select("id", "color_name", "code", "collection")
            .in_("id", fabric_ids)
            .eq("collection", collection)
            .order("color_name")
            .execute()
        )


class SelectorChain:
    def __init__(self, catalog=None):
        self.catalog = catalog or Catalog()
        self.product_id = None
        self.system_type = ""
        self.collection = ""
        self.fabric_id = None
        self.fabric_color = ""
        self.fabric_code = ""
        self.collection_options = []
        self.color_options = []
        self.errors = {}
        self._tokens = {"collections": 0, "colors": 0}

    @property
    def state(self):
        if self.product_id is None:
            return NO_SYSTEM
        if not self.collection:
            return SYSTEM_CHOSEN
        if self.fabric_id is None:
            return COLLECTION_CHOSEN
        return COLOR_CHOSEN

    # --- tokens ---
    def issue_token(self, field):
        self._tokens[field] += 1
        return self._tokens[field]

    def latest_token(self, field):
        return self._tokens[field]

    def is_current(self, field, token):
        return token == self._tokens[field]

    # --- resets ---
    def _reset_color(self):
        self.fabric_id = None
        self.fabric_color = ""
        self.fabric_code = ""

    def _reset_collection(self):
        self.collection = ""
        self.color_options = []
        self.errors.pop("colors", None)
        self._reset_color()

    # --- system ---
    def begin_system(self, product_id):
        """システム選択。下流をクリアしてコレクション取得用トークンを返す"""
        self.errors.pop("system", None)
        product = None
        if product_id:
            try:
                product = self.catalog.product(product_id)
            except StoreError as e:
                self.errors["system"] = e.message
            else:
                if product is None:
                    self.errors["system"] = "Selected system is not available."
        self.product_id = product["id"] if product else None
        self.system_type = product["code"] if product else ""
        self._reset_collection()
        self.collection_options = []
        self.errors.pop("collections", None)
        # 旧システム向けの色取得応答も無効化する
        self.issue_token("colors")
        return self.issue_token("collections")

    def apply_collections(self, token, options=None, error=None):
        if not self.is_current("collections", token):
            return False
        if error:
            self.errors["collections"] = error
            self.collection_options = []
        else:
            self.collection_options = list(options or [])
        return True

    def choose_system(self, product_id):
        token = self.begin_system(product_id)
        if self.product_id is None:
            return token
        try:
            options = self.catalog.collections(self.product_id)
        except StoreError as e:
            self.apply_collections(token, error=e.message)
        else:
            self.apply_collections(token, options)
        return token

    # --- collection ---
    def begin_collection(self, name):
        self._reset_collection()
        self.collection = name or ""
        return self.issue_token("colors")

    def apply_colors(self, token, options=None, error=None):
        if not self.is_current("colors", token):
            return False
        if error:
            self.errors["colors"] = error
            self.color_options = []
        else:
            self.color_options = list(options or [])
        return True

    def choose_collection(self, name):
        token = self.begin_collection(name)
        if self.product_id is None or not self.collection:
            return token
        if self.collection not in self.collection_options:
            self.collection = ""
            self.errors["colors"] = "Selected collection is not available for this system."
            return token
        try:
            options = self.catalog.colors(self.product_id, self.collection)
        except StoreError as e:
            self.apply_colors(token, error=e.message)
        else:
            self.apply_colors(token, options)
        return token

    # --- color ---
    def choose_color(self, fabric_id):
        match = None
        for row in self.color_options:
            if str(row["id"]) == str(fabric_id):
                match = row
                break
        if match is None:
            self._reset_color()
            return False
        self.fabric_id = match["id"]
        self.fabric_color = match["color_name"]
        self.fabric_code = match["code"]
        return True

    def restore(self, system_type, collection, fabric_code):
        """保存済み明細（文字列）から選択状態を復元する。解決できない段で止める"""
        if not system_type:
            return False
        try:
            product = self.catalog.product_by_code(system_type)
        except StoreError as e:
            self.errors["system"] = e.message
            return False
        if not product:
            return False
        self.choose_system(product["id"])
        if collection not in self.collection_options:
            return False
        self.choose_collection(collection)
        for row in self.color_options:
            if row["code"] == fabric_code:
                return self.choose_color(row["id"])
        return False
