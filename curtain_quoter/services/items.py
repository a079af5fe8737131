from flask import current_app

from curtain_quoter import store
from curtain_quoter.cascade import SelectorChain
from curtain_quoter.services.validation import ValidationError, is_whole, parse_number

ITEM_TEXT_FIELDS = ("area", "window_id", "width", "height", "quantity", "notes")

# action=system/collection/color はプルダウン変更による再描画、save が登録
ACTION_SYSTEM = "system"
ACTION_COLLECTION = "collection"
ACTION_COLOR = "color"
ACTION_SAVE = "save"

# 入力上限（mm / 数量）
MAX_DIMENSION_MM = 100000
MAX_QUANTITY = 9999


class ItemForm:
    """明細入力フォーム（入力文字列 + 連動プルダウンの状態）"""

    def __init__(self, values=None, chain=None):
        self.values = {name: "" for name in ITEM_TEXT_FIELDS}
        self.values["quantity"] = "1"
        if values:
            self.values.update(values)
        self.chain = chain or SelectorChain()
        self.error = None

    @classmethod
    def from_request(cls, form, action=ACTION_SAVE, chain=None):
        """
        送信値からフォームを組み立てる。
        連動部分は system → collection → color の順に再生し、
        変更された段より下流の送信値は捨てる。
        """
        values = {name: (form.get(name) or "").strip() for name in ITEM_TEXT_FIELDS}
        item_form = cls(values, chain=chain)
        product_id = (form.get("system_product_id") or "").strip()
        collection = (form.get("collection") or "").strip()
        fabric_id = (form.get("fabric_id") or "").strip()

        item_form.chain.choose_system(product_id or None)
        if action == ACTION_SYSTEM or not collection:
            return item_form
        item_form.chain.choose_collection(collection)
        if action == ACTION_COLLECTION or not fabric_id:
            return item_form
        item_form.chain.choose_color(fabric_id)
        return item_form

    @classmethod
    def from_item(cls, item, chain=None):
        values = {
            "area": item.get("area") or "",
            "window_id": item.get("window_id") or "",
            "width": "" if item.get("width") is None else str(item["width"]),
            "height": "" if item.get("height") is None else str(item["height"]),
            "quantity": str(item.get("quantity") or 1),
            "notes": item.get("notes") or "",
        }
        item_form = cls(values, chain=chain)
        item_form.chain.restore(item.get("system_type"), item.get("collection"), item.get("fabric_code"))
        return item_form

    def build_payload(self, quote_id):
        chain = self.chain
        required = [
            self.values["area"],
            self.values["window_id"],
            chain.product_id,
            chain.collection,
            chain.fabric_id,
            chain.fabric_color,
            chain.fabric_code,
            self.values["quantity"],
            self.values["width"],
            self.values["height"],
        ]
        if any(v is None or str(v).strip() == "" for v in required):
            raise ValidationError("All fields are required.")

        width = parse_number(self.values["width"])
        height = parse_number(self.values["height"])
        quantity = parse_number(self.values["quantity"])
        if width is None or height is None or quantity is None:
            raise ValidationError("Width, height, and quantity must be valid numbers.")
        if width <= 0 or height <= 0 or not is_whole(width) or not is_whole(height):
            raise ValidationError("Width and height must be whole millimetres greater than zero.")
        if quantity < 1 or not is_whole(quantity):
            raise ValidationError("Quantity must be a whole number of at least 1.")
        if width > MAX_DIMENSION_MM or height > MAX_DIMENSION_MM:
            raise ValidationError(f"Width and height must be at most {MAX_DIMENSION_MM} mm.")
        if quantity > MAX_QUANTITY:
            raise ValidationError(f"Quantity must be at most {MAX_QUANTITY}.")

        width = int(width)
        height = int(height)
        return {
            "quote_id": quote_id,
            "area": self.values["area"],
            "window_id": self.values["window_id"],
            "system_type": chain.system_type,
            "collection": chain.collection,
            "fabric_color": chain.fabric_color,
            "fabric_code": chain.fabric_code,
            "quantity": int(quantity),
            "width": width,
            "height": height,
            "width_m": width / 1000,
            "height_m": height / 1000,
            "notes": self.values["notes"] or None,
        }


def get_item(quote_id, item_id):
    return (
        store.table("quote_items")
        .select()
        .eq("id", item_id)
        .eq("quote_id", quote_id)
        .single()
    )


def create_item(quote_id, item_form):
    payload = item_form.build_payload(quote_id)
    row = store.table("quote_items").insert(payload)[0]
    current_app.logger.info("[ITEM] created id=%s quote_id=%s", row["id"], quote_id)
    return row


def update_item(quote_id, item_id, item_form):
    payload = item_form.build_payload(quote_id)
    rows = store.table("quote_items").eq("id", item_id).eq("quote_id", quote_id).update(payload)
    if not rows:
        raise store.NotFoundError("Item not found.", table="quote_items")
    current_app.logger.info("[ITEM] updated id=%s quote_id=%s", item_id, quote_id)
    return rows[0]


def delete_item(quote_id, item_id):
    count = store.table("quote_items").eq("id", item_id).eq("quote_id", quote_id).delete()
    if not count:
        raise store.NotFoundError("Item not found.", table="quote_items")
    current_app.logger.info("[ITEM] deleted id=%s quote_id=%s", item_id, quote_id)
    return count
