from datetime import date, datetime

from flask import current_app

from curtain_quoter import store
from curtain_quoter.models.quote import QuoteStatus
from curtain_quoter.services.notifications import notify_quote_event
from curtain_quoter.services.validation import ValidationError

QUOTE_FIELDS = ("customer_name", "project_name", "distributor_name", "quote_date", "notes")
STATUS_ALL = "all"


def empty_quote_values(today=None):
    values = {name: "" for name in QUOTE_FIELDS}
    values["quote_date"] = (today or date.today()).isoformat()
    return values


def read_quote_form(form):
    return {name: (form.get(name) or "").strip() for name in QUOTE_FIELDS}


def build_quote_payload(values, today=None):
    if not values.get("customer_name") or not values.get("project_name"):
        raise ValidationError("Customer name and project name are required.")

    quote_date = values.get("quote_date") or ""
    if quote_date:
        try:
            quote_date = datetime.strptime(quote_date, "%Y-%m-%d").date().isoformat()
        except ValueError:
            raise ValidationError("Date must be a valid date (YYYY-MM-DD).")
    else:
        quote_date = (today or date.today()).isoformat()

    return {
        "customer_name": values["customer_name"],
        "project_name": values["project_name"],
        "distributor_name": values.get("distributor_name") or None,
        "quote_date": quote_date,
        "notes": values.get("notes") or None,
        "status": QuoteStatus.DRAFT.value,
        "currency": current_app.config.get("DEFAULT_CURRENCY", "USD"),
    }


def create_quote(values, actor, today=None):
    payload = build_quote_payload(values, today=today)
    row = store.table("quotes").insert(payload)[0]
    current_app.logger.info("[QUOTE] created id=%s project=%s", row["id"], row["project_name"])
    notify_quote_event(row, "created", actor)
    return row


def list_quotes():
    return store.table("quotes").select().order("created_at", desc=True).execute()


def normalize_status_filter(raw):
    return raw if raw else STATUS_ALL


def filter_by_status(rows, status):
    """表示用フィルタ（all は全件）"""
    if status == STATUS_ALL:
        return rows
    return [r for r in rows if r["status"] == status]


def get_quote(quote_id):
    return store.table("quotes").select().eq("id", quote_id).single()


def list_items(quote_id):
    return (
        store.table("quote_items")
        .select()
        .eq("quote_id", quote_id)
        .order("created_at", desc=True)
        .execute()
    )


def delete_quote(quote_id, actor):
    quote = get_quote(quote_id)
    store.table("quotes").eq("id", quote_id).delete()
    current_app.logger.info("[QUOTE] deleted id=%s", quote_id)
    notify_quote_event(quote, "deleted", actor)
    return quote


def change_status(quote_id, status, actor):
    valid = [s.value for s in QuoteStatus]
    if status not in valid:
        raise ValidationError(f"Status must be one of: {', '.join(valid)}.")
    rows = store.table("quotes").eq("id", quote_id).update({"status": status})
    if not rows:
        raise store.NotFoundError("Quote not found.", table="quotes")
    current_app.logger.info("[QUOTE] status id=%s -> %s", quote_id, status)
    notify_quote_event(rows[0], "status_changed", actor)
    return rows[0]


def short_code(quote_id):
    return (quote_id or "")[:8].upper()


def display_date(quote):
    """quote_date 優先、無ければ created_at の日付部分"""
    value = quote.get("quote_date") or quote.get("created_at") or ""
    return value[:10]
