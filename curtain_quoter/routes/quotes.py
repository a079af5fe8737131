from flask import Blueprint, flash, redirect, render_template, request, url_for

from curtain_quoter.auth_utils import authorized_required
from curtain_quoter.services import items as item_service
from curtain_quoter.services.items import ACTION_SAVE, ItemForm
from curtain_quoter.services.quotes import (
    STATUS_ALL,
    change_status,
    create_quote,
    delete_quote,
    display_date,
    empty_quote_values,
    filter_by_status,
    get_quote,
    list_items,
    list_quotes,
    normalize_status_filter,
    read_quote_form,
    short_code,
)
from curtain_quoter.services.validation import ValidationError
from curtain_quoter.store import NotFoundError, StoreError

quotes_bp = Blueprint("quotes", __name__, url_prefix="/dashboard/quotes")


@quotes_bp.app_template_filter("short_code")
def short_code_filter(quote_id):
    return short_code(quote_id)


@quotes_bp.app_template_filter("display_date")
def display_date_filter(quote):
    return display_date(quote)


@quotes_bp.route("", methods=["GET", "POST"])
@authorized_required
def quote_list(session_ctx):
    status = normalize_status_filter(request.args.get("status"))
    values = empty_quote_values()
    form_open = False
    submit_error = None

    if request.method == "POST":
        values = read_quote_form(request.form)
        form_open = True
        try:
            create_quote(values, session_ctx)
        except (ValidationError, StoreError) as e:
            submit_error = e.message
        else:
            flash("Quote created.", "success")
            return redirect(url_for("quotes.quote_list", status=None if status == STATUS_ALL else status))

    quotes = []
    error = None
    try:
        quotes = filter_by_status(list_quotes(), status)
    except StoreError as e:
        error = e.message

    return render_template(
        "quote_list.html",
        quotes=quotes,
        error=error,
        status=status,
        values=values,
        form_open=form_open,
        submit_error=submit_error,
        session_ctx=session_ctx,
    )


def _render_detail(quote_id, session_ctx, delete_error=None, items_error=None, status_error=None):
    quote = None
    error = None
    try:
        quote = get_quote(quote_id)
    except NotFoundError:
        quote = None
    except StoreError as e:
        error = e.message

    items = []
    if quote is not None:
        try:
            items = list_items(quote_id)
        except StoreError as e:
            items_error = items_error or e.message

    code = 404 if quote is None and error is None else 200
    return render_template(
        "quote_detail.html",
        quote=quote,
        quote_id=quote_id,
        error=error,
        items=items,
        items_error=items_error,
        delete_error=delete_error,
        status_error=status_error,
        session_ctx=session_ctx,
    ), code


@quotes_bp.route("/<quote_id>")
@authorized_required
def quote_detail(quote_id, session_ctx):
    return _render_detail(quote_id, session_ctx)


@quotes_bp.route("/<quote_id>/delete", methods=["POST"])
@authorized_required
def quote_delete(quote_id, session_ctx):
    try:
        delete_quote(quote_id, session_ctx)
    except NotFoundError:
        return _render_detail(quote_id, session_ctx)
    except StoreError as e:
        return _render_detail(quote_id, session_ctx, delete_error=e.message)
    flash("Quote deleted.", "success")
    return redirect(url_for("quotes.quote_list"))


@quotes_bp.route("/<quote_id>/status", methods=["POST"])
@authorized_required
def quote_status(quote_id, session_ctx):
    status = request.form.get("status", "").strip()
    try:
        change_status(quote_id, status, session_ctx)
    except NotFoundError:
        return _render_detail(quote_id, session_ctx)
    except (ValidationError, StoreError) as e:
        return _render_detail(quote_id, session_ctx, status_error=e.message)
    flash(f"Status changed to {status}.", "success")
    return redirect(url_for("quotes.quote_detail", quote_id=quote_id))


def _render_item_form(quote, item_form, session_ctx, item_id=None):
    products = []
    products_error = None
    try:
        products = item_form.chain.catalog.products()
    except StoreError as e:
        products_error = e.message
    return render_template(
        "item_form.html",
        quote=quote,
        item_form=item_form,
        item_id=item_id,
        products=products,
        products_error=products_error,
        session_ctx=session_ctx,
    )


def _item_form_view(quote_id, session_ctx, item_id=None):
    try:
        quote = get_quote(quote_id)
    except NotFoundError:
        return _render_detail(quote_id, session_ctx)
    except StoreError as e:
        flash(e.message, "danger")
        return redirect(url_for("quotes.quote_detail", quote_id=quote_id))

    if request.method == "GET":
        if item_id is None:
            return _render_item_form(quote, ItemForm(), session_ctx)
        try:
            item = item_service.get_item(quote_id, item_id)
        except NotFoundError:
            return _render_detail(quote_id, session_ctx, items_error="Item not found.")
        except StoreError as e:
            return _render_detail(quote_id, session_ctx, items_error=e.message)
        return _render_item_form(quote, ItemForm.from_item(item), session_ctx, item_id)

    action = request.form.get("action", ACTION_SAVE)
    item_form = ItemForm.from_request(request.form, action=action)
    if action != ACTION_SAVE:
        # プルダウン変更時は保存せず再描画
        return _render_item_form(quote, item_form, session_ctx, item_id)

    try:
        if item_id is None:
            item_service.create_item(quote_id, item_form)
        else:
            item_service.update_item(quote_id, item_id, item_form)
    except (ValidationError, StoreError) as e:
        item_form.error = e.message
        return _render_item_form(quote, item_form, session_ctx, item_id)

    flash("Item saved.", "success")
    return redirect(url_for("quotes.quote_detail", quote_id=quote_id))


@quotes_bp.route("/<quote_id>/items/new", methods=["GET", "POST"])
@authorized_required
def item_new(quote_id, session_ctx):
    return _item_form_view(quote_id, session_ctx)


@quotes_bp.route("/<quote_id>/items/<item_id>/edit", methods=["GET", "POST"])
@authorized_required
def item_edit(quote_id, item_id, session_ctx):
    return _item_form_view(quote_id, session_ctx, item_id=item_id)


@quotes_bp.route("/<quote_id>/items/<item_id>/delete", methods=["POST"])
@authorized_required
def item_delete(quote_id, item_id, session_ctx):
    try:
        item_service.delete_item(quote_id, item_id)
    except StoreError as e:
        return _render_detail(quote_id, session_ctx, items_error=e.message)
    flash("Item deleted.", "success")
    return redirect(url_for("quotes.quote_detail", quote_id=quote_id))
