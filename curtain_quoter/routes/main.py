from flask import Blueprint, render_template, request
from curtain_quoter.auth_utils import authorized_required, peek_session


main_bp = Blueprint("main", __name__)


@main_bp.route("/")
def landing():
    unauthorized = request.args.get("error") == "unauthorized"
    return render_template("landing.html", unauthorized=unauthorized, session_ctx=peek_session())


@main_bp.route("/dashboard")
@authorized_required
def dashboard(session_ctx):
    return render_template("dashboard.html", session_ctx=session_ctx)
