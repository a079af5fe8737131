from flask import Blueprint, current_app, flash, redirect, render_template, request, url_for
from sqlalchemy.exc import SQLAlchemyError

from curtain_quoter import db
from curtain_quoter.auth_utils import peek_session, sign_in, sign_out
from curtain_quoter.models.user import User

auth_bp = Blueprint("auth", __name__)


def _safe_next(next_url):
    # オープンリダイレクト対策: / で始まる相対パスのみ許可
    if next_url and next_url.startswith("/") and not next_url.startswith("//") and not next_url.startswith("/\\"):
        return next_url
    return None


@auth_bp.route("/login", methods=["GET", "POST"])
def login():
    if peek_session():
        return redirect(url_for("main.dashboard"))
    next_url = request.values.get("next")
    email = ""
    if request.method == "POST":
        email = request.form.get("email", "").strip().lower()
        password = request.form.get("password", "")
        user = User.query.filter_by(email=email).first()
        if user and user.check_password(password):
            if not user.is_active:
                flash("This account is disabled.", "danger")
                current_app.logger.info("[AUTH] login inactive email=%s", email)
            else:
                sign_in(user)
                current_app.logger.info("[AUTH] login success email=%s", email)
                return redirect(_safe_next(next_url) or url_for("main.dashboard"))
        else:
            flash("Invalid email or password.", "danger")
            current_app.logger.info("[AUTH] login failed email=%s", email)
    return render_template("login.html", next=next_url, email=email)


@auth_bp.route("/logout")
def logout():
    sign_out()
    flash("Signed out.", "info")
    return redirect(url_for("main.landing"))


@auth_bp.route("/register", methods=["GET", "POST"])
def register():
    if request.method == "POST":
        email = request.form.get("email", "").strip().lower()
        display_name = request.form.get("display_name", "").strip()
        password = request.form.get("password", "")
        error = None
        if not email or not display_name or not password:
            error = "All fields are required."
        elif "@" not in email:
            error = "Please enter a valid email address."
        elif len(password) < 8:
            error = "Password must be at least 8 characters."
        elif User.query.filter_by(email=email).first():
            error = "This email is already registered."
        if error:
            flash(error, "danger")
            return render_template("register.html", email=email, display_name=display_name)
        try:
            user = User(email=email, display_name=display_name, is_active=True)
            user.set_password(password)
            db.session.add(user)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.exception("[AUTH] register failed email=%s", email)
            flash(f"Registration failed: {e}", "danger")
            return render_template("register.html", email=email, display_name=display_name)
        current_app.logger.info("[AUTH] registered email=%s", email)
        return redirect(url_for("auth.signup_success"))
    return render_template("register.html", email="", display_name="")


@auth_bp.route("/signup-success")
def signup_success():
    return render_template("signup_success.html")
