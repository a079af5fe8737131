import os
import logging
from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from .config import Config

db = SQLAlchemy()


def resource_path(relative_path: str) -> str:
    """パッケージ配下の templates, static へのパス"""
    return os.path.join(os.path.dirname(os.path.abspath(__file__)), relative_path)


def create_app(overrides=None):
    from flask import render_template, request, jsonify
    from flask.signals import template_rendered

    # logging
    debug_mode = os.environ.get("FLASK_DEBUG", "0") == "1"
    logging.basicConfig(
        level=logging.DEBUG if debug_mode else logging.INFO,
        format='[%(asctime)s] %(levelname)s in %(module)s: %(message)s',
    )

    app = Flask(
        __name__,
        template_folder=resource_path("templates"),
        static_folder=resource_path("static"),
    )
    app.logger.setLevel(logging.DEBUG if debug_mode else logging.INFO)

    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)
    app.logger.info("[DB] Using database: %s", app.config["SQLALCHEMY_DATABASE_URI"])

    if debug_mode:
        app.config["TEMPLATES_AUTO_RELOAD"] = True
        app.jinja_env.auto_reload = True

    def wants_json():
        return request.path.startswith("/api/")

    @app.errorhandler(403)
    def forbidden(e):
        if wants_json():
            return jsonify({"error": "forbidden"}), 403
        return render_template("403.html"), 403

    @app.errorhandler(404)
    def not_found(e):
        if wants_json():
            return jsonify({"error": "not found"}), 404
        return render_template("404.html"), 404

    @app.errorhandler(500)
    def internal_error(e):
        if wants_json():
            return jsonify({"error": "internal error"}), 500
        return render_template("500.html"), 500

    db.init_app(app)

    with app.app_context():
        from curtain_quoter import models  # noqa: F401  テーブル定義の登録
        if db.engine.dialect.name == "sqlite":
            event.listen(db.engine, "connect", _sqlite_pragmas)
        db.create_all()
        seed_bootstrap_user(app)

    # Blueprints
    from curtain_quoter.routes.main import main_bp
    from curtain_quoter.routes.auth import auth_bp
    from curtain_quoter.routes.quotes import quotes_bp
    from curtain_quoter.routes.catalog import catalog_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(quotes_bp)
    app.register_blueprint(catalog_bp)

    from curtain_quoter.models.quote import QuoteStatus

    @app.context_processor
    def inject_quote_statuses():
        return {"quote_statuses": [s.value for s in QuoteStatus]}

    def log_routes():
        app.logger.debug("[Flask routes] URL map:")
        for rule in app.url_map.iter_rules():
            app.logger.debug("%s %s -> %s", ",".join(sorted(rule.methods)), rule.rule, rule.endpoint)

    log_routes()

    @template_rendered.connect_via(app)
    def when_template_rendered(sender, template, context, **extra):
        sender.logger.debug("[TEMPLATE-RENDERED] name=%s", template.name)

    # ヘルスチェック（認証・DB依存なし）
    @app.route("/health")
    def health():
        return "OK", 200

    app.logger.info("[BOOT] create_app completed")
    return app


def _sqlite_pragmas(dbapi_conn, connection_record):
    cur = dbapi_conn.cursor()
    try:
        cur.execute("PRAGMA foreign_keys=ON")
    finally:
        cur.close()


def seed_bootstrap_user(app):
    """CURTAIN_SEED_EMAIL が設定されていれば、ユーザーと許可リストを用意する"""
    from curtain_quoter.models.user import User
    from curtain_quoter.models.authorized_user import AuthorizedUser

    email = (app.config.get("SEED_EMAIL") or "").strip().lower()
    password = app.config.get("SEED_PASSWORD")
    if not email or not password:
        return

    user = User.query.filter_by(email=email).first()
    if not user:
        user = User(email=email, display_name=email.split("@")[0], is_active=True)
        user.set_password(password)
        db.session.add(user)
        app.logger.info("[SEED] bootstrap user created: %s", email)
    if not AuthorizedUser.query.filter_by(email=email).first():
        db.session.add(AuthorizedUser(email=email))
        app.logger.info("[SEED] bootstrap email allow-listed: %s", email)
    db.session.commit()
