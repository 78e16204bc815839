import logging
from datetime import datetime

import structlog
from flask import Flask, jsonify

from config import Config
from extensions import db, migrate, mail, login_manager


def configure_logging(app):
    level = logging.getLevelName(app.config.get("LOG_LEVEL", "INFO"))
    if not isinstance(level, int):
        level = logging.INFO

    renderer = (
        structlog.processors.JSONRenderer()
        if app.config.get("LOG_JSON")
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=False,
    )


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    configure_logging(app)

    # Extensions
    db.init_app(app)
    migrate.init_app(app, db)
    mail.init_app(app)
    login_manager.init_app(app)

    # Import models after db is bound
    from models import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    from blueprints.auth.routes import auth_bp
    app.register_blueprint(auth_bp, url_prefix="/auth")

    from blueprints.houses.routes import houses_bp
    app.register_blueprint(houses_bp, url_prefix="/houses")

    from blueprints.bookings.routes import bookings_bp
    app.register_blueprint(bookings_bp, url_prefix="/bookings")

    from blueprints.account.routes import account_bp
    app.register_blueprint(account_bp, url_prefix="/account")

    from blueprints.admin.routes import admin_bp
    app.register_blueprint(admin_bp, url_prefix="/admin")

    @app.route("/")
    def home():
        return jsonify({"name": "Rental Management", "year": datetime.now().year})

    return app


if __name__ == "__main__":
    create_app().run(debug=True)
