# app.py
import click
from flask import Flask
from redis.exceptions import RedisError
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from werkzeug.exceptions import HTTPException

from config.settings import get_config
from extensions.database import db, migrate
from extensions.logger import init_logger
from controllers.auth_controller import auth_bp
from controllers.user_controller import user_bp
from controllers.post_controller import post_bp
from controllers.comment_controller import comment_bp
from services.user_service import UserService
from utils.response import json_response
from utils.exceptions import BizError, ErrorKind

import models  # noqa: F401  register every table with the metadata


def register_error_handlers(app):
    @app.errorhandler(BizError)
    def _biz_err(e: BizError):
        return json_response(code=e.code, message=e.message, data=e.data, error=e.kind.value)

    @app.errorhandler(IntegrityError)
    def _integrity_err(e):
        db.session.rollback()
        app.logger.warning("integrity error: %s", e.orig)
        return json_response(code=409, message="Conflict with existing data", error=ErrorKind.CONFLICT.value)

    @app.errorhandler(OperationalError)
    def _db_unavailable(e):
        db.session.rollback()
        app.logger.exception("database unavailable")
        return json_response(code=503, message="Database unavailable", error=ErrorKind.UNAVAILABLE.value)

    @app.errorhandler(RedisError)
    def _redis_unavailable(e):
        app.logger.exception("token store unavailable")
        return json_response(code=503, message="Session store unavailable", error=ErrorKind.UNAVAILABLE.value)

    @app.errorhandler(SQLAlchemyError)
    def _db_err(e):
        db.session.rollback()
        app.logger.exception("database error")
        return json_response(
            code=500,
            message="Database error",
            data={"details": e.__class__.__name__},
            error=ErrorKind.INTERNAL.value,
        )

    @app.errorhandler(404)
    def not_found(e):
        return json_response(message="Route not found", code=404, error=ErrorKind.NOT_FOUND.value)

    @app.errorhandler(405)
    def method_not_allowed(e):
        return json_response(message="Method not allowed", code=405)

    @app.errorhandler(Exception)
    def _err(e):
        if isinstance(e, HTTPException):
            return json_response(code=e.code, message=e.description)
        app.logger.exception("UNHANDLED EXCEPTION")
        return json_response(
            code=500,
            message="An unexpected error occurred",
            data={"details": str(e)} if app.debug else None,
            error=ErrorKind.INTERNAL.value,
        )


def register_commands(app):
    @app.cli.command("seed-admin")
    def seed_admin():
        """Create the default admin account if it does not exist yet."""
        user = UserService.ensure_default_admin(app)
        if user is None:
            click.echo("Admin user already exists. Skipping seeding.")
        else:
            click.echo(f"Admin user created: {user.email}")


def create_app(config_name="development"):
    app = Flask(__name__)
    app.config.from_object(get_config(config_name))

    db.init_app(app)
    migrate.init_app(app, db)
    init_logger(app)
    app.logger.info("database URI: %s", app.config["SQLALCHEMY_DATABASE_URI"])

    if app.config.get("SEED_ADMIN_ON_STARTUP"):
        try:
            with app.app_context():
                UserService.ensure_default_admin(app)
        except SQLAlchemyError as e:
            # tables do not exist before the first `flask db upgrade`
            app.logger.warning("default admin not created yet: %s", e.__class__.__name__)

    # accounts / sessions
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(user_bp, url_prefix="/api/users")
    # blog
    app.register_blueprint(post_bp)
    app.register_blueprint(comment_bp)

    @app.get("/")
    def index():
        return "Welcome to the Blog API"

    register_error_handlers(app)
    register_commands(app)
    return app


if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=3000, debug=True)
