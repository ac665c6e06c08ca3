import logging
import os

import click
from flask import Flask, request, jsonify
from flask_migrate import Migrate
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from config import Config
from routes import health_bp, auth_bp
from models import db
from security.bruteforce import unblock_ip
from security.password import hash_password, passphrase_hash_from_config
from security.rate_limit import build_login_rate_limiter
from security.tokens import revoke_tokens, revoke_all_tokens
from utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "migrations")


def create_app(config_object=Config, rate_limiter=None):
    app = Flask(__name__, static_folder="static")
    app.config.from_object(config_object)

    if not app.config.get("TESTING"):
        setup_logging(app.config.get("LOG_LEVEL", "INFO"), app.config.get("LOG_FILE"))

    # Register routes
    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)

    # Database init
    db.init_app(app)

    # Migrations
    Migrate(app, db, directory=MIGRATIONS_DIR)

    # Same effect as CREATE TABLE IF NOT EXISTS on boot; off when migrations own the schema
    if app.config.get("AUTO_CREATE_TABLES", False):
        with app.app_context():
            db.create_all()

    if rate_limiter is None:
        rate_limiter = build_login_rate_limiter(app.config)
    app.extensions["login_rate_limiter"] = rate_limiter
    app.extensions["login_passphrase_hash"] = passphrase_hash_from_config(app.config)

    @app.get("/")
    def login_page():
        return app.send_static_file("index.html")

    @app.before_request
    def _cors_preflight():
        if request.method == "OPTIONS":
            return "", 204

    @app.after_request
    def add_cors_headers(resp):
        origin = request.headers.get("Origin")
        frontend = app.config.get("FRONTEND_URL")
        if origin and origin == frontend:
            resp.headers["Access-Control-Allow-Origin"] = origin
            resp.headers["Access-Control-Allow-Credentials"] = "true"
            resp.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
            resp.headers["Access-Control-Allow-Headers"] = "Content-Type"
            resp.headers.add("Vary", "Origin")
        return resp

    @app.after_request
    def add_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Referrer-Policy"] = "no-referrer"
        resp.headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=()"
        # The login page loads its script and stylesheet from /static only
        resp.headers["Content-Security-Policy"] = "default-src 'self'; frame-ancestors 'none';"
        return resp

    @app.errorhandler(SQLAlchemyError)
    def handle_storage_error(exc):
        db.session.rollback()
        logger.exception("Storage error on %s %s", request.method, request.path)
        return jsonify(error="Internal server error"), 500

    @app.errorhandler(HTTPException)
    def handle_http_error(exc):
        if exc.code and exc.code >= 500:
            db.session.rollback()
            logger.error("HTTP %s on %s %s", exc.code, request.method, request.path)
            return jsonify(error="Internal server error"), exc.code
        return jsonify(error=exc.description), exc.code

    register_cli(app)

    return app

#-------------------------

def register_cli(app):
    @app.cli.command("unblock-ip")
    @click.argument("ip")
    def unblock_ip_command(ip):
        """Lift the block on a source address."""
        if unblock_ip(ip):
            click.echo(f"{ip} unblocked")
        else:
            click.echo(f"{ip} was not blocked")

    @app.cli.command("revoke-tokens")
    @click.option("--all", "revoke_all", is_flag=True, help="Revoke every issued token.")
    @click.argument("tokens", nargs=-1)
    def revoke_tokens_command(revoke_all, tokens):
        """Delete issued auth tokens so they stop validating."""
        if revoke_all:
            count = revoke_all_tokens()
        elif tokens:
            count = revoke_tokens(tokens)
        else:
            raise click.UsageError("Pass one or more tokens, or --all")
        click.echo(f"Revoked {count} token(s)")

    @app.cli.command("hash-passphrase")
    @click.argument("passphrase")
    @click.option("--rounds", default=None, type=int, help="bcrypt cost; defaults to BCRYPT_ROUNDS.")
    def hash_passphrase_command(passphrase, rounds):
        """Print a bcrypt hash for LOGIN_PASSPHRASE_HASH."""
        if rounds is None:
            rounds = app.config.get("BCRYPT_ROUNDS", 12)
        click.echo(hash_password(passphrase, rounds=rounds))

#-------------------------


if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=app.config.get("PORT", 3002))
