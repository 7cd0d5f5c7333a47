import logging

import click
from flask import Flask
from flask_cors import CORS

from config import config_for_env
from models import db
from errors import register_error_handlers
from auth import authbp, limiter
from routes_products import bp as products_bp
from routes_configuration import bp as configuration_bp
import storage

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
}


def create_app(config_object=None):
    app = Flask(__name__)
    app.config.from_object(config_object or config_for_env())
    app.logger.setLevel(getattr(logging, str(app.config["LOG_LEVEL"]).upper(), logging.INFO))

    db.init_app(app)
    limiter.init_app(app)
    CORS(
        app,
        resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}},
        supports_credentials=True,
        methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    register_error_handlers(app)

    app.register_blueprint(authbp)
    app.register_blueprint(products_bp)
    app.register_blueprint(configuration_bp)

    @app.after_request
    def security_headers(response):
        for name, value in SECURITY_HEADERS.items():
            response.headers[name] = value
        return response

    @app.cli.command("create-admin")
    @click.argument("username")
    @click.password_option()
    def create_admin_command(username, password):
        """Create an admin account (there is no public signup)."""
        if storage.get_admin_by_username(username):
            raise click.ClickException(f"Admin {username} already exists")
        admin = storage.create_admin(username, password)
        click.echo(f"Created admin {admin.username} ({admin.id})")

    with app.app_context():
        db.create_all()

    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000)
