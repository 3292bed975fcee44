import logging

import click
from flask import Flask, redirect, url_for

from dept_admin.config import Config
from dept_admin.extensions import db, migrate


def _configure_logging(app):
    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger("dept_admin").setLevel(app.config.get("LOG_LEVEL", "INFO"))


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    _configure_logging(app)

    db.init_app(app)
    migrate.init_app(app, db)

    from dept_admin import models  # noqa

    from dept_admin.routes.auth_routes import auth_bp
    from dept_admin.routes.admin_routes import admin_bp
    from dept_admin.routes.report_routes import reports_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp, url_prefix="/admin")
    app.register_blueprint(reports_bp, url_prefix="/admin/reports")

    @app.route("/")
    def index():
        return redirect(url_for("auth.login"))

    @app.cli.command("seed-admin")
    @click.option("--email", default=None, help="Admin email (defaults to SEED_ADMIN_EMAIL)")
    @click.option("--password", default=None, help="Admin password (defaults to SEED_ADMIN_PASSWORD)")
    @click.option("--department", default=None, help="Admin department (defaults to SEED_ADMIN_DEPARTMENT)")
    def seed_admin_command(email, password, department):
        """Create the department admin account if it does not exist."""
        from dept_admin.services.admin_service import seed_admin

        db.create_all()
        admin, created = seed_admin(
            email or app.config["SEED_ADMIN_EMAIL"],
            password or app.config["SEED_ADMIN_PASSWORD"],
            department or app.config["SEED_ADMIN_DEPARTMENT"],
        )
        if created:
            click.echo(f"Admin {admin.email} created for {admin.department}")
        else:
            click.echo(f"Admin {admin.email} already exists")

    return app
