from flask import Flask, jsonify
from config import Config
from routes import health_bp, auth_bp, public_bp, newsletter_bp, admin_bp, audit_bp

from models import db
from flask_migrate import Migrate
from services.distance import NominatimGeocoder
from utils.seed import seed_products
from utils.auth_context import load_current_admin
from utils.logger import configure_logging, get_logger

logger = get_logger()


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"), app.config.get("LOG_FILE"))

    # Register routes
    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(public_bp)
    app.register_blueprint(newsletter_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(audit_bp)

    # Database init
    db.init_app(app)

    # Migrations
    Migrate(app, db)

    # Geocoding collaborator for the delivery distance gate
    app.extensions["geocoder"] = NominatimGeocoder(
        url=app.config["GEOCODER_URL"],
        user_agent=app.config["GEOCODER_USER_AGENT"],
        country_codes=app.config.get("GEOCODER_COUNTRY_CODES", "pl"),
        timeout=app.config.get("GEOCODER_TIMEOUT_SECONDS", 5),
    )

    # Seed the equipment catalog at startup (safe & idempotent)
    if app.config.get("SEED_PRODUCTS_ON_STARTUP"):
        with app.app_context():
            seed_products()

    @app.before_request
    def _load_admin():
        load_current_admin()

    @app.after_request
    def add_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Referrer-Policy"] = "no-referrer"
        resp.headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=()"
        resp.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none';"
        return resp

    @app.errorhandler(404)
    def _not_found(_err):
        return jsonify(error="Endpoint does not exist"), 404

    @app.errorhandler(500)
    def _server_error(err):
        logger.error(f"Unhandled error: {err}")
        return jsonify(error="Unexpected server error"), 500

    register_cli(app)

    return app

#-------------------------
import click
from models.admin_user import AdminUser
from security.password import hash_password
from services.reminders import send_daily_reminders

def register_cli(app):
    @app.cli.command("create-admin")
    @click.argument("email")
    @click.password_option()
    @click.option("--name", default=None, help="Display name")
    def create_admin(email, password, name):
        """Create an admin account, or reset its password (bootstrap)."""
        email = email.strip().lower()
        try:
            pw_hash = hash_password(password)
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint="password")

        admin = AdminUser.query.filter_by(email=email).first()
        if admin:
            admin.password_hash = pw_hash
            admin.is_active = True
            if name:
                admin.full_name = name
            db.session.commit()
            click.echo(f"{email}: password reset")
            return

        db.session.add(AdminUser(email=email, password_hash=pw_hash, full_name=name))
        db.session.commit()
        click.echo(f"{email} created as admin")

    @app.cli.command("seed-products")
    def seed_products_command():
        """Insert missing catalog products."""
        seed_products()
        click.echo("Catalog seeded")

    @app.cli.command("send-reminders")
    def send_reminders_command():
        """Send tomorrow's pickup and return reminders (run once a day)."""
        sent_pickup, sent_return = send_daily_reminders()
        click.echo(f"Reminders sent: {sent_pickup} pickup, {sent_return} return")

#-------------------------




if __name__ == "__main__":
    app = create_app()
    # Run locally
    app.run(host="127.0.0.1", port=3001)
