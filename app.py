import click
from flask import Flask
from flask_migrate import Migrate

from config import Config
from models import db
from routes import health_bp, experiences_bp, booking_bp, promo_bp
from routes.errors import register_error_handlers
from utils.logger import configure_logging
from utils.seed import seed_demo_data


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    configure_logging(app)

    # Register routes
    app.register_blueprint(health_bp)
    app.register_blueprint(experiences_bp)
    app.register_blueprint(booking_bp)
    app.register_blueprint(promo_bp)
    register_error_handlers(app)

    # Database init
    db.init_app(app)

    # Migrations
    Migrate(app, db)

    @app.after_request
    def add_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Referrer-Policy"] = "no-referrer"
        resp.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none';"
        return resp

    register_cli(app)

    return app

#-------------------------

def register_cli(app):
    @app.cli.command("init-db")
    def init_db():
        """Create all tables (local/dev databases)."""
        db.create_all()
        click.echo("Tables created")

    @app.cli.command("seed-demo")
    @click.option("--days", type=int, default=None, help="Days of slots to generate (default SEED_DAYS).")
    @click.option("--keep", is_flag=True, help="Keep existing rows instead of clearing them first.")
    def seed_demo(days, keep):
        """Load demo experiences, slots and promo codes."""
        db.create_all()
        created = seed_demo_data(days=days or app.config["SEED_DAYS"], clear=not keep)
        click.echo(f"Seeded {len(created)} experiences")

#-------------------------


if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        db.create_all()
    # Run locally
    app.run(host="127.0.0.1", port=5000)
