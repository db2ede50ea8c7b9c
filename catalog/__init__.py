import logging

from flask import Flask, redirect
from flasgger import Swagger
from flask_cors import CORS

from .config import get_config
from .errors import register_error_handlers
from models import storage  # DBStorage singleton (scoped_session)
from utils.forms import form_date

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "Local Library Catalog",
        "version": "1.0.0",
        "description": "Server-rendered catalog of genres, books, authors and book copies.",
    },
    "basePath": "/",
    "schemes": ["http"],
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,   # include all endpoints
            "model_filter": lambda tag: True,   # include all models
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    for name in ("catalog", "models", "utils"):
        logging.getLogger(name).setLevel(level)


def create_app(config_name: str | None = None) -> Flask:
    """
    Application factory: creates and configures the Flask app.
    Each call rebinds the storage singleton to the configured DATABASE_URL,
    so tests can build an isolated app over an in-memory database.
    """
    app = Flask(__name__)

    # Load configuration (reads .env via get_config)
    app.config.from_object(get_config(config_name))
    configure_logging(app.config["LOG_LEVEL"])

    # Bind storage to this app's database and make sure tables exist
    storage.configure(app.config["DATABASE_URL"], echo=app.config.get("SQL_ECHO", False))
    storage.reload()

    # Cross-Origin Resource Sharing: enable for dev, configurable for prod
    CORS(app, resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})

    # Swagger UI and JSON
    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    # Global error handlers rendering error.html
    register_error_handlers(app)

    app.add_template_filter(form_date, "form_date")

    from .health import bp as health_bp
    from .books import bp as books_bp
    from .authors import bp as authors_bp
    from .genres import bp as genres_bp
    from .bookinstances import bp as bookinstances_bp

    app.register_blueprint(health_bp, url_prefix="/api/v1")
    app.register_blueprint(books_bp, url_prefix="/catalog")
    app.register_blueprint(authors_bp, url_prefix="/catalog")
    app.register_blueprint(genres_bp, url_prefix="/catalog")
    app.register_blueprint(bookinstances_bp, url_prefix="/catalog")

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        # Calls scoped_session.remove(), preventing connection leaks
        storage.close()

    @app.route("/")
    def root():
        return redirect("/catalog/")

    logging.getLogger(__name__).info("Catalog app created (env=%s)", app.config.get("APP_ENV"))
    return app
