from types import SimpleNamespace

from flask import Flask
from flasgger import Swagger
from flask_cors import CORS

from models import DBStorage, UserRepository
from services import AuthProtocol, SessionStore
from utils.logger import setup_logging

from .config import AuthConfig, get_config
from .errors import register_error_handlers

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0.0",
    "info": {
        "title": "Token Auth API",
        "version": "1.0.0",
        "description": "User login with rotating access/refresh token pairs.",
    },
    "basePath": "/",
    "schemes": ["http", "https"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Enter the token with the `Bearer ` prefix, e.g. \"Bearer abcde12345\"."
        }
    }
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


def create_app(config_name: str | None = None, storage: DBStorage | None = None) -> Flask:
    """
    Application factory: creates and configures the Flask app.
    The token core (AuthConfig, repository, SessionStore, AuthProtocol) is
    built once here and shared through app.extensions["auth"].
    """
    app = Flask(__name__)

    app.config.from_object(get_config(config_name))
    setup_logging(app.config["LOG_LEVEL"], app.config["LOG_FORMAT"])

    # Cross-Origin Resource Sharing: enable for dev, configurable for prod
    CORS(app, resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})

    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    register_error_handlers(app)

    if storage is None:
        storage = DBStorage(app.config["DATABASE_URL"])
        storage.reload()

    auth_config = AuthConfig.from_mapping(app.config)
    repository = UserRepository(storage)
    session_store = SessionStore(repository, auth_config)
    app.extensions["storage"] = storage
    app.extensions["auth"] = SimpleNamespace(
        config=auth_config,
        repository=repository,
        session_store=session_store,
        protocol=AuthProtocol(repository, session_store, auth_config),
    )

    from .health import bp as health_bp
    from .auth import bp as auth_bp

    app.register_blueprint(health_bp, url_prefix="/api/v1")
    app.register_blueprint(auth_bp, url_prefix="/api/v1/auth")

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        storage.close()

    @app.route("/")
    def root():
        return {
            "message": "Welcome to Token Auth API",
            "docs": "/apidocs/",
            "health": "/api/v1/health",
        }, 200

    return app
