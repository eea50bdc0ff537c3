"""
Development server: `python -m api`.

Binds to HOST:PORT from the selected config (API_HOST / API_PORT). Debug mode
follows the config class, so APP_ENV=prod never starts the reloader.
Production deployments serve `api:create_app()` from a WSGI server instead.
"""
import logging

from . import create_app

logger = logging.getLogger("api")


def main(config_name=None):
    app = create_app(config_name)
    if not app.config["AUTH_COOKIE_SECURE"]:
        logger.warning("AUTH_COOKIE_SECURE is off: token cookies will be sent over plain HTTP")
    logger.info("Serving on http://%s:%s (env=%s)", app.config["HOST"], app.config["PORT"], app.config["APP_ENV"])
    app.run(host=app.config["HOST"], port=app.config["PORT"], debug=app.config["DEBUG"])
    return app


if __name__ == "__main__":
    main()
