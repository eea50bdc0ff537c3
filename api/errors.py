import logging

from flask import request
from marshmallow import ValidationError as SchemaValidationError
from werkzeug.exceptions import HTTPException

from utils.errors import ApiError
from .responses import error_response

logger = logging.getLogger(__name__)


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(err: ApiError):
        # 5xx causes were logged where they were caught; only the sanitized message goes out
        return error_response(err.message, err.status_code, err.errors)

    # Marshmallow validation errors map to 400
    @app.errorhandler(SchemaValidationError)
    def handle_validation_error(err: SchemaValidationError):
        # err.messages contains field-level details
        return error_response("Invalid input", 400, errors=[err.messages])

    # Werkzeug HTTPExceptions map to their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        return error_response(err.description or err.name, err.code or 400)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logger.exception(
            "Unhandled exception on %s %s", request.method, request.path,
            exc_info=err,
        )
        return error_response("An unexpected error occurred", 500)
