from flask import render_template, current_app
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError
import logging

logger = logging.getLogger(__name__)


def error_response(error: str, message: str, status: int, details: dict | None = None):
    return render_template("error.html", title=error, error=error, message=message, status=status, details=details), status


def register_error_handlers(app):
    # 400 Bad Request (generic)
    @app.errorhandler(400)
    def bad_request(e):
        if current_app and current_app.debug:
            logger.exception("Bad request", exc_info=e)
        message = getattr(e, "description", "Bad request")
        return error_response("Bad Request", message, 400)

    # 404 Not Found; controllers pass "<Entity> not found" as the description
    @app.errorhandler(404)
    def not_found(e):
        if current_app and current_app.debug:
            logger.info("Not found: %s", getattr(e, "description", e))
        message = getattr(e, "description", None) or "Not Found"
        return error_response("Not Found", message, 404)

    # Forms catch their own ValidationError; one escaping a handler is a 422
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        if current_app and current_app.debug:
            logger.exception("Unhandled validation error", exc_info=err)
        return error_response("Validation Error", "Invalid input", 422, details=err.messages)

    # Integrity errors (foreign keys to missing records, check constraints)
    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        # The session was already rolled back by storage.save()
        message = str(getattr(err, "orig", err))
        lower_msg = message.lower()
        logger.warning("Integrity error: %s", message)
        if "unique constraint" in lower_msg or "unique violation" in lower_msg:
            return error_response("Conflict", "Unique constraint violated.", 409)
        if "foreign key constraint" in lower_msg or "foreign key mismatch" in lower_msg:
            return error_response("Bad Request", "Referenced record does not exist or is still in use.", 400)
        if "check constraint" in lower_msg or "constraint failed" in lower_msg:
            return error_response("Bad Request", "Check constraint failed.", 400)
        return error_response("Bad Request", "Integrity error.", 400)

    # Other werkzeug HTTPExceptions keep their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        return error_response(err.name, err.description, err.code or 400)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logger.exception("Unhandled exception", exc_info=err)
        # In dev, include exception details to speed up debugging
        details = None
        if current_app and current_app.debug:
            details = {"type": err.__class__.__name__, "message": str(err)}
        return error_response("Internal Server Error", "An unexpected error occurred", 500, details=details)
