from flask import jsonify
from loguru import logger
from werkzeug.exceptions import HTTPException

from services.errors import BookingError


def register_error_handlers(app):
    @app.errorhandler(BookingError)
    def _booking_error(exc: BookingError):
        if exc.status_code >= 500:
            logger.error("Booking error: {}", exc.message)
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return jsonify(error=exc.description), exc.code

    @app.errorhandler(Exception)
    def _unhandled(exc: Exception):
        logger.opt(exception=exc).error("Unhandled exception: {}", exc)
        return jsonify(error="Internal server error"), 500
