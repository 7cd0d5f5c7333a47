from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException

from schemas import PayloadError


def error_response(status, message, **extra):
    body = {"ok": False, "message": message}
    body.update(extra)
    return jsonify(body), status


def register_error_handlers(app):
    @app.errorhandler(PayloadError)
    def invalid_payload(e):
        return error_response(400, "Invalid input", errors=e.errors)

    @app.errorhandler(HTTPException)
    def http_error(e):
        return error_response(e.code, e.description)

    @app.errorhandler(Exception)
    def server_error(e):
        current_app.logger.exception("Unhandled error: %s", e)
        return error_response(500, "Server error")
