# auth.py
import time
from dataclasses import dataclass
from functools import wraps

from flask import Blueprint, session, jsonify, abort, current_app
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from werkzeug.security import generate_password_hash, check_password_hash

from sanitize import request_payload
from schemas import LoginIn, validate
import storage

authbp = Blueprint("auth", __name__, url_prefix="/api/admin")
limiter = Limiter(key_func=get_remote_address)

INVALID_CREDENTIALS = "Invalid credentials"
UNAUTHORIZED = "Unauthorized - Please log in"

# compared against when the username is unknown so both failures cost the same
_DUMMY_HASH = generate_password_hash("not-a-real-password")


@dataclass(frozen=True)
class AdminIdentity:
    admin_id: str
    username: str

    def public(self):
        return {"id": self.admin_id, "username": self.username}


def current_identity():
    """Return the admin bound to this request's session, or None.

    An expired session is cleared on the way out.
    """
    admin_id = session.get("admin_id")
    if not admin_id:
        return None
    if session.get("expires_at", 0) <= time.time():
        session.clear()
        return None
    return AdminIdentity(admin_id=admin_id, username=session.get("username", ""))


def require_admin(view):
    """Reject the request with 401 unless an admin is logged in.

    The resolved identity is handed to the view as ``identity``.
    """
    @wraps(view)
    def wrapper(*args, **kwargs):
        identity = current_identity()
        if identity is None:
            abort(401, description=UNAUTHORIZED)
        return view(*args, identity=identity, **kwargs)
    return wrapper


def _login_limit():
    return current_app.config["LOGIN_RATE_LIMIT"]


@authbp.post("/login")
@limiter.limit(_login_limit, error_message="Too many login attempts, please try again later.")
def login():
    creds = validate(LoginIn, request_payload())

    admin = storage.get_admin_by_username(creds.username)
    if admin is None:
        check_password_hash(_DUMMY_HASH, creds.password)
        current_app.logger.info("Failed admin login for unknown user")
        abort(401, description=INVALID_CREDENTIALS)
    if not admin.check_password(creds.password):
        current_app.logger.info("Failed admin login for %s", admin.username)
        abort(401, description=INVALID_CREDENTIALS)

    lifetime = current_app.permanent_session_lifetime
    session.clear()
    session.permanent = True
    session["admin_id"] = admin.id
    session["username"] = admin.username
    session["expires_at"] = time.time() + lifetime.total_seconds()
    current_app.logger.info("Admin %s logged in", admin.username)
    return jsonify({"ok": True, "admin": admin.public()})


@authbp.post("/logout")
def logout():
    session.clear()
    return jsonify({"ok": True})


@authbp.get("/me")
@require_admin
def me(identity):
    admin = storage.get_admin(identity.admin_id)
    if admin is None:
        abort(404, description="Admin not found")
    return jsonify({"ok": True, "admin": admin.public()})
