# routes_configuration.py
from flask import Blueprint, jsonify, current_app

import storage
from auth import require_admin
from sanitize import request_payload
from schemas import ConfigurationIn, validate

bp = Blueprint("configuration", __name__, url_prefix="/api/configuration")


@bp.get("")
def list_configuration():
    # public: the checkout button needs the whatsapp number
    return jsonify([c.to_dict() for c in storage.list_configuration()])


@bp.post("")
@require_admin
def set_configuration(identity):
    data = validate(ConfigurationIn, request_payload())
    config = storage.set_configuration(data.key, data.value)
    current_app.logger.info("%s set configuration %s", identity.username, data.key)
    return jsonify({"ok": True, "config": config.to_dict()})
