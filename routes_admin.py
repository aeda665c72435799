# routes_admin.py — shared-password admin login/logout (capability cookie)
from flask import Blueprint, current_app, jsonify, request

from errors import form_field
from extensions import get_config
from guards import clear_admin_cookie, secrets_match, set_admin_cookie

bp_admin = Blueprint("admin", __name__)


@bp_admin.post("/admin")
def login():
    """
    Body (JSON or form):
      { "pass": "<admin password>" }
    Match -> sets the admin cookie; mismatch -> 401.
    """
    pw = form_field("pass")
    if not secrets_match(pw, get_config().admin_pass):
        current_app.logger.warning("[ADMIN] wrong password from %s", request.remote_addr)
        return jsonify(ok=False, msg="wrong-password"), 401

    current_app.logger.info("[ADMIN] login from %s", request.remote_addr)
    return set_admin_cookie(jsonify(ok=True))


@bp_admin.post("/admin/logout")
def logout():
    return clear_admin_cookie(jsonify(ok=True))
