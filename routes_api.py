# routes_api.py — JSON listing for scripts and the frontend
from flask import Blueprint, jsonify

from errors import NotFound
from extensions import get_store
from guards import age_gate_required, is_admin
from storage import sanitize_room

bp_api = Blueprint("api", __name__, url_prefix="/api")


@bp_api.get("/rooms")
def list_rooms():
    return jsonify(ok=True, rooms=get_store().list_rooms(), admin=is_admin())


@bp_api.get("/rooms/<room>/files")
@age_gate_required(files=True)
def list_files(room):
    store = get_store()
    room = sanitize_room(room)
    if not store.room_exists(room):
        raise NotFound("room not found")
    return jsonify(ok=True, room=room, files=[f.to_dict() for f in store.list_files(room)])
