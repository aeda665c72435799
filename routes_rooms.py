# routes_rooms.py — home page, room creation, room gallery
from flask import Blueprint, current_app, jsonify, redirect, request, url_for

from errors import InvalidName, NotFound, Unauthorized, form_field, wants_json
from extensions import get_config, get_store
from guards import age_gate_redirect, is_admin
from storage import sanitize_room
from views import home_page, room_page as render_room

bp_rooms = Blueprint("rooms", __name__)


def _can_create(cfg) -> bool:
    return not cfg.room_create_requires_admin or is_admin()


@bp_rooms.get("/")
def home():
    cfg = get_config()
    rooms = get_store().list_rooms()
    return home_page(rooms, is_admin(), _can_create(cfg))


@bp_rooms.post("/create-room")
def create_room():
    """
    form-data | JSON:
      room: lowercase letters, digits and dashes, 1..40 chars
    Admin only unless ROOM_CREATE=open.
    """
    cfg = get_config()
    if not _can_create(cfg):
        current_app.logger.warning("[ROOMS] create-room rejected (not admin) from %s", request.remote_addr)
        raise Unauthorized("admin only")
    raw = form_field("room")
    room = get_store().ensure_room(raw)
    current_app.logger.info("[ROOMS] room ready: %s", room)
    if wants_json():
        return jsonify(ok=True, room=room), 201
    return redirect(url_for("rooms.room_page", room=room))


@bp_rooms.get("/r/<room>")
def room_page(room):
    try:
        room = sanitize_room(room)
    except InvalidName:
        raise NotFound("room not found") from None
    store = get_store()
    if not store.room_exists(room):
        raise NotFound("room not found")

    gate = age_gate_redirect(room)
    if gate is not None:
        return gate

    files = store.list_files(room)
    return render_room(room, files, is_admin(), store.max_file_bytes)


@bp_rooms.get("/room/<room>")
def room_alias(room):
    return redirect(url_for("rooms.room_page", room=room), code=301)
