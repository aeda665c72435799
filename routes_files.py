# routes_files.py — upload, serve, download and admin deletes
from flask import Blueprint, current_app, jsonify, redirect, request, send_file, url_for

from errors import BadRequest, ConfirmationMismatch, NotFound, form_field, wants_json
from extensions import get_config, get_store
from guards import admin_required, age_gate_required
from storage import guess_mime, sanitize_room

bp_files = Blueprint("files", __name__)


def _back_to_room(room, **payload):
    if wants_json():
        return jsonify(ok=True, room=room, **payload)
    return redirect(url_for("rooms.room_page", room=room))


# ---------- upload (everyone) ----------
@bp_files.post("/upload/<room>")
@bp_files.post("/r/<room>/upload")
def upload(room):
    """
    form-data:
      file: a single file part
    The stored name is generated; the declared name only hints the extension.
    """
    cfg, store = get_config(), get_store()
    room = sanitize_room(room)
    fs = request.files.get("file")
    if fs is None or not fs.filename:
        raise BadRequest("no file")

    if not store.room_exists(room):
        if cfg.room_create_requires_admin:
            raise NotFound("room not found")
        store.ensure_room(room)

    meta = store.save_upload(room, fs.stream, fs.filename, fs.mimetype)
    current_app.logger.info("[UPLOAD] %s/%s %d bytes (%s)", room, meta.name, meta.size, meta.mime)
    return _back_to_room(room, file=meta.to_dict())


# ---------- serve / download ----------
@bp_files.get("/file/<room>/<name>")
@bp_files.get("/raw/<room>/<name>")
@age_gate_required(files=True)
def serve_file(room, name):
    path = get_store().file_path(room, name)
    return send_file(path, mimetype=guess_mime(path.name), conditional=True)


@bp_files.get("/download/<room>/<name>")
@age_gate_required(files=True)
def download_file(room, name):
    path = get_store().file_path(room, name)
    return send_file(path, mimetype=guess_mime(path.name), as_attachment=True, download_name=path.name)


# ---------- deletes (admin) ----------
@bp_files.post("/delete/<room>/<name>")
@admin_required
def delete_file(room, name):
    room = sanitize_room(room)
    removed = get_store().delete_file(room, name)
    current_app.logger.info("[DELETE] %s/%s removed=%s", room, name, removed)
    return _back_to_room(room, removed=removed)


@bp_files.post("/delete-room/<room>")
@admin_required
def delete_room(room):
    """
    form-data | JSON:
      confirm: must equal the room name exactly (typed confirmation)
    """
    room = sanitize_room(room)
    typed = form_field("confirm")
    if typed != room:
        current_app.logger.warning("[DELETE] room %s: confirmation mismatch", room)
        raise ConfirmationMismatch("confirmation mismatch")

    try:
        get_store().delete_room(room)
        current_app.logger.info("[DELETE] room %s removed", room)
        removed = True
    except NotFound:
        current_app.logger.info("[DELETE] room %s already gone", room)
        removed = False

    if wants_json():
        return jsonify(ok=True, room=room, removed=removed)
    return redirect(url_for("rooms.home"))
