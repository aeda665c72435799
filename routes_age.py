# routes_age.py — 18+ interstitial; only an explicit POST flips the flag
from flask import Blueprint, redirect, request, url_for

from errors import InvalidName
from guards import safe_next, set_age_cookie
from storage import sanitize_room
from views import age_gate_page

bp_age = Blueprint("age", __name__)


def _room_or_none(raw):
    try:
        return sanitize_room(raw) if raw else None
    except InvalidName:
        return None


def _fallback(room):
    return url_for("rooms.room_page", room=room) if room else url_for("rooms.home")


@bp_age.get("/age")
def age_prompt():
    room = _room_or_none(request.args.get("room"))
    return age_gate_page(safe_next(request.args.get("next"), _fallback(room)), room)


@bp_age.post("/age/confirm")
def age_confirm():
    room = _room_or_none(request.form.get("room"))
    resp = redirect(safe_next(request.form.get("next"), _fallback(room)))
    return set_age_cookie(resp, room)


@bp_age.post("/age-ok/<room>")
def age_ok_room(room):
    room = sanitize_room(room)
    return set_age_cookie(redirect(url_for("rooms.room_page", room=room)), room)
