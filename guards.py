# guards.py — admin gate and age gate, checked server-side on every request that needs them
import time
from functools import wraps
from urllib.parse import urlsplit

import jwt
from flask import current_app, redirect, request, url_for

from errors import InvalidName, Unauthorized
from extensions import get_config
from storage import sanitize_room

ADMIN_COOKIE = "admin"
AGE_COOKIE = "age_ok"
AGE_COOKIE_PREFIX = "age_ok_"
JWT_ALG = "HS256"


# ---------- credentials ----------
def secrets_match(submitted, expected) -> bool:
    """The one place a submitted credential is compared with the configured secret."""
    return str(submitted or "") == str(expected or "")


def make_admin_token(cfg) -> str:
    now = int(time.time())
    payload = {"sub": "admin", "iat": now, "exp": now + cfg.admin_ttl_min * 60, "iss": "rooms"}
    return jwt.encode(payload, cfg.jwt_secret, algorithm=JWT_ALG)


def _valid_admin_token(token, cfg) -> bool:
    if not token:
        return False
    try:
        payload = jwt.decode(token, cfg.jwt_secret, algorithms=[JWT_ALG],
                             options={"require": ["exp", "iat", "sub"]}, issuer="rooms")
    except jwt.PyJWTError:
        return False
    return payload.get("sub") == "admin"


def is_admin() -> bool:
    cfg = get_config()
    if _valid_admin_token(request.cookies.get(ADMIN_COOKIE), cfg):
        return True
    if cfg.admin_query_token and "admin" in request.args:
        return secrets_match(request.args.get("admin"), cfg.admin_pass)
    return False


def set_admin_cookie(resp):
    cfg = get_config()
    resp.set_cookie(ADMIN_COOKIE, make_admin_token(cfg), max_age=cfg.admin_ttl_min * 60,
                    httponly=True, samesite="Lax")
    return resp


def clear_admin_cookie(resp):
    resp.delete_cookie(ADMIN_COOKIE, httponly=True, samesite="Lax")
    return resp


def admin_required(f):
    @wraps(f)
    def wrapper(*args, **kwargs):
        if not is_admin():
            current_app.logger.warning("[ADMIN] rejected %s %s from %s", request.method, request.path, request.remote_addr)
            raise Unauthorized("admin only")
        return f(*args, **kwargs)
    return wrapper


# ---------- age gate ----------
def age_cookie_name(room=None) -> str:
    if get_config().age_gate == "room" and room:
        return AGE_COOKIE_PREFIX + room
    return AGE_COOKIE


def age_confirmed(room=None) -> bool:
    if get_config().age_gate == "off":
        return True
    return request.cookies.get(age_cookie_name(room)) == "1"


def set_age_cookie(resp, room=None):
    cfg = get_config()
    resp.set_cookie(age_cookie_name(room), "1", max_age=cfg.age_ttl_days * 24 * 3600, samesite="Lax")
    return resp


def safe_next(target, fallback="/") -> str:
    """Only same-site relative paths are followed after confirmation."""
    target = (target or "").strip()
    if not target.startswith("/") or target.startswith("//") or "\\" in target:
        return fallback
    parts = urlsplit(target)
    if parts.scheme or parts.netloc:
        return fallback
    return target


def age_gate_redirect(room=None, files=False):
    """
    Redirect to the interstitial (carrying the original destination) when the
    visitor has not confirmed yet, else None. File endpoints are only gated
    when AGE_GATE_FILES is on.
    """
    cfg = get_config()
    if cfg.age_gate == "off" or (files and not cfg.age_gate_files):
        return None
    try:
        room = sanitize_room(room) if room else None
    except InvalidName:
        room = None
    if room is None and cfg.age_gate == "room":
        return None
    if age_confirmed(room):
        return None
    dest = request.path
    if request.query_string:
        dest += "?" + request.query_string.decode("utf-8", "ignore")
    return redirect(url_for("age.age_prompt", next=dest, room=room))


def age_gate_required(files=False):
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            gate = age_gate_redirect(kwargs.get("room"), files=files)
            if gate is not None:
                return gate
            return f(*args, **kwargs)
        return wrapper
    return decorator
