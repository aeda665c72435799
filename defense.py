# defense.py — rate limit, scanner/probe filter and security headers.

from flask import request, abort
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

BAD_UA = ("sqlmap", "nmap", "nikto", "acunetix", "dirbuster", "wpscan")
BAD_PATHS = ("/wp-admin", "/phpmyadmin", "/.env", "/.git", "/server-status")

# inline <style>/<script> in the pages, media served from our own origin
CSP = ("default-src 'self'; img-src 'self' data:; media-src 'self'; "
       "style-src 'self' 'unsafe-inline'; script-src 'self' 'unsafe-inline'; "
       "frame-ancestors 'none'; base-uri 'none'; form-action 'self'")


def init_defense(app, cfg):
    """Wires hardening into the Flask app. Returns the Limiter for per-blueprint limits."""
    # 1) Rate limiting
    app.config.setdefault("RATELIMIT_ENABLED", cfg.rate_limit_enabled)
    app.config.setdefault("RATELIMIT_STORAGE_URI", "memory://")
    limiter = Limiter(
        key_func=get_remote_address,
        app=app,
        default_limits=[cfg.rate_limit_default],
    )
    if cfg.rate_limit_enabled:
        app.logger.info("[DEFENSE] Rate limit ON (%s, login %s)", cfg.rate_limit_default, cfg.login_rate_limit)
    else:
        app.logger.info("[DEFENSE] Rate limit OFF")

    # 2) CORS for the JSON API only
    CORS(app, resources={r"/api/*": {"origins": list(cfg.cors_origins)}})

    # 3) Scanner user agents and probe paths
    @app.before_request
    def _pre_block():
        path = (request.path or "").lower()
        ua = (request.headers.get("User-Agent") or "").lower()

        if any(bad in ua for bad in BAD_UA):
            app.logger.warning("[DEFENSE] blocked UA %r on %s", ua, path)
            abort(403)
        if any(path.startswith(p) for p in BAD_PATHS):
            abort(404)

    # 4) Security headers
    @app.after_request
    def _secure_headers(resp):
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "same-origin")
        resp.headers.setdefault("Permissions-Policy", "geolocation=(), microphone=(), camera=()")
        resp.headers.setdefault("Content-Security-Policy", CSP)
        return resp

    return limiter
