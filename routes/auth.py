from flask import Blueprint, request, jsonify, current_app

from models import db
from security.bruteforce import (
    active_block,
    record_attempt,
    count_recent_failures,
    should_block,
    block_ip,
    mark_success,
    to_iso,
)
from security.password import check_passphrase
from security.rate_limit import check_login_rate
from security.tokens import issue_token, token_from_request, is_token_valid
from utils.audit import log_event
from utils.client_ip import client_ip


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


def _parse_credentials():
    """
    Returns (username, password) or None when the body is malformed.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None
    username = data.get("username")
    password = data.get("password")
    if not isinstance(username, str) or not isinstance(password, str):
        return None
    return username, password


def _set_auth_cookie(resp, token: str):
    resp.set_cookie(
        current_app.config.get("AUTH_COOKIE_NAME", "auth_token"),
        token,
        httponly=True,
        secure=current_app.config.get("SESSION_COOKIE_SECURE", False),
        samesite=current_app.config.get("AUTH_COOKIE_SAMESITE", "Strict"),
        max_age=current_app.config.get("AUTH_COOKIE_MAX_AGE", 315360000),
        path="/",
    )
    return resp


@auth_bp.post("/login")
def login():
    allowed, retry_after = check_login_rate()
    if not allowed:
        log_event("LOGIN_RATE_LIMIT", retry_after=retry_after)
        resp = jsonify(error="Too many login attempts. Please wait.", retry_after_seconds=retry_after)
        resp.headers["Retry-After"] = str(retry_after)
        return resp, 429

    credentials = _parse_credentials()
    if credentials is None:
        return jsonify(error="username and password must be strings"), 400
    username, password = credentials

    ip = client_ip()

    blocked_until = active_block(ip)
    if blocked_until is not None:
        db.session.commit()
        log_event("LOGIN_BLOCKED", blocked_until=blocked_until)
        return jsonify(error="IP is blocked", blockedUntil=to_iso(blocked_until)), 403

    attempt = record_attempt(ip, username, password)

    # Honeypot: the login page never fills this field in
    if username:
        db.session.commit()
        log_event("LOGIN_HONEYPOT", username_length=len(username))
        return jsonify(error="Invalid credentials"), 401

    fail_count = count_recent_failures(ip)
    if should_block(fail_count):
        blocked_until = block_ip(ip)
        db.session.commit()
        log_event("LOGIN_LOCKOUT", fail_count=fail_count, blocked_until=blocked_until)
        return jsonify(
            error="Too many failed attempts. IP blocked for 1 week.",
            blockedUntil=to_iso(blocked_until),
        ), 403

    if not check_passphrase(password):
        db.session.commit()
        log_event("LOGIN_FAIL", fail_count=fail_count)
        return jsonify(error="Invalid credentials"), 401

    token = issue_token()
    mark_success(attempt)
    db.session.commit()

    resp = jsonify(success=True, frontendUrl=current_app.config.get("FRONTEND_URL"))
    _set_auth_cookie(resp, token)

    log_event("LOGIN_SUCCESS", attempt_id=attempt.id)
    return resp, 200


@auth_bp.get("/validate")
def validate():
    token = token_from_request()
    if not token:
        return jsonify(valid=False), 401

    if is_token_valid(token):
        return jsonify(valid=True), 200

    log_event("TOKEN_REJECTED")
    return jsonify(valid=False), 401
