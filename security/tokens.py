import secrets
from flask import request, current_app

from models import db
from models.auth_token import AuthToken
from security.bruteforce import now_ts


def generate_token() -> str:
    # 32 random bytes, hex encoded
    return secrets.token_hex(32)


def issue_token() -> str:
    """
    Creates a token record and returns the raw token (to set as cookie).
    Flushed, not committed; the login request commits once at the end.
    """
    token = generate_token()
    db.session.add(AuthToken(token=token, created_at=now_ts()))
    db.session.flush()
    return token


def token_from_request():
    cookie_name = current_app.config.get("AUTH_COOKIE_NAME", "auth_token")
    return request.cookies.get(cookie_name) or None


def is_token_valid(token: str) -> bool:
    if not token:
        return False

    row = db.session.get(AuthToken, token)
    if not row:
        return False

    ttl = current_app.config.get("AUTH_TOKEN_TTL_SECONDS")
    if ttl and row.created_at + ttl <= now_ts():
        return False

    return True


def revoke_tokens(tokens) -> int:
    count = 0
    for token in tokens:
        row = db.session.get(AuthToken, token)
        if row:
            db.session.delete(row)
            count += 1
    db.session.commit()
    return count


def revoke_all_tokens() -> int:
    count = AuthToken.query.delete()
    db.session.commit()
    return count
