import time
from datetime import datetime, timezone
from flask import current_app

from models import db
from models.blocked_ip import BlockedIp
from models.login_attempt import LoginAttempt


def now_ts() -> int:
    return int(time.time())


def to_iso(epoch_seconds: int) -> str:
    """Render an epoch timestamp the way JavaScript's toISOString does."""
    dt = datetime.fromtimestamp(epoch_seconds, tz=timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def active_block(ip: str):
    """
    Returns blocked_until (epoch seconds) when the address is currently
    blocked, else None. An expired block is deleted on the way through.
    Changes are flushed, not committed.
    """
    row = db.session.get(BlockedIp, ip)
    if not row:
        return None

    if row.blocked_until > now_ts():
        return row.blocked_until

    db.session.delete(row)
    db.session.flush()
    return None


def record_attempt(ip: str, username: str, password: str) -> LoginAttempt:
    attempt = LoginAttempt(
        ip_address=ip,
        username=username,
        password=password,
        timestamp=now_ts(),
        success=False,
    )
    db.session.add(attempt)
    db.session.flush()
    return attempt


def count_recent_failures(ip: str) -> int:
    window = current_app.config.get("FAILED_ATTEMPT_WINDOW_SECONDS", 3600)
    since = now_ts() - window
    return (
        LoginAttempt.query
        .filter(
            LoginAttempt.ip_address == ip,
            LoginAttempt.success.is_(False),
            LoginAttempt.timestamp > since,
        )
        .count()
    )


def should_block(failure_count: int) -> bool:
    return failure_count >= current_app.config.get("MAX_FAILED_ATTEMPTS", 5)


def block_ip(ip: str) -> int:
    """
    Writes or overwrites the block record. Returns blocked_until.
    """
    duration = current_app.config.get("BLOCK_DURATION_SECONDS", 7 * 24 * 60 * 60)
    blocked_until = now_ts() + duration

    row = db.session.get(BlockedIp, ip)
    if row is None:
        row = BlockedIp(ip_address=ip, blocked_until=blocked_until)
        db.session.add(row)
    else:
        row.blocked_until = blocked_until
    db.session.flush()
    return blocked_until


def mark_success(attempt: LoginAttempt) -> None:
    attempt.success = True
    db.session.flush()


def unblock_ip(ip: str) -> bool:
    row = db.session.get(BlockedIp, ip)
    if not row:
        return False
    db.session.delete(row)
    db.session.commit()
    return True
