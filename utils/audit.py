import json
import logging
from flask import request, has_request_context

from utils.client_ip import client_ip

security_logger = logging.getLogger("gatekeeper.security")


def log_event(action: str, level: int = logging.INFO, **metadata):
    """
    Emits one line per security event, e.g.
    LOGIN_FAIL ip=10.0.0.1 ua="curl/8.0" meta={"fail_count": 2}
    """
    ip = None
    user_agent = None
    if has_request_context():
        ip = client_ip()
        user_agent = (request.headers.get("User-Agent") or "")[:255] or None

    security_logger.log(
        level,
        "%s ip=%s ua=%s meta=%s",
        action,
        ip,
        json.dumps(user_agent),
        json.dumps(metadata, sort_keys=True, default=str) if metadata else "{}",
    )
