"""
Authorization guard for resource services that sit behind the gatekeeper.

A protected service forwards the caller's auth cookie to
GET /api/auth/validate and only runs the view when the gatekeeper
answers {"valid": true}.
"""
import logging
from functools import wraps

import httpx
from flask import current_app, jsonify, request

logger = logging.getLogger(__name__)

VALIDATE_PATH = "/api/auth/validate"


class GatekeeperUnavailable(Exception):
    """The gatekeeper could not be reached or answered with garbage status."""


class GatekeeperClient:
    """Client for the gatekeeper's token validation endpoint."""

    def __init__(self, base_url: str, timeout: float = 5.0, cookie_name: str = "auth_token", transport=None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.cookie_name = cookie_name
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(base_url=self.base_url, timeout=self.timeout, transport=self._transport)

    def is_token_valid(self, token: str) -> bool:
        if not token:
            return False

        try:
            with self._client() as client:
                response = client.get(
                    VALIDATE_PATH,
                    headers={"Cookie": f"{self.cookie_name}={token}"},
                )
        except httpx.TimeoutException as exc:
            logger.error("Gatekeeper timeout: %s", exc)
            raise GatekeeperUnavailable("Gatekeeper timeout") from exc
        except httpx.RequestError as exc:
            logger.error("Gatekeeper request error: %s", exc)
            raise GatekeeperUnavailable("Gatekeeper unavailable") from exc

        if response.status_code >= 500:
            logger.error("Gatekeeper answered %s", response.status_code)
            raise GatekeeperUnavailable(f"Gatekeeper answered {response.status_code}")

        try:
            body = response.json()
        except ValueError:
            logger.warning("Gatekeeper returned a non-JSON body (status %s)", response.status_code)
            return False

        return isinstance(body, dict) and body.get("valid") is True


def get_gatekeeper_client() -> GatekeeperClient:
    client = current_app.extensions.get("gatekeeper_client")
    if client is None:
        client = GatekeeperClient(
            current_app.config.get("GATEKEEPER_URL", "http://localhost:3002"),
            timeout=current_app.config.get("GATEKEEPER_TIMEOUT_SECONDS", 5.0),
            cookie_name=current_app.config.get("AUTH_COOKIE_NAME", "auth_token"),
        )
        current_app.extensions["gatekeeper_client"] = client
    return client


def require_valid_token(fn):
    """
    Usage: @require_valid_token on any view of a protected service.
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        client = get_gatekeeper_client()
        token = request.cookies.get(client.cookie_name)
        if not token:
            return jsonify(error="Authentication required"), 401

        try:
            valid = client.is_token_valid(token)
        except GatekeeperUnavailable:
            return jsonify(error="Authentication service error"), 500

        if not valid:
            return jsonify(error="Invalid or expired token"), 401

        return fn(*args, **kwargs)
    return wrapper
