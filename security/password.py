import bcrypt
from flask import current_app


def hash_password(plain_password: str, rounds: int = 12) -> str:
    if not isinstance(plain_password, str) or len(plain_password) == 0:
        raise ValueError("Password must be a non-empty string")

    # bcrypt expects bytes
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(plain_password.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    if not plain_password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(
            plain_password.encode("utf-8"),
            password_hash.encode("utf-8")
        )
    except ValueError:
        return False


def passphrase_hash_from_config(config) -> str:
    configured = config.get("LOGIN_PASSPHRASE_HASH")
    if configured:
        return configured
    return hash_password(config["LOGIN_PASSPHRASE"], rounds=config.get("BCRYPT_ROUNDS", 12))


def check_passphrase(supplied: str) -> bool:
    """Constant-time comparison against the shared passphrase."""
    return verify_password(supplied, current_app.extensions["login_passphrase_hash"])
