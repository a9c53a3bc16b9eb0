# passwords.py
from flask import current_app, has_app_context
from werkzeug.security import check_password_hash, generate_password_hash

DEFAULT_METHOD = "scrypt"


def _method() -> str:
    if has_app_context():
        return current_app.config.get("PASSWORD_HASH_METHOD") or DEFAULT_METHOD
    return DEFAULT_METHOD


def hash_password(plaintext: str) -> str:
    """Salted one-way hash; the method/cost comes from PASSWORD_HASH_METHOD."""
    return generate_password_hash(plaintext, method=_method())


def verify_password(plaintext: str, digest: str | None) -> bool:
    if not plaintext or not digest:
        return False
    try:
        return check_password_hash(digest, plaintext)
    except ValueError:
        # unknown or malformed hash format
        return False
