# auth.py
import datetime
from functools import wraps

from flask import current_app, g, request
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError

from errors import ExpiredToken, InvalidToken, Unauthenticated


def _secret() -> str:
    secret = current_app.config.get("JWT_SECRET")
    if not secret:
        raise RuntimeError("JWT_SECRET is not configured")
    return secret


def issue_token(account_id: int, now: datetime.datetime | None = None) -> str:
    """
    Mint a signed bearer token for an account.

    The token carries the account id as `sub` and expires TOKEN_TTL after
    `now`. Nothing is stored server-side; there is no refresh.
    """
    now = now or datetime.datetime.now(datetime.timezone.utc)
    claims = {
        "sub": str(account_id),
        "iat": int(now.timestamp()),
        "exp": int((now + current_app.config["TOKEN_TTL"]).timestamp()),
    }
    return jwt.encode(claims, _secret(), algorithm=current_app.config["JWT_ALGORITHM"])


def verify_token(token: str) -> int:
    try:
        claims = jwt.decode(
            token,
            _secret(),
            algorithms=[current_app.config["JWT_ALGORITHM"]],
            options={"require_exp": True, "require_sub": True},
        )
    except ExpiredSignatureError:
        raise ExpiredToken()
    except JWTError:
        raise InvalidToken()

    try:
        return int(claims["sub"])
    except (KeyError, TypeError, ValueError):
        raise InvalidToken()


def bearer_token_from_request() -> str:
    auth = request.headers.get("Authorization", "")
    parts = auth.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise Unauthenticated("missing token")
    return parts[1]


def require_student(f):
    """Reject the request with 401 unless it carries a valid bearer token."""

    @wraps(f)
    def wrapper(*args, **kwargs):
        token = bearer_token_from_request()
        # expose identity for handlers; the account itself is loaded there
        g.account_id = verify_token(token)
        return f(*args, **kwargs)

    return wrapper
