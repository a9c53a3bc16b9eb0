import os
import datetime

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


class Config:
    """
    Settings read from the environment (and .env via python-dotenv).

    Every key lands in app.config, so tests override them by passing a
    mapping to create_app().
    """

    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///portal.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    JWT_SECRET = os.getenv("JWT_SECRET")
    JWT_ALGORITHM = "HS256"
    TOKEN_TTL = datetime.timedelta(days=_env_int("TOKEN_TTL_DAYS", 7))

    PASSWORD_HASH_METHOD = os.getenv("PASSWORD_HASH_METHOD", "scrypt")

    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "uploads")
    MAX_UPLOAD_BYTES = _env_int("MAX_UPLOAD_BYTES", 5 * 1024 * 1024)  # 5MiB
    # room for the multipart envelope and the "name" field
    FORM_OVERHEAD_BYTES = _env_int("FORM_OVERHEAD_BYTES", 64 * 1024)

    SMTP_HOST = os.getenv("SMTP_HOST")
    SMTP_PORT = _env_int("SMTP_PORT", 587)
    SMTP_USER = os.getenv("SMTP_USER")
    SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
    SMTP_USE_TLS = _env_bool("SMTP_USE_TLS", True)
    SMTP_TIMEOUT = _env_int("SMTP_TIMEOUT", 30)
    MAIL_FROM = os.getenv("MAIL_FROM") or os.getenv("SMTP_USER")
    OPERATOR_EMAIL = os.getenv("OPERATOR_EMAIL") or os.getenv("SMTP_USER")
    NOTIFY_SYNC = _env_bool("NOTIFY_SYNC", False)

    FRONTEND_ORIGINS = os.getenv("FRONTEND_ORIGINS", "http://localhost:3000").split(",")
    PORT = _env_int("PORT", 5000)
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
