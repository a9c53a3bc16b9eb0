"""Server-side input validation. Authoritative; client checks are advisory only."""
import re

from errors import ValidationError

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 8
MIN_STUDENT_ID_LENGTH = 5


def _field(data, *names) -> str:
    # accept both camelCase and snake_case keys
    for name in names:
        value = data.get(name)
        if value is not None:
            return str(value)
    return ""


def validate_registration(data) -> dict:
    name = _field(data, "name").strip()
    email = _field(data, "email").strip()
    password = _field(data, "password")
    student_id = _field(data, "studentId", "student_id").strip()

    if not name or not email or not password or not student_id:
        raise ValidationError("name, email, password and studentId are required")
    if not EMAIL_RE.match(email):
        raise ValidationError("Invalid email address")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if len(student_id) < MIN_STUDENT_ID_LENGTH:
        raise ValidationError(
            f"studentId must be at least {MIN_STUDENT_ID_LENGTH} characters"
        )

    return {"name": name, "email": email, "password": password, "student_id": student_id}


def validate_login(data) -> dict:
    email = _field(data, "email").strip()
    password = _field(data, "password")
    if not email or not password:
        raise ValidationError("email and password are required")
    return {"email": email, "password": password}


def validate_display_name(raw) -> str:
    name = (raw or "").strip()
    if not name:
        raise ValidationError("name is required")
    if len(name) > 180:
        raise ValidationError("name must be at most 180 characters")
    return name
