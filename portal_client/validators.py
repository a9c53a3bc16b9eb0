"""
Advisory field checks, run before a request is sent.

They only save a round trip for obviously bad input; the server validates
again and its answer is the one that counts.
"""
import re

from portal_client.errors import ValidationError

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 8
MIN_STUDENT_ID_LENGTH = 5


def is_valid_email(email) -> bool:
    return bool(EMAIL_RE.match(str(email or "").strip().lower()))


def is_valid_password(password) -> bool:
    return len(password or "") >= MIN_PASSWORD_LENGTH


def is_valid_student_id(student_id) -> bool:
    return len((student_id or "").strip()) >= MIN_STUDENT_ID_LENGTH


def check_login(email, password):
    if not is_valid_email(email):
        raise ValidationError("Please enter a valid email address")
    if not is_valid_password(password):
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")


def check_registration(name, email, password, student_id):
    if not (name or "").strip():
        raise ValidationError("Please enter your name")
    check_login(email, password)
    if not is_valid_student_id(student_id):
        raise ValidationError(
            f"Student id must be at least {MIN_STUDENT_ID_LENGTH} characters"
        )


def check_upload(name, content):
    if not (name or "").strip():
        raise ValidationError("Please enter the assignment name")
    if not content:
        raise ValidationError("Please select a file")
