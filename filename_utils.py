import os
import uuid

from werkzeug.utils import secure_filename

MAX_EXTENSION_LENGTH = 10


def safe_extension(filename):
    """
    Return the lower-cased extension of an uploaded filename, including the dot.

    Only the extension survives into stored names; the stem is user input and
    never used. Returns "" when there is no usable extension.
        "Essay Final.PDF" -> ".pdf"
        "../../etc/passwd" -> ""
    """
    cleaned = secure_filename(filename or "")
    _, ext = os.path.splitext(cleaned)
    ext = ext.lower()
    if len(ext) <= 1 or len(ext) > MAX_EXTENSION_LENGTH or not ext[1:].isalnum():
        return ""
    return ext


def new_stored_file_id(filename):
    return uuid.uuid4().hex + safe_extension(filename)


def display_filename(filename):
    """Sanitized original name, kept for downloads."""
    return secure_filename(filename or "") or None
