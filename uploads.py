# uploads.py
import logging

from flask import Blueprint, current_app, g, jsonify, request, send_file, url_for

import accounts
from auth import require_student
from errors import MissingFile, NotFound, PayloadTooLarge
from filename_utils import display_filename
from models import Submission
from notifier import submission_notification
from validation import validate_display_name

bp = Blueprint("uploads", __name__)
logger = logging.getLogger(__name__)

# "assignment" is the field name older clients send the file under
FILE_FIELDS = ("file", "assignment")


# ---------- HELPERS ----------

def file_store():
    return current_app.extensions["file_store"]


def outbox():
    return current_app.extensions["outbox"]


def _uploaded_file():
    for field in FILE_FIELDS:
        f = request.files.get(field)
        if f is not None and f.filename:
            return f
    return None


def _payload_size(upload):
    """Size of an already-received upload, or None if the stream can't seek."""
    stream = upload.stream
    try:
        start = stream.tell()
        stream.seek(0, 2)
        size = stream.tell() - start
        stream.seek(start)
    except (AttributeError, OSError, ValueError):
        return None
    return size


def submit_assignment(account_id, display_name, upload):
    """
    Store one uploaded file and record it on the owner's account.

    Steps run in order: validate, persist the bytes, append the record,
    then notify. A failure before the record is committed leaves nothing
    behind: the stored file is removed again. Notification happens after
    the commit and cannot fail the submission.
    """
    name = validate_display_name(display_name)
    if upload is None:
        raise MissingFile()

    store = file_store()
    size = _payload_size(upload)
    if size == 0:
        raise MissingFile()
    if size is not None and size > store.max_bytes:
        raise PayloadTooLarge()

    # the store re-counts while writing, for streams we could not measure
    stored = store.save(upload.stream, upload.filename)
    if stored.size_bytes == 0:
        store.delete(stored.stored_file_id)
        raise MissingFile()

    submission = Submission(
        name=name,
        stored_file_id=stored.stored_file_id,
        original_filename=display_filename(upload.filename),
        location=url_for("uploads.download_file", stored_file_id=stored.stored_file_id),
        size_bytes=stored.size_bytes,
    )
    try:
        account = accounts.append_submission(account_id, submission)
    except BaseException:
        store.delete(stored.stored_file_id)
        raise

    logger.info(
        "submission %s stored for account %s", submission.record_id, account.id
    )
    outbox().publish(
        submission_notification(account, submission, current_app.config.get("OPERATOR_EMAIL"))
    )
    return submission


# ---------- ROUTES ----------

@bp.route("/api/upload", methods=["POST"])
@require_student
def upload():
    """
    multipart/form-data:
      - name  (display name of the assignment)
      - file  (the payload, at most MAX_UPLOAD_BYTES)
    """
    submission = submit_assignment(g.account_id, request.form.get("name"), _uploaded_file())
    return jsonify({
        "ok": True,
        "message": "Assignment submitted",
        "location": submission.location,
        "submission": submission.to_dict(),
    }), 201


@bp.route("/api/files/<string:stored_file_id>", methods=["GET"])
@require_student
def download_file(stored_file_id):
    """Stream a stored file back to the account that submitted it."""
    submission = Submission.query.filter_by(
        stored_file_id=stored_file_id, account_id=g.account_id
    ).first()
    if submission is None:
        raise NotFound("File not found")

    path = file_store().path_for(stored_file_id)
    if not file_store().exists(stored_file_id):
        logger.warning("stored file %s missing on disk", stored_file_id)
        raise NotFound("File not found")

    return send_file(
        path,
        as_attachment=True,
        download_name=submission.original_filename or stored_file_id,
    )
