import uuid
import datetime

from extensions import db


def _utcnow():
    return datetime.datetime.now(datetime.timezone.utc)


class Submission(db.Model):
    __tablename__ = "submissions"

    # integer pk keeps insertion order; record_id is the public identifier
    id = db.Column(db.Integer, primary_key=True)
    record_id = db.Column(
        db.String(32), unique=True, nullable=False, default=lambda: uuid.uuid4().hex
    )
    account_id = db.Column(
        db.Integer, db.ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True
    )

    name = db.Column(db.String(180), nullable=False)
    stored_file_id = db.Column(db.String(64), unique=True, nullable=False)
    original_filename = db.Column(db.String(255), nullable=True)
    location = db.Column(db.String(300), nullable=False)
    size_bytes = db.Column(db.Integer, nullable=False, default=0)

    submitted_at = db.Column(db.DateTime, nullable=False, default=_utcnow)

    def to_dict(self):
        return {
            "id": self.record_id,
            "name": self.name,
            "stored_file_id": self.stored_file_id,
            "original_filename": self.original_filename,
            "location": self.location,
            "size_bytes": self.size_bytes,
            "submitted_at": self.submitted_at.isoformat() if self.submitted_at else None,
        }
