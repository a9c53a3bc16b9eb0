import datetime

from extensions import db
from passwords import hash_password, verify_password


def _utcnow():
    return datetime.datetime.now(datetime.timezone.utc)


class Account(db.Model):
    __tablename__ = "accounts"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(180), nullable=False)
    # always stored lower-cased, which makes the unique index case-insensitive
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    student_id = db.Column(db.String(64), unique=True, nullable=False, index=True)

    created_at = db.Column(db.DateTime, nullable=False, default=_utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)

    submissions = db.relationship(
        "Submission",
        backref="account",
        cascade="all, delete-orphan",
        order_by="Submission.id",
        lazy=True,
    )

    def set_password(self, plaintext: str) -> None:
        # the only place a secret is hashed; untouched on other updates
        self.password_hash = hash_password(plaintext)

    def check_password(self, plaintext: str) -> bool:
        return verify_password(plaintext, self.password_hash)

    def to_dict(self, include_submissions: bool = True):
        data = {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "student_id": self.student_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_submissions:
            data["submissions"] = [s.to_dict() for s in self.submissions]
        return data
