"""
Credential store: persistence of student accounts and their submissions.

All writes commit per call. A submission is appended by inserting its own
row, so concurrent appends to one account never overwrite each other.
"""
from __future__ import annotations

import logging
import datetime

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from errors import DuplicateKey, NotFound
from extensions import db
from models import Account, Submission

logger = logging.getLogger(__name__)


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def find_by_id(account_id: int) -> Account | None:
    return db.session.get(Account, account_id)


def find_by_email(email: str) -> Account | None:
    return Account.query.filter(Account.email == normalize_email(email)).first()


def find_by_email_or_external_id(email: str, student_id: str) -> Account | None:
    return Account.query.filter(
        or_(
            func.lower(Account.email) == normalize_email(email),
            Account.student_id == (student_id or "").strip(),
        )
    ).first()


def create(name: str, email: str, password: str, student_id: str) -> Account:
    """
    Create an account, hashing the password once before it is persisted.

    Raises DuplicateKey if the email or student id is already taken. The
    unique constraints catch the race where two registrations pass the
    lookup at the same time.
    """
    if find_by_email_or_external_id(email, student_id) is not None:
        raise DuplicateKey()

    account = Account(
        name=name.strip(),
        email=normalize_email(email),
        student_id=student_id.strip(),
    )
    account.set_password(password)
    db.session.add(account)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise DuplicateKey()

    logger.info("account created id=%s", account.id)
    return account


def append_submission(account_id: int, submission: Submission) -> Account:
    account = find_by_id(account_id)
    if account is None:
        raise NotFound("Account no longer exists")

    submission.account_id = account.id
    db.session.add(submission)
    account.updated_at = datetime.datetime.now(datetime.timezone.utc)
    try:
        db.session.commit()
    except (IntegrityError, StaleDataError):
        # account deleted between the lookup and the commit
        db.session.rollback()
        raise NotFound("Account no longer exists")

    return account
