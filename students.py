# students.py
import logging

from flask import Blueprint, current_app, g, jsonify, request

import accounts
from auth import issue_token, require_student
from errors import InvalidCredentials, Unauthenticated
from notifier import welcome_notification
from validation import validate_login, validate_registration

bp = Blueprint("students", __name__)
logger = logging.getLogger(__name__)


@bp.route("/api/register", methods=["POST"])
def register():
    """
    JSON body: { "name", "email", "password", "studentId" }

    Returns 201 with the new account (never the password hash), 409 if the
    email or student id is already registered.
    """
    data = validate_registration(request.get_json(silent=True) or {})
    account = accounts.create(**data)

    current_app.extensions["outbox"].publish(welcome_notification(account))
    return jsonify({
        "message": "Account registered",
        "account": account.to_dict(),
    }), 201


@bp.route("/api/login", methods=["POST"])
def login():
    data = validate_login(request.get_json(silent=True) or {})

    account = accounts.find_by_email(data["email"])
    # same error for unknown email and wrong password
    if account is None or not account.check_password(data["password"]):
        logger.info("failed login for %s", accounts.normalize_email(data["email"]))
        raise InvalidCredentials()

    logger.info("login account=%s", account.id)
    return jsonify({
        "token": issue_token(account.id),
        "account": account.to_dict(),
    })


@bp.route("/api/student", methods=["GET"])
@require_student
def get_student():
    account = accounts.find_by_id(g.account_id)
    if account is None:
        # token outlived its account
        raise Unauthenticated()
    return jsonify(account.to_dict())
