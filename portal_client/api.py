import logging
import time

import requests

from portal_client import validators
from portal_client.errors import (
    ApiError,
    AuthenticationRequired,
    FormBusy,
    TransientNetworkFailure,
)
from portal_client.retry import RetryPolicy
from portal_client.session import SessionContext

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30  # seconds


class PortalClient:
    """
    Python client for the submission portal API.

    Every call goes through the retry policy. A 401 is never retried: the
    session token is cleared, the re-authentication hook fires once and
    AuthenticationRequired is raised.
    """

    def __init__(self, base_url, context=None, policy=None, http=None,
                 timeout=DEFAULT_TIMEOUT, sleep=time.sleep):
        self.base_url = base_url.rstrip("/")
        self.context = context or SessionContext()
        self.policy = policy or RetryPolicy()
        self.http = http or requests.Session()
        self.timeout = timeout
        self.sleep = sleep

    # ---------- transport ----------

    def _send_once(self, method, endpoint, **kwargs):
        url = f"{self.base_url}/api/{endpoint.lstrip('/')}"
        try:
            resp = self.http.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            # connection drops, timeouts, broken chunked or encoded bodies
            raise TransientNetworkFailure(str(exc)) from exc

        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if resp.status_code == 401:
            self.context.require_reauthentication()
            raise AuthenticationRequired(data.get("error") or "Please log in again", data.get("code"))
        if not 200 <= resp.status_code < 300:
            raise ApiError(
                resp.status_code,
                data.get("error") or f"Request failed with status {resp.status_code}",
                data.get("code"),
            )
        return data

    def request(self, method, endpoint, auth=False, **kwargs):
        if auth:
            if not self.context.token:
                self.context.require_reauthentication()
                raise AuthenticationRequired("Not logged in")
            headers = dict(kwargs.pop("headers", None) or {})
            headers["Authorization"] = f"Bearer {self.context.token}"
            kwargs["headers"] = headers
        return self.policy.run(lambda: self._send_once(method, endpoint, **kwargs), sleep=self.sleep)

    # ---------- operations ----------

    def register(self, name, email, password, student_id):
        validators.check_registration(name, email, password, student_id)
        return self.request("POST", "register", json={
            "name": name.strip(),
            "email": email.strip(),
            "password": password,
            "studentId": student_id.strip(),
        })

    def login(self, email, password):
        validators.check_login(email, password)
        data = self.request("POST", "login", json={"email": email.strip(), "password": password})
        self.context.sign_in(data["token"], data.get("account"))
        return data

    def logout(self):
        self.context.require_reauthentication()

    def load_student(self):
        data = self.request("GET", "student", auth=True)
        self.context.current_user = data
        return data

    def upload_assignment(self, name, filename, content):
        """Upload `content` (bytes) as a new submission named `name`."""
        validators.check_upload(name, content)
        return self.request(
            "POST",
            "upload",
            auth=True,
            data={"name": name.strip()},
            files={"file": (filename, content)},
        )

    # ---------- forms ----------

    def submit(self, form_id, action, success_message=None):
        """
        Run `action` for a form, at most one at a time per form.

        The form is disabled while the call is in flight and re-enabled
        whatever the outcome. Errors are shown in the form's message area
        and re-raised; FormBusy is raised without calling `action` if the
        form already has a request in flight.
        """
        form = self.context.form(form_id)
        if form.in_flight:
            raise FormBusy(f"{form_id} already has a request in flight")

        form.in_flight = True
        form.disabled = True
        form.dismiss_message()
        try:
            result = action()
        except Exception as exc:
            form.show_error(str(exc))
            raise
        else:
            if success_message:
                form.show_success(success_message)
            return result
        finally:
            form.in_flight = False
            form.disabled = False
