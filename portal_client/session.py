from dataclasses import dataclass, field
from typing import Callable, Optional


@dataclass
class FormMessage:
    text: str
    is_error: bool = True


@dataclass
class FormState:
    """UI state of one form: its in-flight guard and inline message area."""

    form_id: str
    in_flight: bool = False
    disabled: bool = False
    message: Optional[FormMessage] = None

    def show_error(self, text):
        self.message = FormMessage(text, is_error=True)

    def show_success(self, text):
        self.message = FormMessage(text, is_error=False)

    def dismiss_message(self):
        self.message = None


@dataclass
class SessionContext:
    """
    Client-side session owned by the UI layer and passed to the client.

    Holds the cached bearer token, the last loaded account and one
    FormState per form id. `on_reauthenticate` is called when the server
    rejects the token (the UI sends the user back to the login screen).
    """

    token: Optional[str] = None
    current_user: Optional[dict] = None
    on_reauthenticate: Optional[Callable[[], None]] = None
    forms: dict = field(default_factory=dict)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def form(self, form_id) -> FormState:
        if form_id not in self.forms:
            self.forms[form_id] = FormState(form_id)
        return self.forms[form_id]

    def sign_in(self, token, user):
        self.token = token
        self.current_user = user

    def clear(self):
        self.token = None
        self.current_user = None

    def require_reauthentication(self):
        self.clear()
        if self.on_reauthenticate is not None:
            self.on_reauthenticate()
