from portal_client.api import PortalClient
from portal_client.errors import (
    ApiError,
    AuthenticationRequired,
    ClientError,
    FormBusy,
    TransientNetworkFailure,
    ValidationError,
)
from portal_client.retry import RetryPolicy, default_retry_predicate
from portal_client.session import FormState, SessionContext

__all__ = [
    "ApiError",
    "AuthenticationRequired",
    "ClientError",
    "FormBusy",
    "FormState",
    "PortalClient",
    "RetryPolicy",
    "SessionContext",
    "TransientNetworkFailure",
    "ValidationError",
    "default_retry_predicate",
]
