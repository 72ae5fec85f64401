"""Client for the hosted data/auth gateway."""

from .client import AuthClient, AuthEvent, AuthResponse, GatewayClient
from .errors import AuthError, GatewayError, NotAuthenticatedError
from .query import QueryResult, TableQuery

__all__ = [
    "AuthClient",
    "AuthEvent",
    "AuthResponse",
    "AuthError",
    "GatewayClient",
    "GatewayError",
    "NotAuthenticatedError",
    "QueryResult",
    "TableQuery",
]
