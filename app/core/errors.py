"""OAuth 2.0 error model for the token endpoint.

RFC 6749 §5.2 fixes the error response shape:

    {"error": "invalid_grant", "error_description": "..."}

`error` is a registered code the client can branch on; the description is
for humans (developers reading logs), never parsed.

TWO LAYERS
------------
  OAuth2Error: plain data.  The PKCE core returns these inside its result
    objects, so it never depends on FastAPI or on raising.

  OAuth2AuthenticationError: the exception carrying an OAuth2Error.  Raised
    at the edge (authenticate_required / authenticate_if_available) and
    turned into a JSON response by the handler registered in app/main.py.
"""

from __future__ import annotations

from dataclasses import dataclass

INVALID_REQUEST = "invalid_request"
INVALID_CLIENT = "invalid_client"
INVALID_GRANT = "invalid_grant"
SERVER_ERROR = "server_error"

# invalid_client is 401 per RFC 6749 §5.2; server_error is ours, not the client's.
STATUS_CODES: dict[str, int] = {
    INVALID_REQUEST: 400,
    INVALID_CLIENT: 401,
    INVALID_GRANT: 400,
    SERVER_ERROR: 500,
}

_CLIENT_AUTH_FAILED = "Client authentication failed: "


@dataclass(frozen=True, slots=True)
class OAuth2Error:
    error: str
    description: str | None = None
    uri: str | None = None

    @property
    def status_code(self) -> int:
        return STATUS_CODES.get(self.error, 400)

    def to_dict(self) -> dict[str, str]:
        body = {"error": self.error}
        if self.description is not None:
            body["error_description"] = self.description
        if self.uri is not None:
            body["error_uri"] = self.uri
        return body


class OAuth2AuthenticationError(Exception):
    def __init__(self, error: OAuth2Error) -> None:
        super().__init__(error.description or error.error)
        self.error = error


def invalid_grant(parameter_name: str) -> OAuth2Error:
    return OAuth2Error(INVALID_GRANT, _CLIENT_AUTH_FAILED + parameter_name)


def invalid_client(parameter_name: str) -> OAuth2Error:
    return OAuth2Error(INVALID_CLIENT, _CLIENT_AUTH_FAILED + parameter_name)


def server_error() -> OAuth2Error:
    return OAuth2Error(SERVER_ERROR)
