from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from app.models import parameters


@dataclass(frozen=True, slots=True)
class ClientAuthenticationAttempt:
    """One inbound token-endpoint request, as far as client auth cares.

    Every field is None when the parameter was not sent at all.  An empty
    value stays an empty string: the grant-type gate only checks presence,
    the verifier check treats blank as missing.
    """

    client_id: str | None = None
    grant_type: str | None = None
    code: str | None = None
    refresh_token: str | None = None
    code_verifier: str | None = None

    @staticmethod
    def from_parameters(params: Mapping[str, str]) -> ClientAuthenticationAttempt:
        return ClientAuthenticationAttempt(
            client_id=params.get(parameters.CLIENT_ID),
            grant_type=params.get(parameters.GRANT_TYPE),
            code=params.get(parameters.CODE),
            refresh_token=params.get(parameters.REFRESH_TOKEN),
            code_verifier=params.get(parameters.CODE_VERIFIER),
        )
