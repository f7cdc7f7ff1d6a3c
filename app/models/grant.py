from __future__ import annotations

import hashlib
from dataclasses import dataclass
from enum import StrEnum
from uuid import UUID, uuid4

# A grant is what the authorization server remembers about an issued
# authorization code (and the refresh token later minted from it).
#
# We only ever store token HASHES.  A leaked database dump must not hand
# out redeemable codes or refresh tokens.


class TokenKind(StrEnum):
    AUTHORIZATION_CODE = "authorization_code"
    REFRESH_TOKEN = "refresh_token"


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


@dataclass(frozen=True, slots=True)
class AuthorizationRequestSnapshot:
    """The authorization request as it was when the code was issued.

    code_challenge / code_challenge_method are None when the client did not
    send them.  An empty string is kept as-is; callers do blank checks.
    """

    client_id: str
    redirect_uri: str | None = None
    scopes: frozenset[str] = frozenset()
    state: str | None = None
    code_challenge: str | None = None
    code_challenge_method: str | None = None


@dataclass(frozen=True, slots=True)
class GrantRecord:
    id: UUID
    client_id: str
    principal_name: str
    authorization_code_hash: str | None
    refresh_token_hash: str | None
    authorization_request: AuthorizationRequestSnapshot | None

    def token_hash(self, kind: TokenKind) -> str | None:
        if kind is TokenKind.AUTHORIZATION_CODE:
            return self.authorization_code_hash
        return self.refresh_token_hash

    @staticmethod
    def new(
        *,
        client_id: str,
        principal_name: str,
        authorization_request: AuthorizationRequestSnapshot | None,
        authorization_code: str | None = None,
        refresh_token: str | None = None,
    ) -> GrantRecord:
        # Raw tokens come in, only hashes are kept.
        return GrantRecord(
            id=uuid4(),
            client_id=client_id,
            principal_name=principal_name,
            authorization_code_hash=(
                hash_token(authorization_code)
                if authorization_code is not None
                else None
            ),
            refresh_token_hash=(
                hash_token(refresh_token) if refresh_token is not None else None
            ),
            authorization_request=authorization_request,
        )
