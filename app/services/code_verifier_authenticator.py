"""PKCE check for the token endpoint, for both code and refresh grants.

WHERE THIS SITS
-----------------
Client authentication at POST /oauth/token happens before any token is
minted.  For a public client there is no secret, so the code_verifier IS
the credential: the client proves it is the same party that sent
code_challenge to /authorize.  Confidential clients authenticate with a
secret and get the PKCE check on top, when the grant used PKCE.

REFRESH TOKENS TOO
--------------------
RFC 7636 only talks about the authorization_code grant.  We also bind the
refresh_token grant: a refresh token minted from a PKCE-protected code can
only be redeemed by a client that still holds the original verifier.  The
lookup goes through the same grant record, found by refresh token instead
of by code.

THE DECISION CHAIN
--------------------
evaluate() is one straight line.  Each step continues, stops with
"not applicable", or stops with a rejection:

  1. grant_type gate     wrong grant type / token missing -> not applicable
  2. grant lookup        unknown grant                    -> invalid_grant (code)
  3. stored challenge    none + client requires PKCE      -> invalid_grant (code_challenge)
                         none otherwise                   -> not applicable
  4. verifier check      mismatch                         -> invalid_grant (code_verifier)
                         no SHA-256 in runtime            -> server_error
  5. otherwise                                            -> verified

Step 2 reports "code" even for a refresh token.  Clients and dashboards
already match on that description; keep it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from app.core.errors import (
    OAuth2AuthenticationError,
    OAuth2Error,
    invalid_grant,
    server_error,
)
from app.core.metrics import PKCE_AUTHENTICATIONS, PKCE_REJECTIONS
from app.models import parameters
from app.models.client_authentication import ClientAuthenticationAttempt
from app.models.grant import TokenKind
from app.models.oauth_client import RegisteredClient
from app.repos.grant_repo import GrantRepo
from app.services import pkce_service

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PkceVerified:
    kind: TokenKind


@dataclass(frozen=True, slots=True)
class PkceNotApplicable:
    reason: str


@dataclass(frozen=True, slots=True)
class PkceRejected:
    error: OAuth2Error
    # None for server_error, which is not the client's fault.
    parameter: str | None


PkceResult = PkceVerified | PkceNotApplicable | PkceRejected


def _rejected(parameter: str) -> PkceRejected:
    return PkceRejected(error=invalid_grant(parameter), parameter=parameter)


def _presented_token(
    attempt: ClientAuthenticationAttempt,
) -> tuple[str, TokenKind] | None:
    # Presence only: an empty code still goes to the store (and misses).
    if (
        attempt.grant_type == parameters.AUTHORIZATION_CODE_GRANT
        and attempt.code is not None
    ):
        return attempt.code, TokenKind.AUTHORIZATION_CODE
    if (
        attempt.grant_type == parameters.REFRESH_TOKEN_GRANT
        and attempt.refresh_token is not None
    ):
        return attempt.refresh_token, TokenKind.REFRESH_TOKEN
    return None


def evaluate(
    attempt: ClientAuthenticationAttempt,
    client: RegisteredClient,
    grants: GrantRepo,
) -> PkceResult:
    """Run the PKCE decision chain.  Pure apart from one grant lookup."""
    presented = _presented_token(attempt)
    if presented is None:
        return PkceNotApplicable("grant type does not carry a PKCE-bound token")
    token, kind = presented

    grant = grants.find(token, kind)
    # A grant without its authorization request is as good as unknown.
    if grant is None or grant.authorization_request is None:
        return _rejected(parameters.CODE)

    request = grant.authorization_request
    if not pkce_service.has_text(request.code_challenge):
        if client.require_proof_key:
            return _rejected(parameters.CODE_CHALLENGE)
        return PkceNotApplicable("no code_challenge stored for this grant")

    try:
        valid = pkce_service.verify_code_challenge(
            attempt.code_verifier,
            request.code_challenge,  # type: ignore[arg-type]
            request.code_challenge_method,
        )
    except pkce_service.DigestUnavailableError:
        logger.error(
            "PKCE check impossible: SHA-256 unavailable in this runtime",
            exc_info=True,
        )
        return PkceRejected(error=server_error(), parameter=None)

    if not valid:
        return _rejected(parameters.CODE_VERIFIER)
    return PkceVerified(kind)


def _grant_type_label(grant_type: str | None) -> str:
    if grant_type in (
        parameters.AUTHORIZATION_CODE_GRANT,
        parameters.REFRESH_TOKEN_GRANT,
    ):
        return grant_type  # type: ignore[return-value]
    return "other"


class CodeVerifierAuthenticator:
    """Raises OAuth2AuthenticationError for rejections; wraps evaluate()."""

    def __init__(self, grants: GrantRepo) -> None:
        self._grants = grants

    def authenticate_required(
        self, attempt: ClientAuthenticationAttempt, client: RegisteredClient
    ) -> None:
        """PKCE must be verified; "not applicable" is a failure here."""
        if not self._authenticate(attempt, client):
            raise OAuth2AuthenticationError(invalid_grant(parameters.CODE_VERIFIER))

    def authenticate_if_available(
        self, attempt: ClientAuthenticationAttempt, client: RegisteredClient
    ) -> bool:
        """Best effort: returns False when PKCE does not apply.

        A rejection (unknown grant, missing required challenge, wrong
        verifier) still raises.
        """
        return self._authenticate(attempt, client)

    def _authenticate(
        self, attempt: ClientAuthenticationAttempt, client: RegisteredClient
    ) -> bool:
        result = evaluate(attempt, client, self._grants)
        grant_type = _grant_type_label(attempt.grant_type)

        if isinstance(result, PkceRejected):
            PKCE_AUTHENTICATIONS.labels(grant_type=grant_type, outcome="rejected").inc()
            PKCE_REJECTIONS.labels(
                error=result.error.error, parameter=result.parameter or "-"
            ).inc()
            # Name the parameter, never its value.
            logger.warning(
                "PKCE rejected  client_id=%s grant_type=%s error=%s parameter=%s",
                client.client_id,
                grant_type,
                result.error.error,
                result.parameter,
                extra={"client_id": client.client_id, "grant_type": grant_type},
            )
            raise OAuth2AuthenticationError(result.error)

        if isinstance(result, PkceNotApplicable):
            PKCE_AUTHENTICATIONS.labels(
                grant_type=grant_type, outcome="not_applicable"
            ).inc()
            logger.info(
                "PKCE not applicable  client_id=%s grant_type=%s reason=%s",
                client.client_id,
                grant_type,
                result.reason,
                extra={"client_id": client.client_id, "grant_type": grant_type},
            )
            return False

        PKCE_AUTHENTICATIONS.labels(grant_type=grant_type, outcome="verified").inc()
        logger.info(
            "PKCE verified  client_id=%s grant_type=%s",
            client.client_id,
            grant_type,
            extra={"client_id": client.client_id, "grant_type": grant_type},
        )
        return True
