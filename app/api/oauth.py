from __future__ import annotations

import logging
from typing import Literal

from fastapi import APIRouter, Request
from pydantic import BaseModel

from app.core.errors import (
    INVALID_REQUEST,
    OAuth2AuthenticationError,
    OAuth2Error,
    invalid_client,
)
from app.models import parameters
from app.models.client_authentication import ClientAuthenticationAttempt
from app.repos.grant_repo import InMemoryGrantRepo
from app.repos.oauth_client_repo import InMemoryOAuthClientRepo
from app.services.code_verifier_authenticator import CodeVerifierAuthenticator

# ---------------------------------------------------------------------------
# Token endpoint: client authentication step
#
#   POST /oauth/client-auth   authenticate the client of a token request
#                              via PKCE (authorization_code or refresh_token)
#
# Token minting happens after this step passes and lives elsewhere.
#
#   public client        -> PKCE is its only credential: authenticate_required
#   confidential client  -> secret checked upstream; PKCE enforced only when
#                           the grant used it: authenticate_if_available
# ---------------------------------------------------------------------------

logger = logging.getLogger(__name__)

router = APIRouter(tags=["oauth"])

# Module-level singletons; the grant store is filled by the /authorize side.
grant_repo = InMemoryGrantRepo()
client_repo = InMemoryOAuthClientRepo()
authenticator = CodeVerifierAuthenticator(grant_repo)

# RFC 6749 §3.2: request parameters MUST NOT be included more than once.
_SINGLE_VALUED = (
    parameters.CLIENT_ID,
    parameters.GRANT_TYPE,
    parameters.CODE,
    parameters.REFRESH_TOKEN,
    parameters.CODE_VERIFIER,
)


class ClientAuthOut(BaseModel):
    client_id: str
    grant_type: str | None
    pkce: Literal["verified", "not_applicable"]


@router.post("/oauth/client-auth", response_model=ClientAuthOut)
async def authenticate_client(request: Request) -> ClientAuthOut:
    # Raw form, not Form(...) params: FastAPI maps an empty optional field
    # to None, and "sent but empty" must stay distinct from "not sent".
    form = await request.form()
    for name in _SINGLE_VALUED:
        if len(form.getlist(name)) > 1:
            logger.warning("Repeated token request parameter  name=%s", name)
            raise OAuth2AuthenticationError(
                OAuth2Error(INVALID_REQUEST, f"OAuth 2.0 Parameter: {name}")
            )
    params = {key: value for key, value in form.items() if isinstance(value, str)}
    attempt = ClientAuthenticationAttempt.from_parameters(params)

    if not attempt.client_id:
        raise OAuth2AuthenticationError(
            OAuth2Error(INVALID_REQUEST, f"missing {parameters.CLIENT_ID}")
        )

    client = client_repo.get(attempt.client_id)
    if client is None:
        logger.warning("Unknown client_id  client_id=%s", attempt.client_id)
        raise OAuth2AuthenticationError(invalid_client(parameters.CLIENT_ID))

    if client.is_public:
        authenticator.authenticate_required(attempt, client)
        verified = True
    else:
        verified = authenticator.authenticate_if_available(attempt, client)

    return ClientAuthOut(
        client_id=client.client_id,
        grant_type=attempt.grant_type,
        pkce="verified" if verified else "not_applicable",
    )
