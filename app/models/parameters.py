from __future__ import annotations

# Wire-level parameter names for the token endpoint (RFC 6749 §4.1.3, §6 and
# RFC 7636 §4.3-4.5). These never change; clients depend on them.

GRANT_TYPE = "grant_type"
CLIENT_ID = "client_id"
CODE = "code"
REFRESH_TOKEN = "refresh_token"
CODE_VERIFIER = "code_verifier"
CODE_CHALLENGE = "code_challenge"
CODE_CHALLENGE_METHOD = "code_challenge_method"

# grant_type values
AUTHORIZATION_CODE_GRANT = "authorization_code"
REFRESH_TOKEN_GRANT = "refresh_token"

# The only code_challenge_method we accept. "plain" is deliberately absent.
S256 = "S256"
