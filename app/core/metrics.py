"""Prometheus metrics for PKCE client authentication.

All metrics live here so there is one inventory of what the service
measures.  The authenticator increments them at the point of decision.

  pkce_authentications_total{grant_type, outcome}
    outcome is verified | not_applicable | rejected.  A sudden rise in
    not_applicable for public clients usually means a client stopped
    sending code_challenge at /authorize.

  pkce_rejections_total{error, parameter}
    Breaks rejections down by the parameter we blamed.  parameter=code is
    unknown/expired grants, code_verifier is a wrong verifier (stolen
    code?), code_challenge is a client that must use PKCE but did not.

Label values are always from a small fixed set.  Never put a client_id or
token in a label: every distinct value is a new time series.
"""

from __future__ import annotations

from prometheus_client import Counter

PKCE_AUTHENTICATIONS = Counter(
    "pkce_authentications_total",
    "PKCE code_verifier checks by grant type and outcome",
    ["grant_type", "outcome"],
)

PKCE_REJECTIONS = Counter(
    "pkce_rejections_total",
    "PKCE checks that failed, by OAuth error code and offending parameter",
    ["error", "parameter"],
)
