from __future__ import annotations

import base64
import hashlib
import hmac
import secrets
import unicodedata

from app.models import parameters

# PKCE primitives (RFC 7636).  The token endpoint only ever needs
# verify_code_challenge; the other two are what a client does, and the tests
# play the client.
#
# Only S256 is supported.  "plain" sends the secret itself as the challenge,
# which defeats the point, so it fails like any unknown method.


class DigestUnavailableError(RuntimeError):
    """SHA-256 is missing from this interpreter (e.g. a locked-down FIPS build)."""


def generate_code_verifier() -> str:
    # 32 random bytes -> 43 base64url chars, the minimum verifier length.
    random_bytes = secrets.token_bytes(32)
    return base64.urlsafe_b64encode(random_bytes).rstrip(b"=").decode("ascii")


def compute_code_challenge(code_verifier: str) -> str:
    """BASE64URL-NOPAD(SHA256(ASCII(code_verifier))).

    Non-ASCII characters are replaced with "?" before hashing; a verifier
    built from the RFC 7636 alphabet is never affected.
    """
    try:
        digest = hashlib.new("sha256")
    except ValueError as exc:
        raise DigestUnavailableError("sha256 is not available") from exc
    digest.update(code_verifier.encode("ascii", errors="replace"))
    return base64.urlsafe_b64encode(digest.digest()).rstrip(b"=").decode("ascii")


# Whitespace for blank checks: \t \n \v \f \r, the separators \x1c-\x1f, and
# Unicode space/line/paragraph separators other than the non-breaking ones.
# Narrower than str.isspace(): a stored "\u00a0" challenge is present text
# and fails the S256 comparison.
_CONTROL_WHITESPACE = frozenset("\t\n\x0b\x0c\r\x1c\x1d\x1e\x1f")
_NON_BREAKING_SPACES = frozenset("\u00a0\u2007\u202f")
_SEPARATOR_CATEGORIES = ("Zs", "Zl", "Zp")


def _is_whitespace(ch: str) -> bool:
    if ch in _CONTROL_WHITESPACE:
        return True
    return (
        unicodedata.category(ch) in _SEPARATOR_CATEGORIES
        and ch not in _NON_BREAKING_SPACES
    )


def has_text(value: str | None) -> bool:
    return value is not None and not all(_is_whitespace(ch) for ch in value)


def verify_code_challenge(
    code_verifier: str | None,
    code_challenge: str,
    code_challenge_method: str | None,
) -> bool:
    """Check a presented verifier against the challenge stored at /authorize.

    Raises DigestUnavailableError if the runtime cannot compute SHA-256.
    """
    if not has_text(code_verifier):
        return False
    if code_challenge_method != parameters.S256:
        return False
    actual = compute_code_challenge(code_verifier)  # type: ignore[arg-type]
    # Constant time: plain == leaks how much of the challenge matched.
    return hmac.compare_digest(actual.encode(), code_challenge.encode())
