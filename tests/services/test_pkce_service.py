from __future__ import annotations

import base64
import hashlib

import pytest

from app.services import pkce_service
from tests.factories import RFC_CHALLENGE, RFC_VERIFIER


def test_compute_code_challenge_matches_rfc7636_appendix_b() -> None:
    assert pkce_service.compute_code_challenge(RFC_VERIFIER) == RFC_CHALLENGE


def test_challenge_is_unpadded_base64url() -> None:
    challenge = pkce_service.compute_code_challenge("x" * 64)
    assert "=" not in challenge
    assert "+" not in challenge and "/" not in challenge
    assert len(challenge) == 43


def test_generate_code_verifier_is_43_chars_and_unique() -> None:
    a = pkce_service.generate_code_verifier()
    b = pkce_service.generate_code_verifier()
    assert len(a) == 43
    assert a != b


def test_non_ascii_verifier_hashed_with_replacement_chars() -> None:
    expected = (
        base64.urlsafe_b64encode(hashlib.sha256(b"caf?").digest())
        .rstrip(b"=")
        .decode()
    )
    assert pkce_service.compute_code_challenge("café") == expected


def test_verify_accepts_matching_s256_pair() -> None:
    assert pkce_service.verify_code_challenge(RFC_VERIFIER, RFC_CHALLENGE, "S256")


def test_verify_is_deterministic_across_calls() -> None:
    results = {
        pkce_service.verify_code_challenge(RFC_VERIFIER, RFC_CHALLENGE, "S256")
        for _ in range(3)
    }
    assert results == {True}


@pytest.mark.parametrize("verifier", [None, "", "   ", "\t\n"])
def test_verify_rejects_blank_verifier(verifier: str | None) -> None:
    assert not pkce_service.verify_code_challenge(verifier, RFC_CHALLENGE, "S256")


@pytest.mark.parametrize("method", [None, "", "plain", "s256", "S384", " S256"])
def test_verify_rejects_anything_but_s256(method: str | None) -> None:
    # Even with verifier == challenge, which is what "plain" would accept.
    assert not pkce_service.verify_code_challenge(RFC_CHALLENGE, RFC_CHALLENGE, method)
    assert not pkce_service.verify_code_challenge(RFC_VERIFIER, RFC_CHALLENGE, method)


def test_verify_rejects_wrong_verifier() -> None:
    assert not pkce_service.verify_code_challenge("wrong", RFC_CHALLENGE, "S256")


def test_verify_handles_non_ascii_stored_challenge() -> None:
    assert not pkce_service.verify_code_challenge(RFC_VERIFIER, "défi", "S256")


def test_missing_sha256_raises_digest_unavailable(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def _no_sha256(name: str, *args: object, **kwargs: object) -> object:
        raise ValueError(f"unsupported hash type {name}")

    monkeypatch.setattr(pkce_service.hashlib, "new", _no_sha256)
    with pytest.raises(pkce_service.DigestUnavailableError):
        pkce_service.verify_code_challenge(RFC_VERIFIER, RFC_CHALLENGE, "S256")


def test_has_text() -> None:
    assert pkce_service.has_text("a")
    assert pkce_service.has_text(" a ")
    assert not pkce_service.has_text(None)
    assert not pkce_service.has_text("")
    assert not pkce_service.has_text("  ")


@pytest.mark.parametrize(
    "value",
    ["\t\n\x0b\x0c\r", "\x1c\x1d\x1e\x1f", "\u2003", "\u3000", "\u2028\u2029"],
)
def test_has_text_treats_separators_as_blank(value: str) -> None:
    assert not pkce_service.has_text(value)


@pytest.mark.parametrize("value", ["\u00a0", "\u2007", "\u202f", "\x85", " \u00a0 "])
def test_has_text_counts_non_breaking_spaces_as_text(value: str) -> None:
    assert pkce_service.has_text(value)


def test_nbsp_verifier_is_compared_not_skipped() -> None:
    # Present but never equal to a real challenge.
    assert not pkce_service.verify_code_challenge("\u00a0", RFC_CHALLENGE, "S256")
