from __future__ import annotations

from app.models.grant import TokenKind, hash_token
from app.repos.grant_repo import InMemoryGrantRepo
from tests.factories import make_grant


def test_find_by_code_and_refresh_token() -> None:
    repo = InMemoryGrantRepo()
    grant = make_grant(code="abc", refresh_token="rt1")
    repo.save(grant)

    assert repo.find("abc", TokenKind.AUTHORIZATION_CODE) is grant
    assert repo.find("rt1", TokenKind.REFRESH_TOKEN) is grant


def test_kind_must_match() -> None:
    repo = InMemoryGrantRepo()
    repo.save(make_grant(code="abc", refresh_token="rt1"))

    assert repo.find("abc", TokenKind.REFRESH_TOKEN) is None
    assert repo.find("rt1", TokenKind.AUTHORIZATION_CODE) is None


def test_unknown_token_not_found() -> None:
    assert InMemoryGrantRepo().find("nope", TokenKind.AUTHORIZATION_CODE) is None


def test_only_hashes_are_stored() -> None:
    repo = InMemoryGrantRepo()
    grant = make_grant(code="abc", refresh_token="rt1")
    repo.save(grant)

    assert grant.authorization_code_hash == hash_token("abc")
    assert grant.refresh_token_hash == hash_token("rt1")
    stored_keys = {token_hash for _, token_hash in repo._by_token_hash}
    assert "abc" not in stored_keys
    assert "rt1" not in stored_keys


def test_grant_without_refresh_token_indexed_by_code_only() -> None:
    repo = InMemoryGrantRepo()
    repo.save(make_grant(code="abc", refresh_token=None))
    assert list(repo._by_token_hash) == [
        (TokenKind.AUTHORIZATION_CODE, hash_token("abc"))
    ]
