from __future__ import annotations

from typing import Protocol

from app.models.grant import GrantRecord, TokenKind, hash_token


class GrantRepo(Protocol):
    def find(self, token: str, kind: TokenKind) -> GrantRecord | None: ...


class InMemoryGrantRepo:
    def __init__(self) -> None:
        self._by_token_hash: dict[tuple[TokenKind, str], GrantRecord] = {}

    def save(self, record: GrantRecord) -> None:
        """Index the grant under every token hash it carries."""
        for kind in TokenKind:
            token_hash = record.token_hash(kind)
            if token_hash is not None:
                self._by_token_hash[(kind, token_hash)] = record

    def find(self, token: str, kind: TokenKind) -> GrantRecord | None:
        return self._by_token_hash.get((kind, hash_token(token)))
