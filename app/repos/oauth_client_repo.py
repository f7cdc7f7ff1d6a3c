from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from app.models.oauth_client import RegisteredClient


class OAuthClientRepo(Protocol):
    def get(self, client_id: str) -> RegisteredClient | None: ...
    def register(self, client: RegisteredClient) -> None: ...


class InMemoryOAuthClientRepo:
    def __init__(self, clients: Iterable[RegisteredClient] = ()) -> None:
        self._by_client_id: dict[str, RegisteredClient] = {}
        for client in clients:
            self.register(client)

    def get(self, client_id: str) -> RegisteredClient | None:
        return self._by_client_id.get(client_id)

    def register(self, client: RegisteredClient) -> None:
        # Re-registering a client_id replaces its settings.
        self._by_client_id[client.client_id] = client
