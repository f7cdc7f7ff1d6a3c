from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID, uuid4


@dataclass(frozen=True, slots=True)
class ClientSettings:
    # When True, a grant without a stored code_challenge is rejected instead
    # of being treated as "PKCE not in use".
    require_proof_key: bool = False


@dataclass(frozen=True, slots=True)
class RegisteredClient:
    id: UUID
    client_id: str
    redirect_uris: tuple[str, ...]
    is_public: bool
    allowed_scopes: frozenset[str]
    settings: ClientSettings = field(default_factory=ClientSettings)

    @property
    def require_proof_key(self) -> bool:
        return self.settings.require_proof_key

    @staticmethod
    def new(
        *,
        client_id: str,
        redirect_uris: tuple[str, ...],
        is_public: bool,
        allowed_scopes: frozenset[str],
        require_proof_key: bool = False,
    ) -> RegisteredClient:
        return RegisteredClient(
            id=uuid4(),
            client_id=client_id,
            redirect_uris=redirect_uris,
            is_public=is_public,
            allowed_scopes=frozenset(allowed_scopes),
            settings=ClientSettings(require_proof_key=require_proof_key),
        )
