"""Bearer-token gate in front of every league route."""

from __future__ import annotations

import logging
import secrets
from typing import Iterable, Optional, Protocol, runtime_checkable

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer


logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@runtime_checkable
class TokenVerifier(Protocol):
    def verify(self, token: str) -> Optional[str]:
        """Return the caller's principal for a valid token, else None."""
        ...


class StaticTokenVerifier:
    """Accepts a fixed set of shared API tokens."""

    def __init__(self, tokens: Iterable[str]):
        self._tokens = tuple(token for token in tokens if token)
        if not self._tokens:
            logger.warning("No API tokens configured; every authenticated route will return 401")

    def verify(self, token: str) -> Optional[str]:
        for index, candidate in enumerate(self._tokens):
            if secrets.compare_digest(token.encode(), candidate.encode()):
                return f"api-token-{index}"
        return None


def _unauthorized() -> HTTPException:
    return HTTPException(status_code=401, detail="Unauthorized", headers={"WWW-Authenticate": "Bearer"})


async def require_principal(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    if credentials is None or not credentials.credentials:
        raise _unauthorized()
    verifier: TokenVerifier = request.app.state.token_verifier
    principal = verifier.verify(credentials.credentials)
    if principal is None:
        logger.warning("Rejected bearer token for %s %s", request.method, request.url.path)
        raise _unauthorized()
    return principal
