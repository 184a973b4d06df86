from __future__ import annotations

import jwt

from marketplace_chat.application.dto.principal import Principal


class HS256Verifier:
    """Verify gateway JWTs signed with a shared HS256 secret."""

    def __init__(self, secret: str, algorithm: str = "HS256") -> None:
        self._secret = secret
        self._algorithm = algorithm

    async def verify(self, token: str) -> Principal:
        payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        username = payload.get("username")
        if not username:
            raise jwt.InvalidTokenError("Token has no username claim")
        return Principal(
            user_id=str(payload.get("id", payload.get("sub", ""))),
            username=username,
            email=payload.get("email"),
        )
