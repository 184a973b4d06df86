from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated caller identity extracted from the gateway JWT."""

    user_id: str
    username: str
    email: str | None = None

    @property
    def principal_key(self) -> str:
        """Unique key for WS connection registry."""
        return f"user:{self.username}"
