from __future__ import annotations

from typing import Protocol


class FileUploader(Protocol):
    async def upload(self, file: str, public_id: str | None = None) -> str:
        """Upload a base64/data-URI file and return its hosted URL."""
        ...
