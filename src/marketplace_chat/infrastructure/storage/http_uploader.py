from __future__ import annotations

import logging

import httpx

from marketplace_chat.application.exceptions import ValidationError

logger = logging.getLogger(__name__)


class HttpFileUploader:
    """Implements application.ports.storage.FileUploader against an upload endpoint.

    The endpoint accepts ``{"file": ..., "public_id": ...}`` and answers with
    ``{"public_id": ..., "secure_url": ...}``.
    """

    def __init__(self, upload_url: str, *, timeout: float = 30.0) -> None:
        self._upload_url = upload_url
        self._timeout = timeout

    async def upload(self, file: str, public_id: str | None = None) -> str:
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(
                    self._upload_url,
                    json={"file": file, "public_id": public_id},
                )
                response.raise_for_status()
                result = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("File upload failed: %s", exc)
            raise ValidationError("File upload failed. Try again") from exc

        if not result.get("public_id") or not result.get("secure_url"):
            raise ValidationError("File upload failed. Try again")
        return result["secure_url"]
