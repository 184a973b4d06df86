"""FastAPI dependency injection helpers."""
from __future__ import annotations

from typing import Annotated, AsyncIterator

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from marketplace_chat.application.dto.principal import Principal
from marketplace_chat.application.ports.auth import TokenVerifier
from marketplace_chat.application.ports.storage import FileUploader
from marketplace_chat.config import settings
from marketplace_chat.infrastructure.auth.hs256_verifier import HS256Verifier
from marketplace_chat.infrastructure.db.session import AsyncSessionLocal
from marketplace_chat.infrastructure.db.uow import SqlAlchemyUoW
from marketplace_chat.infrastructure.storage.http_uploader import HttpFileUploader
from marketplace_chat.services.notifier import ChatNotifier

_bearer_scheme = HTTPBearer()


async def get_uow() -> AsyncIterator[SqlAlchemyUoW]:
    async with AsyncSessionLocal() as session:
        async with SqlAlchemyUoW(session) as uow:
            yield uow


UoWDep = Annotated[SqlAlchemyUoW, Depends(get_uow)]


def get_notifier(request: Request) -> ChatNotifier:
    """Notifier built once in the app lifespan."""
    return request.app.state.notifier


NotifierDep = Annotated[ChatNotifier, Depends(get_notifier)]


def get_uploader() -> FileUploader | None:
    if not settings.UPLOAD_URL:
        return None
    return HttpFileUploader(settings.UPLOAD_URL, timeout=settings.UPLOAD_TIMEOUT_SECONDS)


UploaderDep = Annotated[FileUploader | None, Depends(get_uploader)]


_verifier: TokenVerifier | None = None


def get_verifier() -> TokenVerifier:
    global _verifier  # noqa: PLW0603
    if _verifier is None:
        _verifier = HS256Verifier(settings.JWT_SECRET, settings.JWT_ALGORITHM)
    return _verifier


async def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(_bearer_scheme)],
) -> Principal:
    verifier = get_verifier()
    try:
        return await verifier.verify(credentials.credentials)
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
        ) from exc
