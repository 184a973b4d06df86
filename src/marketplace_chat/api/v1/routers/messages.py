from __future__ import annotations

import secrets

from fastapi import APIRouter, Depends

from marketplace_chat.api.deps import NotifierDep, UoWDep, UploaderDep, get_current_principal
from marketplace_chat.api.v1.schemas.common import StatusResponse
from marketplace_chat.api.v1.schemas.conversation import (
    ConversationListResponse,
    ConversationLookupResponse,
    ConversationPreviewResponse,
    ConversationResponse,
)
from marketplace_chat.api.v1.schemas.message import (
    MarkManyReadRequest,
    MarkReadRequest,
    MessageListResponse,
    MessageResponse,
    SendMessageRequest,
    SendMessageResponse,
    SingleMessageResponse,
    UpdateOfferRequest,
)
from marketplace_chat.services import (
    conversation_service,
    message_service,
    offer_service,
    read_state_service,
)

router = APIRouter(
    prefix="/api/v1/message",
    tags=["messages"],
    dependencies=[Depends(get_current_principal)],
)


@router.get(
    "/conversation/{sender_username}/{receiver_username}",
    response_model=ConversationLookupResponse,
)
async def get_conversation(
    sender_username: str,
    receiver_username: str,
    uow: UoWDep,
) -> ConversationLookupResponse:
    convs = await conversation_service.get_conversation(sender_username, receiver_username, uow)
    return ConversationLookupResponse(
        message="Conversation retrieved successfully",
        conversation=[ConversationResponse.model_validate(c) for c in convs],
    )


@router.get("/conversations/{username}", response_model=ConversationListResponse)
async def get_conversation_list(username: str, uow: UoWDep) -> ConversationListResponse:
    previews = await message_service.get_user_conversation_list(username, uow)
    return ConversationListResponse(
        message="Conversation list retrieved successfully",
        conversations=[ConversationPreviewResponse.model_validate(p) for p in previews],
    )


@router.get("/{sender_username}/{receiver_username}", response_model=MessageListResponse)
async def get_messages(
    sender_username: str,
    receiver_username: str,
    uow: UoWDep,
) -> MessageListResponse:
    messages = await message_service.get_messages(sender_username, receiver_username, uow)
    return MessageListResponse(
        message="Messages retrieved successfully",
        messages=[MessageResponse.model_validate(m) for m in messages],
    )


@router.get("/{conversation_id}", response_model=MessageListResponse)
async def get_user_messages(conversation_id: str, uow: UoWDep) -> MessageListResponse:
    messages = await message_service.get_user_messages(conversation_id, uow)
    return MessageListResponse(
        message="User messages retrieved successfully",
        messages=[MessageResponse.model_validate(m) for m in messages],
    )


@router.post("", response_model=SendMessageResponse)
async def send_message(
    body: SendMessageRequest,
    uow: UoWDep,
    notifier: NotifierDep,
    uploader: UploaderDep,
) -> SendMessageResponse:
    file_url = body.file
    if body.file and uploader is not None:
        public_id = f"{secrets.token_hex(20)}.zip" if body.file_type == "zip" else None
        file_url = await uploader.upload(body.file, public_id)

    msg = await message_service.send_message(
        body.to_dto(file=file_url),
        body.has_conversation_id,
        uow,
        notifier,
    )
    return SendMessageResponse(
        message="Message sent successfully",
        conversation_id=msg.conversation_id,
        message_data=MessageResponse.model_validate(msg),
    )


@router.put("/offer", response_model=SingleMessageResponse)
async def update_offer(body: UpdateOfferRequest, uow: UoWDep) -> SingleMessageResponse:
    msg = await offer_service.update_offer(body.message_id, body.type, uow)
    return SingleMessageResponse(
        message="Message updated successfully",
        single_message=MessageResponse.model_validate(msg),
    )


@router.put("/mark-as-read", response_model=SingleMessageResponse)
async def mark_single_message(
    body: MarkReadRequest,
    uow: UoWDep,
    notifier: NotifierDep,
) -> SingleMessageResponse:
    msg = await read_state_service.mark_message_as_read(body.message_id, uow, notifier)
    return SingleMessageResponse(
        message="Message marked as read successfully",
        single_message=MessageResponse.model_validate(msg),
    )


@router.put("/mark-multiple-as-read", response_model=StatusResponse)
async def mark_multiple_messages(
    body: MarkManyReadRequest,
    uow: UoWDep,
    notifier: NotifierDep,
) -> StatusResponse:
    await read_state_service.mark_many_messages_as_read(
        body.receiver_username,
        body.sender_username,
        body.message_id,
        uow,
        notifier,
    )
    return StatusResponse(message="Messages marked as read")
