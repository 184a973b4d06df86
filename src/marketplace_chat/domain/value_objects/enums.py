from __future__ import annotations

from enum import StrEnum


class OfferFlag(StrEnum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class ChatEvent(StrEnum):
    MESSAGE_RECEIVED = "message received"
    MESSAGE_UPDATED = "message updated"


class EmailTemplate(StrEnum):
    OFFER = "offer"
