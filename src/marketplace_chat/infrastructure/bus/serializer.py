from __future__ import annotations

import json
from datetime import datetime
from typing import Any
from uuid import UUID


class _Encoder(json.JSONEncoder):
    def default(self, o: object) -> Any:
        if isinstance(o, UUID):
            return str(o)
        if isinstance(o, datetime):
            return o.isoformat()
        return super().default(o)


def dumps(payload: Any) -> str:
    return json.dumps(payload, cls=_Encoder)


def serialize_event(event_type: str, payload: Any) -> str:
    envelope = {"event": event_type, "data": payload}
    return dumps(envelope)


def deserialize_event(raw: str | bytes) -> tuple[str, Any]:
    data = json.loads(raw)
    return data["event"], data["data"]
