from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class PayloadModel(BaseModel):
    """Base for outgoing FCM payloads: absent (None) fields are never serialized."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
