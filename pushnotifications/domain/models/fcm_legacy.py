from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from pushnotifications.domain.models.base import PayloadModel
from pushnotifications.domain.models.results import FcmResult, count_failures, count_successes

MAX_TIME_TO_LIVE = 2_419_200  # 4 weeks, in seconds


class FcmNotification(PayloadModel):
    title: str | None = None
    body: str | None = None
    android_channel_id: str | None = None
    icon: str | None = None
    image: str | None = None
    sound: str | None = None
    tag: str | None = None
    color: str | None = None
    click_action: str | None = None
    body_loc_key: str | None = None
    body_loc_args: list[str] | None = None
    title_loc_key: str | None = None
    title_loc_args: list[str] | None = None
    badge: str | None = None
    subtitle: str | None = None


class FcmRequest(PayloadModel):
    registration_ids: list[str] = Field(default_factory=list)
    notification: FcmNotification | None = None
    data: dict[str, str] | None = None
    collapse_key: str | None = None
    priority: Literal["normal", "high"] | None = None
    content_available: bool | None = None
    mutable_content: bool | None = None
    time_to_live: int | None = Field(default=None, ge=0, le=MAX_TIME_TO_LIVE)
    restricted_package_name: str | None = None
    dry_run: bool | None = None


class FcmResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    multicast_id: int | None = None
    canonical_ids: int = 0
    results: list[FcmResult] = Field(default_factory=list)
    # Attached by the client
    status_code: int | None = None

    @classmethod
    def from_payload(cls, body: dict) -> "FcmResponse":
        """Build from the body FCM returns, mapping each result entry."""
        entries = body.get("results") or []
        if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
            # let validation report the malformed results
            return cls.model_validate(body)
        return cls.model_validate(
            {**body, "results": [FcmResult.from_payload(e) for e in entries]}
        )

    @property
    def number_of_successes(self) -> int:
        return count_successes(self.results)

    @property
    def number_of_failures(self) -> int:
        return count_failures(self.results)
