from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pushnotifications.domain.models.base import PayloadModel
from pushnotifications.domain.models.results import FcmResult, count_failures, count_successes


class Notification(PayloadModel):
    title: str | None = None
    body: str | None = None
    image: str | None = None


class AndroidNotification(PayloadModel):
    title: str | None = None
    body: str | None = None
    icon: str | None = None
    color: str | None = None
    sound: str | None = None
    tag: str | None = None
    click_action: str | None = None
    channel_id: str | None = None
    image: str | None = None
    body_loc_key: str | None = None
    body_loc_args: list[str] | None = None
    title_loc_key: str | None = None
    title_loc_args: list[str] | None = None


class AndroidConfig(PayloadModel):
    collapse_key: str | None = None
    priority: Literal["normal", "high"] | None = None
    # Duration in seconds with an "s" suffix, e.g. "3600s"
    ttl: str | None = None
    restricted_package_name: str | None = None
    data: dict[str, str] | None = None
    notification: AndroidNotification | None = None
    direct_boot_ok: bool | None = None


class ApnsConfig(PayloadModel):
    headers: dict[str, str] | None = None
    payload: dict[str, Any] | None = None


class WebpushFcmOptions(PayloadModel):
    link: str | None = None
    analytics_label: str | None = None


class WebpushConfig(PayloadModel):
    headers: dict[str, str] | None = None
    data: dict[str, str] | None = None
    notification: dict[str, Any] | None = None
    fcm_options: WebpushFcmOptions | None = None


class MessageFcmOptions(PayloadModel):
    analytics_label: str | None = None


class Message(PayloadModel):
    token: str | None = None
    topic: str | None = None
    condition: str | None = None
    name: str | None = None
    data: dict[str, str] | None = None
    notification: Notification | None = None
    android: AndroidConfig | None = None
    apns: ApnsConfig | None = None
    webpush: WebpushConfig | None = None
    fcm_options: MessageFcmOptions | None = None

    @model_validator(mode="after")
    def single_target(self) -> "Message":
        targets = [t for t in (self.token, self.topic, self.condition) if t]
        if len(targets) > 1:
            raise ValueError("Only one of token, topic or condition can be set")
        return self

    @property
    def has_target(self) -> bool:
        return bool(self.token or self.topic or self.condition)


class FcmV1Request(PayloadModel):
    message: Message | None = None
    validate_only: bool | None = None


class FcmV1Error(BaseModel):
    model_config = ConfigDict(extra="ignore")

    code: int | None = None
    message: str | None = None
    status: str | None = None
    details: list[dict[str, Any]] = Field(default_factory=list)

    @property
    def error_code(self) -> str | None:
        """FCM-specific code (e.g. UNREGISTERED) from the details, falling back to status."""
        for detail in self.details:
            code = detail.get("errorCode")
            if code:
                return code
        return self.status


class FcmV1Response(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    error: FcmV1Error | None = None
    # Attached by the client, FCM does not echo them
    token: str | None = None
    status_code: int | None = None

    @property
    def is_successful(self) -> bool:
        return self.status_code == 200

    @property
    def results(self) -> list[FcmResult]:
        result = FcmResult(registration_id=self.token, message_id=self.name)
        if not self.is_successful:
            reason = None
            if self.error is not None:
                reason = self.error.error_code or self.error.message
            result.error = reason or f"HTTP {self.status_code}"
        return [result]

    @property
    def number_of_successes(self) -> int:
        return count_successes(self.results)

    @property
    def number_of_failures(self) -> int:
        return count_failures(self.results)
