from __future__ import annotations

from typing import Sequence

from pydantic import BaseModel


class FcmResult(BaseModel):
    """Delivery outcome for one registration ID."""

    # Back-filled by the client, FCM does not echo the ID it was sent.
    registration_id: str | None = None
    message_id: str | None = None
    # Set when FCM replaced the token with a canonical one
    canonical_registration_id: str | None = None
    error: str | None = None

    @classmethod
    def from_payload(cls, entry: dict) -> "FcmResult":
        """Build from one entry of FCM's ``results`` array.

        FCM's own ``registration_id`` key carries the canonical ID.
        """
        return cls(
            message_id=entry.get("message_id"),
            canonical_registration_id=entry.get("registration_id"),
            error=entry.get("error"),
        )

    @property
    def is_successful(self) -> bool:
        return self.error is None


def count_successes(results: Sequence[FcmResult]) -> int:
    return sum(1 for r in results if r.is_successful)


def count_failures(results: Sequence[FcmResult]) -> int:
    return sum(1 for r in results if not r.is_successful)
