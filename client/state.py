"""Request lifecycle state for a cover generator instance."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Status(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class RequestState:
    """Exactly one lifecycle status plus the payload that belongs to it.

    States are immutable; a transition replaces the whole value, so a new
    ``loading`` state never carries a stale image URL or error message.
    """

    status: Status = Status.IDLE
    image_url: str | None = None
    error: str | None = None

    @classmethod
    def idle(cls) -> RequestState:
        return cls()

    @classmethod
    def loading(cls) -> RequestState:
        return cls(status=Status.LOADING)

    @classmethod
    def success(cls, image_url: str) -> RequestState:
        return cls(status=Status.SUCCESS, image_url=image_url)

    @classmethod
    def failure(cls, message: str) -> RequestState:
        return cls(status=Status.ERROR, error=message)
