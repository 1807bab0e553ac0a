"""Status codes, the error type raised for them, and the SDK version."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class Status(enum.IntEnum):
    """Outcome codes reported by the SDK."""

    OK = 0
    UNKNOWN = 1
    FLOW_NOT_FOUND = 2
    OUT_OF_RANGE_TOO_LATE = 3
    OUT_OF_RANGE_TOO_EARLY = 4
    INVALID_FLOW_READER = 5
    INVALID_FLOW_WRITER = 6
    TIMEOUT = 7
    INVALID_ARG = 8
    CONFLICT = 9


class MxlError(Exception):
    """An operation failed with a status other than OK."""

    def __init__(self, status: Status, message: str | None = None) -> None:
        status = Status(status)
        if status is Status.OK:
            raise ValueError("an error cannot carry the OK status")
        self.status = status
        self.message = message
        super().__init__(message if message is not None else status.name)

    def __str__(self) -> str:
        if self.message is None:
            return f"{self.status.name} ({int(self.status)})"
        return f"{self.message} [{self.status.name}]"


@dataclass(frozen=True, order=True)
class Version:
    """Semantic version of the SDK."""

    major: int
    minor: int
    bugfix: int
    build: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.bugfix}.{self.build}"


_VERSION = Version(major=0, minor=7, bugfix=1, build=0)


def get_version() -> Version:
    """Return the version of the SDK."""
    return _VERSION