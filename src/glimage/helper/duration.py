from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from glimage.errors import UnencodableField

NANOS_PER_SECOND = 1_000_000_000
NANOS_PER_MICROSECOND = 1_000


@dataclass(frozen=True, order=True)
class Duration:
    """
    A non-negative time interval with nanosecond resolution.

    Docker stores healthcheck intervals as integer nanoseconds, which
    ``timedelta`` (microsecond resolution) cannot always hold exactly.
    """

    nanoseconds: int = 0

    def __post_init__(self):
        if isinstance(self.nanoseconds, bool) or not isinstance(self.nanoseconds, int):
            raise TypeError(f"nanoseconds must be an int, got {self.nanoseconds!r}")
        if self.nanoseconds < 0:
            raise ValueError(f"negative duration: {self.nanoseconds}ns")

    @classmethod
    def from_seconds(cls, seconds) -> "Duration":
        return cls(round(seconds * NANOS_PER_SECOND))

    @classmethod
    def from_timedelta(cls, delta: timedelta) -> "Duration":
        return cls((delta // timedelta(microseconds=1)) * NANOS_PER_MICROSECOND)

    def to_timedelta(self) -> timedelta:
        """Convert to ``timedelta``, truncating below one microsecond."""
        return timedelta(microseconds=self.nanoseconds // NANOS_PER_MICROSECOND)

    def total_seconds(self) -> float:
        return self.nanoseconds / NANOS_PER_SECOND

    def __str__(self):
        seconds, nanos = divmod(self.nanoseconds, NANOS_PER_SECOND)
        if nanos:
            return f"{seconds}.{nanos:09d}".rstrip("0") + "s"
        return f"{seconds}s"


def serialize_duration(duration: Optional[Duration], field: str = "duration") -> int:
    if duration is None:
        raise UnencodableField(field)
    if not isinstance(duration, Duration):
        raise UnencodableField(field, f"not a Duration: {duration!r}")
    return duration.nanoseconds


def deserialize_duration(value: Optional[int]) -> Optional[Duration]:
    """Absent keys decode to None, never to a zero duration."""
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return Duration(value)
