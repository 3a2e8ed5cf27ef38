from abc import ABC, abstractmethod
from datetime import datetime, timezone


def ensure_aware(now: datetime) -> datetime:
    """Naive instants are taken to be UTC."""
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


class Trigger(ABC):
    """
    Abstract base class for timer triggers.

    Triggers determine when a timer should next fire. ``now`` is always passed
    in by the caller; a trigger never reads the clock.
    """

    @abstractmethod
    def next_fire_time(self, now: datetime) -> datetime:
        """Returns the first firing instant strictly after ``now``, in UTC."""
        ...

    def __eq__(self, other: object) -> bool:
        if isinstance(other, self.__class__):
            return self.__dict__ == other.__dict__
        return False

    def __hash__(self) -> int:
        return hash((self.__class__.__name__, tuple(sorted(self.__dict__.items()))))

    def __repr__(self) -> str:
        params = ", ".join(f"{k}={v!r}" for k, v in self.__dict__.items())
        return f"{self.__class__.__name__}({params})"
