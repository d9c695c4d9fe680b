"""Domain primitives that enforce validity at creation time."""

from dataclasses import dataclass
from typing import Self
from uuid import UUID, uuid4

POINTS_PER_LEVEL = 100


@dataclass(frozen=True)
class UserId:
    """Identifier of a platform user (owned by the auth collaborator)."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class SessionId:
    """Unique identifier for a Session."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    @classmethod
    def new(cls) -> Self:
        return cls(value=uuid4())

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class BookingId:
    """Unique identifier for a Booking."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    @classmethod
    def new(cls) -> Self:
        return cls(value=uuid4())

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Capacity:
    """Non-negative integer representing capacity."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("Capacity cannot be negative")


@dataclass(frozen=True)
class Points:
    """Non-negative point amount."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("Points cannot be negative")

    @property
    def level(self) -> int:
        return self.value // POINTS_PER_LEVEL + 1

    def covers(self, amount: int) -> bool:
        return self.value >= amount

    def plus(self, amount: int) -> "Points":
        return Points(self.value + amount)

    def minus(self, amount: int) -> "Points":
        # Clamp at zero; callers must check covers() first.
        return Points(max(0, self.value - amount))

    def __str__(self) -> str:
        return str(self.value)
