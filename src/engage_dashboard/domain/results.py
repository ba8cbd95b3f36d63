"""Tagged result types returned by every API client call.

A call either succeeded with a payload, succeeded without a usable payload,
or failed. Callers branch on the type instead of inspecting response shapes.
"""

from dataclasses import dataclass, field
from typing import Generic, NoReturn, TypeVar

from engage_dashboard.errors import EmptyResultError, RequestError

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """The call returned a usable payload."""

    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Empty:
    """The call succeeded but the response carried no usable payload."""

    reason: str = "Response contained no data"

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        raise EmptyResultError(self.reason)


@dataclass(frozen=True)
class Failure:
    """The call failed (network error, server error or unparseable payload)."""

    reason: str
    status_code: int | None = None
    error: Exception | None = field(default=None, compare=False, repr=False)

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> NoReturn:
        raise RequestError(self.reason, status_code=self.status_code)


ApiResult = Success[T] | Empty | Failure
