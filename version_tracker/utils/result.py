"""Success-or-error values for boundary operations.

Validating configuration and reading documents return ``Ok`` or ``Err``
instead of raising, so the CLI picks the exit code for each failure in one
place.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, NoReturn, TypeVar, Union

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type
U = TypeVar("U")  # Mapped type


class ResultError(Exception):
    """Raised when the wrong side of a Result is unwrapped."""

    pass


@dataclass(frozen=True)
class Ok(Generic[T]):
    """A successful value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self) -> NoReturn:
        raise ResultError(f"Expected an error, got Ok({self.value!r})")

    def map(self, fn: Callable[[T], U]) -> "Ok[U]":
        """Apply fn to the value."""
        return Ok(fn(self.value))


@dataclass(frozen=True)
class Err(Generic[E]):
    """A failure carrying a ConfigError or StorageError."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        raise ResultError(f"Expected a value, got Err({self.error})")

    def unwrap_err(self) -> E:
        return self.error

    def map(self, fn: Callable[[T], U]) -> "Err[E]":
        """Errors pass through unchanged."""
        return self


# Type alias for Result
Result = Union[Ok[T], Err[E]]


@dataclass(frozen=True)
class ConfigError:
    """Error in the tracker configuration or settings."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"Config error in '{self.field}': {self.message}"


@dataclass(frozen=True)
class StorageError:
    """Error reading or locating a project document."""

    operation: str
    path: str
    message: str
    cause: Exception | None = None

    def __str__(self) -> str:
        if self.cause:
            return f"Storage {self.operation} failed for '{self.path}': {self.message} ({self.cause})"
        return f"Storage {self.operation} failed for '{self.path}': {self.message}"


class ConfigMalformed(Exception):
    """Raised when a tracker configuration cannot be turned into a TrackerConfig."""

    def __init__(self, error: ConfigError) -> None:
        super().__init__(str(error))
        self.error = error


# Exit codes
class ExitCode:
    """Exit codes for CLI."""

    GENERAL_ERROR = 1

    # Configuration errors (10-11)
    CONFIG_MALFORMED = 10
    PROJECT_NOT_FOUND = 11

    # Storage errors (12-13)
    STORAGE_READ_FAILED = 12
    STORAGE_WRITE_FAILED = 13


def first_err(results: list[Result[T, E]]) -> Result[list[T], E]:
    """
    Collect a list of Results, returning the first error if any.

    Returns Ok with all values if all are Ok, or Err with the first error.
    """
    values = []

    for result in results:
        if result.is_err():
            return Err(result.unwrap_err())
        values.append(result.unwrap())

    return Ok(values)
