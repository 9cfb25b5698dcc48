"""
Result values for grading calls that must not raise.

Callers that serve requests (chat commands, HTTP handlers) usually want a
failed grading request as a value they can render, not an exception.

Usage:
    from riven_grader.result import Ok, Err

    result = grader.try_grade(profile, composition, rank, observed)
    if result.is_ok():
        report = result.unwrap()
    else:
        show_error(result.error)   # a RivenGradingError
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, NoReturn, Tuple, Type, TypeVar, Union

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type
U = TypeVar("U")  # Mapped success type


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """A successful result.

    Example:
        >>> Ok(0.5).map(lambda q: q * 30).unwrap()
        15.0
    """

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def map(self, func: Callable[[T], U]) -> Ok[U]:
        """Transform the success value."""
        return Ok(func(self.value))

    @property
    def error(self) -> None:
        return None

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """A failed result holding the error (usually the exception instance)."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        """
        Raises:
            The contained error when it is an exception, ValueError otherwise.
        """
        if isinstance(self.error, BaseException):
            raise self.error
        raise ValueError(f"Called unwrap on Err: {self.error}")

    def unwrap_or(self, default: T) -> T:
        return default

    def map(self, func: Callable) -> "Err[E]":
        return self

    @property
    def value(self) -> None:
        return None

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Union[Ok[T], Err[E]]


def try_result(
    func: Callable[[], T],
    catch: Tuple[Type[BaseException], ...] = (Exception,),
) -> Result[T, BaseException]:
    """Run func and wrap its return value or raised exception.

    Only exceptions listed in ``catch`` become Err; anything else propagates.

    Example:
        >>> try_result(lambda: 1 / 0, (ZeroDivisionError,)).is_err()
        True
    """
    try:
        return Ok(func())
    except catch as e:
        return Err(e)
