"""
Tagged optional value used for fields that may legitimately be unset.

    Present(value) | Absent()

Both variants expose the same operations, so callers branch on
``is_present`` or use ``expect``/``unwrap_or``/``map`` instead of
instance checks.
"""
from typing import Any, Callable, Generic, TypeVar


T = TypeVar("T")
U = TypeVar("U")


class Maybe(Generic[T]):
    """Common interface of Present and Absent."""

    __slots__ = ()

    @property
    def is_present(self) -> bool:
        raise NotImplementedError

    def unwrap(self) -> T:
        raise NotImplementedError

    def expect(self, error: BaseException) -> T:
        raise NotImplementedError

    def unwrap_or(self, default: T) -> T:
        raise NotImplementedError

    def map(self, fn: Callable[[T], U]) -> "Maybe[U]":
        raise NotImplementedError


class Present(Maybe[T]):
    """A value that is set."""

    __slots__ = ("_value",)

    def __init__(self, value: T):
        self._value = value

    @property
    def is_present(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self._value

    def expect(self, error: BaseException) -> T:
        return self._value

    def unwrap_or(self, default: T) -> T:
        return self._value

    def map(self, fn: Callable[[T], U]) -> Maybe[U]:
        return Present(fn(self._value))

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, Present) and other._value == self._value

    def __hash__(self) -> int:
        return hash(("Present", self._value))

    def __repr__(self) -> str:
        return f"Present({self._value!r})"


class Absent(Maybe[Any]):
    """No value."""

    __slots__ = ()

    @property
    def is_present(self) -> bool:
        return False

    def unwrap(self) -> Any:
        raise ValueError("Called unwrap() on an absent value")

    def expect(self, error: BaseException) -> Any:
        raise error

    def unwrap_or(self, default: T) -> T:
        return default

    def map(self, fn: Callable[[Any], U]) -> Maybe[U]:
        return self

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, Absent)

    def __hash__(self) -> int:
        return hash("Absent")

    def __repr__(self) -> str:
        return "Absent()"
