from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")

Succ = TypeVar("Succ")
Err = TypeVar("Err")


@dataclass(frozen=True)
class Result(Generic[Succ, Err]):
    """
    Outcome of an operation, either a success value or an error value.

    Create it with 'Result.ok()' or 'Result.err()', check it with 'is_ok()'
    before calling 'unwrap()'.
    """

    _ok: bool
    _value: Any

    @staticmethod
    def ok(succ: T) -> "Result[T, Any]":
        return Result(True, succ)

    @staticmethod
    def err(err: T) -> "Result[Any, T]":
        return Result(False, err)

    def is_ok(self) -> bool:
        return self._ok

    def is_err(self) -> bool:
        return not self._ok

    def unwrap(self) -> Succ:
        assert self._ok, f"unwrap() called on {self!r}"
        return self._value

    def unwrap_err(self) -> Err:
        assert not self._ok, f"unwrap_err() called on {self!r}"
        return self._value

    def __repr__(self) -> str:
        return f"Result.{'ok' if self._ok else 'err'}({self._value!r})"
