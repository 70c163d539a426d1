import re
from re import Pattern
from typing import Any, Dict

from nat64_info.utils.modeling import BaseValueType


class StrBase(BaseValueType):
    """
    Value given as a string in the configuration.

    Integers are accepted and converted, YAML turns some unquoted values into numbers.
    """

    _orig_value: str
    _value: str

    def __init__(self, source_value: Any, object_path: str = "/") -> None:
        if isinstance(source_value, bool) or not isinstance(source_value, (str, int)):
            raise ValueError(
                f"expected string for '{type(self).__name__}', got '{source_value}' of type '{type(source_value).__name__}'",
                object_path,
            )
        self._orig_value = str(source_value)
        self._value = self._orig_value

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f'{type(self).__name__}("{self._value}")'

    def __hash__(self) -> int:
        return hash(self._value)

    def __eq__(self, o: object) -> bool:
        return isinstance(o, StrBase) and o._value == self._value

    def serialize(self) -> Any:
        return self._orig_value


class UnitBase(StrBase):
    """
    Non-negative integer followed by a unit, e.g. '60s'.

    Subclasses set '_units', a mapping of the unit name to its size in the base unit.
    """

    _units: Dict[str, int]
    _re: Pattern[str]
    _base_value: int

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._re = re.compile(rf"^(\d+)({'|'.join(cls._units)})$")

    def __init__(self, source_value: Any, object_path: str = "/") -> None:
        super().__init__(source_value, object_path)
        match = self._re.fullmatch(self._value)
        if match is None:
            raise ValueError(
                f"'{source_value}' is not a valid {type(self).__name__}, expected a non-negative integer"
                f" followed by one of the units {list(self._units)}",
                object_path,
            )
        amount, unit = match.groups()
        self._base_value = int(amount) * self._units[unit]

    def __int__(self) -> int:
        return self._base_value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value})"

    def __eq__(self, o: object) -> bool:
        # '60s' == '1m'
        return isinstance(o, type(self)) and o._base_value == self._base_value

    def __hash__(self) -> int:
        return hash(self._base_value)
