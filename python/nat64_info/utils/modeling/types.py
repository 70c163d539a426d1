"""
Inspection of the type annotations used in 'ConfigSchema' classes.
"""

import inspect
import types
from typing import Any, Dict, Literal, Optional, Tuple, Type, TypeVar, Union, get_args, get_origin

T = TypeVar("T")

_UNION_ORIGINS = (Union, types.UnionType)


def get_annotations(cls: Any) -> Dict[str, Any]:
    # only the class itself, fields of the base classes are not inherited
    return inspect.get_annotations(cls)


def get_generic_type_arguments(tp: Any) -> Tuple[Any, ...]:
    return get_args(tp)


def get_generic_type_argument(tp: Any) -> Any:
    args = get_args(tp)
    if len(args) != 1:
        raise TypeError(f"expected exactly one type argument in {tp}, got {len(args)}")
    return args[0]


def is_optional(tp: Any) -> bool:
    """'Optional[X]' or 'X | None' with exactly one other type."""

    args = get_args(tp)
    return get_origin(tp) in _UNION_ORIGINS and len(args) == 2 and type(None) in args


def get_optional_inner_type(optional: Type[Optional[T]]) -> Type[T]:
    assert is_optional(optional)
    inner: Type[T] = next(a for a in get_args(optional) if a is not type(None))
    return inner


def is_list(tp: Any) -> bool:
    return get_origin(tp) is list


def is_literal(tp: Any) -> bool:
    return get_origin(tp) is Literal


def is_internal_field_name(field_name: str) -> bool:
    return field_name.startswith("_")
