import inspect
from typing import Any, Dict, List, Set, Union

from .base_value_type import BaseValueType
from .errors import AggrDataValidationError, DataModelingError, DataValidationError
from .renaming import RenamedDict, renamed
from .types import (
    get_annotations,
    get_generic_type_argument,
    get_generic_type_arguments,
    get_optional_inner_type,
    is_internal_field_name,
    is_list,
    is_literal,
    is_optional,
)

TSource = Union[None, "ConfigSchema", Dict[str, Any]]


def _check_errors(errs: List[DataModelingError], object_path: str) -> None:
    if len(errs) == 1:
        raise errs[0]
    if errs:
        raise AggrDataValidationError(object_path, errs)


def _exact_type(obj: Any, tp: type) -> bool:
    # 'isinstance(True, int)' holds, but a bool is not accepted where an int is expected
    return type(obj) is tp  # pylint: disable=unidiomatic-typecheck


class ObjectMapper:
    """
    Converts plain data (from YAML/JSON) to the types used in 'ConfigSchema' annotations.

    Supported are 'int', 'str', 'bool', 'Literal', 'Optional', 'List', 'BaseValueType'
    subclasses and nested 'ConfigSchema' subclasses.
    """

    def map_object(self, tp: Any, obj: Any, object_path: str = "/") -> Any:
        if is_optional(tp):
            return None if obj is None else self.map_object(get_optional_inner_type(tp), obj, object_path)
        if obj is None:
            raise DataValidationError(f"unexpected value 'None' for type {tp}", object_path)

        if tp is int:
            if _exact_type(obj, int):
                return obj
            raise DataValidationError(f"expected int, found {type(obj).__name__}", object_path)
        if tp is bool:
            if _exact_type(obj, bool):
                return obj
            raise DataValidationError(f"expected bool, found {type(obj).__name__}", object_path)
        if tp is str:
            return self._map_str(obj, object_path)
        if is_literal(tp):
            expected = get_generic_type_arguments(tp)
            if obj in expected:
                return obj
            raise DataValidationError(f"'{obj}' does not match any of the expected values {list(expected)}", object_path)
        if is_list(tp):
            return self._map_list(get_generic_type_argument(tp), obj, object_path)
        if inspect.isclass(tp) and issubclass(tp, BaseValueType):
            return self._map_value_type(tp, obj, object_path)
        if inspect.isclass(tp) and issubclass(tp, ConfigSchema):
            if isinstance(obj, (dict, ConfigSchema)):
                return tp(obj, object_path=object_path)
            raise DataValidationError(f"expected a mapping, found {type(obj).__name__}", object_path)

        raise DataValidationError(f"type {tp} is not supported in configuration schema classes", object_path)

    def _map_str(self, obj: Any, object_path: str) -> str:
        if _exact_type(obj, bool):
            raise DataValidationError(
                "expected str, found bool. YAML reads unquoted 'yes', 'no', 'on' and 'off' as booleans,"
                " use quotes.",
                object_path,
            )
        # numbers are fine, they are just unquoted strings in YAML
        if isinstance(obj, (str, int, float, BaseValueType)):
            return str(obj)
        raise DataValidationError(f"expected str, found {type(obj).__name__}", object_path)

    def _map_list(self, inner: Any, obj: Any, object_path: str) -> List[Any]:
        if not isinstance(obj, list):
            raise DataValidationError(f"expected list, found {type(obj).__name__}", object_path)
        if not obj:
            raise DataValidationError("empty list is not allowed", object_path)

        errs: List[DataModelingError] = []
        res: List[Any] = []
        for i, val in enumerate(obj):
            try:
                res.append(self.map_object(inner, val, f"{object_path}[{i}]"))
            except DataModelingError as e:
                errs.append(e)
        _check_errors(errs, object_path)
        return res

    def _map_value_type(self, tp: Any, obj: Any, object_path: str) -> BaseValueType:
        if isinstance(obj, tp):
            return obj
        # value types validate in their constructor and raise ValueError(msg, object_path)
        try:
            return tp(obj, object_path=object_path)
        except DataModelingError:
            raise
        except ValueError as e:
            msg = e.args[0] if e.args and isinstance(e.args[0], str) else f"invalid value for {tp.__name__}"
            raise DataValidationError(msg, object_path) from e

    def _assign_fields(self, obj: "ConfigSchema", source: Any, object_path: str) -> Set[str]:
        cls = type(obj)
        errs: List[DataModelingError] = []
        used: Set[str] = set()

        for name, tp in get_annotations(cls).items():
            if is_internal_field_name(name):
                continue
            try:
                if name in source:
                    value = source[name]
                    used.add(name)
                elif hasattr(cls, name):
                    value = getattr(cls, name)
                elif is_optional(tp):
                    value = None
                else:
                    raise DataValidationError(f"missing attribute '{name}'", object_path)
                setattr(obj, name, self.map_object(tp, value, f"{object_path}/{name.replace('_', '-')}"))
            except DataModelingError as e:
                errs.append(e)

        _check_errors(errs, object_path)
        return used

    def object_constructor(self, obj: "ConfigSchema", source: Any, object_path: str) -> None:
        if not isinstance(source, (ConfigSchema, dict)):
            raise DataValidationError(f"expected a mapping, found {type(source).__name__}", object_path)

        source = renamed(source)
        used = self._assign_fields(obj, source, object_path)

        if isinstance(source, RenamedDict):
            unknown = source.keys() - used
            if unknown:
                keys = ", ".join(f"'{k}'" for k in sorted(unknown))
                raise DataValidationError(f"unexpected extra key(s) {keys}", object_path)

        try:
            obj._validate()  # pylint: disable=protected-access
        except ValueError as e:
            raise DataValidationError(e.args[0] if e.args else "validation failed", object_path or "/") from e


class ConfigSchema:
    """
    Base class of the configuration sections.

    Fields are class-level type-annotated attributes, the class-level value is the default.
    Optional fields without a value default to None. Keys written with '-' in the data
    ('probe-host') are matched to the fields written with '_' ('probe_host'), unknown keys
    are an error.

    Override '_validate()' to check the object once all fields are set, raise ValueError
    when the values are not valid together.
    """

    _MAPPER: ObjectMapper = ObjectMapper()

    def __init__(self, source: TSource = None, object_path: str = "") -> None:
        self._MAPPER.object_constructor(self, source or {}, object_path)

    def __getitem__(self, key: str) -> Any:
        if not hasattr(self, key):
            raise KeyError(key)
        return getattr(self, key)

    def __contains__(self, item: Any) -> bool:
        return hasattr(self, item)

    def _validate(self) -> None:
        pass

    def __eq__(self, o: object) -> bool:
        if not isinstance(o, type(self)):
            return False
        return all(getattr(self, name) == getattr(o, name) for name in get_annotations(type(self)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            name.replace("_", "-"): _serialize(getattr(self, name))
            for name in get_annotations(type(self))
            if not is_internal_field_name(name)
        }


def _serialize(obj: Any) -> Any:
    if isinstance(obj, ConfigSchema):
        return obj.to_dict()
    if isinstance(obj, BaseValueType):
        return obj.serialize()
    if isinstance(obj, list):
        return [_serialize(i) for i in obj]
    return obj
