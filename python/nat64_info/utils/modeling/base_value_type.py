from abc import ABC, abstractmethod  # pylint: disable=[no-name-in-module]
from typing import Any


class BaseValueType(ABC):
    """
    Subclasses of this class can be used as type annotations in 'ConfigSchema'. When a value
    is being parsed from a serialized format (e.g. JSON/YAML), an object is created by
    calling the constructor of the appropriate type on the field value. The value MUST NOT be `None`.

    If you want to perform any validation during creation, raise a `ValueError` in case of errors.
    """

    @abstractmethod
    def __init__(self, source_value: Any, object_path: str = "/") -> None:
        pass

    @abstractmethod
    def __str__(self) -> str:
        raise NotImplementedError(f"return 'str()' value for {type(self).__name__} is not implemented.")

    @abstractmethod
    def serialize(self) -> Any:
        """
        Used for dumping configuration. Returns a JSON-serializable object from which the object
        can be recreated again using the constructor.
        """
        raise NotImplementedError(f"{type(self).__name__}'s' 'serialize()' not implemented.")
