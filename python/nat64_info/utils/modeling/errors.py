from __future__ import annotations

from nat64_info.errors import BaseNat64Error


class DataModelingError(BaseNat64Error):
    """Configuration data could not be loaded. 'error_path' points to the offending value, e.g. '/discovery/ttl'."""

    def __init__(self, msg: str, error_path: str = "") -> None:
        super().__init__(msg)
        self.msg = msg
        self.error_path = error_path

    def line(self) -> str:
        return f"[{self.error_path}] {self.msg}" if self.error_path else self.msg

    def __str__(self) -> str:
        return self.line()


class DataParsingError(DataModelingError):
    """The data are not valid YAML/JSON or could not be read."""

    def __init__(self, msg: str, error_path: str = "") -> None:
        super().__init__(f"parsing error: {msg}", error_path)


class DataValidationError(DataModelingError):
    """The data do not match the schema. Errors of nested values are kept as children."""

    def __init__(self, msg: str, error_path: str, child_errors: list[DataModelingError] | None = None) -> None:
        super().__init__(msg, error_path)
        self.child_errors = child_errors or []

    def _lines(self, depth: int) -> list[str]:
        lines = [f"{'    ' * depth}{self.line()}"]
        for child in self.child_errors:
            if isinstance(child, DataValidationError):
                lines.extend(child._lines(depth + 1))
            else:
                lines.append(f"{'    ' * (depth + 1)}{child}")
        return lines

    def recursive_msg(self) -> str:
        return "\n".join(["Configuration validation error detected:", *self._lines(1)])

    def __str__(self) -> str:
        return self.recursive_msg()


class AggrDataValidationError(DataValidationError):
    """Several independent validation errors found in one object."""

    def __init__(self, error_path: str, child_errors: list[DataModelingError]) -> None:
        super().__init__("errors in nested values", error_path, child_errors)

    def _lines(self, depth: int) -> list[str]:
        # no line of its own, only the children
        lines: list[str] = []
        for child in self.child_errors:
            if isinstance(child, DataValidationError):
                lines.extend(child._lines(depth))
            else:
                lines.append(f"{'    ' * depth}{child}")
        return lines
