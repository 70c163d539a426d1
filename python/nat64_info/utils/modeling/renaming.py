"""
Dict wrapper that reads keys written with '-' through their '_' spelling.

Configuration files use 'probe-host', the schema classes use 'probe_host'.
"""

from typing import Any, Dict, Set, TypeVar

K = TypeVar("K")
V = TypeVar("V")


def map_public_to_private(name: Any) -> Any:
    if isinstance(name, str):
        return name.replace("_", "-")
    return name


def map_private_to_public(name: Any) -> Any:
    if isinstance(name, str):
        return name.replace("-", "_")
    return name


class RenamedDict(Dict[K, V]):
    def keys(self) -> Set[Any]:  # type: ignore[override]
        return {map_private_to_public(key) for key in super().keys()}

    def __getitem__(self, key: K) -> V:
        if not super().__contains__(key):
            key = map_public_to_private(key)
        return super().__getitem__(key)

    def __contains__(self, key: object) -> bool:
        return super().__contains__(key) or super().__contains__(map_public_to_private(key))


def renamed(obj: Any) -> Any:
    if isinstance(obj, dict) and not isinstance(obj, RenamedDict):
        return RenamedDict(obj)
    return obj


__all__ = ["renamed", "RenamedDict"]
