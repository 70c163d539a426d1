from .config_schema import Nat64Config

__all__ = ["Nat64Config"]
