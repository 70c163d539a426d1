from __future__ import annotations


class BaseNat64Error(Exception):
    """Base class for all errors used in nat64_info."""


class InvalidAddress(BaseNat64Error, ValueError):
    """
    Raised when a caller supplies a malformed IP address literal.

    This is always a caller error and it is never treated as "no translation available".
    """

    def __init__(self, value: object, reason: str = "") -> None:
        self.value = value
        self.reason = reason
        msg = f"invalid IP address literal '{value}'"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class PrefixNotFound(BaseNat64Error):
    """The IPv4 address is not embedded in the IPv6 address, so no NAT64 prefix can be derived."""


class InvalidPrefix(BaseNat64Error):
    """
    Internal consistency fault, the NAT64 prefix does not have the right length.

    Seeing this error means there is a bug, it never indicates that NAT64 is missing on the network.
    """


class DiscoveryFailed(BaseNat64Error):
    """NAT64 prefix discovery did not produce a prefix."""


class ResolverError(BaseNat64Error):
    """DNS lookup failed, timed out or returned no usable answer."""

    def __init__(self, msg: str, hostname: str = "") -> None:
        self.hostname = hostname
        super().__init__(f"{hostname}: {msg}" if hostname else msg)
