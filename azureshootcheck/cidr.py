"""CIDR parsing and subset, overlap and canonical-form checks."""

from __future__ import annotations

import ipaddress
from itertools import combinations

from .errors import FieldError, FieldPath, invalid

_Interface = ipaddress.IPv4Interface | ipaddress.IPv6Interface
_Network = ipaddress.IPv4Network | ipaddress.IPv6Network
_Address = ipaddress.IPv4Address | ipaddress.IPv6Address


def _parse(text: str) -> _Interface | None:
    _, sep, prefix = text.partition("/")
    if not sep or not (prefix.isascii() and prefix.isdigit()):
        return None
    try:
        return ipaddress.ip_interface(text)
    except ValueError:
        return None


def _contains(network: _Network, address: _Address) -> bool:
    return network.version == address.version and address in network


def _overlaps(a: _Network, b: _Network) -> bool:
    return a.version == b.version and a.overlaps(b)


def _path_text(path: FieldPath | None) -> str:
    return "<nil>" if path is None else str(path)


class CIDR:
    """A CIDR string together with the field it was taken from."""

    def __init__(self, cidr: str, path: FieldPath | None = None) -> None:
        self.cidr = cidr
        self.path = path
        parsed = _parse(cidr)
        self.address: _Address | None = parsed.ip if parsed else None
        self.network: _Network | None = parsed.network if parsed else None

    def __repr__(self) -> str:
        return f"CIDR({self.cidr!r}, {self.path!r})"

    @property
    def last_ip(self) -> _Address | None:
        return self.network.broadcast_address if self.network is not None else None

    def validate_parse(self) -> list[FieldError]:
        """Report an error if the CIDR cannot be parsed."""
        if self.network is None:
            return [invalid(self.path, self.cidr, f"invalid CIDR address: {self.cidr}")]
        return []

    def validate_subset(self, *subsets: CIDR | None) -> list[FieldError]:
        """Report each given CIDR that does not lie wholly within this one."""
        errors: list[FieldError] = []
        for subset in subsets:
            if subset is None or self.network is None or subset.network is None:
                continue
            if not (
                _contains(self.network, subset.network.network_address)
                and _contains(self.network, subset.network.broadcast_address)
            ):
                errors.append(
                    invalid(
                        subset.path,
                        subset.cidr,
                        f'must be a subset of "{_path_text(self.path)}" ("{self.cidr}")',
                    )
                )
        return errors

    def validate_not_overlap(self, *others: CIDR | None) -> list[FieldError]:
        """Report each given CIDR that overlaps this one."""
        errors: list[FieldError] = []
        for other in others:
            if other is None or self.network is None or other.network is None:
                continue
            if _contains(self.network, other.network.network_address) or _contains(
                other.network, self.network.network_address
            ):
                errors.append(
                    invalid(
                        other.path,
                        other.cidr,
                        f'must not overlap with "{_path_text(self.path)}" ("{self.cidr}")',
                    )
                )
        return errors


def validate_cidr_parse(*cidrs: CIDR | None) -> list[FieldError]:
    """Report every given CIDR that cannot be parsed."""
    return [err for cidr in cidrs if cidr is not None for err in cidr.validate_parse()]


def validate_cidr_is_canonical(path: FieldPath | None, cidr: str) -> list[FieldError]:
    """Report a CIDR whose address has host bits set."""
    if not cidr:
        return []
    parsed = _parse(cidr)
    if parsed is not None and parsed.ip != parsed.network.network_address:
        return [invalid(path, cidr, "must be valid canonical CIDR")]
    return []


def validate_cidr_overlap(cidrs: list[CIDR | None], overlap_allowed: bool) -> list[FieldError]:
    """Report each CIDR that overlaps an earlier one, unless overlaps are allowed."""
    if overlap_allowed:
        return []
    errors: list[FieldError] = []
    for first, second in combinations(cidrs, 2):
        if first is None or second is None or first.network is None or second.network is None:
            continue
        if _overlaps(first.network, second.network):
            errors.append(
                invalid(
                    second.path,
                    second.cidr,
                    f'must not overlap with "{_path_text(first.path)}" ("{first.cidr}")',
                )
            )
    return errors