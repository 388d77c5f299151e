"""IP address / range canonicalisation"""

import ipaddress
import re
from typing import List, Sequence

_IPV4_WITH_ZEROS = re.compile(r"^(\d{1,3})\.(\d{1,3})\.(\d{1,3})\.(\d{1,3})$")


class AddressValidationError(ValueError):
    """Raised when a token is not an IP address or range"""


def _strip_zero_padding(address: str) -> str:
    #ipaddress rejects "010.0.0.1", older tools happily wrote it
    match = _IPV4_WITH_ZEROS.match(address)
    if not match:
        return address
    return ".".join(str(int(octet)) for octet in match.groups())


def _unmap(address):
    if address.version == 6 and address.ipv4_mapped is not None:
        return address.ipv4_mapped
    return address


def parse_address(value: str):
    """Parse a single address, unwrapping IPv4-mapped IPv6 forms"""
    return _unmap(ipaddress.ip_address(_strip_zero_padding(value.strip())))


class IPAddressNormalizer:
    """Turns address strings into one stable textual form.

    Accepted tokens:

    * single addresses: ``10.0.0.1``, ``2001:db8::1``
    * CIDR ranges: ``10.0.0.0/24`` (host bits are cleared)
    * explicit ranges: ``10.0.0.1-10.0.0.20``

    A range covering exactly one host collapses to the bare address.
    """

    def normalize(self, addresses: Sequence[str]) -> List[str]:
        return [self.normalize_one(address) for address in addresses]

    def normalize_one(self, address: str) -> str:
        try:
            if "/" in address:
                return self._normalize_network(address)
            if "-" in address:
                return self._normalize_span(address)
            return str(parse_address(address))
        except ValueError as e:
            raise AddressValidationError(f"Invalid IP address or range: {address}") from e

    def _normalize_network(self, address: str) -> str:
        host, _, prefix = address.partition("/")
        network = ipaddress.ip_network(f"{_strip_zero_padding(host)}/{prefix}", strict=False)
        if network.version == 6 and network.network_address.ipv4_mapped is not None and network.prefixlen >= 96:
            mapped = network.network_address.ipv4_mapped
            network = ipaddress.IPv4Network(f"{mapped}/{network.prefixlen - 96}")
        if network.prefixlen == network.max_prefixlen:
            return str(_unmap(network.network_address))
        return str(network)

    def _normalize_span(self, address: str) -> str:
        first, _, last = address.partition("-")
        start = parse_address(first)
        end = parse_address(last)
        if start.version != end.version:
            raise ValueError("range ends must share an IP version")
        if start > end:
            raise ValueError("range start is after range end")
        if start == end:
            return str(start)
        return f"{start}-{end}"
