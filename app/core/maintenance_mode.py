"""Application maintenance mode"""

import ipaddress
import logging
import re
from typing import List, Optional

from app.core.events import MAINTENANCE_MODE_CHANGED, EventNotifier
from app.core.flag_store import FlagStore
from app.core.ip_normalizer import AddressValidationError, IPAddressNormalizer, parse_address

logger = logging.getLogger(__name__)

#DO NOT merge these two records: is_on() answers False from a single
#existence check whenever the flag is missing, which is nearly always
FLAG_FILENAME = ".maintenance.flag"
IP_FILENAME = ".maintenance.ip"

_ADDRESS_LIST = re.compile(r"^[^\s,]+(,[^\s,]+)*$")


class MaintenanceModeError(Exception):
    """Base class for maintenance mode errors"""


class InvalidFormatError(MaintenanceModeError, ValueError):
    """Allow-list input is not a comma-separated list of addresses"""


class MalformedAddressError(MaintenanceModeError, ValueError):
    """An address or range could not be parsed"""


def _parse_range(entry: str):
    try:
        if "-" in entry and "/" not in entry:
            first, _, last = entry.partition("-")
            return parse_address(first), parse_address(last)
        network = ipaddress.ip_network(entry, strict=False)
    except ValueError as e:
        raise MalformedAddressError(f"Invalid IP range: {entry}") from e
    return network.network_address, network.broadcast_address


class MaintenanceMode:
    """Process-wide maintenance switch with an allow-list of client addresses.

    Both the flag and the allow-list live in the store and are re-read on
    every call, so a change made by one worker is seen by all of them on
    their next request.
    """

    def __init__(
        self,
        store: FlagStore,
        event_notifier: EventNotifier,
        address_normalizer: IPAddressNormalizer,
        flag_filename: str = FLAG_FILENAME,
        ip_filename: str = IP_FILENAME,
    ):
        self.store = store
        self.event_notifier = event_notifier
        self.address_normalizer = address_normalizer
        self.flag_filename = flag_filename
        self.ip_filename = ip_filename

    def is_on(self, remote_addr: Optional[str] = None) -> bool:
        """Check whether maintenance mode is on.

        When ``remote_addr`` is given and falls inside an allowed range the
        caller bypasses maintenance and this returns False.

        Raises MalformedAddressError if ``remote_addr`` is not an IP address.
        """
        if not self.store.exists(self.flag_filename):
            return False
        if not remote_addr:
            return True

        allowed = self.get_address_info()
        try:
            address = parse_address(remote_addr)
        except ValueError as e:
            raise MalformedAddressError(f"Invalid client address: {remote_addr}") from e

        for entry in allowed:
            try:
                first, last = _parse_range(entry)
            except MalformedAddressError:
                logger.warning(f"Skipping unparsable allow-list entry {entry!r}")
                continue
            if address.version == first.version == last.version and first <= address <= last:
                return False
        return True

    def set(self, is_on: bool) -> bool:
        """Turn maintenance mode on or off.

        Observers are notified of the requested state before it is persisted,
        even when nothing changes on disk.
        """
        self.event_notifier.dispatch(MAINTENANCE_MODE_CHANGED, {"isOn": is_on})

        if is_on:
            return self.store.touch(self.flag_filename)
        if self.store.exists(self.flag_filename):
            return self.store.delete(self.flag_filename)
        return True

    def parse_addresses(self, addresses: Optional[str]) -> List[str]:
        """Validate and normalize a comma-separated address list.

        Blank input yields an empty list. Raises InvalidFormatError when the
        list is malformed or any entry is not an address or range.
        """
        addresses = "" if addresses is None else str(addresses)
        if not addresses.strip():
            return []

        if not _ADDRESS_LIST.fullmatch(addresses):
            raise InvalidFormatError("One or more IP-addresses is expected (comma-separated)")

        try:
            return self.address_normalizer.normalize(addresses.split(","))
        except AddressValidationError as e:
            raise InvalidFormatError(str(e)) from e

    def set_addresses(self, addresses: Optional[str]) -> bool:
        """Replace the allow-list with a comma-separated list of addresses"""
        addresses = "" if addresses is None else str(addresses)
        if not addresses.strip():
            if self.store.exists(self.ip_filename):
                return self.store.delete(self.ip_filename)
            return True

        address_list = self.parse_addresses(addresses)
        return self.store.write_file(self.ip_filename, ",".join(address_list))

    def get_address_info(self) -> List[str]:
        """Get the list of addresses exempt from maintenance mode"""
        if not self.store.exists(self.ip_filename):
            return []
        try:
            content = self.store.read_file(self.ip_filename).strip()
        except FileNotFoundError:
            #removed between the existence check and the read
            return []
        if not content:
            return []
        return content.split(",")
