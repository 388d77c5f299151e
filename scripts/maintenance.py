"""Operator commands for maintenance mode.

Usage:
    python -m scripts.maintenance enable [--ip 10.0.0.1,192.168.0.0/24]
    python -m scripts.maintenance disable [--ip none]
    python -m scripts.maintenance status
    python -m scripts.maintenance allow-ips 10.0.0.1,10.0.0.2
    python -m scripts.maintenance allow-ips --none
    python -m scripts.maintenance token --sub admin
"""

import argparse
import sys

from app.core.config import settings
from app.core.maintenance_mode import InvalidFormatError
from app.core.security import create_access_token
from app.dependencies import build_maintenance_mode


def _apply_addresses(maintenance_mode, addresses):
    if addresses is None:
        return
    if addresses == "none":
        addresses = ""
    if not maintenance_mode.set_addresses(addresses):
        raise RuntimeError("Failed to store the list of exempt IP-addresses")
    if addresses:
        print(f"Set exempt IP-addresses: {', '.join(maintenance_mode.get_address_info())}")
    else:
        print("Set exempt IP-addresses: none")


def _switch(maintenance_mode, args, enabled: bool):
    #validate the address list before touching the flag
    if args.ip is not None and args.ip != "none":
        maintenance_mode.parse_addresses(args.ip)
    if not maintenance_mode.set(enabled):
        raise RuntimeError("Failed to store maintenance mode flag")
    print("Enabled maintenance mode" if enabled else "Disabled maintenance mode")
    _apply_addresses(maintenance_mode, args.ip)


def cmd_enable(maintenance_mode, args):
    _switch(maintenance_mode, args, True)


def cmd_disable(maintenance_mode, args):
    _switch(maintenance_mode, args, False)


def cmd_status(maintenance_mode, args):
    if maintenance_mode.is_on():
        print("Status: maintenance mode is active.")
    else:
        print("Status: maintenance mode is not active.")
    addresses = maintenance_mode.get_address_info()
    print(f"List of exempt IP-addresses: {' '.join(addresses) if addresses else 'none'}")


def cmd_allow_ips(maintenance_mode, args):
    if args.none:
        _apply_addresses(maintenance_mode, "none")
    elif args.addresses:
        _apply_addresses(maintenance_mode, args.addresses)
    else:
        raise InvalidFormatError("One or more IP-addresses is expected (comma-separated)")


def cmd_token(maintenance_mode, args):
    token, _, expire = create_access_token({"sub": args.sub, "is_superuser": True})
    print(token)
    print(f"Expires at {expire.isoformat()}", file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="maintenance", description="Manage maintenance mode")
    subparsers = parser.add_subparsers(dest="command", required=True)

    enable = subparsers.add_parser("enable", help="Enable maintenance mode")
    enable.add_argument("--ip", help="Exempt IP-addresses, comma-separated. Use 'none' to clear the list")
    enable.set_defaults(func=cmd_enable)

    disable = subparsers.add_parser("disable", help="Disable maintenance mode")
    disable.add_argument("--ip", help="Exempt IP-addresses, comma-separated. Use 'none' to clear the list")
    disable.set_defaults(func=cmd_disable)

    status = subparsers.add_parser("status", help="Show maintenance mode status")
    status.set_defaults(func=cmd_status)

    allow_ips = subparsers.add_parser("allow-ips", help="Set exempt IP-addresses")
    allow_ips.add_argument("addresses", nargs="?", help="Comma-separated IP-addresses or ranges")
    allow_ips.add_argument("--none", action="store_true", help="Clear the list of exempt IP-addresses")
    allow_ips.set_defaults(func=cmd_allow_ips)

    token = subparsers.add_parser("token", help="Issue an admin access token for the HTTP API")
    token.add_argument("--sub", default="admin", help="Token subject")
    token.set_defaults(func=cmd_token)

    return parser


def main(argv=None, maintenance_mode=None) -> int:
    args = build_parser().parse_args(argv)
    if maintenance_mode is None:
        maintenance_mode = build_maintenance_mode(settings)
    try:
        args.func(maintenance_mode, args)
    except (ValueError, RuntimeError) as e:
        print(str(e), file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
