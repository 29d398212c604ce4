"""Command-line VLSM calculator.

Usage:
    vlsm-calc 192.168.0.0/24 LAN=100 DMZ=50 MGMT=10
    vlsm-calc 10.0.0.0/16 Office=500 --json > vlsm_calculation.json
"""

import argparse
import json
import sys

from tabulate import tabulate

from .models.allocation import AllocationResult, SubnetRequirement
from .services.addressing import validate_cidr
from .services.allocator import allocate

EXIT_OK = 0
EXIT_ALLOCATION_FAILED = 1
EXIT_USAGE = 2


def parse_requirement(text: str) -> SubnetRequirement:
    """Parse a NAME=HOSTS argument."""
    name, sep, hosts = text.rpartition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected NAME=HOSTS, got '{text}'")
    try:
        host_count = int(hosts)
    except ValueError:
        raise argparse.ArgumentTypeError(f"host count for '{name}' must be an integer")
    if host_count < 0:
        raise argparse.ArgumentTypeError(f"host count for '{name}' must not be negative")
    return SubnetRequirement(name=name, host_count=host_count)


def render_table(result: AllocationResult, show_wasted: bool = False) -> str:
    """Render allocated subnets as a grid table, in allocation order."""
    headers = ["Name", "Needed", "Network", "Mask", "Usable Range", "Broadcast", "Usable"]
    if show_wasted:
        headers.append("Wasted")

    rows = []
    for subnet in result.subnets:
        row = [
            subnet.name,
            subnet.needed_hosts,
            subnet.cidr,
            subnet.subnet_mask,
            f"{subnet.first_usable} - {subnet.last_usable}",
            subnet.broadcast_address,
            subnet.usable_hosts,
        ]
        if show_wasted:
            row.append(subnet.wasted_addresses)
        rows.append(row)

    return tabulate(rows, headers=headers, tablefmt="grid")


def render_summary(result: AllocationResult) -> str:
    """One-line totals: hosts needed, addresses allocated and utilization."""
    return (
        f"Hosts needed: {result.total_needed}  "
        f"Addresses allocated: {result.total_allocated}  "
        f"Utilization: {result.utilization_pct:.2f}%"
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for vlsm-calc."""
    parser = argparse.ArgumentParser(
        prog="vlsm-calc",
        description="Allocate variable-length subnets from a parent IPv4 network",
    )
    parser.add_argument("network", help="Parent network in CIDR notation, e.g. 192.168.0.0/24")
    parser.add_argument(
        "requirements",
        nargs="*",
        type=parse_requirement,
        metavar="NAME=HOSTS",
        help="Subnet name and number of usable hosts required",
    )
    parser.add_argument("--json", action="store_true", help="Print the subnet list as JSON")
    parser.add_argument("--wasted", action="store_true", help="Include wasted addresses per subnet")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the calculator and return the process exit status.

    Returns:
        EXIT_OK on success, EXIT_ALLOCATION_FAILED when the requirements do not
        fit, EXIT_USAGE when the network or requirement list is invalid
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if not validate_cidr(args.network):
        print(f"Invalid primary network CIDR format: {args.network}", file=sys.stderr)
        return EXIT_USAGE

    if not args.requirements:
        print("At least one subnet requirement is required", file=sys.stderr)
        return EXIT_USAGE

    result = allocate(args.network, args.requirements)
    if not result.succeeded:
        print(f"Allocation error: {result.error}", file=sys.stderr)
        return EXIT_ALLOCATION_FAILED

    if args.json:
        print(json.dumps([subnet.model_dump() for subnet in result.subnets], indent=2))
    else:
        print(render_table(result, show_wasted=args.wasted))
        print(render_summary(result))

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
