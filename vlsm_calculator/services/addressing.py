"""IPv4 address arithmetic.

Conversions between dotted-decimal strings and 32-bit integers, mask
derivation from prefix lengths, CIDR validation and minimal-prefix sizing.
All functions are pure.
"""

import re
from ipaddress import IPv4Address

from ..exceptions import FormatError
from ..models.allocation import ParentBlock

ALL_ONES = 0xFFFFFFFF

# Octet range is checked separately after the syntax match
CIDR_PATTERN = re.compile(r"([0-9]{1,3}\.){3}[0-9]{1,3}/([0-9]|[1-2][0-9]|3[0-2])")


def parse_address(text: str) -> int:
    """Convert a dotted-decimal IPv4 address to a 32-bit unsigned integer.

    Octets are read most-significant first. Range checking is the job of
    validate_cidr; this only rejects text that is not four numeric parts.

    Raises:
        FormatError: If the text does not split into four numeric octets
    """
    parts = text.split(".")
    if len(parts) != 4:
        raise FormatError(f"Invalid IPv4 address format: '{text}'")

    value = 0
    for part in parts:
        try:
            octet = int(part, 10)
        except ValueError as e:
            raise FormatError(f"Invalid IPv4 address format: '{text}'") from e
        value = (value << 8) | (octet & 0xFF)
    return value & ALL_ONES


def format_address(value: int) -> str:
    """Convert a 32-bit unsigned integer to dotted-decimal notation."""
    return str(IPv4Address(value & ALL_ONES))


def mask_from_prefix(prefix: int) -> int:
    """Return the subnet mask with the top ``prefix`` bits set."""
    if not 0 <= prefix <= 32:
        raise FormatError(f"Prefix length must be between 0 and 32, got {prefix}")
    return (ALL_ONES << (32 - prefix)) & ALL_ONES


def wildcard_from_prefix(prefix: int) -> int:
    """Return the wildcard (host) mask, the complement of the subnet mask."""
    return ~mask_from_prefix(prefix) & ALL_ONES


def validate_cidr(text: str) -> bool:
    """Check that text is ``A.B.C.D/P`` with octets 0-255 and P in 0-32."""
    if not isinstance(text, str) or not CIDR_PATTERN.fullmatch(text):
        return False

    address = text.split("/")[0]
    return all(0 <= int(octet) <= 255 for octet in address.split("."))


def minimal_prefix(host_count: int) -> int:
    """Smallest prefix whose block holds host_count hosts plus network and broadcast.

    Non-positive host counts map to /32. /31 and /32 are never treated as
    point-to-point blocks with usable addresses.
    """
    if host_count <= 0:
        return 32

    needed = host_count + 2
    for bits in range(33):
        if (1 << bits) >= needed:
            return 32 - bits

    # Requirement larger than the whole IPv4 space
    raise FormatError(f"Host count {host_count} exceeds the IPv4 address space")


def parse_parent_block(cidr: str) -> ParentBlock:
    """Parse CIDR text into a ParentBlock, clearing any host bits.

    Raises:
        FormatError: If the text is not address/prefix or the prefix is invalid
    """
    if not isinstance(cidr, str):
        raise FormatError(f"CIDR must be a string, got {type(cidr).__name__}")

    address, sep, prefix_text = cidr.partition("/")
    if not sep:
        raise FormatError(f"Invalid CIDR format: '{cidr}'")

    try:
        prefix = int(prefix_text, 10)
    except ValueError as e:
        raise FormatError(f"Invalid prefix length in '{cidr}'") from e

    mask = mask_from_prefix(prefix)
    network = parse_address(address) & mask
    broadcast = network | wildcard_from_prefix(prefix)

    return ParentBlock(
        network_address=network,
        prefix_length=prefix,
        broadcast_address=broadcast,
        capacity=broadcast - network + 1,
    )
