"""Error types raised by the VLSM core.

The allocator converts these into a failed AllocationResult; they only
escape to callers that use the arithmetic helpers directly.
"""


class VLSMError(Exception):
    """Base class for all VLSM calculation errors."""


class FormatError(VLSMError, ValueError):
    """Malformed IPv4 address or CIDR text reached the arithmetic layer."""


class CapacityExceededError(VLSMError):
    """The parent block has no room left for a requirement."""

    def __init__(self, parent_cidr: str, name: str, host_count: int):
        self.parent_cidr = parent_cidr
        self.name = name
        self.host_count = host_count
        super().__init__(
            f"insufficient address space in {parent_cidr}; "
            f"cannot allocate subnet '{name}' needing {host_count} hosts"
        )
