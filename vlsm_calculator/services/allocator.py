"""VLSM allocation.

Carves a parent IPv4 block into subnets sized to each requirement. Blocks
are allocated largest first and packed back to back from the parent's
network address. No alignment padding is inserted; placing power-of-two
blocks in descending size order from a network boundary keeps each block
on a multiple of its own size anyway.
"""

import logging
from collections.abc import Iterable

from ..exceptions import CapacityExceededError, FormatError, VLSMError
from ..models.allocation import AllocatedSubnet, AllocationResult, SubnetRequirement
from .addressing import (
    format_address,
    mask_from_prefix,
    minimal_prefix,
    parse_parent_block,
    wildcard_from_prefix,
)

logger = logging.getLogger(__name__)

IPV4_SPACE = 1 << 32


def _as_requirement(item) -> SubnetRequirement:
    if isinstance(item, SubnetRequirement):
        return item
    try:
        name, host_count = item
    except (TypeError, ValueError) as e:
        raise FormatError(f"Invalid subnet requirement: {item!r}") from e
    # bool is an int subclass; floats and numeric strings are not truncated
    if isinstance(host_count, bool) or not isinstance(host_count, int):
        raise FormatError(f"Host count for '{name}' must be an integer, got {host_count!r}")
    # model_construct skips the ge=0 check; non-positive counts are dropped below
    return SubnetRequirement.model_construct(name=str(name), host_count=host_count, id=None)


def _build_subnet(requirement: SubnetRequirement, network: int, prefix: int) -> AllocatedSubnet:
    block_size = 1 << (32 - prefix)
    broadcast = network + block_size - 1
    usable = max(0, block_size - 2)

    if usable > 0:
        first_usable, last_usable = network + 1, broadcast - 1
    else:
        first_usable = last_usable = network

    return AllocatedSubnet(
        name=requirement.name,
        needed_hosts=requirement.host_count,
        network_address=format_address(network),
        broadcast_address=format_address(broadcast),
        prefix_length=prefix,
        subnet_mask=format_address(mask_from_prefix(prefix)),
        wildcard_mask=format_address(wildcard_from_prefix(prefix)),
        block_size=block_size,
        usable_hosts=usable,
        first_usable=format_address(first_usable),
        last_usable=format_address(last_usable),
        wasted_addresses=block_size - requirement.host_count,
    )


def _pack(parent_cidr: str, requirements: Iterable) -> AllocationResult:
    parent = parse_parent_block(parent_cidr)

    try:
        items = list(requirements)
    except TypeError as e:
        raise FormatError(f"Requirements must be a sequence, got {type(requirements).__name__}") from e

    pending = [r for r in map(_as_requirement, items) if r.host_count > 0]
    # sorted() is stable: equal host counts keep their input order
    pending = sorted(pending, key=lambda r: r.host_count, reverse=True)

    subnets = []
    cursor = parent.network_address

    for requirement in pending:
        if requirement.host_count + 2 > IPV4_SPACE:
            raise CapacityExceededError(parent_cidr, requirement.name, requirement.host_count)

        prefix = minimal_prefix(requirement.host_count)
        block_size = 1 << (32 - prefix)

        if cursor + block_size - 1 > parent.broadcast_address:
            raise CapacityExceededError(parent_cidr, requirement.name, requirement.host_count)

        subnet = _build_subnet(requirement, cursor, prefix)
        logger.debug(
            "Allocated subnet",
            extra={"subnet": subnet.name, "cidr": subnet.cidr, "needed_hosts": subnet.needed_hosts},
        )
        subnets.append(subnet)
        cursor += block_size

    total_needed = sum(r.host_count for r in pending)
    total_allocated = sum(s.block_size for s in subnets)
    utilization = total_allocated / parent.capacity * 100 if parent.capacity > 0 else 0

    return AllocationResult(
        subnets=subnets,
        total_needed=total_needed,
        total_allocated=total_allocated,
        utilization_pct=utilization,
    )


def allocate(parent_cidr: str, requirements: Iterable) -> AllocationResult:
    """Allocate subnets for each requirement out of the parent block.

    Callers are expected to have checked the parent with validate_cidr and to
    pass at least one requirement. Requirements with a host count of zero or
    less are ignored.

    Args:
        parent_cidr: Parent IPv4 network in CIDR notation; host bits are cleared
        requirements: SubnetRequirement instances or (name, host_count) pairs

    Returns:
        AllocationResult with subnets in allocation order, or a failed result
        with ``error`` set if any requirement does not fit. Allocation is all
        or nothing.
    """
    try:
        return _pack(parent_cidr, requirements)
    except CapacityExceededError as e:
        logger.warning(
            "VLSM allocation failed: insufficient address space",
            extra={"parent": parent_cidr, "subnet": e.name, "host_count": e.host_count},
        )
        return AllocationResult.failure(str(e))
    except VLSMError as e:
        logger.error(
            "VLSM allocation received malformed input",
            extra={"parent": parent_cidr, "error": str(e)},
        )
        return AllocationResult.failure(str(e))
