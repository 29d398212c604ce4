"""VLSM allocation endpoints.

Validates the parent network and requirement list before handing them to the
allocator, and renders its result as JSON.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from ..auth import get_current_user
from ..models.allocation import (
    AllocateRequest,
    AllocationResult,
    ParentBlockResponse,
    PrefixResponse,
    ValidateRequest,
)
from ..services.addressing import (
    format_address,
    mask_from_prefix,
    minimal_prefix,
    parse_parent_block,
    validate_cidr,
    wildcard_from_prefix,
)
from ..services.allocator import allocate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/vlsm", tags=["vlsm"])

EXPORT_FILENAME = "vlsm_calculation.json"


def _checked_allocation(request: AllocateRequest, current_user: str) -> AllocationResult:
    """Apply the input guards, run the allocator and raise on failure."""
    if not validate_cidr(request.network):
        logger.warning(
            "Rejected allocation: invalid CIDR",
            extra={"network": request.network, "user": current_user},
        )
        raise HTTPException(status_code=400, detail="Invalid primary network CIDR format")

    if not request.requirements:
        logger.warning(
            "Rejected allocation: no requirements",
            extra={"network": request.network, "user": current_user},
        )
        raise HTTPException(status_code=400, detail="At least one subnet requirement is required")

    result = allocate(request.network, request.requirements)
    if not result.succeeded:
        raise HTTPException(status_code=422, detail=result.error)

    logger.info(
        "VLSM allocation complete",
        extra={
            "network": request.network,
            "subnets": len(result.subnets),
            "utilization_pct": round(result.utilization_pct, 2),
            "user": current_user,
        },
    )
    return result


@router.post("/allocate", response_model=AllocationResult)
async def allocate_subnets(request: AllocateRequest, current_user: str = Depends(get_current_user)):
    """Allocate subnets for each requirement out of the parent network.

    Requirements are allocated largest first and packed contiguously from the
    parent's network address. Host bits in the parent address are cleared.

    Args:
        request: Parent network and subnet requirements
        current_user: Current authenticated user (from dependency)

    Returns:
        Allocated subnets in allocation order with utilization totals

    Raises:
        HTTPException: 400 if the network is invalid or there are no requirements,
            422 if the requirements do not fit in the parent network
    """
    return _checked_allocation(request, current_user)


@router.post("/export")
async def export_subnets(request: AllocateRequest, current_user: str = Depends(get_current_user)):
    """Allocate and return only the subnet list as a downloadable JSON document."""
    result = _checked_allocation(request, current_user)
    return JSONResponse(
        content=[subnet.model_dump() for subnet in result.subnets],
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


@router.post("/validate", response_model=ParentBlockResponse)
async def validate_network(request: ValidateRequest, current_user: str = Depends(get_current_user)):
    """Validate a parent network and describe the block it denotes.

    Raises:
        HTTPException: 400 if the network is not valid IPv4 CIDR notation
    """
    if not validate_cidr(request.network):
        raise HTTPException(status_code=400, detail="Invalid IPv4 CIDR format")

    parent = parse_parent_block(request.network)
    return ParentBlockResponse(
        network=parent.cidr,
        network_address=format_address(parent.network_address),
        broadcast_address=format_address(parent.broadcast_address),
        prefix_length=parent.prefix_length,
        subnet_mask=format_address(mask_from_prefix(parent.prefix_length)),
        wildcard_mask=format_address(wildcard_from_prefix(parent.prefix_length)),
        capacity=parent.capacity,
    )


@router.get("/prefix/{hosts}", response_model=PrefixResponse)
async def prefix_for_hosts(hosts: int, current_user: str = Depends(get_current_user)):
    """Smallest subnet that holds the given number of usable hosts.

    Raises:
        HTTPException: 400 if the host count is negative or exceeds IPv4 space
    """
    if hosts < 0:
        raise HTTPException(status_code=400, detail="Host count must not be negative")
    if hosts + 2 > 1 << 32:
        raise HTTPException(status_code=400, detail="Host count exceeds the IPv4 address space")

    prefix = minimal_prefix(hosts)
    block_size = 1 << (32 - prefix)
    return PrefixResponse(
        hosts=hosts,
        prefix_length=prefix,
        block_size=block_size,
        usable_hosts=max(0, block_size - 2),
        subnet_mask=format_address(mask_from_prefix(prefix)),
        wildcard_mask=format_address(wildcard_from_prefix(prefix)),
    )
