"""Pydantic models for VLSM allocation input and output."""

from ipaddress import IPv4Address

from pydantic import BaseModel, ConfigDict, Field, computed_field


class SubnetRequirement(BaseModel):
    """A named request for a subnet with a number of usable hosts."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Display label for the subnet (need not be unique)")
    host_count: int = Field(..., ge=0, description="Usable hosts required; 0 means no request")
    id: str | None = Field(default=None, description="Opaque client-side identifier")


class ParentBlock(BaseModel):
    """The parent network that subnets are carved from."""

    model_config = ConfigDict(frozen=True)

    network_address: int
    prefix_length: int
    broadcast_address: int
    capacity: int

    @property
    def cidr(self) -> str:
        return f"{IPv4Address(self.network_address)}/{self.prefix_length}"


class AllocatedSubnet(BaseModel):
    """One allocated block, in allocation order."""

    model_config = ConfigDict(frozen=True)

    name: str
    needed_hosts: int
    network_address: str
    broadcast_address: str
    prefix_length: int
    subnet_mask: str
    wildcard_mask: str
    block_size: int
    usable_hosts: int
    first_usable: str
    last_usable: str
    wasted_addresses: int

    @computed_field
    @property
    def total_addresses(self) -> int:
        return self.block_size

    @computed_field
    @property
    def cidr(self) -> str:
        return f"{self.network_address}/{self.prefix_length}"


class AllocationResult(BaseModel):
    """Outcome of one allocation run.

    On failure ``error`` is set, ``subnets`` is empty and every total is zero.
    """

    subnets: list[AllocatedSubnet] = Field(default_factory=list)
    total_needed: int = 0
    total_allocated: int = 0
    utilization_pct: float = 0.0
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return not self.error

    @classmethod
    def failure(cls, message: str) -> "AllocationResult":
        return cls(error=message or "An unknown error occurred")


class AllocateRequest(BaseModel):
    """Request model for VLSM allocation."""

    network: str = Field(..., description="Parent IPv4 network in CIDR notation (e.g., 192.168.0.0/24)")
    requirements: list[SubnetRequirement] = Field(
        ..., description="Subnet requirements; allocated largest first"
    )


class ValidateRequest(BaseModel):
    """Request model for parent network validation."""

    network: str = Field(..., description="IPv4 network in CIDR notation")


class ParentBlockResponse(BaseModel):
    """Response model for a validated parent network."""

    network: str
    network_address: str
    broadcast_address: str
    prefix_length: int
    subnet_mask: str
    wildcard_mask: str
    capacity: int


class PrefixResponse(BaseModel):
    """Response model for minimal-prefix sizing."""

    hosts: int
    prefix_length: int
    block_size: int
    usable_hosts: int
    subnet_mask: str
    wildcard_mask: str
