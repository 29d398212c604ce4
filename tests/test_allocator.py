"""Tests for the VLSM allocator."""

import random

import pytest
from pydantic import ValidationError

from vlsm_calculator.models.allocation import AllocationResult, SubnetRequirement
from vlsm_calculator.services.addressing import parse_address, parse_parent_block
from vlsm_calculator.services.allocator import allocate


def reqs(*pairs):
    return [SubnetRequirement(name=name, host_count=hosts) for name, hosts in pairs]


def assert_well_packed(parent_cidr, result):
    """Check subnets are contiguous, non-overlapping and inside the parent."""
    parent = parse_parent_block(parent_cidr)
    cursor = parent.network_address
    for subnet in result.subnets:
        network = parse_address(subnet.network_address)
        broadcast = parse_address(subnet.broadcast_address)
        assert network == cursor
        assert broadcast - network + 1 == subnet.block_size
        assert parent.network_address <= network <= broadcast <= parent.broadcast_address
        cursor = broadcast + 1


class TestScenarios:
    """Worked allocation examples."""

    def test_largest_first_in_slash_24(self):
        """Test three requirements packed into 192.168.0.0/24."""
        result = allocate("192.168.0.0/24", reqs(("C", 10), ("A", 100), ("B", 50)))

        assert result.succeeded
        assert result.error is None
        assert [s.name for s in result.subnets] == ["A", "B", "C"]

        a, b, c = result.subnets
        assert (a.prefix_length, a.block_size) == (25, 128)
        assert (a.network_address, a.broadcast_address) == ("192.168.0.0", "192.168.0.127")
        assert (b.prefix_length, b.block_size) == (26, 64)
        assert (b.network_address, b.broadcast_address) == ("192.168.0.128", "192.168.0.191")
        assert (c.prefix_length, c.block_size) == (28, 16)
        assert (c.network_address, c.broadcast_address) == ("192.168.0.192", "192.168.0.207")

        assert result.total_needed == 160
        assert result.total_allocated == 208
        assert result.utilization_pct == pytest.approx(81.25)

    def test_subnet_fields(self):
        """Test derived addressing fields of an allocated subnet."""
        result = allocate("192.168.0.0/24", reqs(("A", 100)))
        subnet = result.subnets[0]

        assert subnet.needed_hosts == 100
        assert subnet.subnet_mask == "255.255.255.128"
        assert subnet.wildcard_mask == "0.0.0.127"
        assert subnet.usable_hosts == 126
        assert subnet.first_usable == "192.168.0.1"
        assert subnet.last_usable == "192.168.0.126"
        assert subnet.wasted_addresses == 28
        assert subnet.total_addresses == 128
        assert subnet.cidr == "192.168.0.0/25"

    def test_insufficient_space(self):
        """Test a requirement that cannot fit fails with its name in the error."""
        result = allocate("10.0.0.0/30", reqs(("X", 10)))

        assert not result.succeeded
        assert result.error == (
            "insufficient address space in 10.0.0.0/30; cannot allocate subnet 'X' needing 10 hosts"
        )
        assert result.subnets == []
        assert result.total_needed == 0
        assert result.total_allocated == 0
        assert result.utilization_pct == 0

    def test_zero_host_requirement_excluded(self):
        """Test host count 0 is dropped from the output and totals."""
        result = allocate("192.168.0.0/24", reqs(("A", 10), ("Empty", 0), ("B", 5)))

        assert [s.name for s in result.subnets] == ["A", "B"]
        assert result.total_needed == 15

    def test_parent_host_bits_normalized(self):
        """Test allocation starts at the true network address."""
        result = allocate("192.168.1.5/24", reqs(("LAN", 20)))

        assert result.succeeded
        assert result.subnets[0].network_address == "192.168.1.0"
        assert result.subnets[0].broadcast_address == "192.168.1.31"


class TestFailureIsAllOrNothing:
    """Tests for capacity failures."""

    def test_later_overflow_discards_earlier_allocations(self):
        """Test no partial result is returned when a later block overflows."""
        result = allocate("192.168.0.0/24", reqs(("A", 120), ("B", 120), ("C", 1)))

        assert "'C' needing 1 hosts" in result.error
        assert result.subnets == []

    def test_first_overflowing_requirement_is_named(self):
        """Test the error names the first requirement in allocation order that fails."""
        result = allocate("10.0.0.0/24", reqs(("Small", 200), ("Big", 300)))
        assert "'Big' needing 300 hosts" in result.error

    def test_exact_fit_succeeds(self):
        """Test requirements that fill the parent exactly are allocated."""
        result = allocate("10.0.0.0/24", reqs(("A", 126), ("B", 62), ("C", 62)))

        assert result.succeeded
        assert result.total_allocated == 256
        assert result.utilization_pct == pytest.approx(100.0)
        assert result.subnets[-1].broadcast_address == "10.0.0.255"

    def test_requirement_larger_than_ipv4_space(self):
        """Test an impossible host count fails as a capacity error."""
        result = allocate("0.0.0.0/0", reqs(("Huge", 1 << 32)))
        assert result.error.startswith("insufficient address space in 0.0.0.0/0")


class TestOrdering:
    """Tests for deterministic allocation order."""

    def test_ties_keep_input_order(self):
        """Test equal host counts are allocated in input order."""
        result = allocate(
            "10.0.0.0/24",
            reqs(("first", 10), ("big", 50), ("second", 10), ("third", 10)),
        )
        assert [s.name for s in result.subnets] == ["big", "first", "second", "third"]

    def test_same_size_block_different_hosts_sorted_by_hosts(self):
        """Test ordering uses host count, not block size."""
        result = allocate("10.0.0.0/24", reqs(("nine", 9), ("fourteen", 14)))
        assert [s.name for s in result.subnets] == ["fourteen", "nine"]

    def test_duplicate_names_allowed(self):
        """Test names are opaque labels and may repeat."""
        result = allocate("10.0.0.0/24", reqs(("lan", 10), ("lan", 20)))
        assert [s.needed_hosts for s in result.subnets] == [20, 10]

    def test_input_not_mutated(self):
        """Test the caller's requirement list is left untouched."""
        requirements = reqs(("a", 1), ("b", 50), ("c", 0))
        snapshot = list(requirements)
        allocate("10.0.0.0/24", requirements)
        assert requirements == snapshot


class TestBlockSizes:
    """Tests for small blocks and back-to-back packing."""

    def test_one_and_two_hosts_get_slash_30(self):
        """Test the smallest real requirement gets a /30 with two usable hosts."""
        result = allocate("10.0.0.0/29", reqs(("p2p", 2), ("one", 1)))
        p2p, one = result.subnets

        assert (p2p.prefix_length, p2p.usable_hosts) == (30, 2)
        assert (p2p.first_usable, p2p.last_usable) == ("10.0.0.1", "10.0.0.2")
        assert one.network_address == "10.0.0.4"
        assert one.wasted_addresses == 3

    def test_blocks_packed_back_to_back(self):
        """Test blocks follow each other with no padding between them."""
        result = allocate("10.0.0.0/24", reqs(("small", 10), ("tiny", 2), ("mid", 12)))
        names = [(s.name, s.network_address, s.prefix_length) for s in result.subnets]

        assert names == [
            ("mid", "10.0.0.0", 28),
            ("small", "10.0.0.16", 28),
            ("tiny", "10.0.0.32", 30),
        ]


class TestInputShapes:
    """Tests for tolerated input forms."""

    def test_plain_pairs(self):
        """Test (name, host_count) pairs are accepted."""
        result = allocate("192.168.0.0/24", [("A", 100), ("B", 50)])
        assert [s.name for s in result.subnets] == ["A", "B"]

    def test_negative_host_counts_dropped(self):
        """Test negative counts are ignored like zero."""
        result = allocate("192.168.0.0/24", [("A", 10), ("Neg", -5)])
        assert [s.name for s in result.subnets] == ["A"]
        assert result.total_needed == 10

    def test_only_empty_requirements(self):
        """Test a batch with nothing to allocate succeeds with zero totals."""
        result = allocate("192.168.0.0/24", [("A", 0)])
        assert result.succeeded
        assert result.subnets == []
        assert result.utilization_pct == 0

    def test_malformed_parent_returns_failure(self):
        """Test parse errors surface as a failed result rather than an exception."""
        result = allocate("192.168.0/24", [("A", 10)])
        assert not result.succeeded
        assert result.subnets == []
        assert "192.168.0" in result.error

    def test_malformed_requirement_returns_failure(self):
        """Test a requirement that is not a pair surfaces as a failed result."""
        result = allocate("192.168.0.0/24", [("A", 10, "extra")])
        assert not result.succeeded
        assert "Invalid subnet requirement" in result.error

    @pytest.mark.parametrize(
        "parent,requirements",
        [
            (None, [("A", 1)]),
            (b"10.0.0.0/24", [("A", 1)]),
            (24, [("A", 1)]),
            ("10.0.0.0/24", None),
            ("10.0.0.0/24", 5),
            ("10.0.0.0/24", [None]),
            ("10.0.0.0/24", [("A", float("inf"))]),
            ("10.0.0.0/24", [("A", float("nan"))]),
        ],
    )
    def test_wrong_types_return_failure(self, parent, requirements):
        """Test inputs of the wrong type produce a failed result instead of raising."""
        result = allocate(parent, requirements)
        assert not result.succeeded
        assert result.subnets == []
        assert result.total_allocated == 0

    @pytest.mark.parametrize("host_count", [10.7, 10.0, "10", True, None])
    def test_non_integer_host_count_rejected(self, host_count):
        """Test host counts are not truncated or coerced to integers."""
        result = allocate("192.168.0.0/24", [("A", host_count)])
        assert not result.succeeded
        assert result.error == f"Host count for 'A' must be an integer, got {host_count!r}"


class TestPackingProperties:
    """Property checks over randomized inputs."""

    def test_random_batches_pack_contiguously(self):
        """Test successful results are contiguous, contained and correctly totalled."""
        rng = random.Random(42)
        for _ in range(200):
            prefix = rng.randint(16, 28)
            parent_cidr = f"10.{rng.randint(0, 255)}.0.0/{prefix}"
            pairs = [(f"net{i}", rng.randint(0, 300)) for i in range(rng.randint(1, 8))]

            result = allocate(parent_cidr, pairs)
            if not result.succeeded:
                assert result.subnets == []
                continue

            assert_well_packed(parent_cidr, result)
            capacity = parse_parent_block(parent_cidr).capacity
            assert result.total_allocated == sum(s.block_size for s in result.subnets)
            assert result.total_needed == sum(h for _, h in pairs if h > 0)
            assert result.utilization_pct == pytest.approx(result.total_allocated / capacity * 100)
            hosts = [s.needed_hosts for s in result.subnets]
            assert hosts == sorted(hosts, reverse=True)
            # Largest-first packing from a network address keeps every block self-aligned
            for subnet in result.subnets:
                assert parse_address(subnet.network_address) % subnet.block_size == 0


class TestAllocationResult:
    """Tests for the result model."""

    def test_failure_shape(self):
        """Test failure() zeroes every total."""
        result = AllocationResult.failure("boom")
        assert result.model_dump() == {
            "subnets": [],
            "total_needed": 0,
            "total_allocated": 0,
            "utilization_pct": 0.0,
            "error": "boom",
        }

    def test_failure_without_message(self):
        """Test an empty message still yields a non-empty error."""
        assert AllocationResult.failure("").error

    def test_subnets_are_immutable(self):
        """Test allocated subnets cannot be modified after construction."""
        subnet = allocate("10.0.0.0/24", [("A", 10)]).subnets[0]
        with pytest.raises(ValidationError):
            subnet.name = "changed"
