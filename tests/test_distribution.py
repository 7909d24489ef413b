"""
Tests for the per-step force distribution protocol.
"""

import time
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from distbody import (
    CommunicationError,
    CommunicationTimeout,
    DistributionProtocol,
    LocalGroup,
    ProtocolMismatch,
    SoloCommunicator,
    partition_indices,
)


def _run_ranks(size, fn, timeout=5.0):
    group = LocalGroup(size, timeout=timeout)
    with ThreadPoolExecutor(max_workers=size) as pool:
        futures = [pool.submit(fn, group.communicator(r)) for r in range(size)]
        return [f.exception() or f.result() for f in futures]


class TestPartitionIndices:
    """Test the contiguous index split used by partitioned reduction."""

    @pytest.mark.parametrize("n,size", [(6, 1), (6, 4), (2, 3), (10, 3)])
    def test_slices_cover_all_indices_once(self, n, size):
        covered = []
        for rank in range(size):
            covered.extend(partition_indices(n, size, rank))
        assert covered == list(range(n))

    def test_first_ranks_take_the_remainder(self):
        assert [len(partition_indices(10, 3, r)) for r in range(3)] == [4, 3, 3]


class TestDistributionProtocol:
    """Test DistributionProtocol.distribute and replicate."""

    def test_single_rank_is_a_no_op(self):
        forces = np.ones((3, 2))
        protocol = DistributionProtocol(SoloCommunicator())
        assert protocol.distribute(forces, 3) is forces
        assert protocol.local_indices(3) is None

    def test_every_rank_adopts_coordinator_forces(self):
        authoritative = np.array([[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]])

        def body(comm):
            local = authoritative if comm.is_coordinator else np.full((3, 2), -7.0)
            return DistributionProtocol(comm).distribute(local, 3)

        for result in _run_ranks(3, body):
            assert np.array_equal(result, authoritative)

    def test_non_coordinators_skip_reduction(self):
        def body(comm):
            return DistributionProtocol(comm).local_indices(5)

        results = _run_ranks(3, body)
        assert results[0] is None
        assert list(results[1]) == [] and list(results[2]) == []

    def test_partitioned_slices_are_assembled(self):
        authoritative = np.arange(14, dtype=float).reshape(7, 2)

        def body(comm):
            protocol = DistributionProtocol(comm, partition=True)
            mine = protocol.local_indices(7)
            local = np.zeros((7, 2))
            local[mine.start:mine.stop] = authoritative[mine.start:mine.stop]
            return protocol.distribute(local, 7)

        for result in _run_ranks(3, body):
            assert np.array_equal(result, authoritative)

    def test_length_mismatch_fails_the_whole_group(self):
        def body(comm):
            n = 2 if comm.is_coordinator else 3
            return DistributionProtocol(comm).distribute(np.zeros((n, 2)), n)

        results = _run_ranks(2, body)
        assert isinstance(results[1], ProtocolMismatch)
        assert isinstance(results[0], CommunicationError)

    def test_replicate_adopts_coordinator_state(self, cluster):
        def body(comm):
            local = cluster.copy()
            if not comm.is_coordinator:
                local.vel[...] = 0.0
            return DistributionProtocol(comm).replicate(local)

        for result in _run_ranks(3, body):
            assert result.state_equal(cluster)

    def test_replicate_length_mismatch(self, cluster, two_body):
        def body(comm):
            local = cluster.copy() if comm.is_coordinator else two_body.copy()
            return DistributionProtocol(comm).replicate(local)

        results = _run_ranks(2, body)
        assert isinstance(results[1], ProtocolMismatch)
        assert isinstance(results[0], CommunicationError)

    def test_slow_coordinator_within_compute_timeout(self):
        """Peers wait out a long reduction on the coordinator instead of timing out."""
        authoritative = np.array([[1.0, -1.0], [-1.0, 1.0]])

        def body(comm):
            protocol = DistributionProtocol(comm, compute_timeout=10.0)
            if comm.is_coordinator:
                time.sleep(0.5)
                return protocol.distribute(authoritative.copy(), 2)
            return protocol.distribute(np.zeros((2, 2)), 2)

        for result in _run_ranks(3, body, timeout=0.1):
            assert np.array_equal(result, authoritative)

    def test_compute_timeout_still_bounds_the_first_barrier(self):
        def body(comm):
            protocol = DistributionProtocol(comm, compute_timeout=0.1)
            if comm.is_coordinator:
                time.sleep(1.0)
            return protocol.distribute(np.zeros((2, 2)), 2)

        results = _run_ranks(2, body, timeout=5.0)
        assert isinstance(results[1], CommunicationTimeout)
        assert isinstance(results[0], CommunicationError)
